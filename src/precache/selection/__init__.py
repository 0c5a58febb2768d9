"""Artifact selection for precache.

This module turns command-line flags into the set of artifacts to fetch:
- Conflict validation of umbrella and child flags
- Collection of explicitly chosen artifacts
- Resolution of the required artifact set
"""

from .collector import SelectionCollector
from .plan import CacheConfiguration, PrecachePlan
from .resolver import ArtifactResolver, plan_precache
from .validator import ConflictValidator

__all__ = [
    "SelectionCollector",
    "CacheConfiguration",
    "PrecachePlan",
    "ArtifactResolver",
    "plan_precache",
    "ConflictValidator",
]
