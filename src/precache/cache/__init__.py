"""Artifact cache management for precache.

This module handles locking, downloading, and stamping the engine
artifacts that make up the cache.
"""

from .artifact_sets import DEFAULT_ARTIFACT_SETS, ArtifactSet, EngineArchive
from .cache import Cache
from .downloader import ArtifactDownloader, DownloadError, ExtractionError
from .lock import CacheLock
from .platform_utils import HostPlatform, PlatformDetector, PlatformError

__all__ = [
    "DEFAULT_ARTIFACT_SETS",
    "ArtifactSet",
    "EngineArchive",
    "Cache",
    "ArtifactDownloader",
    "DownloadError",
    "ExtractionError",
    "CacheLock",
    "HostPlatform",
    "PlatformDetector",
    "PlatformError",
]
