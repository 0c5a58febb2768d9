"""Values produced by artifact resolution and handed to the cache."""

from dataclasses import dataclass, field
from typing import FrozenSet

from precache.config.artifacts import DevelopmentArtifact


@dataclass(frozen=True)
class CacheConfiguration:
    """Cache settings derived from the command line.

    Attributes:
        platform_override_artifacts: Artifact names the user explicitly chose;
            these are fetched even when they do not match the host platform
        include_all_platforms: Fetch artifacts for every host platform
        use_unsigned_mac_binaries: Prefer unsigned macOS binaries when available
    """

    platform_override_artifacts: FrozenSet[str] = frozenset()
    include_all_platforms: bool = False
    use_unsigned_mac_binaries: bool = False


@dataclass(frozen=True)
class PrecachePlan:
    """Everything the orchestrator needs to bring the cache up to date."""

    required_artifacts: FrozenSet[DevelopmentArtifact]
    configuration: CacheConfiguration = field(default_factory=CacheConfiguration)
    force: bool = False

    @property
    def required_names(self) -> FrozenSet[str]:
        return frozenset(a.name for a in self.required_artifacts)
