"""
Catalog of development artifacts.

A development artifact is a named group of platform binaries that can be
fetched into the cache. The catalog is a closed, ordered enumeration; the
order only matters for deterministic iteration.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .features import (
    FUCHSIA_FEATURE,
    LINUX_DESKTOP_FEATURE,
    MACOS_DESKTOP_FEATURE,
    WEB_FEATURE,
    WINDOWS_DESKTOP_FEATURE,
    Feature,
)


@dataclass(frozen=True)
class DevelopmentArtifact:
    """A fetchable group of binaries.

    Attributes:
        name: Unique name, identical to the flag that selects it
        unstable: Only fetched on the unstable (master) channel
        feature: Feature that must be enabled for the artifact to be fetched
    """

    name: str
    unstable: bool = False
    feature: Optional[Feature] = None

    def __str__(self) -> str:
        return self.name


ANDROID_GEN_SNAPSHOT = DevelopmentArtifact("android_gen_snapshot")
ANDROID_MAVEN = DevelopmentArtifact("android_maven")
ANDROID_INTERNAL_BUILD = DevelopmentArtifact("android_internal_build")
IOS = DevelopmentArtifact("ios")
WEB = DevelopmentArtifact("web", feature=WEB_FEATURE)
MACOS = DevelopmentArtifact("macos", feature=MACOS_DESKTOP_FEATURE)
WINDOWS = DevelopmentArtifact("windows", feature=WINDOWS_DESKTOP_FEATURE)
LINUX = DevelopmentArtifact("linux", feature=LINUX_DESKTOP_FEATURE)
FUCHSIA = DevelopmentArtifact("fuchsia", unstable=True, feature=FUCHSIA_FEATURE)
FLUTTER_RUNNER = DevelopmentArtifact(
    "flutter_runner", unstable=True, feature=FUCHSIA_FEATURE
)
UNIVERSAL = DevelopmentArtifact("universal")

ARTIFACT_CATALOG: Tuple[DevelopmentArtifact, ...] = (
    ANDROID_GEN_SNAPSHOT,
    ANDROID_MAVEN,
    ANDROID_INTERNAL_BUILD,
    IOS,
    WEB,
    MACOS,
    WINDOWS,
    LINUX,
    FUCHSIA,
    FLUTTER_RUNNER,
    UNIVERSAL,
)

def artifact_names() -> Tuple[str, ...]:
    """Names of all catalog artifacts, in catalog order."""
    return tuple(a.name for a in ARTIFACT_CATALOG)
