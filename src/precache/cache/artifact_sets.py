"""
Artifact sets stored in the cache.

Each artifact set is a group of engine archives that belong to one
development artifact. A set is installed into its own directory under the
cache and marked complete with a stamp file.

Archive paths may contain a {host} placeholder, which expands to the current
host platform, or to every host platform when all platforms are requested.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from precache.config import artifacts as dev
from precache.config.artifacts import DevelopmentArtifact


@dataclass(frozen=True)
class EngineArchive:
    """An archive in engine storage and where it is extracted.

    Attributes:
        path: Path relative to the engine version directory in storage
        subdir: Directory inside the artifact set to extract into
    """

    path: str
    subdir: str

    def expand(self, hosts: Iterable[str]) -> List["EngineArchive"]:
        """Substitute the {host} placeholder for each host."""
        if "{host}" not in self.path and "{host}" not in self.subdir:
            return [self]
        return [
            EngineArchive(self.path.format(host=h), self.subdir.format(host=h))
            for h in hosts
        ]


@dataclass(frozen=True)
class ArtifactSet:
    """A cached group of archives for one development artifact.

    Attributes:
        name: Directory and stamp name in the cache
        development_artifact: Artifact that selects this set
        archives: Archives that make up the set
        host_platforms: Host operating systems the set is useful on
            (None means every host)
        mac_binaries: Contains signed macOS binaries that have an unsigned
            variant in storage
    """

    name: str
    development_artifact: DevelopmentArtifact
    archives: Tuple[EngineArchive, ...]
    host_platforms: Optional[FrozenSet[str]] = None
    mac_binaries: bool = False

    def matches_host(self, os_name: str) -> bool:
        return self.host_platforms is None or os_name in self.host_platforms

    def archives_for(self, hosts: Iterable[str]) -> List[EngineArchive]:
        """All archives of the set with host placeholders expanded."""
        hosts = list(hosts)
        expanded: List[EngineArchive] = []
        for archive in self.archives:
            expanded.extend(archive.expand(hosts))
        return expanded


def _archives(*pairs: Tuple[str, str]) -> Tuple[EngineArchive, ...]:
    return tuple(EngineArchive(path, subdir) for path, subdir in pairs)


DEFAULT_ARTIFACT_SETS: Tuple[ArtifactSet, ...] = (
    ArtifactSet(
        "universal",
        dev.UNIVERSAL,
        _archives(
            ("flutter_patched_sdk.zip", "flutter_patched_sdk"),
            ("flutter_patched_sdk_product.zip", "flutter_patched_sdk_product"),
            ("{host}/artifacts.zip", "{host}"),
            ("{host}/font-subset.zip", "{host}"),
        ),
    ),
    ArtifactSet(
        "android-gen-snapshot",
        dev.ANDROID_GEN_SNAPSHOT,
        _archives(
            ("android-arm-profile/{host}.zip", "android-arm-profile/{host}"),
            ("android-arm-release/{host}.zip", "android-arm-release/{host}"),
            ("android-arm64-profile/{host}.zip", "android-arm64-profile/{host}"),
            ("android-arm64-release/{host}.zip", "android-arm64-release/{host}"),
            ("android-x64-profile/{host}.zip", "android-x64-profile/{host}"),
            ("android-x64-release/{host}.zip", "android-x64-release/{host}"),
        ),
    ),
    ArtifactSet(
        "android-maven",
        dev.ANDROID_MAVEN,
        _archives(
            ("android-arm/artifacts.zip", "android-arm"),
            ("android-arm64/artifacts.zip", "android-arm64"),
            ("android-x64/artifacts.zip", "android-x64"),
        ),
    ),
    ArtifactSet(
        "android-internal-build",
        dev.ANDROID_INTERNAL_BUILD,
        _archives(
            ("android-x86-jit-release/artifacts.zip", "android-x86-jit-release"),
        ),
    ),
    ArtifactSet(
        "ios",
        dev.IOS,
        _archives(
            ("ios/artifacts.zip", "ios"),
            ("ios-profile/artifacts.zip", "ios-profile"),
            ("ios-release/artifacts.zip", "ios-release"),
        ),
        host_platforms=frozenset({"darwin"}),
        mac_binaries=True,
    ),
    ArtifactSet(
        "flutter-web-sdk",
        dev.WEB,
        _archives(("flutter-web-sdk.zip", "flutter_web_sdk")),
    ),
    ArtifactSet(
        "macos",
        dev.MACOS,
        _archives(
            ("darwin-x64/FlutterMacOS.framework.zip", "darwin-x64"),
            ("darwin-x64-profile/artifacts.zip", "darwin-x64-profile"),
            ("darwin-x64-release/artifacts.zip", "darwin-x64-release"),
        ),
        host_platforms=frozenset({"darwin"}),
        mac_binaries=True,
    ),
    ArtifactSet(
        "windows",
        dev.WINDOWS,
        _archives(
            ("windows-x64/windows-x64-flutter.zip", "windows-x64"),
            ("windows-x64/flutter-cpp-client-wrapper.zip", "windows-x64/cpp_client_wrapper"),
            ("windows-x64-profile/windows-x64-flutter.zip", "windows-x64-profile"),
            ("windows-x64-release/windows-x64-flutter.zip", "windows-x64-release"),
        ),
        host_platforms=frozenset({"windows"}),
    ),
    ArtifactSet(
        "linux",
        dev.LINUX,
        _archives(
            ("linux-x64/linux-x64-flutter-gtk.zip", "linux-x64"),
            ("linux-x64-profile/linux-x64-flutter-gtk.zip", "linux-x64-profile"),
            ("linux-x64-release/linux-x64-flutter-gtk.zip", "linux-x64-release"),
        ),
        host_platforms=frozenset({"linux"}),
    ),
    ArtifactSet(
        "fuchsia",
        dev.FUCHSIA,
        _archives(
            ("fuchsia/fuchsia-debug.zip", "fuchsia/debug"),
            ("fuchsia/fuchsia-profile.zip", "fuchsia/profile"),
            ("fuchsia/fuchsia-release.zip", "fuchsia/release"),
        ),
        host_platforms=frozenset({"linux", "darwin"}),
    ),
    ArtifactSet(
        "flutter-runner",
        dev.FLUTTER_RUNNER,
        _archives(("flutter_runner/flutter_runner.zip", "flutter_runner")),
        host_platforms=frozenset({"linux", "darwin"}),
    ),
)
