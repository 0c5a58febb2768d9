"""Artifact cache for precache.

This module manages the on-disk cache of engine artifacts.

Cache Structure:
    {cache_root}/
    ├── artifacts/
    │   └── {set_name}/             # Extracted archives of one artifact set
    ├── stamps/
    │   └── {set_name}.stamp        # Engine version the set was fetched for
    ├── downloads/                  # Archives while they are being fetched
    └── lockfile                    # PID of the process holding the cache

A set is up to date when its stamp holds the current engine version.
Removing the stamps forces every set to be fetched again.
"""

import logging
import shutil
from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional, Sequence

from precache.config.artifacts import DevelopmentArtifact
from precache.config.settings import DEFAULT_ENGINE_VERSION, DEFAULT_STORAGE_BASE_URL
from precache.errors import CacheUpdateError
from precache.selection.plan import CacheConfiguration

from .artifact_sets import DEFAULT_ARTIFACT_SETS, ArtifactSet, EngineArchive
from .downloader import ArtifactDownloader, DownloadError, ExtractionError
from .lock import CacheLock
from .platform_utils import ALL_HOST_PLATFORMS, HostPlatform, PlatformDetector

logger = logging.getLogger(__name__)


class Cache:
    """Manages the engine artifact cache.

    The cache configuration (platform overrides and toggles) is applied once
    per invocation through configure().
    """

    def __init__(
        self,
        cache_root: Path,
        engine_version: str = DEFAULT_ENGINE_VERSION,
        storage_base_url: str = DEFAULT_STORAGE_BASE_URL,
        artifact_sets: Sequence[ArtifactSet] = DEFAULT_ARTIFACT_SETS,
        host: Optional[HostPlatform] = None,
        downloader: Optional[ArtifactDownloader] = None,
        lock_timeout: Optional[float] = None,
    ):
        """Initialize cache manager.

        Args:
            cache_root: Root directory of the cache
            engine_version: Engine revision whose artifacts are cached
            storage_base_url: Base URL of engine storage
            artifact_sets: Artifact sets managed by this cache
            host: Host platform (detected if None)
            downloader: Downloader used for fetching archives
            lock_timeout: Seconds to wait for the cache lock (None waits forever)
        """
        self.cache_root = Path(cache_root).resolve()
        self.engine_version = engine_version
        self.storage_base_url = storage_base_url.rstrip("/")
        self.artifact_sets = tuple(artifact_sets)
        self.host = host if host is not None else PlatformDetector.detect()
        self.downloader = downloader if downloader is not None else ArtifactDownloader()
        self.configuration = CacheConfiguration()
        self._lock = CacheLock(self.cache_root / "lockfile", timeout=lock_timeout)

    @property
    def artifacts_dir(self) -> Path:
        """Directory for extracted artifact sets."""
        return self.cache_root / "artifacts"

    @property
    def stamps_dir(self) -> Path:
        """Directory for stamp files."""
        return self.cache_root / "stamps"

    @property
    def downloads_dir(self) -> Path:
        """Directory for archives being downloaded."""
        return self.cache_root / "downloads"

    def ensure_directories(self) -> None:
        """Create all cache directories if they don't exist."""
        for directory in [self.artifacts_dir, self.stamps_dir, self.downloads_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def get_artifact_dir(self, artifact_set: ArtifactSet) -> Path:
        return self.artifacts_dir / artifact_set.name

    def get_stamp_path(self, artifact_set: ArtifactSet) -> Path:
        return self.stamps_dir / f"{artifact_set.name}.stamp"

    def lock(self) -> None:
        """Acquire the cross-process cache lock."""
        self._lock.acquire()

    def release_lock(self) -> None:
        """Release the cache lock if held."""
        self._lock.release()

    def configure(self, configuration: CacheConfiguration) -> None:
        """Apply the configuration for this invocation."""
        self.configuration = configuration
        logger.debug(f"Cache configured: {configuration}")

    def clear_stamp_files(self) -> None:
        """Remove every stamp so all artifact sets are fetched again."""
        if not self.stamps_dir.exists():
            return
        for stamp in self.stamps_dir.glob("*.stamp"):
            stamp.unlink(missing_ok=True)
        logger.info(f"Cleared stamp files in {self.stamps_dir}")

    def get_stamp(self, artifact_set: ArtifactSet) -> Optional[str]:
        stamp_path = self.get_stamp_path(artifact_set)
        if not stamp_path.exists():
            return None
        return stamp_path.read_text(encoding="utf-8").strip()

    def set_stamp(self, artifact_set: ArtifactSet) -> None:
        stamp_path = self.get_stamp_path(artifact_set)
        stamp_path.parent.mkdir(parents=True, exist_ok=True)
        stamp_path.write_text(self.engine_version, encoding="utf-8")

    def is_relevant(self, artifact_set: ArtifactSet) -> bool:
        """Check whether an artifact set should be present on this host.

        A set is relevant when all platforms are requested, when it matches
        the host, or when the user explicitly selected its artifact.
        """
        return (
            self.configuration.include_all_platforms
            or artifact_set.matches_host(self.host.os_name)
            or artifact_set.development_artifact.name
            in self.configuration.platform_override_artifacts
        )

    def is_set_up_to_date(self, artifact_set: ArtifactSet) -> bool:
        return (
            self.get_artifact_dir(artifact_set).is_dir()
            and self.get_stamp(artifact_set) == self.engine_version
        )

    def is_up_to_date(
        self, required_artifacts: Optional[AbstractSet[DevelopmentArtifact]] = None
    ) -> bool:
        """True if every relevant artifact set is current.

        Args:
            required_artifacts: Only consider sets of these artifacts
                (None considers every set)
        """
        return all(
            self.is_set_up_to_date(s)
            for s in self.artifact_sets
            if self.is_relevant(s)
            and (required_artifacts is None or s.development_artifact in required_artifacts)
        )

    def _hosts(self) -> Iterable[str]:
        if self.configuration.include_all_platforms:
            return ALL_HOST_PLATFORMS
        return (self.host.identifier,)

    def get_archive_url(self, artifact_set: ArtifactSet, archive: EngineArchive) -> str:
        """Storage URL of an archive."""
        path = archive.path
        if artifact_set.mac_binaries and self.configuration.use_unsigned_mac_binaries:
            path = f"unsigned/{path}"
        return (
            f"{self.storage_base_url}/flutter_infra_release/flutter/"
            + f"{self.engine_version}/{path}"
        )

    def update_all(self, required_artifacts: AbstractSet[DevelopmentArtifact]) -> List[str]:
        """Fetch every stale artifact set that belongs to a required artifact.

        Args:
            required_artifacts: Development artifacts that must be cached

        Returns:
            Names of the artifact sets that were fetched

        Raises:
            CacheUpdateError: If any archive fails to download or extract
        """
        self.ensure_directories()
        updated: List[str] = []
        for artifact_set in self.artifact_sets:
            if artifact_set.development_artifact not in required_artifacts:
                continue
            if not self.is_relevant(artifact_set):
                logger.debug(f"Skipping {artifact_set.name}: not used on {self.host.os_name}")
                continue
            if self.is_set_up_to_date(artifact_set):
                logger.debug(f"{artifact_set.name} is up to date")
                continue
            self._update_set(artifact_set)
            updated.append(artifact_set.name)
        return updated

    def _update_set(self, artifact_set: ArtifactSet) -> None:
        print(f"Downloading {artifact_set.name} tools...")
        location = self.get_artifact_dir(artifact_set)
        if location.exists():
            shutil.rmtree(location)
        location.mkdir(parents=True)

        for archive in artifact_set.archives_for(self._hosts()):
            url = self.get_archive_url(artifact_set, archive)
            try:
                self.downloader.download_and_extract(
                    url, self.downloads_dir, location / archive.subdir
                )
            except (DownloadError, ExtractionError) as e:
                raise CacheUpdateError(
                    f"Failed to update {artifact_set.name}: {e}"
                ) from e

        self.set_stamp(artifact_set)
        logger.info(f"Updated {artifact_set.name} to {self.engine_version}")
