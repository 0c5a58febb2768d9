"""
Settings file parser.

Settings are read from an INI file, by default ~/.precache/settings.ini, or
the path in the PRECACHE_SETTINGS environment variable. Environment
variables override values from the file.

Example settings.ini:
    [precache]
    cache_dir = ~/flutter/bin/cache
    engine_version = 4f2b6a3d8c5e1f0a9b7d6c5e4f3a2b1c0d9e8f7a
    storage_base_url = https://storage.googleapis.com
    channel = stable

    [features]
    enable-web = true
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from precache.errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_BASE_URL = "https://storage.googleapis.com"
DEFAULT_ENGINE_VERSION = "main"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def default_settings_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Location of the settings file."""
    environ = os.environ if environ is None else environ
    override = environ.get("PRECACHE_SETTINGS")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".precache" / "settings.ini"


class Settings:
    """
    User settings for the precache command.

    Usage:
        settings = Settings.load()
        base_url = settings.storage_base_url
        web_enabled = settings.get_feature("enable-web")
    """

    SECTION = "precache"
    FEATURES_SECTION = "features"

    def __init__(
        self,
        config: Optional[configparser.ConfigParser] = None,
        environ: Optional[Mapping[str, str]] = None,
        path: Optional[Path] = None,
    ):
        self.config = config if config is not None else configparser.ConfigParser()
        self.environ = os.environ if environ is None else environ
        self.path = path

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """Load settings from disk.

        A missing file yields default settings.

        Raises:
            SettingsError: If the file exists but cannot be parsed
        """
        path = path if path is not None else default_settings_path(environ)
        config = configparser.ConfigParser()
        if path.exists():
            try:
                config.read(path, encoding="utf-8")
            except configparser.Error as e:
                raise SettingsError(f"Failed to parse {path}: {e}") from e
            logger.debug(f"Loaded settings from {path}")
        else:
            logger.debug(f"No settings file at {path}, using defaults")
        return cls(config, environ, path)

    def _get(self, key: str) -> Optional[str]:
        value = self.config.get(self.SECTION, key, fallback=None)
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def cache_dir(self) -> Path:
        """Root directory of the artifact cache."""
        env_value = self.environ.get("PRECACHE_CACHE_DIR")
        if env_value:
            return Path(env_value).expanduser().resolve()
        file_value = self._get("cache_dir")
        if file_value:
            return Path(file_value).expanduser().resolve()
        return Path.home() / ".precache" / "cache"

    @property
    def storage_base_url(self) -> str:
        """Base URL that engine artifacts are downloaded from."""
        for var in ("PRECACHE_STORAGE_BASE_URL", "FLUTTER_STORAGE_BASE_URL"):
            env_value = self.environ.get(var)
            if env_value:
                return env_value.rstrip("/")
        return (self._get("storage_base_url") or DEFAULT_STORAGE_BASE_URL).rstrip("/")

    @property
    def engine_version(self) -> str:
        """Engine revision whose artifacts are fetched."""
        return (
            self.environ.get("PRECACHE_ENGINE_VERSION")
            or self._get("engine_version")
            or DEFAULT_ENGINE_VERSION
        )

    @property
    def channel(self) -> Optional[str]:
        """Channel configured in the settings file, if any."""
        return self._get("channel")

    def get_feature(self, setting: str) -> Optional[bool]:
        """Configured value of a feature, or None if unset.

        Raises:
            SettingsError: If the value is not a boolean
        """
        raw = self.config.get(self.FEATURES_SECTION, setting, fallback=None)
        if raw is None:
            return None
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise SettingsError(
            f"Invalid value for feature '{setting}' in {self.path}: {raw!r}"
        )
