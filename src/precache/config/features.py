"""
Feature flags that gate development artifacts.

Each feature declares, per release channel, whether it is available at all
and whether it is on when the user has not configured it. A feature can be
switched on or off in the settings file or through an environment variable.

Example settings.ini:
    [features]
    enable-web = true
    enable-linux-desktop = false
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from .channel import Channel
    from .settings import Settings


@dataclass(frozen=True)
class FeatureChannelSetting:
    """Availability of a feature on a single release channel."""

    available: bool = False
    enabled_by_default: bool = False


@dataclass(frozen=True)
class Feature:
    """A toggleable feature.

    Attributes:
        name: Human readable name (e.g., 'flutter for web')
        setting: Key in the [features] section of the settings file
        environment_override: Environment variable that enables the feature
        master: Setting on the master channel
        dev: Setting on the dev channel
        beta: Setting on the beta channel
        stable: Setting on the stable channel (also used for unknown channels)
    """

    name: str
    setting: str
    environment_override: Optional[str] = None
    master: FeatureChannelSetting = field(default_factory=FeatureChannelSetting)
    dev: FeatureChannelSetting = field(default_factory=FeatureChannelSetting)
    beta: FeatureChannelSetting = field(default_factory=FeatureChannelSetting)
    stable: FeatureChannelSetting = field(default_factory=FeatureChannelSetting)

    def get_setting_for_channel(self, channel_name: str) -> FeatureChannelSetting:
        """Get the availability of this feature on a channel."""
        if channel_name in ("master", "main"):
            return self.master
        if channel_name == "dev":
            return self.dev
        if channel_name == "beta":
            return self.beta
        return self.stable


_EVERYWHERE = FeatureChannelSetting(available=True, enabled_by_default=True)
_OPT_IN = FeatureChannelSetting(available=True, enabled_by_default=False)

WEB_FEATURE = Feature(
    name="Flutter for web",
    setting="enable-web",
    environment_override="FLUTTER_WEB",
    master=_EVERYWHERE,
    dev=_EVERYWHERE,
    beta=_EVERYWHERE,
    stable=_EVERYWHERE,
)

MACOS_DESKTOP_FEATURE = Feature(
    name="support for desktop on macOS",
    setting="enable-macos-desktop",
    environment_override="ENABLE_FLUTTER_DESKTOP",
    master=_EVERYWHERE,
    dev=_EVERYWHERE,
    beta=_OPT_IN,
    stable=_OPT_IN,
)

WINDOWS_DESKTOP_FEATURE = Feature(
    name="support for desktop on Windows",
    setting="enable-windows-desktop",
    environment_override="ENABLE_FLUTTER_DESKTOP",
    master=_EVERYWHERE,
    dev=_EVERYWHERE,
    beta=_OPT_IN,
    stable=_OPT_IN,
)

LINUX_DESKTOP_FEATURE = Feature(
    name="support for desktop on Linux",
    setting="enable-linux-desktop",
    environment_override="ENABLE_FLUTTER_DESKTOP",
    master=_EVERYWHERE,
    dev=_EVERYWHERE,
    beta=_OPT_IN,
    stable=_OPT_IN,
)

FUCHSIA_FEATURE = Feature(
    name="Flutter for Fuchsia",
    setting="enable-fuchsia",
    environment_override="FLUTTER_FUCHSIA",
    master=_OPT_IN,
)

ALL_FEATURES = (
    WEB_FEATURE,
    MACOS_DESKTOP_FEATURE,
    WINDOWS_DESKTOP_FEATURE,
    LINUX_DESKTOP_FEATURE,
    FUCHSIA_FEATURE,
)


class FeatureFlags:
    """Answers whether a feature is enabled for the current invocation."""

    def __init__(
        self,
        channel: "Channel",
        settings: "Settings",
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize feature flags.

        Args:
            channel: Release channel the tool is running on
            settings: Loaded settings (source of per-feature overrides)
            environ: Environment mapping (defaults to os.environ)
        """
        self.channel = channel
        self.settings = settings
        self.environ = os.environ if environ is None else environ

    def is_enabled(self, feature: Feature) -> bool:
        """Check whether a feature is enabled.

        A feature that is unavailable on the current channel is always off.
        Otherwise the settings file wins, then the environment override,
        then the channel default.
        """
        channel_setting = feature.get_setting_for_channel(self.channel.name)
        if not channel_setting.available:
            return False

        configured = self.settings.get_feature(feature.setting)
        if configured is not None:
            return configured

        if feature.environment_override:
            if self.environ.get(feature.environment_override, "").lower() == "true":
                return True

        return channel_setting.enabled_by_default
