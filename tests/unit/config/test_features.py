"""Unit tests for feature flags."""

import configparser

import pytest

from precache.config.channel import Channel
from precache.config.features import (
    FUCHSIA_FEATURE,
    LINUX_DESKTOP_FEATURE,
    WEB_FEATURE,
    FeatureFlags,
)
from precache.config.settings import Settings
from precache.errors import SettingsError


def _settings(features=None):
    config = configparser.ConfigParser()
    if features:
        config["features"] = features
    return Settings(config, environ={})


class TestFeatureFlags:
    """Test cases for FeatureFlags."""

    def test_web_enabled_by_default_on_stable(self):
        """Test web is on without configuration."""
        flags = FeatureFlags(Channel("stable"), _settings(), environ={})
        assert flags.is_enabled(WEB_FEATURE)

    def test_desktop_disabled_by_default_on_stable(self):
        """Test desktop support is opt-in on stable."""
        flags = FeatureFlags(Channel("stable"), _settings(), environ={})
        assert not flags.is_enabled(LINUX_DESKTOP_FEATURE)

    def test_desktop_enabled_by_default_on_master(self):
        """Test desktop support is on by default on master."""
        flags = FeatureFlags(Channel("master"), _settings(), environ={})
        assert flags.is_enabled(LINUX_DESKTOP_FEATURE)

    def test_settings_override(self):
        """Test the settings file switches a feature on."""
        settings = _settings({"enable-linux-desktop": "true"})
        flags = FeatureFlags(Channel("stable"), settings, environ={})
        assert flags.is_enabled(LINUX_DESKTOP_FEATURE)

    def test_settings_can_disable(self):
        """Test the settings file switches a default-on feature off."""
        settings = _settings({"enable-web": "false"})
        flags = FeatureFlags(Channel("stable"), settings, environ={})
        assert not flags.is_enabled(WEB_FEATURE)

    def test_environment_override(self):
        """Test the environment variable switches a feature on."""
        flags = FeatureFlags(
            Channel("stable"), _settings(), environ={"ENABLE_FLUTTER_DESKTOP": "true"}
        )
        assert flags.is_enabled(LINUX_DESKTOP_FEATURE)

    def test_settings_beat_environment(self):
        """Test the settings file wins over the environment."""
        settings = _settings({"enable-linux-desktop": "false"})
        flags = FeatureFlags(
            Channel("stable"), settings, environ={"ENABLE_FLUTTER_DESKTOP": "true"}
        )
        assert not flags.is_enabled(LINUX_DESKTOP_FEATURE)

    def test_unavailable_feature_cannot_be_enabled(self):
        """Test a feature unavailable on the channel stays off."""
        settings = _settings({"enable-fuchsia": "true"})
        flags = FeatureFlags(Channel("stable"), settings, environ={"FLUTTER_FUCHSIA": "true"})
        assert not flags.is_enabled(FUCHSIA_FEATURE)

    def test_fuchsia_opt_in_on_master(self):
        """Test fuchsia must be enabled explicitly on master."""
        assert not FeatureFlags(Channel("master"), _settings(), environ={}).is_enabled(
            FUCHSIA_FEATURE
        )
        settings = _settings({"enable-fuchsia": "yes"})
        assert FeatureFlags(Channel("master"), settings, environ={}).is_enabled(
            FUCHSIA_FEATURE
        )

    def test_invalid_setting_value(self):
        """Test non-boolean feature values are reported."""
        flags = FeatureFlags(Channel("stable"), _settings({"enable-web": "maybe"}), environ={})
        with pytest.raises(SettingsError, match="enable-web"):
            flags.is_enabled(WEB_FEATURE)

    def test_unknown_channel_uses_stable_settings(self):
        """Test an unknown branch behaves like stable."""
        assert WEB_FEATURE.get_setting_for_channel("my-branch") is WEB_FEATURE.stable
