"""Static tables and configuration for precache."""

from .artifacts import ARTIFACT_CATALOG, DevelopmentArtifact
from .channel import Channel, ChannelDetector
from .features import ALL_FEATURES, Feature, FeatureChannelSetting, FeatureFlags
from .flags import FLAG_TABLE, FlagSpec, FlagValue, ParsedFlags, add_flags
from .settings import Settings
from .umbrellas import UMBRELLA_SCHEMA, UmbrellaGroup, UmbrellaSchema

__all__ = [
    "ARTIFACT_CATALOG",
    "DevelopmentArtifact",
    "Channel",
    "ChannelDetector",
    "ALL_FEATURES",
    "Feature",
    "FeatureChannelSetting",
    "FeatureFlags",
    "FLAG_TABLE",
    "FlagSpec",
    "FlagValue",
    "ParsedFlags",
    "add_flags",
    "Settings",
    "UMBRELLA_SCHEMA",
    "UmbrellaGroup",
    "UmbrellaSchema",
]
