"""
Artifact resolution.

Turns parsed flags into the set of development artifacts that must be in the
cache, applying the channel stability filter and feature gating.
"""

import logging
from typing import Callable, FrozenSet, Optional, Sequence, Set

from precache.config.artifacts import ARTIFACT_CATALOG, DevelopmentArtifact
from precache.config.channel import Channel
from precache.config.features import Feature, FeatureFlags
from precache.config.flags import ParsedFlags
from precache.config.umbrellas import UMBRELLA_SCHEMA, UmbrellaSchema

from .collector import SelectionCollector
from .plan import CacheConfiguration, PrecachePlan

logger = logging.getLogger(__name__)


class ArtifactResolver:
    """Resolves the required artifact set for an invocation."""

    def __init__(
        self,
        catalog: Sequence[DevelopmentArtifact] = ARTIFACT_CATALOG,
        schema: UmbrellaSchema = UMBRELLA_SCHEMA,
    ):
        self.catalog = catalog
        self.schema = schema

    def resolve(
        self,
        flags: ParsedFlags,
        all_platforms: bool,
        channel_is_unstable: bool,
        is_feature_enabled: Callable[[Feature], bool],
    ) -> FrozenSet[DevelopmentArtifact]:
        """Compute the artifacts that must be fetched.

        An artifact is skipped if it is unstable and the channel is not the
        unstable channel, or if its gating feature is disabled. Otherwise it
        is included when all_platforms is set or when the flag that controls
        it (its umbrella, if it has one) resolves to true.

        Args:
            flags: Parsed flag values
            all_platforms: Include every artifact that passes the filters
            channel_is_unstable: Whether the tool runs on the unstable channel
            is_feature_enabled: Predicate for gating features

        Returns:
            The required artifacts
        """
        required: Set[DevelopmentArtifact] = set()
        for artifact in self.catalog:
            if artifact.unstable and not channel_is_unstable:
                logger.debug(f"Skipping unstable artifact {artifact.name}")
                continue
            if artifact.feature is not None and not is_feature_enabled(artifact.feature):
                logger.debug(
                    f"Skipping {artifact.name}: {artifact.feature.name} is disabled"
                )
                continue

            argument_name = self.schema.umbrella_of(artifact.name) or artifact.name
            if all_platforms or flags.value(argument_name):
                required.add(artifact)
        return frozenset(required)


def plan_precache(
    flags: ParsedFlags,
    channel: Channel,
    feature_flags: FeatureFlags,
    resolver: Optional[ArtifactResolver] = None,
    collector: Optional[SelectionCollector] = None,
) -> PrecachePlan:
    """Build the full precache plan for an invocation.

    Args:
        flags: Parsed flag values
        channel: Current release channel
        feature_flags: Feature flag lookup
        resolver: Resolver to use (defaults to the catalog resolver)
        collector: Selection collector to use (defaults to the catalog collector)

    Returns:
        PrecachePlan with the required artifacts and cache configuration
    """
    resolver = resolver or ArtifactResolver()
    collector = collector or SelectionCollector(resolver.catalog, resolver.schema)

    include_all_platforms = flags.value("all-platforms")
    required = resolver.resolve(
        flags,
        all_platforms=include_all_platforms,
        channel_is_unstable=channel.is_unstable,
        is_feature_enabled=feature_flags.is_enabled,
    )
    configuration = CacheConfiguration(
        platform_override_artifacts=collector.explicit_selections(flags),
        include_all_platforms=include_all_platforms,
        use_unsigned_mac_binaries=flags.value("use-unsigned-mac-binaries"),
    )
    logger.debug(
        f"Required artifacts: {sorted(a.name for a in required)}; "
        + f"overrides: {sorted(configuration.platform_override_artifacts)}"
    )
    return PrecachePlan(
        required_artifacts=required,
        configuration=configuration,
        force=flags.value("force"),
    )
