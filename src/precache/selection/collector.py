"""Collects the artifacts the user explicitly chose on the command line."""

from typing import FrozenSet, Sequence, Set

from precache.config.artifacts import ARTIFACT_CATALOG, DevelopmentArtifact
from precache.config.flags import ParsedFlags
from precache.config.umbrellas import UMBRELLA_SCHEMA, UmbrellaSchema


class SelectionCollector:
    """Computes the explicit artifact selection for an invocation."""

    def __init__(
        self,
        catalog: Sequence[DevelopmentArtifact] = ARTIFACT_CATALOG,
        schema: UmbrellaSchema = UMBRELLA_SCHEMA,
    ):
        self.catalog = catalog
        self.schema = schema

    def explicit_selections(self, flags: ParsedFlags) -> FrozenSet[str]:
        """Return the names of all artifacts explicitly chosen via flags.

        If an umbrella is chosen, its children are included as well. A flag
        counts only if it was typed and resolves to true; defaults never do.
        """
        umbrella_for_artifact = self.schema.child_to_umbrella()
        selections: Set[str] = set()
        for artifact in self.catalog:
            umbrella_name = umbrella_for_artifact.get(artifact.name)
            if flags.explicitly_selected(artifact.name) or (
                umbrella_name is not None and flags.explicitly_selected(umbrella_name)
            ):
                selections.add(artifact.name)
        return frozenset(selections)
