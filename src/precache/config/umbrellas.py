"""
Umbrella flags.

Some flags are umbrella names that expand to include multiple artifacts.
The table is static; the reverse index (child to umbrella) is built once
and the table is checked for consistency when the schema is created.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from precache.errors import SchemaError

from .artifacts import artifact_names


@dataclass(frozen=True)
class UmbrellaGroup:
    """An umbrella flag and the artifact names it implies."""

    umbrella_name: str
    children: Tuple[str, ...]


class UmbrellaSchema:
    """Maps umbrella flags to their child artifacts and back."""

    def __init__(
        self,
        groups: Iterable[UmbrellaGroup],
        known_artifacts: Optional[Iterable[str]] = None,
    ):
        """Build and validate the schema.

        Args:
            groups: Umbrella groups in declaration order
            known_artifacts: Valid child names (defaults to the catalog)

        Raises:
            SchemaError: If a child is listed twice, an umbrella is nested
                inside another, a group is empty, or a child is unknown
        """
        self._groups = tuple(groups)
        known = set(artifact_names() if known_artifacts is None else known_artifacts)
        self._child_to_umbrella = self._build_reverse_index(self._groups, known)

    @staticmethod
    def _build_reverse_index(
        groups: Tuple[UmbrellaGroup, ...], known: set
    ) -> Dict[str, str]:
        umbrella_names = [g.umbrella_name for g in groups]
        if len(set(umbrella_names)) != len(umbrella_names):
            raise SchemaError(f"Duplicate umbrella names in {umbrella_names}")

        reverse: Dict[str, str] = {}
        for group in groups:
            if not group.children:
                raise SchemaError(f"Umbrella '{group.umbrella_name}' has no children")
            if group.umbrella_name in known:
                raise SchemaError(
                    f"Umbrella '{group.umbrella_name}' collides with an artifact name"
                )
            for child in group.children:
                if child in umbrella_names:
                    raise SchemaError(
                        f"Umbrella '{child}' is nested inside '{group.umbrella_name}'"
                    )
                if child not in known:
                    raise SchemaError(
                        f"Umbrella '{group.umbrella_name}' lists unknown artifact '{child}'"
                    )
                if child in reverse:
                    raise SchemaError(
                        f"Artifact '{child}' belongs to both '{reverse[child]}' "
                        + f"and '{group.umbrella_name}'"
                    )
                reverse[child] = group.umbrella_name
        return reverse

    def __iter__(self) -> Iterator[UmbrellaGroup]:
        return iter(self._groups)

    @property
    def umbrella_names(self) -> Tuple[str, ...]:
        return tuple(g.umbrella_name for g in self._groups)

    def child_to_umbrella(self) -> Mapping[str, str]:
        """Reverse mapping from child artifact name to umbrella name."""
        return dict(self._child_to_umbrella)

    def umbrella_of(self, artifact_name: str) -> Optional[str]:
        """Umbrella that implies this artifact, or None."""
        return self._child_to_umbrella.get(artifact_name)


UMBRELLA_SCHEMA = UmbrellaSchema(
    [
        UmbrellaGroup(
            "android",
            ("android_gen_snapshot", "android_maven", "android_internal_build"),
        ),
    ]
)
