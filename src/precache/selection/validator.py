"""Rejects contradictory umbrella/child flag combinations."""

from typing import Sequence

from precache.config.umbrellas import UMBRELLA_SCHEMA, UmbrellaSchema
from precache.errors import UsageConflictError


class ConflictValidator:
    """Checks raw argument tokens for umbrella conflicts.

    Passing --no-<umbrella> together with --<child> for any child of that
    umbrella is a usage error. The check looks at the tokens the user typed,
    not at resolved values, and runs before any other work.
    """

    def __init__(self, schema: UmbrellaSchema = UMBRELLA_SCHEMA):
        self.schema = schema

    def validate(self, arguments: Sequence[str]) -> None:
        """Validate raw command-line arguments.

        Raises:
            UsageConflictError: If an umbrella is negated while one of its
                children is explicitly requested
        """
        tokens = set(arguments)
        for group in self.schema:
            if f"--no-{group.umbrella_name}" not in tokens:
                continue
            for child in group.children:
                if f"--{child}" in tokens:
                    raise UsageConflictError(
                        f"--{child} requires --{group.umbrella_name}"
                    )
