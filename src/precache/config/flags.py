"""
Flag declarations and parsed flag values.

Every flag the precache command accepts is declared once in FLAG_TABLE.
After parsing, each flag is represented as a (value, was_explicit) pair so
that selection logic never has to ask the argument parser whether the user
typed a flag.
"""

import argparse
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

# Help visibility modes
SHOWN = "shown"
VERBOSE_ONLY = "verbose_only"
CONCISE_ONLY = "concise_only"
HIDDEN = "hidden"


@dataclass(frozen=True)
class FlagSpec:
    """Declaration of a boolean command-line flag.

    Attributes:
        name: Flag name without leading dashes (also the argparse dest)
        default: Value when the flag is not passed
        help: Help text
        abbr: Optional single-letter abbreviation
        negatable: Whether a --no-<name> form exists
        visibility: When the flag appears in --help output
    """

    name: str
    default: bool
    help: str
    abbr: Optional[str] = None
    negatable: bool = True
    visibility: str = SHOWN

    def is_hidden(self, verbose_help: bool) -> bool:
        if self.visibility == HIDDEN:
            return True
        if self.visibility == VERBOSE_ONLY:
            return not verbose_help
        if self.visibility == CONCISE_ONLY:
            return verbose_help
        return False

    @property
    def dest(self) -> str:
        return self.name.replace("-", "_")


FLAG_TABLE: Tuple[FlagSpec, ...] = (
    FlagSpec(
        "all-platforms",
        False,
        "Precache artifacts for all host platforms.",
        abbr="a",
        negatable=False,
    ),
    FlagSpec(
        "force",
        False,
        "Force re-downloading of artifacts.",
        abbr="f",
        negatable=False,
    ),
    FlagSpec(
        "android",
        True,
        "Precache artifacts for Android development.",
        visibility=CONCISE_ONLY,
    ),
    FlagSpec(
        "android_gen_snapshot",
        True,
        "Precache gen_snapshot for Android development.",
        visibility=VERBOSE_ONLY,
    ),
    FlagSpec(
        "android_maven",
        True,
        "Precache Gradle dependencies for Android development.",
        visibility=VERBOSE_ONLY,
    ),
    FlagSpec(
        "android_internal_build",
        False,
        "Precache dependencies for internal Android development.",
        visibility=VERBOSE_ONLY,
    ),
    FlagSpec("ios", True, "Precache artifacts for iOS development."),
    FlagSpec("web", False, "Precache artifacts for web development."),
    FlagSpec("linux", False, "Precache artifacts for Linux desktop development."),
    FlagSpec("windows", False, "Precache artifacts for Windows desktop development."),
    FlagSpec("macos", False, "Precache artifacts for macOS desktop development."),
    FlagSpec("fuchsia", False, "Precache artifacts for Fuchsia development."),
    FlagSpec(
        "universal", True, "Precache artifacts required for any development platform."
    ),
    FlagSpec(
        "flutter_runner",
        False,
        "Precache the flutter runner artifacts.",
        visibility=HIDDEN,
    ),
    FlagSpec(
        "use-unsigned-mac-binaries",
        False,
        "Precache the unsigned mac binaries when available.",
        visibility=HIDDEN,
    ),
)


@dataclass(frozen=True)
class FlagValue:
    """Resolved value of a flag and whether the user typed it."""

    value: bool
    was_explicit: bool = False


class ParsedFlags:
    """Flag values for one invocation plus the raw argument tokens."""

    def __init__(
        self, values: Mapping[str, FlagValue], arguments: Sequence[str] = ()
    ):
        self._values = dict(values)
        self.arguments: Tuple[str, ...] = tuple(arguments)

    def value(self, name: str) -> bool:
        """Resolved boolean value of a flag (explicit or default).

        Raises:
            KeyError: If the flag was never declared
        """
        return self._values[name].value

    def was_explicit(self, name: str) -> bool:
        """True if the flag appeared on the command line."""
        flag = self._values.get(name)
        return flag is not None and flag.was_explicit

    def explicitly_selected(self, name: str) -> bool:
        """True if the flag appeared on the command line and resolved to true."""
        flag = self._values.get(name)
        return flag is not None and flag.was_explicit and flag.value

    @classmethod
    def from_namespace(
        cls,
        namespace: argparse.Namespace,
        arguments: Sequence[str],
        table: Sequence[FlagSpec] = FLAG_TABLE,
    ) -> "ParsedFlags":
        """Build parsed flags from an argparse namespace.

        Flags registered with add_flags() default to None, so a None value
        means the flag was not passed.
        """
        values: Dict[str, FlagValue] = {}
        for spec in table:
            raw = getattr(namespace, spec.dest, None)
            if raw is None:
                values[spec.name] = FlagValue(spec.default, was_explicit=False)
            else:
                values[spec.name] = FlagValue(bool(raw), was_explicit=True)
        return cls(values, arguments)

    @classmethod
    def from_values(
        cls,
        explicit: Optional[Mapping[str, bool]] = None,
        arguments: Optional[Sequence[str]] = None,
        table: Sequence[FlagSpec] = FLAG_TABLE,
    ) -> "ParsedFlags":
        """Build parsed flags directly from explicit values.

        Unspecified flags take their declared defaults. When no arguments are
        given, the equivalent command-line tokens are synthesized.
        """
        explicit = dict(explicit or {})
        values: Dict[str, FlagValue] = {}
        tokens = []
        for spec in table:
            if spec.name in explicit:
                value = explicit.pop(spec.name)
                values[spec.name] = FlagValue(value, was_explicit=True)
                tokens.append(f"--{spec.name}" if value else f"--no-{spec.name}")
            else:
                values[spec.name] = FlagValue(spec.default, was_explicit=False)
        if explicit:
            raise KeyError(f"Unknown flags: {sorted(explicit)}")
        return cls(values, tokens if arguments is None else arguments)


def add_flags(
    parser: argparse.ArgumentParser,
    verbose_help: bool = False,
    table: Sequence[FlagSpec] = FLAG_TABLE,
) -> None:
    """Register the flag table on an argparse parser."""
    for spec in table:
        names = [f"--{spec.name}"]
        if spec.abbr:
            names.insert(0, f"-{spec.abbr}")
        help_text = argparse.SUPPRESS if spec.is_hidden(verbose_help) else spec.help
        if spec.negatable:
            if help_text is not argparse.SUPPRESS:
                help_text = f"{help_text} (default: {'on' if spec.default else 'off'})"
            parser.add_argument(
                *names,
                dest=spec.dest,
                action=argparse.BooleanOptionalAction,
                default=None,
                help=help_text,
            )
        else:
            parser.add_argument(
                *names,
                dest=spec.dest,
                action="store_const",
                const=True,
                default=None,
                help=help_text,
            )
