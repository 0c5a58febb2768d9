"""CLI utility functions for precache.

This module provides common utilities used by the precache command including:
- Error handling and formatting
- Lock environment detection
- Logging setup
"""

import logging
import os
import sys
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for command-line use."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if getattr(handler, "_precache_handler", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._precache_handler = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)


class LockEnvironment:
    """Detects whether a parent process already holds the cache lock."""

    VARIABLE = "FLUTTER_ALREADY_LOCKED"

    @staticmethod
    def is_already_locked(environ: Optional[Mapping[str, str]] = None) -> bool:
        environ = os.environ if environ is None else environ
        return environ.get(LockEnvironment.VARIABLE) == "true"


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def _status_line(color: str, mark: str, text: str) -> None:
        print()
        print(f"{color}{mark} {text}{ErrorFormatter.RESET}")

    @staticmethod
    def print_error(title: str, message: str) -> None:
        ErrorFormatter._status_line(ErrorFormatter.RED, "✗", title)
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        ErrorFormatter._status_line(ErrorFormatter.GREEN, "✓", message)

    @staticmethod
    def print_warning(message: str) -> None:
        ErrorFormatter._status_line(ErrorFormatter.YELLOW, "!", message)

    @staticmethod
    def handle_usage_error(error: Exception) -> None:
        """Report a usage error verbatim and exit."""
        ErrorFormatter.print_error("Usage error", str(error))
        sys.exit(1)

    @staticmethod
    def handle_cache_error(error: Exception) -> None:
        """Report a failed cache update and exit."""
        ErrorFormatter.print_error("Cache update failed", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        ErrorFormatter.print_warning("Precache interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)
