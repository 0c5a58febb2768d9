"""
Command-line interface for precache.

This module provides the `precache` CLI tool, which populates the cache of
binary artifacts without device or target autodetection.
"""

import argparse
import os
import sys
import time
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from precache import __version__
from precache.cache import Cache
from precache.cli_utils import ErrorFormatter, LockEnvironment, setup_logging
from precache.config import ChannelDetector, FeatureFlags, ParsedFlags, Settings, add_flags
from precache.errors import (
    CacheUpdateError,
    LockTimeoutError,
    SettingsError,
    UsageConflictError,
)
from precache.orchestrator import FetchOrchestrator, PrecacheResult
from precache.selection import ConflictValidator, plan_precache


@dataclass
class PrecacheArgs:
    """Arguments for the precache command."""

    flags: ParsedFlags
    verbose: bool = False


def run_precache(
    args: PrecacheArgs,
    environ: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
    cache: Optional[Cache] = None,
) -> PrecacheResult:
    """Validate flags, resolve artifacts and update the cache.

    Args:
        args: Parsed command arguments
        environ: Environment mapping (defaults to os.environ)
        settings: Loaded settings (read from disk if None)
        cache: Cache to update (built from settings if None)

    Returns:
        PrecacheResult from the orchestrator

    Raises:
        UsageConflictError: If umbrella and child flags contradict each other
        CacheUpdateError: If fetching artifacts fails
    """
    environ = os.environ if environ is None else environ

    ConflictValidator().validate(args.flags.arguments)

    settings = settings if settings is not None else Settings.load(environ=environ)
    channel = ChannelDetector.detect(settings, environ)
    feature_flags = FeatureFlags(channel, settings, environ)
    plan = plan_precache(args.flags, channel, feature_flags)

    if cache is None:
        cache = Cache(
            settings.cache_dir,
            engine_version=settings.engine_version,
            storage_base_url=settings.storage_base_url,
        )

    # Re-lock the cache unless a parent process already holds it
    locked_here = False
    if not LockEnvironment.is_already_locked(environ):
        cache.lock()
        locked_here = True
    try:
        return FetchOrchestrator(cache).run(plan)
    finally:
        if locked_here:
            cache.release_lock()


def precache_command(args: PrecacheArgs) -> None:
    """Populate the cache of binary artifacts.

    Examples:
        precache                       # Default artifacts for this host
        precache --web --no-ios        # Add web, drop iOS
        precache -a                    # Artifacts for all host platforms
        precache -f                    # Re-download everything
    """
    try:
        start_time = time.time()
        result = run_precache(args)
        if result.updated:
            ErrorFormatter.print_success(result.message)
            print(f"Precache time: {time.time() - start_time:.2f}s")
        sys.exit(0)

    except UsageConflictError as e:
        ErrorFormatter.handle_usage_error(e)
    except (CacheUpdateError, LockTimeoutError) as e:
        ErrorFormatter.handle_cache_error(e)
    except SettingsError as e:
        ErrorFormatter.print_error("Configuration error", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def build_parser(verbose_help: bool = False) -> argparse.ArgumentParser:
    """Create the argument parser.

    Option prefixes are not accepted so that the raw arguments always contain
    the full flag spelling.
    """
    parser = argparse.ArgumentParser(
        prog="precache",
        description="Populates the cache of binary artifacts.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"precache {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output and hidden flags in --help",
    )
    add_flags(parser, verbose_help=verbose_help)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """precache - fetch platform artifacts without autodetection."""
    arguments = list(sys.argv[1:] if argv is None else argv)
    verbose_help = "-v" in arguments or "--verbose" in arguments

    parser = build_parser(verbose_help=verbose_help)
    parsed_args = parser.parse_args(arguments)

    setup_logging(parsed_args.verbose)

    precache_args = PrecacheArgs(
        flags=ParsedFlags.from_namespace(parsed_args, arguments),
        verbose=parsed_args.verbose,
    )
    precache_command(precache_args)


if __name__ == "__main__":
    main()
