# src/buildcache/main.py - v1
"""CLI entry point: save, restore, clear and stats commands.

Usage:
    buildcache save [path]
    buildcache restore [path]
    buildcache clear
    buildcache stats
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from buildcache.config.settings import ConfigurationError, Settings, load_settings
from buildcache.errors import BuildCacheError
from buildcache.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_usage(sys.stderr)
        return 1

    try:
        settings = load_settings(**_overrides(args))
    except (ConfigurationError, ValidationError) as exc:
        print(f"buildcache: configuration error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    from buildcache.logging.context import clear_context, generate_run_id, set_command_context

    set_command_context(args.command, generate_run_id())
    try:
        return args.func(args, settings)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (BuildCacheError, OSError) as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1
    finally:
        clear_context()


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="buildcache",
        description=f"buildcache v{__version__} - content-addressable build-artifact cache",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--race", action="store_true",
        help="Race build mode: include standard units and tag every fingerprint",
    )
    parser.add_argument(
        "--provider", choices=["go", "manifest"], default=None,
        help="Unit graph provider (default: GRAPH_PROVIDER or go)",
    )
    parser.add_argument(
        "--manifest", type=Path, default=None,
        help="JSON manifest describing the unit graph (implies --provider manifest)",
    )
    parser.add_argument(
        "--cache-dir", type=Path, default=None,
        help="Cache directory (default: $CACHE or ~/buildcache)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- save ---
    p_save = subparsers.add_parser(
        "save", help="Store built artifacts in the cache",
    )
    p_save.add_argument("path", nargs="?", default=".", help="Root unit path (default: .)")
    p_save.set_defaults(func=_cmd_save)

    # --- restore ---
    p_restore = subparsers.add_parser(
        "restore", help="Repopulate artifacts from the cache",
    )
    p_restore.add_argument("path", nargs="?", default=".", help="Root unit path (default: .)")
    p_restore.set_defaults(func=_cmd_restore)

    # --- clear ---
    p_clear = subparsers.add_parser("clear", help="Delete the entire cache directory")
    p_clear.set_defaults(func=_cmd_clear)

    # --- stats ---
    p_stats = subparsers.add_parser("stats", help="Show cache directory statistics")
    p_stats.set_defaults(func=_cmd_stats)

    return parser


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    """Translate CLI flags into Settings overrides (only flags actually given)."""
    overrides: dict[str, object] = {}
    if args.race:
        overrides["build_mode"] = "race"
    if args.manifest is not None:
        overrides["manifest_path"] = args.manifest
        overrides["graph_provider"] = "manifest"
    if args.provider is not None:
        overrides["graph_provider"] = args.provider
    if args.cache_dir is not None:
        overrides["cache_dir"] = args.cache_dir
    return overrides


def _cmd_save(args: argparse.Namespace, settings: Settings) -> int:
    """Publish artifacts for the resolved unit graph."""
    from buildcache.cache.cache_factory import create_cache_store
    from buildcache.graph.provider_factory import create_provider
    from buildcache.orchestrator.commands import save

    report = save(
        args.path,
        settings=settings,
        provider=create_provider(settings),
        store=create_cache_store(settings),
    )
    print(
        f"saved {report.count('stored')} new, {report.count('present')} present, "
        f"{report.count('not_cached')} not cached, {report.count('unresolved')} unresolved"
    )
    return 0


def _cmd_restore(args: argparse.Namespace, settings: Settings) -> int:
    """Materialize cached artifacts for the resolved unit graph."""
    from buildcache.cache.cache_factory import create_cache_store
    from buildcache.graph.provider_factory import create_provider
    from buildcache.orchestrator.commands import restore

    report = restore(
        args.path,
        settings=settings,
        provider=create_provider(settings),
        store=create_cache_store(settings),
    )
    if not report.cache_present:
        print(f"{report.cache_dir} does not exist")
    print(f"restored {report.count('hit')}, missed {report.count('miss')}")
    return 0


def _cmd_clear(args: argparse.Namespace, settings: Settings) -> int:
    """Remove the cache directory."""
    from buildcache.cache.cache_factory import create_cache_store
    from buildcache.orchestrator.commands import clear

    clear(store=create_cache_store(settings))
    return 0


def _cmd_stats(args: argparse.Namespace, settings: Settings) -> int:
    """Display entry count and size of the cache directory."""
    from buildcache.cache.cache_factory import create_cache_store
    from buildcache.orchestrator.commands import stats

    result = stats(store=create_cache_store(settings))
    print(f"\nStatistics for {result.root}:")
    if not result.exists:
        print("  (does not exist)")
        return 0
    print(f"  Entries:    {result.entries}")
    print(f"  Total size: {result.total_bytes} bytes")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from buildcache.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
