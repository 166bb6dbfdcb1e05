# src/buildcache/orchestrator/commands.py - v1
"""save / restore / clear / stats over a resolved unit graph.

Each command resolves the graph, builds a fresh fingerprint engine for the
run, then walks units sorted by identifier. Units are independent: order
only affects reporting. A fatal error aborts the command; entries written
for earlier units stay in place.
"""

from __future__ import annotations

import logging
import os

from buildcache.cache.base_cache_store import BaseCacheStore
from buildcache.cache.fingerprint import FingerprintEngine
from buildcache.cache.models import CacheStats
from buildcache.config.settings import Settings
from buildcache.graph.base_provider import BaseGraphProvider
from buildcache.graph.models import Unit
from buildcache.graph.unit_graph import UnitGraph, resolve_graph
from buildcache.logging.context import unit_context
from buildcache.orchestrator.models import CommandReport, UnitReport

logger = logging.getLogger(__name__)

_NO_FINGERPRINT = "-"


def _resolve(path: str, settings: Settings, provider: BaseGraphProvider) -> UnitGraph:
    graph, _root = resolve_graph(
        provider,
        path,
        build_mode=settings.build_mode,
        include_tests=settings.include_tests,
    )
    return graph


def _engine(
    graph: UnitGraph, settings: Settings, provider: BaseGraphProvider
) -> FingerprintEngine:
    return FingerprintEngine(
        graph,
        identity=provider.toolchain_identity(),
        build_mode=settings.build_mode,
        algorithm=settings.fingerprint_algorithm,
    )


def _log_unit(fingerprint: str, tag: str, identifier: str, detail: str) -> None:
    logger.info("%-40s %s%s (%s)", fingerprint or _NO_FINGERPRINT, tag, identifier, detail)


def _save_unit(unit: Unit, engine: FingerprintEngine, store: BaseCacheStore) -> UnitReport:
    if unit.stale or not unit.target or not os.path.exists(unit.target):
        _log_unit("", " ", unit.identifier, unit.target)
        return UnitReport(identifier=unit.identifier, target=unit.target, status="not_cached")

    digest = engine.fingerprint(unit)
    if not digest:
        _log_unit("", " ", unit.identifier, unit.target)
        return UnitReport(identifier=unit.identifier, target=unit.target, status="unresolved")

    outcome = store.publish(unit.target, digest)
    _log_unit(digest, "*" if outcome == "stored" else " ", unit.identifier, unit.target)
    return UnitReport(
        identifier=unit.identifier,
        target=unit.target,
        fingerprint=digest,
        status=outcome,
    )


def _restore_unit(
    unit: Unit, engine: FingerprintEngine, store: BaseCacheStore
) -> UnitReport:
    digest = engine.fingerprint(unit)
    if not digest or not unit.target:
        _log_unit("", " ", unit.identifier, unit.target)
        return UnitReport(
            identifier=unit.identifier,
            target=unit.target,
            fingerprint=digest,
            status="unresolved",
        )

    outcome = store.materialize(digest, unit.target)
    if outcome == "miss":
        _log_unit("", " ", unit.identifier, f"{digest}:{unit.target}")
    else:
        _log_unit(digest, " ", unit.identifier, unit.target)
    return UnitReport(
        identifier=unit.identifier,
        target=unit.target,
        fingerprint=digest,
        status=outcome,
    )


def save(
    path: str = ".",
    *,
    settings: Settings,
    provider: BaseGraphProvider,
    store: BaseCacheStore,
) -> CommandReport:
    """Publish the artifact of every fresh unit under its fingerprint.

    Stale units and units whose artifact is absent are reported as
    ``not_cached``; units whose fingerprint cannot be resolved as
    ``unresolved``.
    """
    logger.info("saving %s to %s", path, store.root)
    graph = _resolve(path, settings, provider)
    engine = _engine(graph, settings, provider)
    report = CommandReport(command="save", path=path, cache_dir=store.root)

    for unit in graph.units():
        with unit_context(unit.identifier):
            report.units.append(_save_unit(unit, engine, store))

    logger.info(
        "saved %d new, %d present, %d not cached",
        report.count("stored"),
        report.count("present"),
        report.count("not_cached"),
    )
    return report


def restore(
    path: str = ".",
    *,
    settings: Settings,
    provider: BaseGraphProvider,
    store: BaseCacheStore,
) -> CommandReport:
    """Materialize every cached unit artifact at its target path.

    A missing cache directory is a cold cache, not an error: every unit is
    reported as a miss. Nothing is fingerprinted or written.
    """
    graph = _resolve(path, settings, provider)

    if not store.root.exists():
        logger.info("%s does not exist", store.root)
        return CommandReport(
            command="restore",
            path=path,
            cache_dir=store.root,
            cache_present=False,
            units=[
                UnitReport(identifier=u.identifier, target=u.target, status="miss")
                for u in graph.units()
            ],
        )

    logger.info("restoring %s from %s", path, store.root)
    engine = _engine(graph, settings, provider)
    report = CommandReport(command="restore", path=path, cache_dir=store.root)

    for unit in graph.units():
        with unit_context(unit.identifier):
            report.units.append(_restore_unit(unit, engine, store))

    logger.info("restored %d, missed %d", report.count("hit"), report.count("miss"))
    return report


def clear(*, store: BaseCacheStore) -> None:
    """Delete the entire cache directory."""
    logger.info("clearing %s", store.root)
    store.clear()


def stats(*, store: BaseCacheStore) -> CacheStats:
    """Count entries and bytes in the cache directory."""
    return store.stats()
