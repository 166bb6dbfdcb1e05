# src/buildcache/cache/fingerprint.py - v1
"""Recursive, memoized content fingerprints over a unit graph.

A unit's fingerprint covers, in fixed order: the toolchain identity tags,
the build-mode tag (non-default modes only), the unit identifier, every
source-like file (name then bytes) per file group, every build flag per
flag group, and the fingerprint of every non-excluded direct dependency
in declared order. Components are fed as UTF-8 with no separators, so
declared order is part of a unit's identity.

The empty string means "not resolvable yet" and propagates to every
dependent. It is never memoized.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from buildcache.errors import FingerprintCycleError, HashError
from buildcache.graph.models import Unit
from buildcache.graph.unit_graph import UnitGraph, is_excluded

if TYPE_CHECKING:
    from hashlib import _Hash

logger = logging.getLogger(__name__)

_READ_CHUNK = 1 << 16


class FingerprintEngine:
    """Compute unit fingerprints for one run.

    The memo table is owned by the engine, not the units, so a fresh engine
    per run (or per test) starts clean.

    Args:
        graph: Resolved unit graph.
        identity: Toolchain version and platform tags.
        build_mode: "default" excludes standard units; any other mode
            includes them and is fed into every digest as a tag.
        algorithm: hashlib algorithm name.
    """

    def __init__(
        self,
        graph: UnitGraph,
        identity: list[str],
        build_mode: str = "default",
        algorithm: str = "sha1",
    ) -> None:
        try:
            hashlib.new(algorithm)
        except (ValueError, TypeError) as e:
            raise HashError(f"Unsupported hash algorithm {algorithm!r}: {e}") from e
        self._graph = graph
        self._identity = list(identity)
        self._build_mode = build_mode
        self._algorithm = algorithm
        self._memo: dict[str, str] = {}
        self._in_progress: list[str] = []

    @property
    def memo(self) -> dict[str, str]:
        """Copy of the resolved fingerprints so far."""
        return dict(self._memo)

    def fingerprint(self, unit: Unit | str) -> str:
        """Return the fingerprint of a unit, or "" if it cannot be resolved.

        Raises:
            MetadataError: If a dependency is missing from the graph.
            FingerprintCycleError: If the unit depends on itself.
            OSError: If a declared source file cannot be read.
        """
        identifier = unit if isinstance(unit, str) else unit.identifier
        cached = self._memo.get(identifier)
        if cached:
            return cached

        if identifier in self._in_progress:
            start = self._in_progress.index(identifier)
            raise FingerprintCycleError(self._in_progress[start:] + [identifier])

        resolved = self._graph.get(identifier)
        if resolved.has_errors:
            reason = resolved.error.err if resolved.error else "dependency errors"
            logger.warning("Cannot fingerprint %s: %s", identifier, reason)
            return ""

        self._in_progress.append(identifier)
        try:
            digest = self._compute(resolved)
        finally:
            self._in_progress.pop()

        if digest:
            self._memo[identifier] = digest
        return digest

    def fingerprint_all(self) -> dict[str, str]:
        """Fingerprint every unit in the graph, sorted by identifier."""
        return {unit.identifier: self.fingerprint(unit) for unit in self._graph.units()}

    def _compute(self, unit: Unit) -> str:
        h = hashlib.new(self._algorithm)
        _add_flags(h, self._identity)
        if self._build_mode != "default":
            _add_flags(h, [self._build_mode])
        _add_flags(h, [unit.identifier])

        directory = Path(unit.directory)
        for _group, files in unit.file_groups():
            for name in files:
                _add_file(h, directory, name)
        for _group, flags in unit.flag_groups():
            _add_flags(h, flags)

        for dep in unit.imports:
            if is_excluded(self._graph, dep, self._build_mode):
                continue
            dep_digest = self.fingerprint(dep)
            if not dep_digest:
                return ""
            h.update(dep_digest.encode("utf-8"))

        return h.hexdigest()


def _add_flags(h: _Hash, flags: list[str]) -> None:
    for flag in flags:
        h.update(flag.encode("utf-8"))


def _add_file(h: _Hash, directory: Path, name: str) -> None:
    """Feed a file's name followed by its full contents."""
    h.update(name.encode("utf-8"))
    with open(directory / name, "rb") as f:
        for chunk in iter(lambda: f.read(_READ_CHUNK), b""):
            h.update(chunk)
