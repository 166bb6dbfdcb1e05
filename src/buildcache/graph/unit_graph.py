# src/buildcache/graph/unit_graph.py - v1
"""Unit graph: NetworkX DiGraph of units resolved from a provider.

Edges point from a unit to each loaded dependency (direct or test-only).
Dependencies excluded under the active build mode are never loaded, so
they never appear as nodes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import networkx as nx

from buildcache.errors import FingerprintCycleError, MetadataError
from buildcache.graph.base_provider import BaseGraphProvider
from buildcache.graph.models import Unit

logger = logging.getLogger(__name__)


class UnitGraph:
    """Identifier-keyed view over the resolved units of one run."""

    def __init__(self, is_standard: Callable[[str], bool] | None = None) -> None:
        self._graph = nx.DiGraph()
        self._is_standard = is_standard or (lambda _identifier: False)

    @classmethod
    def from_units(
        cls,
        units: Iterable[Unit],
        is_standard: Callable[[str], bool] | None = None,
    ) -> UnitGraph:
        """Build a graph from already-loaded units (edges for known deps only)."""
        graph = cls(is_standard)
        units = list(units)
        for unit in units:
            graph.add(unit)
        for unit in units:
            for dep in unit.imports:
                if dep in graph:
                    graph.add_edge(unit.identifier, dep)
        return graph

    def add(self, unit: Unit) -> None:
        self._graph.add_node(unit.identifier, unit=unit)

    def add_edge(self, identifier: str, dependency: str) -> None:
        self._graph.add_edge(identifier, dependency)

    def get(self, identifier: str) -> Unit:
        """Return the unit for an identifier.

        Raises:
            MetadataError: If the provider never supplied this unit.
        """
        if identifier not in self._graph:
            raise MetadataError(f"{identifier} not found in unit graph")
        unit = self._graph.nodes[identifier].get("unit")
        if unit is None:
            raise MetadataError(f"{identifier} was referenced but never loaded")
        return unit

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def units(self) -> list[Unit]:
        """All units sorted by identifier."""
        return [self.get(identifier) for identifier in sorted(self._graph.nodes)]

    def find_cycle(self) -> list[str] | None:
        """Return one dependency cycle as a closed path, or None if acyclic."""
        try:
            edges = nx.find_cycle(self._graph)
        except nx.NetworkXNoCycle:
            return None
        return [u for u, _ in edges] + [edges[0][0]]

    def is_standard(self, identifier: str) -> bool:
        return self._is_standard(identifier)


def is_excluded(graph: UnitGraph, identifier: str, build_mode: str) -> bool:
    """Standard units are skipped unless a non-default build mode forces them in."""
    return build_mode == "default" and graph.is_standard(identifier)


def resolve_graph(
    provider: BaseGraphProvider,
    path: str = ".",
    build_mode: str = "default",
    include_tests: bool = True,
) -> tuple[UnitGraph, Unit]:
    """Resolve the unit graph rooted at ``path``.

    Loads the root, then every non-excluded dependency transitively. When
    ``include_tests`` is set, units under the root's identifier also pull in
    their test-only dependencies. Test-only dependencies join the unit set
    but add no edges: they are not part of any fingerprint.

    Args:
        provider: Build-metadata backend.
        path: Root path or identifier.
        build_mode: Active build mode ("default" excludes standard units).
        include_tests: Also resolve test-only dependency closures.

    Returns:
        Tuple of (graph, root unit).

    Raises:
        MetadataError: If the provider fails.
        FingerprintCycleError: If the resolved graph contains a cycle.
    """
    graph = UnitGraph(provider.is_standard)

    def load(identifier: str) -> Unit:
        if identifier in graph:
            return graph.get(identifier)
        unit = provider.load(identifier)
        graph.add(unit)
        for dep in unit.imports:
            if is_excluded(graph, dep, build_mode):
                continue
            graph.add_edge(unit.identifier, load(dep).identifier)
        return unit

    root = load(path)

    if include_tests:
        for unit in graph.units():
            if not unit.identifier.startswith(root.identifier):
                continue
            for dep in unit.test_imports + unit.xtest_imports:
                if dep == unit.identifier or is_excluded(graph, dep, build_mode):
                    continue
                load(dep)

    cycle = graph.find_cycle()
    if cycle is not None:
        raise FingerprintCycleError(cycle)

    logger.info("Resolved %d units under %s", len(graph), root.identifier)
    return graph, root
