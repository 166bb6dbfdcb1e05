# tests/unit/graph/test_unit_graph.py - v1
"""Tests for graph/unit_graph.py: resolution, exclusion and cycle checks."""

from __future__ import annotations

import pytest

from buildcache.errors import FingerprintCycleError, MetadataError
from buildcache.graph.models import Unit
from buildcache.graph.unit_graph import UnitGraph, is_excluded, resolve_graph

APP = "example.com/app"
LIB = "example.com/lib"
UTIL = "example.com/util"
TESTKIT = "example.com/testkit"


class TestResolveGraph:
    def test_default_mode(self, workspace):
        graph, root = resolve_graph(workspace.provider())
        assert root.identifier == APP
        assert [u.identifier for u in graph.units()] == [APP, LIB, TESTKIT, UTIL]

    def test_race_mode_includes_standard(self, workspace):
        graph, _root = resolve_graph(workspace.provider(), build_mode="race")
        assert "fmt" in graph

    def test_without_tests(self, workspace):
        graph, _root = resolve_graph(workspace.provider(), include_tests=False)
        assert TESTKIT not in graph
        assert len(graph) == 3

    def test_unrelated_unit_not_loaded(self, workspace):
        graph, _root = resolve_graph(workspace.provider())
        assert "example.com/other" not in graph

    def test_rooted_at_dependency(self, workspace):
        graph, root = resolve_graph(workspace.provider(), LIB)
        assert root.identifier == LIB
        assert [u.identifier for u in graph.units()] == [LIB, UTIL]

    def test_acyclic_graph_resolves(self, workspace):
        graph, _root = resolve_graph(workspace.provider())
        assert graph.find_cycle() is None

    def test_test_imports_add_no_edges(self, workspace):
        # An external test helper may import the unit under test.
        workspace.add_unit("example.com/harness", {"h.go": "package h\n"}, imports=[APP])
        workspace.units[0]["test_imports"] = [TESTKIT, "example.com/harness"]
        workspace.write()
        graph, _root = resolve_graph(workspace.provider())
        assert "example.com/harness" in graph
        assert graph.find_cycle() is None

    def test_each_unit_loaded_once(self, workspace):
        workspace.add_unit("example.com/diamond", {"d.go": "package d\n"}, imports=[LIB, UTIL])
        provider = workspace.provider()
        original = provider.load
        calls: list[str] = []

        def counting_load(path: str) -> Unit:
            calls.append(path)
            return original(path)

        provider.load = counting_load  # type: ignore[method-assign]
        resolve_graph(provider, "example.com/diamond")
        assert calls.count(UTIL) == 1
        assert calls.count(LIB) == 1

    def test_missing_dependency(self, workspace):
        workspace.add_unit("example.com/broken", {"b.go": "package b\n"}, imports=["example.com/gone"])
        with pytest.raises(MetadataError, match="example.com/gone"):
            resolve_graph(workspace.provider(), "example.com/broken")

    def test_cycle(self, workspace):
        workspace.add_unit("example.com/x", {"x.go": "package x\n"}, imports=["example.com/y"])
        workspace.add_unit("example.com/y", {"y.go": "package y\n"}, imports=["example.com/x"])
        with pytest.raises(FingerprintCycleError) as exc_info:
            resolve_graph(workspace.provider(), "example.com/x")
        assert set(exc_info.value.cycle) == {"example.com/x", "example.com/y"}


class TestUnitGraph:
    def test_get_missing(self):
        with pytest.raises(MetadataError, match="not found"):
            UnitGraph().get("nope")

    def test_from_units_skips_unknown_edges(self):
        graph = UnitGraph.from_units([Unit(identifier="a", imports=["b", "fmt"]), Unit(identifier="b")])
        assert "fmt" not in graph
        assert graph.find_cycle() is None

    def test_find_cycle(self):
        graph = UnitGraph.from_units([
            Unit(identifier="a", imports=["b"]),
            Unit(identifier="b", imports=["a"]),
        ])
        cycle = graph.find_cycle()
        assert cycle is not None
        assert cycle[0] == cycle[-1]

    def test_is_excluded(self):
        graph = UnitGraph(is_standard=lambda i: "." not in i)
        assert is_excluded(graph, "fmt", "default") is True
        assert is_excluded(graph, "fmt", "race") is False
        assert is_excluded(graph, "example.com/a", "default") is False
