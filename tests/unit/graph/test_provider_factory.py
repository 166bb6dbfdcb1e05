# tests/unit/graph/test_provider_factory.py - v1
"""Tests for graph/provider_factory.py."""

from __future__ import annotations

from buildcache.config.settings import Settings
from buildcache.graph.go_list import GoListProvider
from buildcache.graph.manifest import ManifestProvider
from buildcache.graph.provider_factory import create_provider


class TestCreateProvider:
    def test_default_go(self):
        provider = create_provider(Settings(_env_file=None, graph_provider="go"))
        assert isinstance(provider, GoListProvider)

    def test_manifest(self, settings):
        assert isinstance(create_provider(settings), ManifestProvider)
