# tests/unit/graph/test_manifest_provider.py - v1
"""Tests for graph/manifest.py: JSON-manifest backed provider."""

from __future__ import annotations

import json
import platform

import pytest

from buildcache.errors import MetadataError
from buildcache.graph.manifest import ManifestProvider


def _write(tmp_path, data) -> str:
    path = tmp_path / "units.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestManifestProvider:
    def test_root_is_first_unit(self, workspace):
        assert workspace.provider().load(".").identifier == "example.com/app"

    def test_load_by_identifier(self, workspace):
        unit = workspace.provider().load("example.com/lib")
        assert unit.imports == ["example.com/util"]

    def test_resolves_relative_paths(self, workspace):
        unit = workspace.provider().load("example.com/util")
        assert unit.directory == str(workspace.root / "src/example.com_util")
        assert unit.target == str(workspace.target("example.com/util"))

    def test_unknown_unit(self, workspace):
        with pytest.raises(MetadataError, match="not found"):
            workspace.provider().load("example.com/nope")

    def test_is_standard(self, workspace):
        provider = workspace.provider()
        assert provider.is_standard("fmt") is True
        assert provider.is_standard("example.com/lib") is False
        assert provider.is_standard("unknown") is False

    def test_toolchain_from_manifest(self, workspace):
        assert workspace.provider().toolchain_identity() == ["go1.22.1", "linux", "amd64"]

    def test_toolchain_default(self, tmp_path):
        provider = ManifestProvider(_write(tmp_path, {"units": [{"identifier": "u"}]}))
        assert provider.toolchain_identity() == [
            platform.python_implementation(),
            platform.system().lower(),
            platform.machine().lower(),
        ]

    def test_empty_target_stays_empty(self, tmp_path):
        provider = ManifestProvider(_write(tmp_path, {"units": [{"identifier": "u"}]}))
        assert provider.load("u").target == ""

    def test_duplicate_identifier(self, tmp_path):
        path = _write(tmp_path, {"units": [{"identifier": "u"}, {"identifier": "u"}]})
        with pytest.raises(MetadataError, match="Duplicate"):
            ManifestProvider(path)

    def test_invalid_unit(self, tmp_path):
        with pytest.raises(MetadataError, match="Invalid unit"):
            ManifestProvider(_write(tmp_path, {"units": [{"directory": "x"}]}))

    def test_unreadable_manifest(self, tmp_path):
        with pytest.raises(MetadataError, match="Cannot read manifest"):
            ManifestProvider(tmp_path / "missing.json")

    def test_empty_manifest_has_no_root(self, tmp_path):
        provider = ManifestProvider(_write(tmp_path, {"units": []}))
        with pytest.raises(MetadataError):
            provider.load(".")
