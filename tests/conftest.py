# tests/conftest.py - v1
"""Shared test fixtures: a small on-disk unit graph served by a JSON manifest.

Graph rooted at ``example.com/app``::

    example.com/app -> example.com/lib -> example.com/util
    example.com/app -> fmt            (standard, excluded by default)
    example.com/app  test-imports example.com/testkit
    example.com/other                 (unrelated, not reachable)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from buildcache.cache.local_store import LocalCacheStore
from buildcache.config.settings import Settings
from buildcache.graph.manifest import ManifestProvider

TOOLCHAIN = ["go1.22.1", "linux", "amd64"]


class Workspace:
    """Source tree, artifacts and manifest for one test."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.manifest = root / "units.json"
        self.units: list[dict[str, Any]] = []

    def add_unit(
        self,
        identifier: str,
        files: dict[str, str],
        imports: list[str] | None = None,
        artifact: bytes | None = b"",
        **extra: Any,
    ) -> None:
        """Create a unit directory with ``files`` and an optional artifact."""
        directory = "src/" + identifier.replace("/", "_")
        for name, content in files.items():
            path = self.root / directory / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        target = "pkg/" + identifier.replace("/", "_") + ".a"
        if artifact is not None:
            (self.root / "pkg").mkdir(exist_ok=True)
            (self.root / target).write_bytes(artifact or f"archive {identifier}".encode())
        self.units.append(
            {
                "identifier": identifier,
                "directory": directory,
                "target": target,
                "go_files": [n for n in files if not n.endswith(".h")],
                "h_files": [n for n in files if n.endswith(".h")],
                "imports": imports or [],
                **extra,
            }
        )
        self.write()

    def write(self) -> Path:
        self.manifest.write_text(
            json.dumps({"toolchain": TOOLCHAIN, "units": self.units}), encoding="utf-8"
        )
        return self.manifest

    def source(self, identifier: str, name: str) -> Path:
        return self.root / ("src/" + identifier.replace("/", "_")) / name

    def target(self, identifier: str) -> Path:
        return self.root / ("pkg/" + identifier.replace("/", "_") + ".a")

    def provider(self) -> ManifestProvider:
        return ManifestProvider(self.manifest)


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    """Workspace with the app/lib/util/fmt/testkit/other graph."""
    ws = Workspace(tmp_path / "ws")
    ws.root.mkdir()
    ws.add_unit(
        "example.com/app",
        {"main.go": "package main\n"},
        imports=["example.com/lib", "fmt"],
        test_imports=["example.com/testkit"],
    )
    ws.add_unit("example.com/lib", {"lib.go": "package lib\n"}, imports=["example.com/util"])
    ws.add_unit("example.com/util", {"util.go": "package util\n", "util.h": "#pragma once\n"})
    ws.add_unit("fmt", {"print.go": "package fmt\n"}, standard=True, artifact=None)
    ws.add_unit("example.com/testkit", {"kit.go": "package testkit\n"})
    ws.add_unit("example.com/other", {"other.go": "package other\n"})
    return ws


@pytest.fixture(autouse=True)
def _reset_buildcache_logger():
    """Drop handlers installed by setup_logging so they do not outlive a test."""
    yield
    root = logging.getLogger("buildcache")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Cache directory path (not created)."""
    return tmp_path / "cache"


@pytest.fixture
def settings(tmp_cache_dir: Path, workspace: Workspace) -> Settings:
    """Settings pointing at the workspace manifest and a temp cache."""
    return Settings(
        _env_file=None,
        cache_dir=tmp_cache_dir,
        graph_provider="manifest",
        manifest_path=workspace.manifest,
    )


@pytest.fixture
def store(tmp_cache_dir: Path) -> LocalCacheStore:
    return LocalCacheStore(tmp_cache_dir)
