# src/buildcache/graph/manifest.py - v1
"""Unit graph provider backed by a JSON manifest file.

Manifest format::

    {
      "toolchain": ["cc-13.2", "linux", "x86_64"],
      "units": [
        {"identifier": "app", "directory": "app", "target": "out/app.a",
         "go_files": ["main.go"], "imports": ["lib"]},
        ...
      ]
    }

The first unit listed is the root returned for ``load(".")``. Relative
``directory`` and ``target`` values are resolved against the manifest's
own directory.
"""

from __future__ import annotations

import json
import logging
import platform
from pathlib import Path

from pydantic import ValidationError

from buildcache.errors import MetadataError
from buildcache.graph.base_provider import BaseGraphProvider
from buildcache.graph.models import Unit

logger = logging.getLogger(__name__)


class ManifestProvider(BaseGraphProvider):
    """Serve units from a static JSON description of the graph."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise MetadataError(f"Cannot read manifest {self._path}: {e}") from e

        self._toolchain: list[str] | None = data.get("toolchain")
        self._units: dict[str, Unit] = {}
        self._root: str | None = None
        base = self._path.parent

        for raw in data.get("units", []):
            try:
                unit = Unit.model_validate(raw)
            except ValidationError as e:
                raise MetadataError(f"Invalid unit in {self._path}: {e}") from e
            if unit.identifier in self._units:
                raise MetadataError(f"Duplicate unit identifier: {unit.identifier}")
            unit = unit.model_copy(
                update={
                    "directory": str(base / unit.directory),
                    "target": str(base / unit.target) if unit.target else "",
                }
            )
            self._units[unit.identifier] = unit
            if self._root is None:
                self._root = unit.identifier

        logger.debug("Manifest %s: %d units", self._path, len(self._units))

    def load(self, path: str) -> Unit:
        """Look a unit up by identifier; ``"."`` names the root unit."""
        identifier = self._root if path == "." else path
        if identifier is None or identifier not in self._units:
            raise MetadataError(f"Unit {path!r} not found in {self._path}")
        return self._units[identifier]

    def is_standard(self, identifier: str) -> bool:
        unit = self._units.get(identifier)
        return unit.standard if unit is not None else False

    def toolchain_identity(self) -> list[str]:
        if self._toolchain is not None:
            return list(self._toolchain)
        return [
            platform.python_implementation(),
            platform.system().lower(),
            platform.machine().lower(),
        ]
