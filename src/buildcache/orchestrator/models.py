# src/buildcache/orchestrator/models.py - v1
"""Per-command reports: UnitReport, CommandReport."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

UnitStatus = Literal["stored", "present", "not_cached", "hit", "miss", "unresolved"]


class UnitReport(BaseModel):
    """Outcome for one unit of a save or restore run."""

    identifier: str
    target: str
    fingerprint: str = ""
    status: UnitStatus


class CommandReport(BaseModel):
    """Outcome of a save or restore run, units sorted by identifier."""

    command: Literal["save", "restore"]
    path: str
    cache_dir: Path
    cache_present: bool = True
    units: list[UnitReport] = Field(default_factory=list)

    def count(self, status: UnitStatus) -> int:
        """Number of units reported with ``status``."""
        return sum(1 for u in self.units if u.status == status)

    def by_identifier(self) -> dict[str, UnitReport]:
        return {u.identifier: u for u in self.units}
