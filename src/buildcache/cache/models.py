# src/buildcache/cache/models.py - v1
"""Cache domain models: outcome literals and CacheStats."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

PublishOutcome = Literal["stored", "present"]
MaterializeOutcome = Literal["hit", "miss"]


class CacheStats(BaseModel):
    """Summary of the cache directory contents."""

    root: Path
    exists: bool
    entries: int = 0
    total_bytes: int = 0
