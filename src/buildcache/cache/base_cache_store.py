# src/buildcache/cache/base_cache_store.py - v1
"""Abstract cache store interface.

Entries are keyed by fingerprint. Publishing an existing key is a no-op
success; the store trusts that identical digests mean identical bytes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from buildcache.cache.models import CacheStats, MaterializeOutcome, PublishOutcome


class BaseCacheStore(ABC):
    """Unified interface for digest-keyed artifact storage."""

    @property
    @abstractmethod
    def root(self) -> Path:
        """Location of the store."""

    @abstractmethod
    def exists(self, digest: str) -> bool:
        """Check whether an entry is stored under ``digest``."""

    @abstractmethod
    def publish(self, source: Path | str, digest: str) -> PublishOutcome:
        """Store the artifact at ``source`` under ``digest`` (write-once)."""

    @abstractmethod
    def materialize(self, digest: str, dest: Path | str) -> MaterializeOutcome:
        """Place the entry for ``digest`` at ``dest``, or report a miss."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry and the store itself."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Summarize the stored entries."""
