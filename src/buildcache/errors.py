# src/buildcache/errors.py - v1
"""Exception taxonomy shared by the graph, fingerprint and cache layers.

Configuration problems live in config.settings.ConfigurationError.
"""

from __future__ import annotations


class BuildCacheError(Exception):
    """Base class for fatal build-cache failures."""


class MetadataError(BuildCacheError):
    """Raised when the unit graph provider fails or returns an inconsistent graph."""


class FingerprintCycleError(MetadataError):
    """Raised when a unit depends on itself, directly or transitively."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__("Dependency cycle: " + " -> ".join(cycle))


class CacheStoreError(BuildCacheError):
    """Raised on unexpected filesystem failures inside the cache store."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{message}: {path}" if path else message)


class HashError(BuildCacheError):
    """Raised when the digest accumulator cannot be created."""
