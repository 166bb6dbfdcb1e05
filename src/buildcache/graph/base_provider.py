# src/buildcache/graph/base_provider.py - v1
"""Abstract unit graph provider interface.

Providers are external collaborators: they know how to enumerate a unit's
sources, flags and declared dependencies. The core consumes them as-is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from buildcache.graph.models import Unit


class BaseGraphProvider(ABC):
    """Unified interface for build-metadata backends."""

    @abstractmethod
    def load(self, path: str) -> Unit:
        """Return the unit record for a path or identifier."""

    @abstractmethod
    def is_standard(self, identifier: str) -> bool:
        """Classify an identifier as platform-standard without loading it."""

    @abstractmethod
    def toolchain_identity(self) -> list[str]:
        """Return toolchain version and platform tags fed into fingerprints."""
