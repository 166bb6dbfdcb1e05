# src/buildcache/cache/cache_factory.py - v1
"""Factory for cache store instantiation."""

from __future__ import annotations

from buildcache.cache.base_cache_store import BaseCacheStore
from buildcache.cache.local_store import LocalCacheStore
from buildcache.config.settings import Settings, load_settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the directory-backed cache store.

    Args:
        settings: Application settings. Loaded from the environment if None.

    Returns:
        Configured BaseCacheStore implementation.
    """
    if settings is None:
        settings = load_settings()
    return LocalCacheStore(settings.resolved_cache_dir)
