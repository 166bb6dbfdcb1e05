"""Fingerprinting and digest-keyed artifact storage."""

from buildcache.cache.fingerprint import FingerprintEngine
from buildcache.cache.local_store import LocalCacheStore

__all__ = ["FingerprintEngine", "LocalCacheStore"]
