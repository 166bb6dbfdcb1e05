# src/buildcache/graph/provider_factory.py - v1
"""Factory: instantiate the unit graph provider from configuration."""

from __future__ import annotations

from buildcache.config.settings import Settings
from buildcache.graph.base_provider import BaseGraphProvider


def create_provider(settings: Settings) -> BaseGraphProvider:
    """Create the configured graph provider.

    Args:
        settings: Application settings (GRAPH_PROVIDER env var).

    Returns:
        BaseGraphProvider instance.

    Raises:
        ValueError: If the provider type is not supported.
    """
    if settings.graph_provider == "go":
        from buildcache.graph.go_list import GoListProvider
        return GoListProvider(
            go_binary=settings.go_binary,
            build_mode=settings.build_mode,
        )

    if settings.graph_provider == "manifest":
        from buildcache.graph.manifest import ManifestProvider
        if settings.manifest_path is None:
            raise ValueError(
                "MANIFEST_PATH must be set when GRAPH_PROVIDER=manifest"
            )
        return ManifestProvider(settings.manifest_path)

    raise ValueError(f"Unsupported graph provider: {settings.graph_provider!r}")
