"""buildcache: content-addressable build-artifact cache."""

from buildcache.version import __version__

__all__ = ["__version__"]
