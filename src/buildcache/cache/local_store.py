# src/buildcache/cache/local_store.py - v1
"""Directory-backed cache store.

One file per entry, named by the digest, directly under the root: the
directory listing is the index. Entries are hard-linked where possible
and copied otherwise. Concurrent invocations sharing the root need no
locking because every write either finds the entry already present or
lands it atomically via rename.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path

from buildcache.cache.base_cache_store import BaseCacheStore
from buildcache.cache.models import CacheStats, MaterializeOutcome, PublishOutcome
from buildcache.errors import CacheStoreError

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".partial-"


class LocalCacheStore(BaseCacheStore):
    """Digest-keyed blob store in a local directory."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def entry_path(self, digest: str) -> Path:
        """Return the file path for a digest.

        Raises:
            CacheStoreError: If the digest cannot name an entry.
        """
        if not digest or digest.startswith(".") or "/" in digest or "\\" in digest:
            raise CacheStoreError(f"Invalid cache key {digest!r}")
        return self._root / digest

    def exists(self, digest: str) -> bool:
        return self.entry_path(digest).exists()

    def publish(self, source: Path | str, digest: str) -> PublishOutcome:
        """Store ``source`` under ``digest``; an existing entry wins."""
        entry = self.entry_path(digest)
        if entry.exists():
            return "present"
        self._check_root()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheStoreError(f"Cannot create cache directory ({e})", str(self._root)) from e

        created = link_or_copy(Path(source), entry)
        logger.debug("Published %s -> %s", source, entry)
        return "stored" if created else "present"

    def materialize(self, digest: str, dest: Path | str) -> MaterializeOutcome:
        """Link or copy the entry to ``dest`` and mark it fresh."""
        entry = self.entry_path(digest)
        if not entry.exists():
            return "miss"

        dest = Path(dest)
        try:
            dest.unlink(missing_ok=True)
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheStoreError(f"Cannot prepare destination ({e})", str(dest)) from e

        link_or_copy(entry, dest)
        try:
            os.utime(dest)
        except OSError as e:
            raise CacheStoreError(f"Cannot reset modification time ({e})", str(dest)) from e
        logger.debug("Materialized %s -> %s", entry, dest)
        return "hit"

    def clear(self) -> None:
        """Remove the whole cache directory tree."""
        self._check_root()
        try:
            shutil.rmtree(self._root)
        except FileNotFoundError:
            return
        except OSError as e:
            raise CacheStoreError(f"Cannot clear cache ({e})", str(self._root)) from e

    def _check_root(self) -> None:
        """Refuse to write into or delete the working directory or its parents.

        Raises:
            CacheStoreError: If the root is the cwd or one of its ancestors.
        """
        root = self._root.resolve()
        cwd = Path.cwd().resolve()
        if root == cwd or root in cwd.parents:
            raise CacheStoreError(
                "Cache directory contains the working directory", str(self._root)
            )

    def stats(self) -> CacheStats:
        if not self._root.is_dir():
            return CacheStats(root=self._root, exists=False)
        entries = 0
        total = 0
        for path in self._root.iterdir():
            if path.name.startswith(".") or not path.is_file():
                continue
            entries += 1
            total += path.stat().st_size
        return CacheStats(root=self._root, exists=True, entries=entries, total_bytes=total)


def link_or_copy(src: Path, dst: Path) -> bool:
    """Hard-link ``src`` to ``dst``, falling back to a permission-preserving copy.

    Returns False if ``dst`` already existed (including a concurrent writer
    landing it first), True if this call created it.

    Raises:
        CacheStoreError: On any other filesystem failure.
    """
    if dst.exists():
        return False
    try:
        os.link(src, dst)
        return True
    except FileExistsError:
        return False
    except OSError as e:
        # Cross-device, unsupported filesystem or policy: copy instead.
        logger.debug("Hard link %s -> %s failed (%s), copying", src, dst, e)

    try:
        mode = stat.S_IMODE(os.stat(src).st_mode)
        fd, tmp_name = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=dst.parent)
    except OSError as e:
        raise CacheStoreError(f"Cannot copy ({e})", str(src)) from e

    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as out, open(src, "rb") as inp:
            os.fchmod(out.fileno(), mode)
            shutil.copyfileobj(inp, out)
        os.replace(tmp, dst)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise CacheStoreError(f"Cannot copy to {dst} ({e})", str(src)) from e
    return True
