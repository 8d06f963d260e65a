"""File-backed response cache.

Each entry is a plain file named by its key inside a single cache
directory, holding the raw response body.  Staleness is judged from the
file's modification time only; nothing is evicted automatically.
"""

import datetime as dt
import logging
from pathlib import Path


class CacheEntryNotFound(FileNotFoundError):
    """Raised when reading a cache key that has no entry."""


class CacheStore:
    """Maps cache keys (CVE IDs, database names) to files on disk.

    The directory is created on first use, not at construction.

    Attributes:
        root: Cache directory.
    """

    def __init__(self, root: Path, logger: logging.Logger | None = None):
        self.root = Path(root)
        self.log = logger or logging.getLogger(__name__)
        self._ready = False

    def _dir(self) -> Path:
        if not self._ready:
            self.root.mkdir(parents=True, exist_ok=True)
            self._ready = True
        return self.root

    def path(self, key: str) -> Path:
        """Return the file path for a cache key.

        Raises:
            ValueError: if the key is empty or could escape the cache directory.
        """
        if not key or key in (".", "..") or "/" in key or "\\" in key:
            raise ValueError(f"Invalid cache key: {key!r}")
        return self._dir() / key

    def exists(self, key: str) -> bool:
        return self.path(key).is_file()

    def last_modified(self, key: str) -> dt.datetime | None:
        """Return the entry's modification time, or ``None`` if absent."""
        try:
            return dt.datetime.fromtimestamp(self.path(key).stat().st_mtime)
        except FileNotFoundError:
            return None

    def is_stale(self, key: str, max_age: dt.timedelta) -> bool:
        """Check whether an entry needs refreshing.

        Args:
            key: Cache key.
            max_age: Freshness window.

        Returns:
            ``True`` if the entry is missing or older than ``max_age``.
        """
        mtime = self.last_modified(key)
        if mtime is None:
            return True
        return dt.datetime.now() - mtime > max_age

    def read(self, key: str) -> bytes:
        """Read an entry's raw bytes.

        Raises:
            CacheEntryNotFound: if there is no entry for ``key``.
        """
        try:
            return self.path(key).read_bytes()
        except FileNotFoundError as e:
            raise CacheEntryNotFound(f"No cache entry for {key}") from e

    def write(self, key: str, data: bytes) -> bool:
        """Overwrite an entry.

        Failures are logged, never raised: the caller's data stays usable.

        Returns:
            ``True`` if the entry was written.
        """
        try:
            self.path(key).write_bytes(data)
        except OSError as e:
            self.log.warning(f"Failed to cache {key} to {self.root / key}: {e}")
            return False
        return True

    def clear(self) -> int:
        """Delete every entry in the cache directory.

        Returns:
            Number of entries removed.
        """
        if not self.root.exists():
            return 0
        removed = 0
        for cache_file in self.root.iterdir():
            if not cache_file.is_file():
                continue
            try:
                cache_file.unlink()
                removed += 1
            except OSError as e:
                self.log.warning(f"Failed to delete {cache_file}: {e}")
        return removed
