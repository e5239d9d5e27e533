"""
Disk cache for fetched register pages using diskcache.

Pages are stored as raw bytes under "<namespace>:<key>" keys, e.g.
"detail:54190-7-0" for the current extract of entity 54190 at court 7 or
"search:ico-36294268" for an IČO search, so detail pages and search results
can be listed and cleared separately.
"""

import logging
from collections import Counter
from collections.abc import Iterator
from itertools import islice
from pathlib import Path
from typing import Optional

import diskcache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path("data/cache")
_cache: Optional["AppCache"] = None

# A detail page is 10-40 kB; 1 GB is tens of thousands of entities
DEFAULT_CACHE_SIZE_LIMIT = 1024 * 1024 * 1024
SECONDS_PER_DAY = 86400


class AppCache:
    """
    Namespaced page cache (SQLite-backed diskcache).

    Args:
        cache_dir: Directory for cache files (created if missing)
        timeout: Seconds to wait for the database lock
        size_limit: Maximum size in bytes; least recently stored pages are evicted beyond it
    """

    def __init__(
        self,
        cache_dir: Path = DEFAULT_CACHE_DIR,
        timeout: float = 30.0,
        size_limit: int = DEFAULT_CACHE_SIZE_LIMIT,
    ):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(str(self.cache_dir), timeout=timeout, size_limit=size_limit)

    @staticmethod
    def _full_key(namespace: str, key: str) -> str:
        return f"{namespace}:{key}"

    def _namespace_keys(self, namespace: str | None) -> Iterator[str]:
        """Full keys of one namespace, or all keys for None."""
        prefix = f"{namespace}:" if namespace else ""
        return (key for key in self._cache if key.startswith(prefix))

    def get(self, namespace: str, key: str) -> bytes | None:
        """Cached page, or None when missing or expired."""
        return self._cache.get(self._full_key(namespace, key))

    def set(self, namespace: str, key: str, page: bytes, ttl_days: int | None = None) -> None:
        """Store a page; ttl_days None or 0 keeps it until evicted."""
        expire = ttl_days * SECONDS_PER_DAY if ttl_days else None
        self._cache.set(self._full_key(namespace, key), page, expire=expire)

    def delete(self, namespace: str, key: str) -> bool:
        return bool(self._cache.delete(self._full_key(namespace, key)))

    def clear_namespace(self, namespace: str) -> int:
        """Drop every page of a namespace; returns the number of pages removed."""
        doomed = list(self._namespace_keys(namespace))
        for key in doomed:
            self._cache.delete(key)
        logger.debug(f"Cleared {len(doomed)} pages from {namespace}")
        return len(doomed)

    def count(self, namespace: str | None = None) -> int:
        if namespace is None:
            return len(self._cache)
        return sum(1 for _ in self._namespace_keys(namespace))

    def stats(self) -> dict:
        """Entry counts per namespace, disk usage and location."""
        by_namespace = Counter(key.partition(":")[0] if ":" in key else "unknown" for key in self._cache)
        size_limit = self._cache.size_limit
        return {
            "total": len(self._cache),
            "by_namespace": dict(by_namespace),
            "size_mb": round(self._cache.volume() / (1024 * 1024), 2),
            "size_limit_mb": round(size_limit / (1024 * 1024), 2) if size_limit else None,
            "cache_dir": str(self.cache_dir),
        }

    def keys(self, namespace: str | None = None, limit: int = 100) -> list[str]:
        """
        Stored keys, at most limit of them.

        With a namespace the prefix is dropped ("54190-7-0"); without one
        the full keys are returned ("detail:54190-7-0").
        """
        strip = len(namespace) + 1 if namespace else 0
        return [key[strip:] for key in islice(self._namespace_keys(namespace), limit)]

    def close(self) -> None:
        self._cache.close()


def get_cache(cache_dir: Path | None = None, timeout: float = 30.0) -> AppCache:
    """
    Shared page cache, opened on first use.

    Args:
        cache_dir: Directory for cache files (default: settings.cache_dir);
            ignored once the cache is open
        timeout: Seconds to wait for the database lock
    """
    global _cache
    if _cache is None:
        if cache_dir is None:
            from orsr_parser.config import get_cache_dir

            cache_dir = get_cache_dir()
        _cache = AppCache(cache_dir, timeout=timeout)
        logger.debug(f"Opened page cache at {_cache.cache_dir}")
    return _cache
