"""In-process caching of resolved embeds."""

import time
from collections import OrderedDict
from typing import Generic, TypeVar

import anyio

from embed_resolver.models.embed import EmbedData

T = TypeVar("T")


class LRUCache(Generic[T]):
    """
    Bounded mapping with least-recently-used eviction and per-entry expiry.

    Expired entries are dropped lazily on lookup and in bulk whenever an insert
    would otherwise evict a live entry.
    """

    def __init__(self, max_size: int = 1000, ttl_seconds: float | None = None) -> None:
        """
        Args:
            max_size: Maximum number of entries kept
            ttl_seconds: Lifetime used when set() is not given one (None never expires)
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        # key -> (value, monotonic deadline or None)
        self._entries: OrderedDict[str, tuple[T, float | None]] = OrderedDict()
        self._lock = anyio.Lock()

    @staticmethod
    def _expired(deadline: float | None, now: float) -> bool:
        return deadline is not None and now >= deadline

    def _purge(self, now: float) -> None:
        for key in [k for k, (_, d) in self._entries.items() if self._expired(d, now)]:
            del self._entries[key]

    async def get(self, key: str) -> T | None:
        """Return the live value for key and mark it recently used, or None."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._expired(entry[1], time.monotonic()):
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry[0]

    async def set(self, key: str, value: T, ttl_seconds: float | None = None) -> None:
        """
        Store value under key.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Lifetime of this entry, overriding the default
        """
        now = time.monotonic()
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        deadline = None if ttl is None else now + ttl

        async with self._lock:
            self._entries.pop(key, None)
            if len(self._entries) >= self.max_size:
                self._purge(now)
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = (value, deadline)

    async def clear(self) -> None:
        """Drop every entry."""
        async with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        """Number of stored entries, expired ones included until purged."""
        return len(self._entries)


class EmbedCache:
    """
    Cache of resolved EmbedData keyed by requested URL.

    An entry lives for the configured TTL, or for the embed's own cache_age
    when that is shorter.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_size: int = 1000,
        enabled: bool = True,
    ) -> None:
        """
        Initialize the embed cache.

        Args:
            ttl_seconds: Maximum time-to-live for cache entries
            max_size: Maximum number of entries
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_seconds
        self._cache: LRUCache[EmbedData] = LRUCache(
            max_size=max_size,
            ttl_seconds=float(ttl_seconds),
        )

    @staticmethod
    def _key(url: str) -> str:
        return url.strip()

    async def get(self, url: str) -> EmbedData | None:
        """Return the cached embed for a URL, if any."""
        if not self.enabled:
            return None
        return await self._cache.get(self._key(url))

    async def set(self, url: str, data: EmbedData) -> None:
        """Cache an embed for a URL."""
        if not self.enabled:
            return

        ttl = float(self.ttl_seconds)
        if data.cache_age is not None:
            ttl = min(ttl, float(data.cache_age))
        if ttl <= 0:
            return
        await self._cache.set(self._key(url), data, ttl_seconds=ttl)

    async def close(self) -> None:
        """Drop all cached entries."""
        await self._cache.clear()

    @property
    def size(self) -> int:
        """Return current cache size."""
        return self._cache.size
