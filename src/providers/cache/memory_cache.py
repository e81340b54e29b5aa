"""In-memory cache provider using cachetools.TLRUCache.

Each entry gets its own expiry (``now + ttl`` at write time), which the
gateway needs because TTLs differ per route category.  Suitable for a single
process; a multi-worker deployment would implement ICacheProvider over a
shared store instead.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import NamedTuple

import structlog
from cachetools import TLRUCache

from src.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class _Entry(NamedTuple):
    body: bytes
    ttl: int


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCacheProvider(ICacheProvider):
    """In-memory cache with per-entry TTLs backed by ``cachetools.TLRUCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    timer:
        Clock used for expiry, in seconds.  Defaults to ``time.monotonic``;
        tests inject a fake clock.
    """

    def __init__(
        self,
        max_size: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        """Retrieve the cached body for *key*, or ``None`` if missing/expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        logger.debug("cache_hit", key=key)
        return entry.body

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._cache[key] = _Entry(body=value, ttl=ttl)
        logger.debug("cache_set", key=key, ttl=ttl)

    async def exists(self, key: str) -> bool:
        return key in self._cache

    def get_provider_name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        self._cache.expire()
        return len(self._cache)
