"""Abstract base class for the gateway's response cache.

The cache stores raw upstream response bodies keyed by a string derived from
the request route and query string.  Every entry carries its own TTL set at
write time; once it elapses the entry reads as absent.  The contract has no
delete or bulk-clear operation: entries are only ever overwritten or left to
expire, which is all a TTL key-value store (in-memory, Redis, edge KV)
needs to support.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ICacheProvider(ABC):
    """Contract for TTL key-value cache stores.

    All operations are async so network-backed stores fit without blocking
    the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        bytes or None
            The cached body if present and not expired; ``None`` otherwise.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store *value* under *key* for *ttl* seconds.

        A second write for the same key replaces the first, including its
        expiry.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The body bytes to store, unchanged.
        ttl:
            Time-to-live in seconds; must be positive.
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for the backing store (e.g. ``"memory"``)."""
