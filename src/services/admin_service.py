"""Read-only operational views for the admin surface.

Everything here is derived from the static provider table; nothing is
cached and nothing is mutated.  Changing providers means redeploying with a
new provider file.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from src.models.provider import ProviderConfig, provider_table

CACHE_CLEAR_MESSAGE = "Cache will expire naturally"


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class AdminService:
    """Builds the JSON payloads served under ``/admin``."""

    def __init__(
        self,
        providers: Sequence[ProviderConfig],
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._providers = tuple(providers)
        self._clock = clock

    def sources(self) -> dict[str, dict[str, Any]]:
        """Full provider table keyed by id, disabled providers included."""
        return provider_table(self._providers)

    def stats(self) -> dict[str, Any]:
        """Provider counts plus the current time, computed on every call."""
        return {
            "sources": len(self._providers),
            "enabled": sum(1 for p in self._providers if p.enabled),
            "timestamp": self._clock().isoformat().replace("+00:00", "Z"),
        }

    def clear_cache(self) -> dict[str, Any]:
        """Acknowledge a cache-clear request without deleting anything.

        The cache contract has no enumeration or bulk delete; entries age
        out on their own TTL.
        """
        return {"success": True, "message": CACHE_CLEAR_MESSAGE}
