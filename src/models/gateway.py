"""Models describing how the gateway resolved an ``/api`` request."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class RouteCategory(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Cache-lifetime buckets derived from the request route.

    The category is a pure function of the route string
    (see :func:`src.services.cache_policy.categorize_route`).
    """

    TRENDING = "trending"
    LATEST = "latest"
    DETAIL = "detail"
    EPISODES = "episodes"
    SEARCH = "search"
    DEFAULT = "default"


class CacheStatus(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Value of the ``X-Cache`` response header."""

    HIT = "HIT"
    MISS = "MISS"


class GatewayResult(BaseModel):
    """The outcome of one successful ``/api`` resolution.

    ``body`` is the upstream response bytes exactly as received; the gateway
    never parses or re-serializes it.  ``source_id`` is only set on a MISS,
    since a cached body does not record which provider produced it.
    """

    model_config = ConfigDict(frozen=True)

    body: bytes
    cache_status: CacheStatus
    cache_key: str
    ttl: int
    source_id: str | None = None

    @property
    def should_cache(self) -> bool:
        """True when the body came from upstream and its route is cacheable."""
        return self.cache_status is CacheStatus.MISS and self.ttl > 0
