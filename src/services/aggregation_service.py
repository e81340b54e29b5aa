"""Aggregation service: cache lookup plus priority-ordered provider fallback.

Resolves one ``/api/<route>?<query>`` request into an upstream body:

    1. Build the cache key from the route and the raw query string.
    2. On a cache hit, return the stored body; no upstream is contacted.
    3. On a miss, try the enabled providers strictly one at a time in
       ``(priority, declaration index)`` order.  The first 2xx body wins.
    4. If every provider fails, raise AllSourcesFailedError carrying the
       last provider's failure message.

The cache write for a fresh body is *not* done here.  :meth:`resolve` hands
back a :class:`GatewayResult` and the route schedules :meth:`store` as a
background task that runs after the response has been sent, so client
latency never includes cache persistence.  Two concurrent misses for the same
key may both reach upstream; the later write wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.upstream_provider import IUpstreamProvider
from src.models.gateway import CacheStatus, GatewayResult, RouteCategory
from src.models.provider import attempt_order
from src.services.cache_policy import DEFAULT_CACHE_TTL, build_cache_key, get_cache_ttl
from src.utils.errors import AllSourcesFailedError
from src.utils.logging import get_logger


class AggregationService:
    """Serves ``/api`` routes from cache or from the first healthy upstream.

    Parameters
    ----------
    providers:
        Every configured upstream, in declaration order.  Disabled ones are
        kept (they are filtered at attempt time) so declaration indices stay
        stable for tie-breaking.
    cache:
        Response cache, or ``None`` to run without caching.
    ttl_table:
        TTL in seconds per route category.
    """

    def __init__(
        self,
        providers: Sequence[IUpstreamProvider],
        cache: ICacheProvider | None = None,
        ttl_table: Mapping[RouteCategory, int] = DEFAULT_CACHE_TTL,
    ) -> None:
        by_id = {p.get_provider_name(): p for p in providers}
        ordered = attempt_order([p.config for p in providers])
        self._attempt_order: list[IUpstreamProvider] = [by_id[c.id] for c in ordered]
        self._cache = cache
        self._ttl_table = ttl_table
        self._logger = get_logger(__name__)

    @property
    def attempt_order(self) -> list[str]:
        """Ids of the providers a cache miss will try, in order."""
        return [p.get_provider_name() for p in self._attempt_order]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(
        self,
        route: str,
        query_string: str,
        params: Mapping[str, str],
        use_cache: bool = True,
    ) -> GatewayResult:
        """Return the body for *route*, from cache or from upstream.

        Parameters
        ----------
        route:
            Request path with the ``/api`` prefix stripped.
        query_string:
            Inbound query string verbatim (``"?bookId=42"`` or ``""``).
        params:
            Parsed query parameters to forward to each provider.
        use_cache:
            Skip the cache lookup when ``False`` (used by the CLI probe).

        Raises
        ------
        AllSourcesFailedError
            If no enabled provider returned a 2xx response.
        """
        cache_key = build_cache_key(route, query_string)
        ttl = get_cache_ttl(route, self._ttl_table)

        if use_cache and self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                self._logger.info("api_cache_hit", route=route, key=cache_key)
                return GatewayResult(
                    body=cached,
                    cache_status=CacheStatus.HIT,
                    cache_key=cache_key,
                    ttl=ttl,
                )

        last_error: Exception | None = None

        for provider in self._attempt_order:
            name = provider.get_provider_name()
            try:
                body = await provider.fetch(route, params)
            except Exception as exc:
                # One provider failing is non-fatal; only the last error is surfaced.
                last_error = exc
                self._logger.warning(
                    "upstream_failed",
                    provider=name,
                    route=route,
                    error=str(exc),
                )
                continue

            self._logger.info("upstream_served", provider=name, route=route)
            return GatewayResult(
                body=body,
                cache_status=CacheStatus.MISS,
                cache_key=cache_key,
                ttl=ttl,
                source_id=name,
            )

        message = _failure_message(last_error)
        self._logger.error(
            "all_sources_failed",
            route=route,
            attempted=self.attempt_order,
            message=message,
        )
        raise AllSourcesFailedError(message=message)

    async def store(self, result: GatewayResult) -> None:
        """Write a fresh upstream body into the cache.

        Runs as a background task after the response has been sent.  A
        failing write is logged and dropped; it must never affect the
        request that produced the body.
        """
        if self._cache is None or not result.should_cache:
            return
        try:
            await self._cache.set(result.cache_key, result.body, ttl=result.ttl)
        except Exception as exc:
            self._logger.error(
                "cache_write_failed",
                key=result.cache_key,
                cache=self._cache.get_provider_name(),
                error=str(exc),
            )


def _failure_message(error: Exception | None) -> str:
    if error is None:
        return "Unknown error"
    # GatewayError.message omits the "[provider]" prefix that str() adds.
    message = getattr(error, "message", None) or str(error)
    return message or "Unknown error"
