"""Unit tests for AggregationService -- cache use and provider fallback."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.interfaces.cache_provider import ICacheProvider
from src.models.gateway import CacheStatus, GatewayResult
from src.models.provider import ProviderConfig
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.upstream.http_upstream_provider import build_upstream_providers
from src.services.aggregation_service import AggregationService
from src.utils.errors import AllSourcesFailedError, ProviderUnavailableError

P1 = "https://p1.example.com/api/dramabox"
P2 = "https://p2.example.com/api/dramabox"
P3 = "https://p3.example.com/api/reelshort"


def _service(provider_configs, client, cache=None) -> AggregationService:
    return AggregationService(
        providers=build_upstream_providers(provider_configs, client),
        cache=cache,
    )


class TestProviderFallback:
    @pytest.mark.asyncio
    async def test_first_provider_serves(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1, body='["p1"]')
        fake_upstream.respond(P2, body='["p2"]')
        async with fake_upstream.client() as client:
            result = await _service(provider_configs, client).resolve("/trending", "", {})

        assert result.body == b'["p1"]'
        assert result.source_id == "p1"
        assert result.cache_status is CacheStatus.MISS
        assert fake_upstream.hosts_called() == [f"{P1}/trending"]

    @pytest.mark.asyncio
    async def test_falls_back_on_failure(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1, status=500)
        fake_upstream.respond(P2, body='["p2"]')
        async with fake_upstream.client() as client:
            result = await _service(provider_configs, client).resolve("/latest", "", {})

        assert result.source_id == "p2"
        assert fake_upstream.hosts_called() == [f"{P1}/latest", f"{P2}/latest"]

    @pytest.mark.asyncio
    async def test_falls_back_on_network_error(self, provider_configs, fake_upstream) -> None:
        fake_upstream.fail(P1, httpx.ConnectError("refused"))
        fake_upstream.respond(P2, body='["p2"]')
        async with fake_upstream.client() as client:
            result = await _service(provider_configs, client).resolve("/foryou", "", {})

        assert result.source_id == "p2"

    @pytest.mark.asyncio
    async def test_disabled_provider_never_contacted(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1, status=502)
        fake_upstream.respond(P2, status=503)
        fake_upstream.respond(P3, body='["p3"]')
        async with fake_upstream.client() as client:
            with pytest.raises(AllSourcesFailedError):
                await _service(provider_configs, client).resolve("/trending", "", {})

        assert not any(url.startswith(P3) for url in fake_upstream.hosts_called())

    @pytest.mark.asyncio
    async def test_last_error_wins(self, provider_configs, fake_upstream) -> None:
        fake_upstream.fail(P1, httpx.ConnectError("p1 unreachable"))
        fake_upstream.respond(P2, status=502)
        async with fake_upstream.client() as client:
            with pytest.raises(AllSourcesFailedError) as exc_info:
                await _service(provider_configs, client).resolve("/detail", "?bookId=1", {"bookId": "1"})

        assert exc_info.value.message == "HTTP 502"
        assert exc_info.value.to_body() == {"error": "All API sources failed", "message": "HTTP 502"}

    @pytest.mark.asyncio
    async def test_no_enabled_providers(self) -> None:
        service = AggregationService(providers=[])
        with pytest.raises(AllSourcesFailedError) as exc_info:
            await service.resolve("/trending", "", {})
        assert exc_info.value.message == "Unknown error"

    @pytest.mark.asyncio
    async def test_no_retry_of_same_provider(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1, status=500)
        fake_upstream.respond(P2, status=500)
        async with fake_upstream.client() as client:
            with pytest.raises(AllSourcesFailedError):
                await _service(provider_configs, client).resolve("/trending", "", {})

        assert len(fake_upstream.calls) == 2

    @pytest.mark.asyncio
    async def test_params_forwarded(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1)
        async with fake_upstream.client() as client:
            await _service(provider_configs, client).resolve(
                "/search", "?query=ceo", {"query": "ceo"}
            )

        assert fake_upstream.calls[0].url.params["query"] == "ceo"

    @pytest.mark.asyncio
    async def test_priority_ties_use_declaration_order(self) -> None:
        calls: list[str] = []

        def _fake(pid: str, priority: int) -> MagicMock:
            provider = MagicMock()
            provider.config = ProviderConfig(
                id=pid, display_name=pid, base_url=f"https://{pid}.example.com", priority=priority
            )
            provider.get_provider_name.return_value = pid

            async def fetch(route, params):  # noqa: ANN001, ANN202
                calls.append(pid)
                raise ProviderUnavailableError("down", provider_name=pid)

            provider.fetch = fetch
            return provider

        service = AggregationService(providers=[_fake("b", 2), _fake("a1", 1), _fake("a2", 1)])
        assert service.attempt_order == ["a1", "a2", "b"]

        with pytest.raises(AllSourcesFailedError):
            await service.resolve("/trending", "", {})
        assert calls == ["a1", "a2", "b"]


class TestCaching:
    @pytest.mark.asyncio
    async def test_hit_skips_upstream(self, provider_configs, fake_upstream, fake_clock) -> None:
        cache = MemoryCacheProvider(timer=fake_clock)
        await cache.set("api:/trending:", b'["cached"]', ttl=300)
        async with fake_upstream.client() as client:
            result = await _service(provider_configs, client, cache).resolve("/trending", "", {})

        assert result.cache_status is CacheStatus.HIT
        assert result.body == b'["cached"]'
        assert result.source_id is None
        assert fake_upstream.calls == []

    @pytest.mark.asyncio
    async def test_store_then_hit_is_byte_identical(
        self, provider_configs, fake_upstream, fake_clock
    ) -> None:
        body = '{"bookId":"42","chapterCount":  80, "tags":["Romansa"]}'
        fake_upstream.respond(P1, body=body)
        cache = MemoryCacheProvider(timer=fake_clock)
        async with fake_upstream.client() as client:
            service = _service(provider_configs, client, cache)
            miss = await service.resolve("/detail", "?bookId=42", {"bookId": "42"})
            await service.store(miss)
            hit = await service.resolve("/detail", "?bookId=42", {"bookId": "42"})

        assert miss.cache_status is CacheStatus.MISS
        assert hit.cache_status is CacheStatus.HIT
        assert hit.body == miss.body == body.encode()
        assert len(fake_upstream.calls) == 1

    @pytest.mark.asyncio
    async def test_entry_expires_after_route_ttl(
        self, provider_configs, fake_upstream, fake_clock
    ) -> None:
        fake_upstream.respond(P1, body="[]")
        cache = MemoryCacheProvider(timer=fake_clock)
        async with fake_upstream.client() as client:
            service = _service(provider_configs, client, cache)
            first = await service.resolve("/search", "?query=x", {"query": "x"})
            assert first.ttl == 180
            await service.store(first)

            fake_clock.advance(179)
            assert (await service.resolve("/search", "?query=x", {"query": "x"})).cache_status is CacheStatus.HIT

            fake_clock.advance(2)
            assert (await service.resolve("/search", "?query=x", {"query": "x"})).cache_status is CacheStatus.MISS

    @pytest.mark.asyncio
    async def test_different_query_is_different_entry(
        self, provider_configs, fake_upstream, fake_clock
    ) -> None:
        fake_upstream.respond(P1, body="[]")
        cache = MemoryCacheProvider(timer=fake_clock)
        async with fake_upstream.client() as client:
            service = _service(provider_configs, client, cache)
            await service.store(await service.resolve("/detail", "?bookId=1", {"bookId": "1"}))
            other = await service.resolve("/detail", "?bookId=2", {"bookId": "2"})

        assert other.cache_status is CacheStatus.MISS

    @pytest.mark.asyncio
    async def test_use_cache_false_bypasses_lookup(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1, body='["fresh"]')
        cache = MagicMock(spec=ICacheProvider)
        cache.get = AsyncMock(return_value=b'["stale"]')
        async with fake_upstream.client() as client:
            result = await _service(provider_configs, client, cache).resolve(
                "/trending", "", {}, use_cache=False
            )

        assert result.body == b'["fresh"]'
        cache.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_is_logged_not_raised(self) -> None:
        cache = MagicMock(spec=ICacheProvider)
        cache.set = AsyncMock(side_effect=RuntimeError("store down"))
        cache.get_provider_name.return_value = "broken"
        service = AggregationService(providers=[], cache=cache)
        result = GatewayResult(
            body=b"[]", cache_status=CacheStatus.MISS, cache_key="api:/x:", ttl=300, source_id="p1"
        )

        await service.store(result)  # should not raise

        cache.set.assert_awaited_once_with("api:/x:", b"[]", ttl=300)

    @pytest.mark.asyncio
    async def test_store_skips_hits_and_zero_ttl(self) -> None:
        cache = MagicMock(spec=ICacheProvider)
        cache.set = AsyncMock()
        service = AggregationService(providers=[], cache=cache)

        await service.store(GatewayResult(body=b"[]", cache_status=CacheStatus.HIT, cache_key="k", ttl=300))
        await service.store(
            GatewayResult(body=b"[]", cache_status=CacheStatus.MISS, cache_key="k", ttl=0, source_id="p1")
        )

        cache.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_runs_without_cache(self, provider_configs, fake_upstream) -> None:
        fake_upstream.respond(P1, body="[]")
        async with fake_upstream.client() as client:
            service = _service(provider_configs, client, cache=None)
            first = await service.resolve("/trending", "", {})
            await service.store(first)
            second = await service.resolve("/trending", "", {})

        assert second.cache_status is CacheStatus.MISS
        assert len(fake_upstream.calls) == 2
