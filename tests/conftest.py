"""Shared pytest fixtures for the Dracin gateway test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from src.config.loader import GatewayConfig
from src.config.settings import Settings
from src.models.provider import ProviderConfig

ADMIN_SECRET = "test-admin-secret"

# ---------------------------------------------------------------------------
# Upstream fakes
# ---------------------------------------------------------------------------


class FakeUpstream:
    """Scriptable stand-in for every upstream host, mounted via MockTransport.

    ``routes`` maps a URL prefix (``base_url``) to either a status code with
    body, or an exception to raise.  Every request is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self._handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(
        self,
        base_url: str,
        status: int = 200,
        body: str | bytes = "[]",
        headers: dict[str, str] | None = None,
    ) -> None:
        content = body.encode("utf-8") if isinstance(body, str) else body

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, content=content, headers=headers)

        self._handlers[base_url] = handler

    def fail(self, base_url: str, exc: Exception) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        self._handlers[base_url] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        url = str(request.url)
        # Longest prefix first so ".../dramabox" does not shadow ".../dramabox2".
        for prefix in sorted(self._handlers, key=len, reverse=True):
            if url.startswith(prefix):
                return self._handlers[prefix](request)
        return httpx.Response(404, text="no fake route")

    def hosts_called(self) -> list[str]:
        return [f"{r.url.scheme}://{r.url.host}{r.url.path}" for r in self.calls]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


class FakeClock:
    """Monotonic clock the tests can advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Provider tables
# ---------------------------------------------------------------------------

P1_URL = "https://p1.example.com/api/dramabox"
P2_URL = "https://p2.example.com/api/dramabox"
P3_URL = "https://p3.example.com/api/reelshort"


@pytest.fixture
def provider_configs() -> list[ProviderConfig]:
    """P1 (priority 1), P2 (priority 2), P3 (priority 3, disabled)."""
    return [
        ProviderConfig(id="p1", display_name="Primary", base_url=P1_URL, enabled=True, priority=1),
        ProviderConfig(id="p2", display_name="Mirror", base_url=P2_URL, enabled=True, priority=2),
        ProviderConfig(id="p3", display_name="Disabled", base_url=P3_URL, enabled=False, priority=3),
    ]


@pytest.fixture
def gateway_config(provider_configs: list[ProviderConfig]) -> GatewayConfig:
    return GatewayConfig(providers=tuple(provider_configs))


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        admin_password=ADMIN_SECRET,
        app_env="test",
        log_level="WARNING",
        _env_file=None,
    )


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent
