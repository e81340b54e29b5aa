"""Dracin gateway FastAPI application entry point.

Wires the provider table, cache, upstream adapters, and services together
and attaches them to ``app.state``.  The provider table is injected into
:func:`create_app` (loaded from the YAML file named by settings when not
given) and is never mutated while serving, so tests can build an app around
fake providers.

Run with uvicorn's factory mode::

    uvicorn src.main:create_app --factory
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    CORSHeadersMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
)
from src.api.routes import admin_router, api_router, root_router
from src.config.loader import GatewayConfig, load_config
from src.config.settings import Settings
from src.interfaces.cache_provider import ICacheProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.upstream.http_upstream_provider import build_upstream_providers
from src.services.admin_service import AdminService
from src.services.aggregation_service import AggregationService
from src.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def _build_cache(app_settings: Settings) -> ICacheProvider | None:
    if not app_settings.cache_enabled:
        return None
    return MemoryCacheProvider(max_size=app_settings.cache_max_size)


def _build_all(
    app_settings: Settings,
    gateway_config: GatewayConfig,
    http_client: httpx.AsyncClient | None = None,
    cache: ICacheProvider | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    owns_http_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(timeout=app_settings.http_timeout)

    if cache is None:
        cache = _build_cache(app_settings)

    upstreams = build_upstream_providers(
        list(gateway_config.providers),
        http_client,
        user_agent=app_settings.upstream_user_agent,
    )
    aggregation_service = AggregationService(
        providers=upstreams,
        cache=cache,
        ttl_table=gateway_config.cache_ttl,
    )
    admin_service = AdminService(providers=gateway_config.providers)

    return {
        "settings": app_settings,
        "http_client": http_client,
        "owns_http_client": owns_http_client,
        "cache": cache,
        "aggregation_service": aggregation_service,
        "admin_service": admin_service,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Log startup; close the shared httpx client on shutdown."""
    state = application.state
    _logger.info(
        "app_startup",
        version=state.settings.service_version,
        environment=state.settings.app_env,
        providers=len(state.admin_service.sources()),
        attempt_order=state.aggregation_service.attempt_order,
        cache=state.cache.get_provider_name() if state.cache else None,
    )

    yield

    if state.owns_http_client:
        http_client: httpx.AsyncClient = state.http_client
        await http_client.aclose()
        _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    gateway_config: GatewayConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
    cache: ICacheProvider | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Runtime settings; read from the environment when omitted.
    gateway_config:
        Provider table and TTL table; loaded from
        ``app_settings.providers_config_path`` when omitted.
    http_client:
        Shared client for upstream calls.  When injected, the caller owns it
        and it is not closed on shutdown.
    cache:
        Response cache override; defaults to an in-memory cache unless
        ``cache_enabled`` is false.
    """
    app_settings = app_settings or Settings()
    configure_logging(
        log_level=app_settings.log_level,
        json_output=(app_settings.app_env == "production"),
    )
    if gateway_config is None:
        gateway_config = load_config(app_settings.providers_config_path)

    application = FastAPI(
        title=app_settings.service_name,
        version=app_settings.service_version,
        description=(
            "Aggregates several drama-content APIs behind one endpoint with "
            "per-route caching and priority-ordered fallback."
        ),
        lifespan=_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    for key, value in _build_all(app_settings, gateway_config, http_client, cache).items():
        setattr(application.state, key, value)

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(CORSHeadersMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    # -- Routes (root catch-all must come last) --
    application.include_router(admin_router)
    application.include_router(api_router)
    application.include_router(root_router)

    return application


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    _settings = Settings()
    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host=_settings.app_host,
        port=_settings.app_port,
        reload=(_settings.app_env == "development"),
    )
