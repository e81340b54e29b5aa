"""FastAPI routes for the Dracin gateway.

Services are resolved from ``app.state`` via ``Depends`` using the
``Annotated`` pattern; src/main.py populates the state when the app is built.

# ─── ROUTE MAP ─────────────────────────────────────────────────────────
#
# Path                 Auth    Description
# ─────────────────────────────────────────────────────────────────────
# /admin/sources       Bearer  Full provider table (disabled included)
# /admin/cache/clear   Bearer  Acknowledge; entries expire on their own
# /admin/stats         Bearer  Provider counts + timestamp
# /admin*              Bearer  404 for anything else
# /api<route>          none    Cache, then upstream fallback (X-Cache/X-Source)
# /  and anything else none    Static service description
#
# Prefix matching follows the path string, so "/apifoo" is an API route and
# "/administrator" is an admin route.  Routers must be included in the order
# admin, api, root: the root catch-all matches every path.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.responses import JSONResponse

from src.api.auth import require_admin
from src.api.schemas import (
    CacheClearResponse,
    NotFoundResponse,
    ProviderEntry,
    ServiceInfoResponse,
    StatsResponse,
)
from src.config.settings import Settings
from src.services.admin_service import AdminService
from src.services.aggregation_service import AggregationService

# OPTIONS never reaches routing; CORSHeadersMiddleware answers it.
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]
ADMIN_METHODS = ["GET", "POST"]

ENDPOINTS: dict[str, str] = {
    "trending": "/api/trending",
    "latest": "/api/latest",
    "foryou": "/api/foryou",
    "search": "/api/search?query=<query>",
    "detail": "/api/detail?bookId=<bookId>",
    "episodes": "/api/allepisode?bookId=<bookId>",
    "populersearch": "/api/populersearch",
    "randomdrama": "/api/randomdrama",
    "dubindo": "/api/dubindo",
    "admin": "/admin",
}


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------


def _get_aggregation_service(request: Request) -> AggregationService:
    return request.app.state.aggregation_service


def _get_admin_service(request: Request) -> AdminService:
    return request.app.state.admin_service


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ---------------------------------------------------------------------------
# Admin surface
# ---------------------------------------------------------------------------

admin_router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])


@admin_router.api_route(
    "/admin/sources",
    methods=ADMIN_METHODS,
    response_model=dict[str, ProviderEntry],
)
async def admin_sources(
    admin: Annotated[AdminService, Depends(_get_admin_service)],
) -> dict[str, Any]:
    return admin.sources()


@admin_router.api_route(
    "/admin/cache/clear",
    methods=ADMIN_METHODS,
    response_model=CacheClearResponse,
)
async def admin_clear_cache(
    admin: Annotated[AdminService, Depends(_get_admin_service)],
) -> dict[str, Any]:
    return admin.clear_cache()


@admin_router.api_route(
    "/admin/stats",
    methods=ADMIN_METHODS,
    response_model=StatsResponse,
)
async def admin_stats(
    admin: Annotated[AdminService, Depends(_get_admin_service)],
) -> dict[str, Any]:
    return admin.stats()


@admin_router.api_route("/admin{rest:path}", methods=ALL_METHODS, include_in_schema=False)
async def admin_not_found(rest: str) -> JSONResponse:
    return JSONResponse(status_code=404, content=NotFoundResponse().model_dump())


# ---------------------------------------------------------------------------
# Aggregation core
# ---------------------------------------------------------------------------

api_router = APIRouter(tags=["api"])


@api_router.api_route("/api{route:path}", methods=ALL_METHODS)
async def proxy_api(
    route: str,
    request: Request,
    background_tasks: BackgroundTasks,
    service: Annotated[AggregationService, Depends(_get_aggregation_service)],
) -> Response:
    """Serve an upstream drama payload, from cache or the first healthy provider.

    The body is passed through untouched.  A fresh body is written to the
    cache by a background task that runs after this response is sent.
    """
    raw_query = request.url.query
    query_string = f"?{raw_query}" if raw_query else ""
    # dict() over the multi-dict keeps the last value of a repeated key.
    params = dict(request.query_params)

    result = await service.resolve(route, query_string, params)

    headers = {"X-Cache": result.cache_status.value}
    if result.source_id is not None:
        headers["X-Source"] = result.source_id
    if result.should_cache:
        background_tasks.add_task(service.store, result)

    return Response(content=result.body, media_type="application/json", headers=headers)


# ---------------------------------------------------------------------------
# Service description
# ---------------------------------------------------------------------------

root_router = APIRouter(tags=["info"])


def _service_info(settings: Settings) -> ServiceInfoResponse:
    return ServiceInfoResponse(
        name=settings.service_name,
        version=settings.service_version,
        endpoints=dict(ENDPOINTS),
    )


@root_router.get("/", response_model=ServiceInfoResponse)
async def service_info(
    settings: Annotated[Settings, Depends(_get_settings)],
) -> ServiceInfoResponse:
    return _service_info(settings)


@root_router.api_route("/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
async def fallback_info(
    rest: str,
    settings: Annotated[Settings, Depends(_get_settings)],
) -> ServiceInfoResponse:
    return _service_info(settings)
