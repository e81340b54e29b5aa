"""Dracin gateway API layer -- routes, schemas, auth, and middleware."""

from src.api.auth import require_admin, verify_bearer_token
from src.api.middleware import (
    CORS_HEADERS,
    CORSHeadersMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
)
from src.api.routes import admin_router, api_router, root_router
from src.api.schemas import (
    CacheClearResponse,
    ErrorResponse,
    ServiceInfoResponse,
    StatsResponse,
)

__all__ = [
    "CORS_HEADERS",
    "CORSHeadersMiddleware",
    "CacheClearResponse",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "RequestLoggingMiddleware",
    "ServiceInfoResponse",
    "StatsResponse",
    "admin_router",
    "api_router",
    "require_admin",
    "root_router",
    "verify_bearer_token",
]
