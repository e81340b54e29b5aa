"""API middleware -- CORS headers, request logging, and error handling.

# ─── MIDDLEWARE EXECUTION ORDER ────────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#   In src/main.py:
#     app.add_middleware(ErrorHandlingMiddleware)   # innermost
#     app.add_middleware(CORSHeadersMiddleware)
#     app.add_middleware(RequestLoggingMiddleware)  # outermost
#
#   Request flow:
#     Client → RequestLogging → CORSHeaders → ErrorHandling → route
#
# CORSHeaders sits outside ErrorHandling so the JSON error bodies get the
# CORS headers too, and it answers OPTIONS itself so preflights never reach
# routing.  RequestLogging sees the final status code of every response.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import GatewayError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Attach permissive CORS headers to every response.

    Starlette's CORSMiddleware only short-circuits real preflights (with
    ``Origin`` and ``Access-Control-Request-Method``).  The gateway answers
    *every* OPTIONS request with the headers and an empty body instead.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                cache=response.headers.get("X-Cache") if response else None,
                source=response.headers.get("X-Source") if response else None,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn exceptions into JSON error responses.

    ``GatewayError`` subclasses map to their own status code and body
    (401 for admin auth, 503 when every upstream failed).  Anything else is
    the last-resort safety net: a 500 with the exception message, logged
    with its traceback.  One failing request never takes the process down.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except GatewayError as exc:
            _logger.warning(
                "gateway_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=exc.status_code,
                path=str(request.url.path),
            )
            return JSONResponse(status_code=exc.status_code, content=exc.to_body())
        except Exception as exc:
            _logger.exception(
                "unhandled_error",
                error_type=type(exc).__name__,
                path=str(request.url.path),
            )
            body = ErrorResponse(
                error="Internal Server Error",
                message=str(exc) or "Unknown error",
            )
            return JSONResponse(status_code=500, content=body.model_dump())
