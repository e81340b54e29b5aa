"""Bearer-token gate for the admin surface.

Every ``/admin*`` route depends on :func:`require_admin`, so a request with a
missing or wrong ``Authorization: Bearer <secret>`` header is rejected with a
401 before any admin handler runs.  The comparison is constant-time.  An
empty configured secret rejects everything rather than opening the surface.
"""

from __future__ import annotations

import hmac

from fastapi import Request

from src.utils.errors import AdminAuthError

_BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX):]


def verify_bearer_token(authorization: str | None, secret: str) -> bool:
    """Return ``True`` only if *authorization* carries exactly *secret*."""
    if not secret:
        return False
    token = extract_bearer_token(authorization)
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


async def require_admin(request: Request) -> None:
    """FastAPI dependency raising AdminAuthError on a bad or missing token."""
    secret: str = request.app.state.settings.admin_password
    if not verify_bearer_token(request.headers.get("Authorization"), secret):
        raise AdminAuthError()
