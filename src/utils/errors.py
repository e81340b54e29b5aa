"""Custom exception hierarchy for the Dracin gateway.

All application exceptions inherit from :class:`GatewayError`, which carries
an optional ``provider_name`` so handlers and log lines can name the upstream
content provider (e.g. "sansekai", "dramabos_dramabox") behind a failure.

    GatewayError  (base -- catch-all for any gateway error)
    +-- ProviderUnavailableError (one upstream failed: non-2xx or network error)
    +-- AllSourcesFailedError    (every enabled upstream failed -> 503)
    +-- AdminAuthError           (bad or missing admin bearer token -> 401)
    +-- ConfigurationError       (startup: bad provider file, duplicate ids)

Errors that map onto an HTTP response carry a ``status_code`` and build
their own JSON body via :meth:`GatewayError.to_body`; the error-handling
middleware uses both.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors.

    ``__str__`` prefixes the provider name in brackets for log output,
    e.g. ``[sansekai] HTTP 502``.
    """

    status_code: int = 500
    error_label: str = "Internal Server Error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def to_body(self) -> dict[str, Any]:
        """Return the JSON body sent to the client for this error."""
        return {"error": self.error_label, "message": self._message}

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Upstream provider errors
# ---------------------------------------------------------------------------

class ProviderUnavailableError(GatewayError):
    """Raised when a single upstream provider fails.

    The aggregation service catches this to try the next provider in
    priority order; it never reaches the client on its own.
    """

    status_code = 502
    error_label = "Bad Gateway"

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AllSourcesFailedError(GatewayError):
    """Raised when every enabled provider failed for one request.

    ``message`` is the failure message of the last provider attempted.
    """

    status_code = 503
    error_label = "All API sources failed"

    def __init__(
        self,
        message: str = "Unknown error",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Admin / configuration errors
# ---------------------------------------------------------------------------

class AdminAuthError(GatewayError):
    """Raised when an admin request lacks a valid bearer token."""

    status_code = 401
    error_label = "Unauthorized"

    def __init__(
        self,
        message: str = "Unauthorized",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error_label}


class ConfigurationError(GatewayError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
