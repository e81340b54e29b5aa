"""Utility modules for the Dracin gateway.

- **errors** -- exception hierarchy rooted at GatewayError; subclasses that
  reach the client carry their HTTP status and JSON body.
- **logging** -- structlog setup: coloured console output in development,
  JSON in production.
"""

from src.utils.errors import (
    AdminAuthError,
    AllSourcesFailedError,
    ConfigurationError,
    GatewayError,
    ProviderUnavailableError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "AdminAuthError",
    "AllSourcesFailedError",
    "ConfigurationError",
    "GatewayError",
    "ProviderUnavailableError",
    "configure_logging",
    "get_logger",
]
