"""Abstract base class for upstream drama-content providers.

Each upstream is a third-party HTTP API returning JSON drama and episode
payloads.  The gateway never inspects those payloads: a provider returns the
body bytes untouched, or raises
:class:`~src.utils.errors.ProviderUnavailableError` so the aggregation
service can move on to the next provider in priority order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from src.models.provider import ProviderConfig


class IUpstreamProvider(ABC):
    """Contract for one upstream content source."""

    @property
    @abstractmethod
    def config(self) -> ProviderConfig:
        """The static configuration this provider was built from."""

    @abstractmethod
    async def fetch(self, route: str, params: Mapping[str, str]) -> bytes:
        """Fetch *route* from this provider and return the raw body bytes.

        Parameters
        ----------
        route:
            The request path with the ``/api`` prefix removed, e.g.
            ``"/detail"``.  Appended to the provider's base URL as-is.
        params:
            Query parameters to send upstream, copied from the inbound
            request.

        Raises
        ------
        src.utils.errors.ProviderUnavailableError
            On a non-2xx response or any transport failure.
        """

    def get_provider_name(self) -> str:
        """Return the provider id (used in ``X-Source`` and logs)."""
        return self.config.id

    def is_available(self) -> bool:
        """Return ``True`` if the provider is enabled in configuration."""
        return self.config.enabled
