"""HTTP upstream provider implementing IUpstreamProvider.

Issues one GET per call against ``base_url + route`` with the inbound query
parameters copied on, and returns the body bytes exactly as received.  No
retries: any non-2xx status or transport error becomes a
ProviderUnavailableError and the aggregation service falls back to the next
provider.  The ``httpx.AsyncClient`` is injected so all providers share one
connection pool and tests can mount a mock transport.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from src.interfaces.upstream_provider import IUpstreamProvider
from src.models.provider import ProviderConfig
from src.utils.errors import ProviderUnavailableError
from src.utils.logging import get_logger

DEFAULT_USER_AGENT = "CTRXL-DRACIN/1.0"


class HTTPUpstreamProvider(IUpstreamProvider):
    """Upstream drama API reached over plain HTTP GET."""

    def __init__(
        self,
        config: ProviderConfig,
        http_client: httpx.AsyncClient,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._config = config
        self._http = http_client
        self._user_agent = user_agent
        self._logger = get_logger(__name__)

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def fetch(self, route: str, params: Mapping[str, str]) -> bytes:
        url = self._config.build_url(route)
        headers = {"User-Agent": self._user_agent}
        try:
            response = await self._http.get(url, params=dict(params), headers=headers)
        except httpx.HTTPError as exc:
            message = str(exc) or type(exc).__name__
            raise ProviderUnavailableError(message=message, provider_name=self._config.id) from exc

        if not response.is_success:
            raise ProviderUnavailableError(
                message=f"HTTP {response.status_code}",
                provider_name=self._config.id,
            )

        self._logger.debug(
            "upstream_response",
            provider=self._config.id,
            url=str(response.request.url),
            status=response.status_code,
            bytes=len(response.content),
        )
        return response.content


def build_upstream_providers(
    configs: list[ProviderConfig],
    http_client: httpx.AsyncClient,
    user_agent: str = DEFAULT_USER_AGENT,
) -> list[IUpstreamProvider]:
    """Wrap every configured provider (enabled or not) in an HTTP adapter."""
    return [HTTPUpstreamProvider(c, http_client, user_agent=user_agent) for c in configs]
