"""Upstream drama-content providers.

One HTTPUpstreamProvider per entry in the provider table; the aggregation
service tries them in ``(priority, declaration index)`` order.
"""

from src.providers.upstream.http_upstream_provider import (
    DEFAULT_USER_AGENT,
    HTTPUpstreamProvider,
    build_upstream_providers,
)

__all__ = ["DEFAULT_USER_AGENT", "HTTPUpstreamProvider", "build_upstream_providers"]
