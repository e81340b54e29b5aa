"""Cache key and TTL rules for ``/api`` responses.

Both functions are pure: the key depends only on the route and the raw query
string, and the TTL only on the route.  Categories are matched by substring
in a fixed order, first match wins:

    route contains   category    default TTL
    ─────────────────────────────────────────
    "trending"       TRENDING    300 s
    "latest"         LATEST      300 s
    "detail"         DETAIL      600 s
    "episode"        EPISODES    600 s
    "search"         SEARCH      180 s
    (none)           DEFAULT     300 s

Rankings and search results change often and are cached briefly; drama detail
and episode lists are comparatively static and cached longer.  A TTL of 0
disables caching for that category.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from src.models.gateway import RouteCategory

CACHE_KEY_PREFIX = "api"

DEFAULT_CACHE_TTL: Mapping[RouteCategory, int] = MappingProxyType(
    {
        RouteCategory.TRENDING: 300,
        RouteCategory.LATEST: 300,
        RouteCategory.DETAIL: 600,
        RouteCategory.EPISODES: 600,
        RouteCategory.SEARCH: 180,
        RouteCategory.DEFAULT: 300,
    }
)

# Evaluation order matters: "/searchlatest" is LATEST, not SEARCH.
_CATEGORY_MARKERS: tuple[tuple[str, RouteCategory], ...] = (
    ("trending", RouteCategory.TRENDING),
    ("latest", RouteCategory.LATEST),
    ("detail", RouteCategory.DETAIL),
    ("episode", RouteCategory.EPISODES),
    ("search", RouteCategory.SEARCH),
)


def build_cache_key(route: str, query_string: str) -> str:
    """Return ``"api:<route>:<query_string>"``.

    *query_string* is the inbound search string verbatim, including its
    leading ``?`` when non-empty, so two requests share an entry only when
    their query strings are byte-identical.
    """
    return f"{CACHE_KEY_PREFIX}:{route}:{query_string}"


def categorize_route(route: str) -> RouteCategory:
    """Map *route* onto its cache-lifetime category."""
    for marker, category in _CATEGORY_MARKERS:
        if marker in route:
            return category
    return RouteCategory.DEFAULT


def get_cache_ttl(
    route: str,
    ttl_table: Mapping[RouteCategory, int] = DEFAULT_CACHE_TTL,
) -> int:
    """Return the TTL in seconds for *route*.

    Categories missing from *ttl_table* fall back to the built-in defaults.
    """
    category = categorize_route(route)
    return ttl_table.get(category, DEFAULT_CACHE_TTL[category])
