"""Public interface definitions for the gateway's external collaborators.

Upstream content APIs and the response cache are reached only through the
abstract base classes here.  Concrete adapters live in ``src/providers/`` and
are wired up in ``src/main.py``; tests inject fakes instead.

    Interface            →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────
    IUpstreamProvider    →  HTTPUpstreamProvider
    ICacheProvider       →  MemoryCacheProvider
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.upstream_provider import IUpstreamProvider

__all__ = [
    "ICacheProvider",
    "IUpstreamProvider",
]
