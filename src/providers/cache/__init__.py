"""Cache providers.

In-memory TTL cache holding raw upstream bodies between requests, so repeated
``/api`` calls inside a route's TTL window are served without touching any
upstream provider.

MemoryCacheProvider is per-process.  For multi-worker deployments, swap in
an adapter implementing ICacheProvider over a shared store without changing
the aggregation service.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
