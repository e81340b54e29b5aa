"""Dracin gateway domain models -- re-exports all public model classes.

    - provider.py -- ProviderConfig and the attempt-order / table helpers
    - gateway.py  -- RouteCategory, CacheStatus, GatewayResult
"""

from __future__ import annotations

from src.models.gateway import CacheStatus, GatewayResult, RouteCategory
from src.models.provider import ProviderConfig, attempt_order, provider_table

__all__ = [
    "CacheStatus",
    "GatewayResult",
    "ProviderConfig",
    "RouteCategory",
    "attempt_order",
    "provider_table",
]
