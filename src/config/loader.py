"""YAML loader for the provider table and cache TTL overrides.

# ─── PROVIDER FILE FORMAT ──────────────────────────────────────────────
#
#   providers:
#     - id: sansekai
#       name: Sansekai Dramabox
#       baseUrl: https://api.sansekai.my.id/api/dramabox
#       enabled: true
#       priority: 1
#     - ...
#
#   cache_ttl:            # optional, seconds per route category
#     search: 120
#     detail: 900
#
# List order is the declaration order used to break priority ties, so the
# providers section must be a YAML list, not a mapping.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import ValidationError

from src.models.gateway import RouteCategory
from src.models.provider import ProviderConfig
from src.services.cache_policy import DEFAULT_CACHE_TTL
from src.utils.errors import ConfigurationError


@dataclass(frozen=True)
class GatewayConfig:
    """Static configuration injected into the application factory."""

    providers: tuple[ProviderConfig, ...]
    cache_ttl: Mapping[RouteCategory, int] = field(default_factory=lambda: DEFAULT_CACHE_TTL)


def load_config(path: str | Path) -> GatewayConfig:
    """Read the provider file at *path* and validate it.

    Raises
    ------
    ConfigurationError
        If the file is missing, is not valid YAML, or describes an invalid
        provider table.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Provider config not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

    return parse_config(raw)


def parse_config(raw: Mapping[str, Any]) -> GatewayConfig:
    """Build a :class:`GatewayConfig` from an already-parsed mapping."""
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Provider config must be a mapping at the top level")

    return GatewayConfig(
        providers=_parse_providers(raw.get("providers") or []),
        cache_ttl=_parse_cache_ttl(raw.get("cache_ttl") or {}),
    )


def _parse_providers(entries: Any) -> tuple[ProviderConfig, ...]:
    if not isinstance(entries, list):
        raise ConfigurationError("'providers' must be a list")

    providers: list[ProviderConfig] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        # YAML 1.1 reads bare on/off/yes/no as booleans.
        if isinstance(entry, Mapping) and isinstance(entry.get("id"), bool):
            raise ConfigurationError(
                f"Invalid provider at index {index}: id parsed as boolean "
                f"{entry['id']}; quote it in the YAML (e.g. id: \"off\")"
            )
        try:
            provider = ProviderConfig.model_validate(entry)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid provider at index {index}: {exc}") from exc
        if provider.id in seen:
            raise ConfigurationError(f"Duplicate provider id: {provider.id}")
        seen.add(provider.id)
        providers.append(provider)
    return tuple(providers)


def _parse_cache_ttl(overrides: Any) -> Mapping[RouteCategory, int]:
    if not isinstance(overrides, Mapping):
        raise ConfigurationError("'cache_ttl' must be a mapping")

    table = dict(DEFAULT_CACHE_TTL)
    for name, seconds in overrides.items():
        try:
            category = RouteCategory(name)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown cache_ttl category: {name}") from exc
        if not isinstance(seconds, int) or isinstance(seconds, bool) or seconds < 0:
            raise ConfigurationError(f"cache_ttl.{name} must be a non-negative integer")
        table[category] = seconds
    return MappingProxyType(table)
