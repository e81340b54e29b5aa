"""Upstream content-provider configuration models.

A :class:`ProviderConfig` describes one upstream drama-content API the gateway
may forward ``/api/*`` requests to.  The table of providers is loaded once at
startup (see ``src/config/loader.py``) and never mutated while serving.

Attempt order is an explicit total order: ascending ``priority``, ties broken
by the position the provider was declared in.  Disabled providers keep their
place in the table (the admin surface reports them) but are never contacted.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderConfig(BaseModel):
    """One upstream drama-content provider.

    Attributes mirror the wire format served by ``/admin/sources``:
    ``display_name`` is published as ``name`` and ``base_url`` as ``baseUrl``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    display_name: str = Field(alias="name")
    base_url: str = Field(alias="baseUrl")     # Absolute origin + path prefix
    enabled: bool = True
    priority: int = 0                          # Lower is tried first

    @field_validator("base_url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value

    def build_url(self, route: str) -> str:
        """Return ``base_url + route`` (query parameters are added by the caller)."""
        return f"{self.base_url}{route}"

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize without ``id``, using the wire field names."""
        return self.model_dump(by_alias=True, exclude={"id"})


def attempt_order(providers: Sequence[ProviderConfig]) -> list[ProviderConfig]:
    """Return the enabled providers in the order they should be tried.

    Sort key is ``(priority, declaration index)`` so ties keep their
    declared order regardless of how the table was built.
    """
    indexed = [(index, p) for index, p in enumerate(providers) if p.enabled]
    indexed.sort(key=lambda pair: (pair[1].priority, pair[0]))
    return [p for _, p in indexed]


def provider_table(providers: Iterable[ProviderConfig]) -> dict[str, dict[str, Any]]:
    """Return the full provider table keyed by id, disabled entries included."""
    return {p.id: p.to_public_dict() for p in providers}
