"""Pydantic response schemas for the gateway's own JSON documents.

Upstream bodies served under ``/api`` are deliberately absent: they are
passed through as opaque bytes and never modelled here.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for 5xx responses generated by the gateway."""

    error: str
    message: str


class NotFoundResponse(BaseModel):
    """Body of a 404 for unknown admin paths."""

    error: str = "Not Found"


class ServiceInfoResponse(BaseModel):
    """Static service description served for every non-``/api``, non-``/admin`` path."""

    name: str
    version: str
    endpoints: dict[str, str] = Field(default_factory=dict)


class ProviderEntry(BaseModel):
    """One row of the ``/admin/sources`` table, keyed by provider id."""

    name: str
    baseUrl: str  # noqa: N815 -- wire name
    enabled: bool
    priority: int


class CacheClearResponse(BaseModel):
    success: bool
    message: str


class StatsResponse(BaseModel):
    """Snapshot from ``/admin/stats``, computed fresh on every call."""

    sources: int = Field(ge=0)
    enabled: int = Field(ge=0)
    timestamp: str
