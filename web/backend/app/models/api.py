"""Pydantic models for API request/response serialization.

These models mirror the spectral catalog dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Catalog models
# ---------------------------------------------------------------------------


class UpsertRequest(BaseModel):
    """Raw record-shaped body for insert-or-update.

    Field values are passed through untouched so that malformed optional
    fields are ignored by the catalog rather than rejected here.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    kind: Optional[str] = None
    origin: Optional[Any] = None
    signature: Optional[Any] = None
    stability: Optional[Any] = None
    drift: Optional[Any] = None
    confidence: Optional[Any] = None
    relationships: Optional[Any] = None
    metadata: Optional[Any] = None


class SpectralObjectResponse(BaseModel):
    """Mirrors spectral.registry.models.SpectralObject.to_dict()."""

    id: str
    kind: str
    origin: Any
    signature: dict[str, Any] = Field(default_factory=dict)
    stability: float = 0.0
    drift: float = 0.0
    confidence: float = 0.0
    relationships: list[Any] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    createdAt: str
    updatedAt: str


class CatalogStatsResponse(BaseModel):
    """Record count and per-kind breakdown for the catalog."""

    total_count: int = 0
    kinds: dict[str, int] = Field(default_factory=dict)
