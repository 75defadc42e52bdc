"""Catalog router -- upsert and lookups over the spectral reality model."""

from __future__ import annotations

from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from spectral.registry.models import SpectralObject, ValidationError
from spectral.registry.reality_model import SpectralRealityModel

from web.backend.app.models.api import (
    CatalogStatsResponse,
    SpectralObjectResponse,
    UpsertRequest,
)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_catalog(request: Request) -> SpectralRealityModel:
    """Return the catalog owned by the running application."""
    return request.app.state.catalog


def _to_response(obj: SpectralObject) -> SpectralObjectResponse:
    return SpectralObjectResponse(**obj.to_dict())


@router.get(
    "",
    response_model=list[SpectralObjectResponse],
    summary="Snapshot the catalog",
)
async def snapshot(catalog: SpectralRealityModel = Depends(get_catalog)):
    """Return every spectral object in insertion order."""
    return [SpectralObjectResponse(**entry) for entry in catalog.snapshot()]


@router.post(
    "",
    response_model=SpectralObjectResponse,
    summary="Insert or update a spectral object",
)
async def upsert(body: UpsertRequest, catalog: SpectralRealityModel = Depends(get_catalog)):
    """Create the object if its id is new, otherwise update its mutable fields."""
    try:
        obj = catalog.upsert(body.model_dump(exclude_unset=True))
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _to_response(obj)


@router.get(
    "/stats",
    response_model=CatalogStatsResponse,
    summary="Catalog statistics",
)
async def stats(catalog: SpectralRealityModel = Depends(get_catalog)):
    kinds = Counter(obj.kind for obj in catalog)
    return CatalogStatsResponse(total_count=len(catalog), kinds=dict(kinds))


@router.get(
    "/high-stability",
    response_model=list[SpectralObjectResponse],
    summary="List stable, low-drift objects",
)
async def list_high_stability(
    request: Request,
    threshold: Optional[float] = Query(None, description="Stability threshold"),
    catalog: SpectralRealityModel = Depends(get_catalog),
):
    """Objects with stability >= threshold and drift <= 1 - threshold.

    Defaults to the application's configured threshold.
    """
    if threshold is None:
        threshold = request.app.state.settings.high_stability_threshold
    return [_to_response(obj) for obj in catalog.list_high_stability(threshold)]


@router.get(
    "/kind/{kind:path}",
    response_model=list[SpectralObjectResponse],
    summary="List objects of a kind",
)
async def list_by_kind(kind: str, catalog: SpectralRealityModel = Depends(get_catalog)):
    return [_to_response(obj) for obj in catalog.list_by_kind(kind)]


@router.get(
    "/domain/{domain:path}",
    response_model=list[SpectralObjectResponse],
    summary="List objects by origin domain",
)
async def list_by_origin_domain(
    domain: str, catalog: SpectralRealityModel = Depends(get_catalog)
):
    return [_to_response(obj) for obj in catalog.list_by_origin_domain(domain)]


@router.get(
    "/objects/{object_id:path}",
    response_model=SpectralObjectResponse,
    summary="Get a spectral object by id",
)
async def get_by_id(object_id: str, catalog: SpectralRealityModel = Depends(get_catalog)):
    """Look up one object. Any id works here, including ones containing slashes."""
    obj = catalog.get_by_id(object_id)
    if obj is None:
        raise HTTPException(
            status_code=404, detail=f"Spectral object '{object_id}' not found"
        )
    return _to_response(obj)
