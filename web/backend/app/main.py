"""FastAPI application for the spectral catalog.

Provides REST API endpoints wrapping the spectral package for:
- Upserting spectral objects into an application-owned catalog
- Lookups by id, kind, origin domain, and stability
- Full catalog snapshots
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spectral import __version__
from spectral.config import Settings, load_settings
from spectral.log import init_logging
from spectral.registry.reality_model import SpectralRealityModel

from web.backend.app.routers import catalog


def create_app(
    model: Optional[SpectralRealityModel] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build an application that owns exactly one catalog."""
    settings = settings or load_settings()
    init_logging(settings.log_level)

    app = FastAPI(
        title="Spectral Catalog API",
        description=(
            "REST API for the spectral reality model. "
            "Provides endpoints for upserting and querying spectral objects."
        ),
        version=__version__,
    )
    app.state.catalog = model if model is not None else SpectralRealityModel()
    app.state.settings = settings

    # Allow all origins for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog.router)

    @app.get("/", tags=["meta"])
    async def root():
        """Return basic API information."""
        return {
            "name": "Spectral Catalog API",
            "version": __version__,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "objects": len(app.state.catalog)}

    return app
