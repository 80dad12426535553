"""
app.py: FastAPI application factory.

This is the ASGI application object imported by uvicorn.
It wires the district registry and allocation service and registers routers.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from backend.controllers.allocation_controller import router as allocation_router
from backend.repository.district_repository import DistrictRepository
from backend.services.allocation_service import DistrictAllocationService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Each app owns its own district registry via app.state; nothing is shared
    between app instances.
    """
    settings = settings or get_settings()

    repository = DistrictRepository(settings)
    allocation_service = DistrictAllocationService(
        repository=repository,
        settings=settings,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
    )
    app.include_router(allocation_router)

    app.state.repository = repository
    app.state.allocation_service = allocation_service

    logger.info(
        "Application created | truncate_on_exhaustion=%s | max_districts=%s",
        settings.allocation_truncate_on_exhaustion,
        settings.max_districts,
    )
    return app


# Module-level app object for uvicorn
app = create_app()
