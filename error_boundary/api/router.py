from __future__ import annotations

from fastapi import APIRouter

from error_boundary.api.catalog import router as catalog_router
from error_boundary.api.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(catalog_router)
