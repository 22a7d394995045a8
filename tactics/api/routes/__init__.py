"""Versioned API route modules."""

from fastapi import APIRouter

from tactics.api.routes.config import router as config_router
from tactics.api.routes.encounter import router as encounter_router
from tactics.api.routes.map import router as map_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(encounter_router, tags=["Encounter"])
api_router.include_router(map_router, tags=["Map"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
