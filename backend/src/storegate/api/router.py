"""Main API router aggregating all endpoints."""

from fastapi import APIRouter

from storegate.api.health import router as health_router
from storegate.api.items import router as items_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(items_router, prefix="/items", tags=["Items"])
