"""Main router for API v1."""

from fastapi import APIRouter

from appgen.api.v1 import ai, health

router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(health.router, tags=["health"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
