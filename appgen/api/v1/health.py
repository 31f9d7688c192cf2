"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from appgen import __version__
from appgen.api.deps import ServiceDep
from appgen.config import settings
from appgen.services.generation_client import OfflineGenerationClient

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    environment: str
    model: str
    offline: bool
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health_check(service: ServiceDep) -> HealthResponse:
    """Check API health and which upstream the service talks to."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.app_env,
        model=service.config.model,
        offline=isinstance(service.client, OfflineGenerationClient),
        timestamp=datetime.now(timezone.utc),
    )
