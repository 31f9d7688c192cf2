"""Dependency injection for API endpoints."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from appgen.config import settings
from appgen.core.orchestrator import CodeGenerationService


@lru_cache
def get_generation_service() -> CodeGenerationService:
    """Get the process-wide generation service built from settings."""
    return CodeGenerationService.from_settings(settings)


# Type alias for cleaner signatures
ServiceDep = Annotated[CodeGenerationService, Depends(get_generation_service)]
