"""AI generation endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from appgen.api.deps import ServiceDep
from appgen.core.prompts import validate_prompt
from appgen.models.generation import (
    CamelModel,
    CodeArtifact,
    CodeGenerationRequest,
    ComponentResult,
    ExplanationResult,
    ProjectFramework,
)
from appgen.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class RefineRequest(CamelModel):
    """Request to refine a previously generated artifact."""

    existing_code: CodeArtifact
    refinement_request: str = Field(..., min_length=1)
    context: str | None = None


class ComponentRequest(CamelModel):
    """Request for a single component."""

    component_request: str = Field(..., min_length=1)
    framework: ProjectFramework = ProjectFramework.REACT
    context: str | None = None


class ExplainRequest(CamelModel):
    """Request to explain a piece of code."""

    code: str = Field(..., min_length=1)


class GenerationEnvelope(BaseModel):
    """Successful response envelope."""

    success: bool = True
    message: str
    data: Any


def _envelope(message: str, data: BaseModel) -> GenerationEnvelope:
    return GenerationEnvelope(message=message, data=data.model_dump(mode="json", by_alias=True))


@router.post("/generate", response_model=GenerationEnvelope)
async def generate_application(
    data: CodeGenerationRequest, service: ServiceDep
) -> GenerationEnvelope:
    """Generate a complete application from a natural-language description."""
    errors = validate_prompt(data.prompt)
    if errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)

    logger.info("ai.generate", framework=data.framework.value, prompt_length=len(data.prompt))
    artifact = await service.generate_application(data)
    return _envelope("Application generated successfully!", artifact)


@router.post("/refine", response_model=GenerationEnvelope)
async def refine_code(data: RefineRequest, service: ServiceDep) -> GenerationEnvelope:
    """Refine an existing artifact; returns a new artifact."""
    artifact = await service.refine_code(
        data.existing_code, data.refinement_request, data.context
    )
    return _envelope("Code refined successfully!", artifact)


@router.post("/component", response_model=GenerationEnvelope)
async def generate_component(
    data: ComponentRequest, service: ServiceDep
) -> GenerationEnvelope:
    """Generate a single component."""
    result: ComponentResult = await service.generate_component(
        data.component_request, data.framework, data.context
    )
    return _envelope("Component generated successfully!", result)


@router.post("/explain", response_model=GenerationEnvelope)
async def explain_code(data: ExplainRequest, service: ServiceDep) -> GenerationEnvelope:
    """Explain a piece of code."""
    result: ExplanationResult = await service.explain_code(data.code)
    return _envelope("Code explanation generated successfully!", result)
