"""Data models for AppGen."""

from appgen.models.generation import (
    CodeArtifact,
    CodeGenerationRequest,
    ComponentResult,
    DesignStyle,
    ExplanationResult,
    GeneratedFile,
    GenerationContext,
    ProjectFramework,
    ProjectType,
    UsageStats,
    ValidationReport,
)

__all__ = [
    # Request models
    "ProjectFramework",
    "ProjectType",
    "DesignStyle",
    "GenerationContext",
    "CodeGenerationRequest",
    # Artifact models
    "GeneratedFile",
    "UsageStats",
    "CodeArtifact",
    "ValidationReport",
    # Narrow results
    "ComponentResult",
    "ExplanationResult",
]
