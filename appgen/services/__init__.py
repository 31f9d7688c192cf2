"""Services for the appgen application."""

from appgen.services.generation_client import (
    AnthropicGenerationClient,
    GenerationClient,
    GenerationConfig,
    GenerationResponse,
    OfflineGenerationClient,
    create_generation_client,
)

__all__ = [
    "GenerationClient",
    "GenerationConfig",
    "GenerationResponse",
    "AnthropicGenerationClient",
    "OfflineGenerationClient",
    "create_generation_client",
]
