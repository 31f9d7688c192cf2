"""Text-generation client boundary.

The generation call is the only suspension point in the pipeline. Provider
errors are classified into ``UpstreamCallError`` kinds here and nowhere else.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

import anthropic
from pydantic import BaseModel, ConfigDict, Field

from appgen.config import Settings
from appgen.core.exceptions import UpstreamCallError, UpstreamErrorKind
from appgen.utils.logging import get_logger


class GenerationConfig(BaseModel):
    """Immutable configuration for one generation service instance."""

    model_config = ConfigDict(frozen=True)

    model: str = "claude-3-sonnet-20240229"
    api_key: str = Field(default="", repr=False)
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    timeout_seconds: float = Field(default=120.0, gt=0)
    max_retries: int = Field(default=0, ge=0)
    retry_backoff_seconds: float = Field(default=1.0, ge=0)
    explanation_max_tokens: int = Field(default=2048, gt=0)
    explanation_temperature: float = Field(default=0.3, ge=0.0, le=1.0)

    @property
    def component_max_tokens(self) -> int:
        """Half the main budget, floored."""
        return max(1, self.max_tokens // 2)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationConfig":
        """Build a config from application settings."""
        return cls(
            model=settings.generation_model,
            api_key=settings.anthropic_api_key,
            max_tokens=settings.generation_max_tokens,
            temperature=settings.generation_temperature,
            timeout_seconds=settings.generation_timeout_seconds,
            max_retries=settings.generation_max_retries,
            retry_backoff_seconds=settings.generation_retry_backoff_seconds,
            explanation_max_tokens=settings.explanation_max_tokens,
            explanation_temperature=settings.explanation_temperature,
        )


class GenerationResponse(BaseModel):
    """Raw text and token counts returned by the provider."""

    text: str
    prompt_tokens: int = Field(ge=0)
    completion_tokens: int = Field(ge=0)


class GenerationClient(ABC):
    """Boundary over an external text-generation service."""

    @abstractmethod
    async def generate(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        """Run one generation call.

        Raises:
            UpstreamCallError: classified provider failure
        """


class OfflineGenerationClient(GenerationClient):
    """Client used when no provider credentials are configured.

    Always answers with empty text and zero usage, so the pipeline produces
    the framework's fallback artifact.
    """

    async def generate(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        return GenerationResponse(text="", prompt_tokens=0, completion_tokens=0)


def classify_provider_error(exc: anthropic.APIError) -> UpstreamCallError:
    """Translate an Anthropic SDK error into an ``UpstreamCallError``."""
    if isinstance(exc, anthropic.APIConnectionError):
        # includes APITimeoutError
        return UpstreamCallError(UpstreamErrorKind.NETWORK, str(exc))
    if isinstance(exc, anthropic.APIResponseValidationError):
        return UpstreamCallError(
            UpstreamErrorKind.MALFORMED, str(exc), status_code=exc.status_code
        )
    if isinstance(exc, anthropic.APIStatusError):
        status_code = exc.status_code
        if status_code in (401, 403):
            kind = UpstreamErrorKind.AUTH
        elif status_code == 429:
            kind = UpstreamErrorKind.RATE_LIMIT
        else:
            kind = UpstreamErrorKind.NETWORK
        return UpstreamCallError(kind, str(exc), status_code=status_code)
    return UpstreamCallError(UpstreamErrorKind.NETWORK, str(exc))


def extract_response(message: Any) -> GenerationResponse:
    """Pull text and usage out of a provider message.

    Raises:
        UpstreamCallError: the message does not have the expected shape
    """
    content = getattr(message, "content", None)
    usage = getattr(message, "usage", None)
    if not isinstance(content, list):
        raise UpstreamCallError(
            UpstreamErrorKind.MALFORMED, "response content is not a list of blocks"
        )
    if usage is None:
        raise UpstreamCallError(UpstreamErrorKind.MALFORMED, "response has no usage block")

    prompt_tokens = getattr(usage, "input_tokens", None)
    completion_tokens = getattr(usage, "output_tokens", None)
    if not isinstance(prompt_tokens, int) or not isinstance(completion_tokens, int):
        raise UpstreamCallError(
            UpstreamErrorKind.MALFORMED, "response usage has no token counts"
        )

    text = "".join(
        block.text
        for block in content
        if getattr(block, "type", None) == "text" and isinstance(getattr(block, "text", None), str)
    )
    return GenerationResponse(
        text=text,
        prompt_tokens=max(prompt_tokens, 0),
        completion_tokens=max(completion_tokens, 0),
    )


class AnthropicGenerationClient(GenerationClient):
    """Generation client backed by the Anthropic Messages API."""

    def __init__(
        self,
        config: GenerationConfig,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.config = config
        self.logger = get_logger("generation_client")
        # SDK retries are disabled; retry policy is applied per error kind below
        self._client = client or anthropic.AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def generate(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        attempt = 0
        while True:
            try:
                return await self._call(
                    model=model,
                    system_prompt=system_prompt,
                    user_prompt=user_prompt,
                    max_tokens=max_tokens,
                    temperature=temperature,
                )
            except UpstreamCallError as e:
                if not e.retryable or attempt >= self.config.max_retries:
                    self.logger.error(
                        "generation_client.call_failed",
                        kind=e.kind.value,
                        status_code=e.status_code,
                        attempts=attempt + 1,
                        error=e.message,
                    )
                    raise
                delay = self.config.retry_backoff_seconds * (2**attempt)
                attempt += 1
                self.logger.warning(
                    "generation_client.retrying",
                    kind=e.kind.value,
                    attempt=attempt,
                    delay_s=delay,
                )
                await asyncio.sleep(delay)

    async def _call(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        self.logger.debug(
            "generation_client.request",
            model=model,
            max_tokens=max_tokens,
            system_prompt_length=len(system_prompt),
            user_prompt_length=len(user_prompt),
        )
        try:
            message = await self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            raise classify_provider_error(e) from e

        response = extract_response(message)
        self.logger.debug(
            "generation_client.response",
            text_length=len(response.text),
            prompt_tokens=response.prompt_tokens,
            completion_tokens=response.completion_tokens,
        )
        return response


def create_generation_client(config: GenerationConfig) -> GenerationClient:
    """Pick the provider client, or the offline client when no key is set."""
    if not config.api_key:
        get_logger("generation_client").warning(
            "generation_client.offline",
            reason="ANTHROPIC_API_KEY not set",
        )
        return OfflineGenerationClient()
    return AnthropicGenerationClient(config)
