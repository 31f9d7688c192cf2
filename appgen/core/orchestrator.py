"""Generation Orchestrator.

Sequences prompt building, the upstream call, response parsing, fallback,
validation and reformatting, then stamps usage/model/timestamp metadata
onto the final artifact.

Pipeline stages:
    idle -> prompting -> awaiting_upstream -> parsing -> (fallback)
         -> validating -> (reformatting) -> done

An upstream failure ends the run in ``failed``; nothing after the upstream
call is attempted and the ``UpstreamCallError`` reaches the caller as-is.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from appgen.config import Settings
from appgen.core.exceptions import UpstreamCallError
from appgen.core.prompts import (
    EXPLANATION_SYSTEM_PROMPT,
    build_component_prompt,
    build_explanation_prompt,
    build_refinement_system_prompt,
    build_refinement_user_prompt,
    build_system_prompt,
    build_user_prompt,
)
from appgen.core.validator import validate_artifact
from appgen.generators.fallback import fallback_artifact, fallback_frontend, fallback_manifest
from appgen.models.generation import (
    CodeArtifact,
    CodeGenerationRequest,
    ComponentResult,
    ExplanationResult,
    GeneratedFile,
    ProjectFramework,
    ProjectType,
    UsageStats,
    ValidationReport,
)
from appgen.parsers.response import (
    CodeFenceExtraction,
    EmptyExtraction,
    ExtractionResult,
    FileBlockExtraction,
    JsonExtraction,
    ResponseParser,
)
from appgen.services.generation_client import (
    GenerationClient,
    GenerationConfig,
    GenerationResponse,
    create_generation_client,
)
from appgen.utils.formatting import format_code
from appgen.utils.logging import get_logger


class PipelineStage(str, Enum):
    """Stages of one generation run."""

    IDLE = "idle"
    PROMPTING = "prompting"
    AWAITING_UPSTREAM = "awaiting_upstream"
    PARSING = "parsing"
    FALLBACK = "fallback"
    VALIDATING = "validating"
    REFORMATTING = "reformatting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """Final artifact of a run together with its validation report and trace."""

    artifact: CodeArtifact
    report: ValidationReport
    stages: list[PipelineStage] = field(default_factory=list)


def merge_files(files: list[GeneratedFile]) -> list[GeneratedFile]:
    """Deduplicate files by path; a later entry replaces the earlier content."""
    merged: dict[str, str] = {}
    for f in files:
        merged[f.path] = f.content
    return [GeneratedFile(path=path, content=content) for path, content in merged.items()]


def assemble_artifact(
    extraction: ExtractionResult, framework: ProjectFramework | str | None
) -> CodeArtifact:
    """Build an artifact from an extraction, filling empty slots from the fallback."""
    if isinstance(extraction, EmptyExtraction):
        return fallback_artifact(framework)

    frontend: str | None = None
    backend: str | None = None
    database: str | None = None
    manifest = None
    files: list[GeneratedFile] = []

    if isinstance(extraction, (JsonExtraction, CodeFenceExtraction)):
        frontend = extraction.frontend
        backend = extraction.backend
        database = extraction.database
        manifest = extraction.package_manifest
        files = extraction.files or []
    elif isinstance(extraction, FileBlockExtraction):
        files = extraction.files

    return CodeArtifact(
        framework=ProjectFramework.resolve(framework),
        frontend=frontend or fallback_frontend(framework),
        backend=backend,
        database=database,
        package_manifest=manifest if manifest is not None else fallback_manifest(framework),
        files=merge_files(files),
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CodeGenerationService:
    """Turns generation requests into validated code artifacts.

    Each call is independent; the instance holds only immutable
    configuration and the client built from it, so one service can serve
    concurrent requests.
    """

    def __init__(
        self,
        client: GenerationClient,
        config: GenerationConfig | None = None,
        parser: ResponseParser | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.client = client
        self.config = config or GenerationConfig()
        self.parser = parser or ResponseParser()
        self.clock = clock
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_settings(cls, settings: Settings) -> "CodeGenerationService":
        """Build a service (and its client) from application settings."""
        config = GenerationConfig.from_settings(settings)
        return cls(client=create_generation_client(config), config=config)

    async def generate_application(self, request: CodeGenerationRequest) -> CodeArtifact:
        """Generate a complete application artifact."""
        result = await self.run_generation(request)
        return result.artifact

    async def refine_code(
        self,
        artifact: CodeArtifact,
        instruction: str,
        context: str | None = None,
    ) -> CodeArtifact:
        """Produce a new artifact refining ``artifact``; the original is untouched."""
        result = await self.run_refinement(artifact, instruction, context)
        return result.artifact

    async def run_generation(self, request: CodeGenerationRequest) -> GenerationResult:
        """Run the full pipeline for a request and return the trace as well."""
        self.logger.info(
            "generation.started",
            operation="generate",
            framework=ProjectFramework.resolve(request.framework).value,
            project_type=ProjectType.resolve(request.project_type).value,
            prompt_length=len(request.prompt),
        )
        stages = [PipelineStage.IDLE, PipelineStage.PROMPTING]
        system_prompt = build_system_prompt(request.framework, request.project_type)
        user_prompt = build_user_prompt(request)
        return await self._run_pipeline(
            stages,
            operation="generate",
            framework=request.framework,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
        )

    async def run_refinement(
        self,
        artifact: CodeArtifact,
        instruction: str,
        context: str | None = None,
    ) -> GenerationResult:
        """Refinement re-enters the pipeline at prompting with the prior artifact as grounding."""
        self.logger.info(
            "generation.started",
            operation="refine",
            framework=artifact.framework.value,
            instruction_length=len(instruction),
            has_context=bool(context),
        )
        stages = [PipelineStage.IDLE, PipelineStage.PROMPTING]
        system_prompt = build_refinement_system_prompt(artifact, context)
        user_prompt = build_refinement_user_prompt(instruction)
        return await self._run_pipeline(
            stages,
            operation="refine",
            framework=artifact.framework,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
        )

    async def generate_component(
        self,
        instruction: str,
        framework: ProjectFramework | str = ProjectFramework.REACT,
        context: str | None = None,
    ) -> ComponentResult:
        """Generate a single component; the raw text is returned without parsing."""
        self.logger.info(
            "generation.started",
            operation="component",
            framework=ProjectFramework.resolve(framework).value,
            instruction_length=len(instruction),
        )
        response = await self._call_upstream(
            operation="component",
            system_prompt=build_system_prompt(framework, ProjectType.COMPONENT),
            user_prompt=build_component_prompt(instruction, framework, context),
            max_tokens=self.config.component_max_tokens,
            temperature=self.config.temperature,
        )
        usage = UsageStats.from_counts(response.prompt_tokens, response.completion_tokens)
        self.logger.info(
            "generation.completed", operation="component", tokens_used=usage.total_tokens
        )
        return ComponentResult(code=response.text, usage=usage)

    async def explain_code(self, code: str) -> ExplanationResult:
        """Explain ``code`` in prose."""
        self.logger.info("generation.started", operation="explain", code_length=len(code))
        response = await self._call_upstream(
            operation="explain",
            system_prompt=EXPLANATION_SYSTEM_PROMPT,
            user_prompt=build_explanation_prompt(code),
            max_tokens=self.config.explanation_max_tokens,
            temperature=self.config.explanation_temperature,
        )
        usage = UsageStats.from_counts(response.prompt_tokens, response.completion_tokens)
        self.logger.info(
            "generation.completed", operation="explain", tokens_used=usage.total_tokens
        )
        return ExplanationResult(explanation=response.text, usage=usage)

    def _advance(self, stages: list[PipelineStage], stage: PipelineStage) -> None:
        stages.append(stage)
        self.logger.debug("generation.stage", stage=stage.value)

    async def _call_upstream(
        self,
        *,
        operation: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        try:
            return await self.client.generate(
                model=self.config.model,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except UpstreamCallError as e:
            self.logger.warning(
                "generation.upstream_failed",
                operation=operation,
                kind=e.kind.value,
                error=e.message,
            )
            raise

    async def _run_pipeline(
        self,
        stages: list[PipelineStage],
        *,
        operation: str,
        framework: ProjectFramework | str | None,
        system_prompt: str,
        user_prompt: str,
    ) -> GenerationResult:
        self._advance(stages, PipelineStage.AWAITING_UPSTREAM)
        try:
            response = await self._call_upstream(
                operation=operation,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except UpstreamCallError:
            self._advance(stages, PipelineStage.FAILED)
            raise

        self._advance(stages, PipelineStage.PARSING)
        extraction = self.parser.parse(response.text, framework)
        if isinstance(extraction, EmptyExtraction):
            self._advance(stages, PipelineStage.FALLBACK)
            self.logger.warning(
                "generation.fallback",
                operation=operation,
                reason="no structure recognised in response",
                response_length=len(response.text),
            )
        artifact = assemble_artifact(extraction, framework)

        self._advance(stages, PipelineStage.VALIDATING)
        report = validate_artifact(artifact)
        if not report.is_valid:
            self._advance(stages, PipelineStage.REFORMATTING)
            self.logger.warning(
                "generation.validation_failed",
                operation=operation,
                errors=report.errors,
            )
            update = {"frontend": format_code(artifact.frontend)}
            if artifact.backend is not None:
                update["backend"] = format_code(artifact.backend)
            artifact = artifact.model_copy(update=update)

        usage = UsageStats.from_counts(response.prompt_tokens, response.completion_tokens)
        artifact = artifact.model_copy(
            update={
                "usage": usage,
                "model": self.config.model,
                "timestamp": self.clock().isoformat(),
            }
        )
        self._advance(stages, PipelineStage.DONE)

        self.logger.info(
            "generation.completed",
            operation=operation,
            extraction=type(extraction).__name__,
            tokens_used=usage.total_tokens,
            has_backend=artifact.backend is not None,
            has_database=artifact.database is not None,
            files_count=len(artifact.files),
            warnings=len(report.warnings),
        )
        return GenerationResult(artifact=artifact, report=report, stages=stages)
