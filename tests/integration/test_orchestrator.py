"""Integration tests for the generation service pipeline."""

import asyncio

import pytest
from structlog.testing import capture_logs

from conftest import FIXED_NOW, ScriptedGenerationClient
from appgen.core import orchestrator as orchestrator_module
from appgen.core.exceptions import UpstreamCallError, UpstreamErrorKind
from appgen.core.orchestrator import (
    CodeGenerationService,
    PipelineStage,
    assemble_artifact,
    merge_files,
)
from appgen.generators.fallback import fallback_artifact
from appgen.models.generation import (
    CodeArtifact,
    CodeGenerationRequest,
    GeneratedFile,
    ProjectFramework,
    ValidationReport,
)
from appgen.parsers.response import FileBlockExtraction, parse_response
from appgen.services.generation_client import GenerationConfig


def _request(**overrides) -> CodeGenerationRequest:
    data = {"prompt": "A todo list app with due dates", "framework": ProjectFramework.REACT}
    data.update(overrides)
    return CodeGenerationRequest(**data)


class TestGenerateApplication:
    """Tests for the generate operation."""

    @pytest.mark.asyncio
    async def test_json_response(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
        json_response: str,
    ):
        scripted_client.text = json_response

        result = await service.run_generation(_request())
        artifact = result.artifact

        assert artifact.frontend == "<App/>"
        assert artifact.package_manifest == {"name": "demo", "dependencies": {}}
        assert artifact.framework == ProjectFramework.REACT
        assert artifact.usage.prompt_tokens == 120
        assert artifact.usage.completion_tokens == 480
        assert artifact.usage.total_tokens == 600
        assert artifact.model == "test-model"
        assert artifact.timestamp == FIXED_NOW.isoformat()
        assert result.report.is_valid
        assert result.stages == [
            PipelineStage.IDLE,
            PipelineStage.PROMPTING,
            PipelineStage.AWAITING_UPSTREAM,
            PipelineStage.PARSING,
            PipelineStage.VALIDATING,
            PipelineStage.DONE,
        ]

    @pytest.mark.asyncio
    async def test_upstream_call_uses_config(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        await service.generate_application(_request(framework=ProjectFramework.VUE))

        call = scripted_client.calls[0]
        assert call["model"] == "test-model"
        assert call["max_tokens"] == 4096
        assert call["temperature"] == 0.7
        assert "VUE GUIDELINES" in call["system_prompt"]
        assert "A todo list app with due dates" in call["user_prompt"]

    @pytest.mark.asyncio
    async def test_fenced_response(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
        fenced_response: str,
    ):
        scripted_client.text = fenced_response

        artifact = await service.generate_application(_request())

        assert artifact.frontend.startswith("import React")
        assert "express()" in artifact.backend
        assert artifact.database.startswith("CREATE TABLE todos")
        assert artifact.package_manifest["name"] == "todo-app"
        assert artifact.file_paths == ["src/components/TodoItem.tsx"]

    @pytest.mark.asyncio
    async def test_empty_response_falls_back(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.text = "Sorry, I can't help with that."

        result = await service.run_generation(_request(framework=ProjectFramework.VUE))

        expected = fallback_artifact(ProjectFramework.VUE)
        stamped = result.artifact.model_copy(
            update={"usage": expected.usage, "model": "", "timestamp": ""}
        )
        assert stamped == expected
        assert PipelineStage.FALLBACK in result.stages
        assert result.stages[-1] == PipelineStage.DONE
        assert result.artifact.usage.total_tokens == 600

    @pytest.mark.asyncio
    async def test_partial_response_gets_fallback_manifest(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.text = "```tsx\nimport React from 'react';\nexport default App;\n```"

        artifact = await service.generate_application(_request())

        assert artifact.frontend == "import React from 'react';\nexport default App;"
        assert artifact.package_manifest == fallback_artifact("REACT").package_manifest

    @pytest.mark.asyncio
    async def test_upstream_failure_propagates(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.error = UpstreamCallError(
            UpstreamErrorKind.AUTH, "invalid x-api-key", status_code=401
        )
        stages: list[PipelineStage] = []

        with pytest.raises(UpstreamCallError) as exc_info:
            await service._run_pipeline(
                stages,
                operation="generate",
                framework=ProjectFramework.REACT,
                system_prompt="system",
                user_prompt="user",
            )

        assert exc_info.value.kind == UpstreamErrorKind.AUTH
        assert stages == [PipelineStage.AWAITING_UPSTREAM, PipelineStage.FAILED]

    @pytest.mark.asyncio
    async def test_invalid_artifact_is_reformatted(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setattr(
            orchestrator_module,
            "validate_artifact",
            lambda artifact: ValidationReport(is_valid=False, errors=["forced"]),
        )
        scripted_client.text = (
            "```tsx\nimport React from 'react';\n\n\n\n\nexport default App;\n```\n"
            "```js\nconst a = 1;\r\n\r\n\r\n\r\nmodule.exports = a;\n```"
        )

        result = await service.run_generation(_request())

        assert PipelineStage.REFORMATTING in result.stages
        assert result.artifact.frontend == "import React from 'react';\n\nexport default App;"
        assert result.artifact.backend == "const a = 1;\n\nmodule.exports = a;"
        assert result.report.errors == ["forced"]

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_independent(
        self,
        generation_config: GenerationConfig,
    ):
        vue = CodeGenerationService(ScriptedGenerationClient(), generation_config)
        react = CodeGenerationService(
            ScriptedGenerationClient('```json\n{"frontend": "<A/>"}\n```'), generation_config
        )

        first, second = await asyncio.gather(
            vue.generate_application(_request(framework=ProjectFramework.VUE)),
            react.generate_application(_request()),
        )

        assert first.framework == ProjectFramework.VUE
        assert "<template>" in first.frontend
        assert second.frontend == "<A/>"


class TestRefineCode:
    """Tests for the refine operation."""

    @pytest.mark.asyncio
    async def test_refinement_grounds_on_prior_artifact(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        original = CodeArtifact(
            framework=ProjectFramework.VUE,
            frontend="<template><p>old</p></template>",
            package_manifest={"name": "demo"},
        )
        snapshot = original.model_copy(deep=True)
        scripted_client.text = (
            '```json\n{"frontend": "<template><p>new</p></template>", '
            '"packageManifest": {"name": "demo", "dependencies": {"vue": "^3"}}}\n```'
        )

        refined = await service.refine_code(original, "Change the text", "Keep the layout")

        call = scripted_client.calls[0]
        assert "<template><p>old</p></template>" in call["system_prompt"]
        assert "ADDITIONAL CONTEXT:\nKeep the layout" in call["system_prompt"]
        assert "Change the text" in call["user_prompt"]

        assert refined.frontend == "<template><p>new</p></template>"
        assert refined.framework == ProjectFramework.VUE
        assert refined.package_manifest["dependencies"] == {"vue": "^3"}
        assert refined.timestamp == FIXED_NOW.isoformat()
        assert original == snapshot

    @pytest.mark.asyncio
    async def test_refinement_falls_back_on_empty_response(
        self,
        service: CodeGenerationService,
    ):
        original = CodeArtifact(frontend="old", package_manifest={"name": "demo"})

        result = await service.run_refinement(original, "Make it better")

        assert PipelineStage.FALLBACK in result.stages
        assert result.artifact.frontend == fallback_artifact("REACT").frontend


class TestSecondaryOperations:
    """Tests for component and explanation generation."""

    @pytest.mark.asyncio
    async def test_component_uses_half_budget(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.text = "```tsx\nexport const Button = () => <button/>;\n```"

        result = await service.generate_component("A button", ProjectFramework.REACT)

        call = scripted_client.calls[0]
        assert call["max_tokens"] == 2048
        assert call["temperature"] == 0.7
        assert "COMPONENT FOCUS" in call["system_prompt"]
        assert result.code == scripted_client.text
        assert result.usage.total_tokens == 600

    @pytest.mark.asyncio
    async def test_explain_uses_explanation_settings(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.text = "This function adds two numbers."

        result = await service.explain_code("def add(a, b): return a + b")

        call = scripted_client.calls[0]
        assert call["max_tokens"] == 2048
        assert call["temperature"] == 0.3
        assert "def add(a, b)" in call["user_prompt"]
        assert result.explanation == "This function adds two numbers."

    @pytest.mark.asyncio
    async def test_component_failure_propagates(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.error = UpstreamCallError(UpstreamErrorKind.RATE_LIMIT, "slow down")

        with pytest.raises(UpstreamCallError):
            await service.generate_component("A button")

    @pytest.mark.asyncio
    async def test_upstream_failure_logged_as_warning(
        self,
        service: CodeGenerationService,
        scripted_client: ScriptedGenerationClient,
    ):
        scripted_client.error = UpstreamCallError(UpstreamErrorKind.AUTH, "bad key")

        with capture_logs() as logs:
            with pytest.raises(UpstreamCallError):
                await service.explain_code("print(1)")

        failed = [e for e in logs if e["event"] == "generation.upstream_failed"]
        assert failed[0]["log_level"] == "warning"
        assert failed[0]["operation"] == "explain"
        assert not any(e["log_level"] == "error" for e in logs)


class TestAssembly:
    """Tests for artifact assembly from extractions."""

    def test_duplicate_file_paths_last_write_wins(self):
        text = (
            "File: src/a.ts\n```ts\nfirst\n```\n"
            "File: src/b.ts\n```ts\nother\n```\n"
            "File: src/a.ts\n```ts\nsecond\n```\n"
        )
        extraction = parse_response(text)

        artifact = assemble_artifact(extraction, ProjectFramework.REACT)

        assert artifact.file_paths == ["src/a.ts", "src/b.ts"]
        assert artifact.files[0].content == "second"

    def test_ts_frontend_is_not_replaced_by_fallback(self):
        text = (
            "```ts\nexport const App = () => 'front';\n```\n"
            "```ts\nimport express from 'express';\n```"
        )

        artifact = assemble_artifact(parse_response(text), "NEXTJS")

        assert artifact.frontend == "export const App = () => 'front';"
        assert artifact.frontend != fallback_artifact("NEXTJS").frontend
        assert artifact.backend == "import express from 'express';"

    def test_file_blocks_only_get_fallback_slots(self):
        extraction = FileBlockExtraction(files=[GeneratedFile(path="README.md", content="hi")])

        artifact = assemble_artifact(extraction, "NUXT")

        assert artifact.framework == ProjectFramework.NUXT
        assert artifact.frontend == fallback_artifact("NUXT").frontend
        assert artifact.package_manifest is not None
        assert artifact.file_paths == ["README.md"]

    def test_merge_files_keeps_unique_paths(self):
        files = [GeneratedFile(path="a", content="1"), GeneratedFile(path="b", content="2")]

        assert merge_files(files) == files
