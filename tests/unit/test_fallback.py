"""Unit tests for the fallback artifact generator."""

import pytest

from appgen.generators.fallback import (
    REACT_FRONTEND,
    fallback_artifact,
    fallback_frontend,
    fallback_manifest,
)
from appgen.models.generation import ProjectFramework


class TestFallbackArtifact:
    """Tests for fallback_artifact."""

    @pytest.mark.parametrize("framework", list(ProjectFramework))
    def test_every_framework_gets_a_usable_artifact(self, framework: ProjectFramework):
        artifact = fallback_artifact(framework)

        assert artifact.framework == framework
        assert artifact.frontend
        assert artifact.package_manifest is not None
        assert artifact.package_manifest["name"]
        assert artifact.files == []
        assert artifact.backend is None
        assert artifact.database is None

    def test_deterministic(self):
        assert fallback_artifact(ProjectFramework.VUE) == fallback_artifact(ProjectFramework.VUE)

    def test_react_template_content(self):
        artifact = fallback_artifact(ProjectFramework.REACT)

        assert "import React" in artifact.frontend
        assert "export default App" in artifact.frontend
        assert "react" in artifact.package_manifest["dependencies"]

    def test_unknown_framework_resolves_to_react(self):
        artifact = fallback_artifact("ELM")

        assert artifact.framework == ProjectFramework.REACT
        assert artifact.frontend == REACT_FRONTEND

    def test_framework_without_template_uses_react_content(self):
        artifact = fallback_artifact(ProjectFramework.SVELTE)

        assert artifact.framework == ProjectFramework.SVELTE
        assert artifact.frontend == REACT_FRONTEND


class TestFallbackPieces:
    """Tests for the per-slot helpers."""

    def test_vue_template(self):
        frontend = fallback_frontend(ProjectFramework.VUE)

        assert "<template>" in frontend
        assert "export default" in frontend

    def test_vue_manifest_has_dev_dependencies(self):
        manifest = fallback_manifest(ProjectFramework.VUE)

        assert "vite" in manifest["devDependencies"]
        assert "scripts" not in manifest

    def test_nextjs_manifest_scripts(self):
        manifest = fallback_manifest(ProjectFramework.NEXTJS)

        assert manifest["scripts"]["dev"] == "next dev"

    def test_manifest_is_a_fresh_copy(self):
        first = fallback_manifest(ProjectFramework.REACT)
        first["dependencies"]["left-pad"] = "1.0.0"

        second = fallback_manifest(ProjectFramework.REACT)
        assert "left-pad" not in second["dependencies"]
