"""Structural lint for generated artifacts.

Validation is advisory: only a missing frontend or a missing package
manifest make an artifact invalid, and nothing here changes the artifact.
"""

from appgen.models.generation import CodeArtifact, ProjectFramework, ValidationReport

IMPORT_MARKERS = ("import", "require")
EXPORT_MARKERS = ("export", "module.exports")


def validate_artifact(artifact: CodeArtifact) -> ValidationReport:
    """Classify problems in ``artifact`` into errors, warnings and suggestions."""
    errors: list[str] = []
    warnings: list[str] = []
    suggestions: list[str] = []

    frontend = artifact.frontend
    manifest = artifact.package_manifest

    if not frontend:
        errors.append("Frontend code is missing")
    else:
        if not any(marker in frontend for marker in IMPORT_MARKERS):
            warnings.append("Frontend code might be missing imports")
        if not any(marker in frontend for marker in EXPORT_MARKERS):
            warnings.append("Frontend code might be missing exports")
        if artifact.framework == ProjectFramework.REACT and "React" not in frontend:
            warnings.append("React code might be missing React imports")

    if manifest is None:
        errors.append("Package manifest is missing")
    else:
        if not manifest.get("name"):
            warnings.append("Package manifest is missing a name field")
        if "dependencies" not in manifest and "devDependencies" not in manifest:
            warnings.append("Package manifest has no dependencies")
        if "scripts" not in manifest:
            suggestions.append("Add npm scripts (start/build) to the package manifest")

    if not artifact.files:
        suggestions.append("Split the application into individual files")

    return ValidationReport(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
    )
