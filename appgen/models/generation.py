"""Code generation data models.

Field names serialise in camelCase (``packageManifest``, ``promptTokens``,
``isValid``) so artifacts round-trip unchanged through the JSON transport
used by the editor and preview UI.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectFramework(str, Enum):
    """Frontend framework a project targets."""

    REACT = "REACT"
    NEXTJS = "NEXTJS"
    VUE = "VUE"
    NUXT = "NUXT"
    ANGULAR = "ANGULAR"
    SVELTE = "SVELTE"
    VANILLA = "VANILLA"

    @classmethod
    def resolve(cls, value: "ProjectFramework | str | None") -> "ProjectFramework":
        """Map any value onto the closed set, defaulting to React."""
        try:
            return cls(value)
        except ValueError:
            return cls.REACT


class ProjectType(str, Enum):
    """Kind of application being generated."""

    WEBAPP = "webapp"
    DASHBOARD = "dashboard"
    ECOMMERCE = "ecommerce"
    BLOG = "blog"
    PORTFOLIO = "portfolio"
    LANDING = "landing"
    SAAS = "saas"
    MOBILE = "mobile"
    API = "api"
    CMS = "cms"
    COMPONENT = "component"
    CUSTOM = "custom"

    @classmethod
    def resolve(cls, value: "ProjectType | str | None") -> "ProjectType":
        """Map any value onto the closed set, defaulting to Webapp."""
        try:
            return cls(value)
        except ValueError:
            return cls.WEBAPP


class DesignStyle(str, Enum):
    """Visual style hint passed through to the prompt."""

    MODERN = "modern"
    MINIMAL = "minimal"
    CORPORATE = "corporate"
    CREATIVE = "creative"


class CamelModel(BaseModel):
    """Base model serialising field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerationContext(CamelModel):
    """Optional grounding for a generation request."""

    existing_code: str | None = None
    requirements: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)
    style: DesignStyle | None = None
    features: list[str] = Field(default_factory=list)


class CodeGenerationRequest(CamelModel):
    """A natural-language request for a complete application."""

    prompt: str
    framework: ProjectFramework = ProjectFramework.REACT
    project_type: ProjectType = Field(
        default=ProjectType.WEBAPP,
        validation_alias=AliasChoices("projectType", "project_type", "type"),
        serialization_alias="projectType",
    )
    include_backend: bool = False
    include_database: bool = False
    include_auth: bool = False
    include_tests: bool = False
    context: GenerationContext | None = None


class GeneratedFile(CamelModel):
    """A single generated file."""

    path: str
    content: str


class UsageStats(CamelModel):
    """Token usage of one upstream call."""

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    @classmethod
    def from_counts(cls, prompt_tokens: int, completion_tokens: int) -> "UsageStats":
        """Build usage with the total derived from its parts."""
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )


class CodeArtifact(CamelModel):
    """Structured, multi-file output of a generation request."""

    framework: ProjectFramework = ProjectFramework.REACT
    frontend: str = ""
    backend: str | None = None
    database: str | None = None
    package_manifest: dict[str, Any] | None = None
    files: list[GeneratedFile] = Field(default_factory=list)
    usage: UsageStats = Field(default_factory=UsageStats)
    model: str = ""
    timestamp: str = ""

    @property
    def file_paths(self) -> list[str]:
        """Paths of the individual files, in order."""
        return [f.path for f in self.files]


class ValidationReport(CamelModel):
    """Advisory lint result for an artifact."""

    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class ComponentResult(CamelModel):
    """Raw output of a single-component generation."""

    code: str
    usage: UsageStats


class ExplanationResult(CamelModel):
    """Prose explanation of a piece of code."""

    explanation: str
    usage: UsageStats
