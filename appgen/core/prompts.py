"""Prompt construction for the generation pipeline.

System prompts are assembled from three blocks: a fixed role/principles
block, a framework capability block and a project-type focus block. Both
lookups are total; anything not in the tables resolves to React/Webapp.
"""

from appgen.models.generation import (
    CodeArtifact,
    CodeGenerationRequest,
    ProjectFramework,
    ProjectType,
)

MIN_PROMPT_LENGTH = 10
MAX_PROMPT_LENGTH = 10_000

ROLE_BLOCK = """You are AppGen, a senior full-stack engineer who turns natural-language descriptions into complete, production-ready web applications.

CORE EXPERTISE:
- Modern frontend frameworks (React, Next.js, Vue, Nuxt, Angular, Svelte)
- Full-stack architecture, REST APIs and data modelling
- Responsive, accessible UI with Tailwind CSS
- TypeScript and modern JavaScript
- Security and performance fundamentals

GENERATION PRINCIPLES:
1. Produce complete, working code rather than fragments
2. Follow the conventions of the target framework
3. Keep code readable, typed and easy to extend
4. Handle errors and loading states explicitly
5. Design mobile-first and keep markup accessible
6. Declare every dependency the code imports"""

FRAMEWORK_PROMPTS: dict[ProjectFramework, str] = {
    ProjectFramework.REACT: """REACT GUIDELINES:
- Functional components with hooks (useState, useEffect, useContext)
- Typed props via TypeScript interfaces
- Compose small components; extract custom hooks for shared logic
- Error boundaries and explicit loading states""",
    ProjectFramework.NEXTJS: """NEXT.JS GUIDELINES:
- App Router (app/ directory) with server components by default
- Route handlers under app/api for backend endpoints
- Built-in Image, Link and metadata APIs
- Mark interactive components with "use client" only where needed""",
    ProjectFramework.VUE: """VUE GUIDELINES:
- Vue 3 Composition API with <script setup lang="ts">
- ref/reactive for state, computed for derived values
- Vue Router for navigation
- Single-file components with scoped styles""",
    ProjectFramework.NUXT: """NUXT GUIDELINES:
- Nuxt 3 with file-based routing under pages/
- Server routes under server/api
- Auto-imported composables; useFetch/useAsyncData for data loading
- Layouts for shared page chrome""",
    ProjectFramework.ANGULAR: """ANGULAR GUIDELINES:
- Standalone components with dependency-injected services
- Reactive forms and typed form controls
- Route guards for protected views
- OnPush change detection where possible""",
    ProjectFramework.SVELTE: """SVELTE GUIDELINES:
- SvelteKit routing with +page.svelte and +page.ts load functions
- Svelte stores for shared state
- Built-in transitions for motion
- TypeScript in <script lang="ts"> blocks""",
    ProjectFramework.VANILLA: """VANILLA JS GUIDELINES:
- ES modules and modern language features
- Modular structure without a framework runtime
- CSS Grid, Flexbox and custom properties for layout
- Event delegation and a small explicit state object""",
}

PROJECT_TYPE_PROMPTS: dict[ProjectType, str] = {
    ProjectType.WEBAPP: """WEB APPLICATION FOCUS:
- Multiple views with navigation and routing
- Interactive features backed by clear state management
- Responsive layout for every screen size
- Loading and error states on every async action""",
    ProjectType.DASHBOARD: """DASHBOARD FOCUS:
- Sidebar layout with a responsive content grid
- Charts, tables and summary cards for the key metrics
- Filtering, search and export of the displayed data""",
    ProjectType.ECOMMERCE: """E-COMMERCE FOCUS:
- Product catalogue with search, filtering and sorting
- Product detail pages and a persistent shopping cart
- Checkout flow with a payment integration placeholder""",
    ProjectType.LANDING: """LANDING PAGE FOCUS:
- Hero section with a clear value proposition
- Feature, testimonial and pricing sections
- Repeated call-to-action buttons and smooth scrolling""",
    ProjectType.BLOG: """BLOG FOCUS:
- Article list and article detail pages
- Categories, tags and search
- Author bios, pagination and social sharing""",
    ProjectType.PORTFOLIO: """PORTFOLIO FOCUS:
- Project showcase with case-study pages
- About section with skills and experience
- Contact form and social links""",
    ProjectType.SAAS: """SAAS FOCUS:
- Onboarding flow and a usage dashboard
- Account, team and settings management
- Subscription and billing placeholders""",
    ProjectType.API: """API FOCUS:
- Resource-oriented REST endpoints with input validation
- Consistent JSON error responses
- A minimal frontend that exercises the endpoints""",
    ProjectType.COMPONENT: """COMPONENT FOCUS:
- A reusable, self-contained component with typed props
- Variants and states (disabled, loading, error)
- ARIA attributes and keyboard support
- A short usage example""",
}

RESPONSE_FORMAT = """RESPONSE FORMAT:
Return the application as a single JSON object inside a ```json fenced block:
```json
{{
  "framework": "{framework}",
  "frontend": "// main frontend entry component",
  "backend": "// backend server code, if requested",
  "database": "// database schema, if requested",
  "packageJson": {{
    "name": "generated-app",
    "version": "1.0.0",
    "dependencies": {{}}
  }},
  "files": [
    {{"path": "src/components/Example.tsx", "content": "// file content"}}
  ]
}}
```
Every string value must be valid JSON (escape quotes and newlines)."""


def get_framework_prompt(framework: ProjectFramework | str | None) -> str:
    """Framework capability block; React for anything unknown."""
    return FRAMEWORK_PROMPTS.get(
        ProjectFramework.resolve(framework), FRAMEWORK_PROMPTS[ProjectFramework.REACT]
    )


def get_project_type_prompt(project_type: ProjectType | str | None) -> str:
    """Project-type focus block; Webapp for anything unknown."""
    return PROJECT_TYPE_PROMPTS.get(
        ProjectType.resolve(project_type), PROJECT_TYPE_PROMPTS[ProjectType.WEBAPP]
    )


def build_system_prompt(
    framework: ProjectFramework | str | None,
    project_type: ProjectType | str | None,
) -> str:
    """Build the system prompt for a framework and project type (or component)."""
    resolved = ProjectFramework.resolve(framework)
    return "\n\n".join(
        [
            ROLE_BLOCK,
            get_framework_prompt(resolved),
            get_project_type_prompt(project_type),
            RESPONSE_FORMAT.format(framework=resolved.value),
        ]
    )


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def build_user_prompt(request: CodeGenerationRequest) -> str:
    """Build the user prompt for a full application request."""
    framework = ProjectFramework.resolve(request.framework)
    project_type = ProjectType.resolve(request.project_type).value

    requirements = [f"Framework: {framework.value}", f"Project type: {project_type}"]
    if request.include_backend:
        requirements.append("Include a backend API (Node.js/Express)")
    if request.include_database:
        requirements.append("Include a database schema (PostgreSQL/Prisma)")
    if request.include_auth:
        requirements.append("Include user authentication")
    if request.include_tests:
        requirements.append("Include unit tests")

    sections = [
        f"Generate a complete {framework.value.lower()} {project_type} application "
        f"from this description:\n\n{request.prompt}",
        f"REQUIREMENTS:\n{_bullets(requirements)}",
    ]

    context = request.context
    if context is not None:
        if context.requirements:
            sections.append(f"SPECIFIC REQUIREMENTS:\n{_bullets(context.requirements)}")
        if context.constraints:
            sections.append(f"CONSTRAINTS:\n{_bullets(context.constraints)}")
        if context.style:
            sections.append(f"DESIGN STYLE: {context.style.value}")
        if context.features:
            sections.append(f"FEATURES TO INCLUDE:\n{_bullets(context.features)}")
        if context.existing_code:
            sections.append(
                f"EXISTING CODE TO BUILD UPON:\n```\n{context.existing_code}\n```"
            )

    sections.append(
        "Generate a complete, working application with every file and dependency it needs."
    )
    return "\n\n".join(sections)


def build_refinement_system_prompt(
    artifact: CodeArtifact, context: str | None = None
) -> str:
    """System prompt for refining an existing artifact, embedding it as JSON."""
    artifact_json = artifact.model_dump_json(by_alias=True, indent=2)
    prompt = f"""You are a senior full-stack engineer refining existing generated code based on user feedback.

INSTRUCTIONS:
1. Read the existing code carefully
2. Apply the requested change precisely
3. Keep existing behaviour unless the request changes it
4. Follow the structure and conventions already in place

RESPONSE FORMAT:
Return the complete refined code as one JSON object in a ```json fenced block,
using the same structure as the existing code below.

EXISTING CODE:
```json
{artifact_json}
```"""
    if context:
        prompt += f"\n\nADDITIONAL CONTEXT:\n{context}"
    return prompt


def build_refinement_user_prompt(instruction: str) -> str:
    """User prompt carrying a refinement instruction."""
    return (
        f"Refine the existing code according to this request:\n\n{instruction}\n\n"
        "Return the complete updated code in the same structure and format."
    )


def build_component_prompt(
    instruction: str,
    framework: ProjectFramework | str | None,
    context: str | None = None,
) -> str:
    """User prompt for a single component."""
    resolved = ProjectFramework.resolve(framework)
    prompt = f"Generate a {resolved.value} component for this request:\n\n{instruction}"
    if context:
        prompt += f"\n\nContext: {context}"
    prompt += (
        "\n\nProvide clean, production-ready code with TypeScript types, "
        "styling and accessible markup."
    )
    return prompt


EXPLANATION_SYSTEM_PROMPT = """You are a senior developer who explains code clearly to readers of mixed experience.

INSTRUCTIONS:
1. Describe what the code does in plain terms
2. Walk through its main parts and how they fit together
3. Point out the patterns and notable implementation details
4. Prefer short paragraphs and concrete examples over jargon"""


def build_explanation_prompt(code: str) -> str:
    """User prompt asking for an explanation of ``code``."""
    return (
        f"Explain this code:\n\n```\n{code}\n```\n\n"
        "Cover its purpose, its main parts and how they work together."
    )


def validate_prompt(prompt: str | None) -> list[str]:
    """Return the problems with a user prompt; empty when it is acceptable."""
    if not prompt or not prompt.strip():
        return ["Prompt cannot be empty"]

    errors: list[str] = []
    if len(prompt) < MIN_PROMPT_LENGTH:
        errors.append(f"Prompt is too short (min {MIN_PROMPT_LENGTH} characters)")
    if len(prompt) > MAX_PROMPT_LENGTH:
        errors.append(f"Prompt is too long (max {MAX_PROMPT_LENGTH:,} characters)")
    return errors
