"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from appgen.api.deps import get_generation_service
from appgen.core.exceptions import UpstreamCallError
from appgen.core.orchestrator import CodeGenerationService
from appgen.main import app
from appgen.services.generation_client import (
    GenerationClient,
    GenerationConfig,
    GenerationResponse,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class ScriptedGenerationClient(GenerationClient):
    """Fake client that replays canned responses and records every call."""

    def __init__(
        self,
        text: str = "",
        prompt_tokens: int = 120,
        completion_tokens: int = 480,
        error: UpstreamCallError | None = None,
    ):
        self.text = text
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.error = error
        self.calls: list[dict] = []

    async def generate(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return GenerationResponse(
            text=self.text,
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
        )


@pytest.fixture
def generation_config() -> GenerationConfig:
    """Deterministic config for tests."""
    return GenerationConfig(model="test-model", max_tokens=4096, temperature=0.7)


@pytest.fixture
def scripted_client() -> ScriptedGenerationClient:
    """A scripted client returning empty text by default."""
    return ScriptedGenerationClient()


@pytest.fixture
def service(
    scripted_client: ScriptedGenerationClient, generation_config: GenerationConfig
) -> CodeGenerationService:
    """Generation service wired to the scripted client and a fixed clock."""
    return CodeGenerationService(
        client=scripted_client,
        config=generation_config,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
async def client(service: CodeGenerationService) -> AsyncClient:
    """Async test client with the generation service overridden."""
    app.dependency_overrides[get_generation_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def json_response() -> str:
    """Model output carrying the artifact as a JSON block."""
    return (
        "Here is your app:\n"
        "```json\n"
        '{"frontend":"<App/>","packageJson":{"name":"demo","dependencies":{}}}\n'
        "```"
    )


@pytest.fixture
def fenced_response() -> str:
    """Model output using language-tagged blocks and file labels."""
    return """Here is the frontend:

```tsx
import React from 'react';
export default function App() { return <div>Todo</div>; }
```

And the server:

```ts
import express from 'express';
const app = express();
```

Database:

```sql
CREATE TABLE todos (id SERIAL PRIMARY KEY, title TEXT);
```

```json
{"name": "todo-app", "dependencies": {"react": "^18.2.0"}}
```

File: src/components/TodoItem.tsx
```tsx
export const TodoItem = () => null;
```
"""
