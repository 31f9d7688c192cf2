"""Model response parser.

Recovers a structured code artifact from free-form model output. Tiers are
tried in order and the first one that recognises anything wins:

1. Json       - a ```json block shaped like an artifact (has ``frontend`` or ``files``)
2. CodeFences - language-tagged blocks mapped onto artifact slots
3. FileBlocks - "File: path" / "src/path:" labels followed by a fenced block
4. Empty      - nothing recognised

File blocks are scanned over the whole text independently of the fence
tier and travel with a CodeFences result. Parsing never raises; a block
that fails to decode is simply not a match.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Union

from appgen.models.generation import GeneratedFile, ProjectFramework
from appgen.utils.logging import get_logger

logger = get_logger(__name__)

# ```lang [info]\n body \n```
FENCE_PATTERN = re.compile(r"```[ \t]*([\w.+#-]*)[^\n]*\n(.*?)\n?```", re.DOTALL)

FILE_BLOCK_PATTERN = re.compile(
    r"(?:"
    r"(?:File|Path):[ \t]*(?P<labeled>[^\n]+?)"
    r"|(?<![\w/.-])(?P<prefixed>(?:src|components|pages|utils)/[^\n:]+):"
    r")[ \t]*\n"
    r"```[^\n]*\n(?P<content>.*?)```",
    re.DOTALL,
)

FRONTEND_LANGS = frozenset({"tsx", "jsx", "ts", "js"})
BACKEND_LANGS = frozenset({"ts", "js", "typescript", "javascript"})
DATABASE_LANGS = frozenset({"sql", "prisma"})
ARTIFACT_KEYS = ("frontend", "files")
MANIFEST_KEYS = ("dependencies", "name")
MANIFEST_FIELDS = ("packageJson", "packageManifest")


@dataclass(frozen=True)
class JsonDecodeResult:
    """Outcome of decoding one JSON candidate."""

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_json(text: str) -> JsonDecodeResult:
    """Decode JSON without raising."""
    try:
        return JsonDecodeResult(value=json.loads(text))
    except (ValueError, RecursionError) as e:
        return JsonDecodeResult(error=str(e))


@dataclass(frozen=True)
class FencedBlock:
    """A fenced code block and its position in the response."""

    index: int
    lang: str
    body: str


@dataclass(frozen=True)
class JsonExtraction:
    """Artifact fields read from a JSON block. ``None`` means the field was absent."""

    frontend: str | None = None
    backend: str | None = None
    database: str | None = None
    package_manifest: dict[str, Any] | None = None
    files: list[GeneratedFile] | None = None


@dataclass(frozen=True)
class CodeFenceExtraction:
    """Artifact slots claimed by language-tagged blocks."""

    frontend: str | None = None
    backend: str | None = None
    database: str | None = None
    package_manifest: dict[str, Any] | None = None
    files: list[GeneratedFile] = field(default_factory=list)


@dataclass(frozen=True)
class FileBlockExtraction:
    """Only labelled file blocks were found."""

    files: list[GeneratedFile] = field(default_factory=list)


@dataclass(frozen=True)
class EmptyExtraction:
    """Nothing in the response was recognised."""


ExtractionResult = Union[JsonExtraction, CodeFenceExtraction, FileBlockExtraction, EmptyExtraction]


def _text_field(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _files_field(data: dict[str, Any]) -> list[GeneratedFile] | None:
    value = data.get("files")
    if not isinstance(value, list):
        return None
    files: list[GeneratedFile] = []
    for item in value:
        if (
            isinstance(item, dict)
            and isinstance(item.get("path"), str)
            and item["path"].strip()
            and isinstance(item.get("content"), str)
        ):
            files.append(GeneratedFile(path=item["path"].strip(), content=item["content"]))
    return files


def _manifest_field(data: dict[str, Any]) -> dict[str, Any] | None:
    for key in MANIFEST_FIELDS:
        value = data.get(key)
        if isinstance(value, dict):
            return value
    return None


class ResponseParser:
    """Tiered, deterministic extraction of artifacts from model output."""

    def parse(
        self, content: str, framework: ProjectFramework | str | None = None
    ) -> ExtractionResult:
        """Parse raw model text into an ``ExtractionResult``."""
        if not content:
            return EmptyExtraction()

        blocks = self.find_fenced_blocks(content)

        result = self._json_tier(blocks)
        if result is None:
            result = self._fence_tier(blocks, self.find_file_blocks(content))

        logger.debug(
            "response_parser.tier_matched",
            tier=type(result).__name__,
            framework=getattr(framework, "value", framework),
            blocks=len(blocks),
        )
        return result

    def find_fenced_blocks(self, content: str) -> list[FencedBlock]:
        """All fenced blocks in order of appearance."""
        return [
            FencedBlock(index=i, lang=match.group(1).lower(), body=match.group(2))
            for i, match in enumerate(FENCE_PATTERN.finditer(content))
        ]

    def find_file_blocks(self, content: str) -> list[GeneratedFile]:
        """Labelled file blocks in order of appearance, duplicates included."""
        files: list[GeneratedFile] = []
        for match in FILE_BLOCK_PATTERN.finditer(content):
            label = match.group("labeled") or match.group("prefixed") or ""
            path = label.strip().strip("`*").strip()
            if not path:
                continue
            files.append(GeneratedFile(path=path, content=match.group("content").strip()))
        return files

    def _json_tier(self, blocks: list[FencedBlock]) -> JsonExtraction | None:
        for block in blocks:
            if block.lang != "json":
                continue
            decoded = decode_json(block.body)
            if not decoded.ok or not isinstance(decoded.value, dict):
                continue
            data = decoded.value
            if not any(key in data for key in ARTIFACT_KEYS):
                continue
            return JsonExtraction(
                frontend=_text_field(data, "frontend"),
                backend=_text_field(data, "backend"),
                database=_text_field(data, "database"),
                package_manifest=_manifest_field(data),
                files=_files_field(data),
            )
        return None

    def _fence_tier(
        self, blocks: list[FencedBlock], files: list[GeneratedFile]
    ) -> ExtractionResult:
        # ts/js blocks qualify for both slots; the frontend claims first
        frontend = next((b for b in blocks if b.lang in FRONTEND_LANGS), None)
        backend = next(
            (
                b
                for b in blocks
                if b.lang in BACKEND_LANGS and (frontend is None or b.index != frontend.index)
            ),
            None,
        )
        database = next((b for b in blocks if b.lang in DATABASE_LANGS), None)
        manifest = self._find_manifest(blocks)

        if frontend is None and backend is None and database is None and manifest is None:
            if files:
                return FileBlockExtraction(files=files)
            return EmptyExtraction()

        return CodeFenceExtraction(
            frontend=frontend.body if frontend else None,
            backend=backend.body if backend else None,
            database=database.body if database else None,
            package_manifest=manifest,
            files=files,
        )

    def _find_manifest(self, blocks: list[FencedBlock]) -> dict[str, Any] | None:
        for block in blocks:
            if block.lang != "json":
                continue
            decoded = decode_json(block.body)
            if decoded.ok and isinstance(decoded.value, dict):
                if any(key in decoded.value for key in MANIFEST_KEYS):
                    return decoded.value
        return None


def parse_response(
    content: str, framework: ProjectFramework | str | None = None
) -> ExtractionResult:
    """Parse a model response string."""
    parser = ResponseParser()
    return parser.parse(content, framework)
