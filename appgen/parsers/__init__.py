"""Model response parsers."""

from appgen.parsers.response import (
    CodeFenceExtraction,
    EmptyExtraction,
    ExtractionResult,
    FileBlockExtraction,
    JsonExtraction,
    ResponseParser,
    parse_response,
)

__all__ = [
    "ResponseParser",
    "parse_response",
    "ExtractionResult",
    "JsonExtraction",
    "CodeFenceExtraction",
    "FileBlockExtraction",
    "EmptyExtraction",
]
