"""Whitespace normalisation for generated code."""

import re

from appgen.utils.logging import get_logger

logger = get_logger(__name__)

# a newline followed by two or more whitespace-only lines
_EXCESS_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n){2,}")


def format_code(code: str) -> str:
    """Normalise line endings to ``\\n`` and collapse runs of blank lines.

    A run of blank (or whitespace-only) lines becomes a single blank line.
    Indentation of the line after the run is left as it was. Idempotent.
    On any failure the input is returned unchanged.
    """
    try:
        formatted = code.replace("\r\n", "\n").replace("\r", "\n")
        return _EXCESS_BLANK_LINES.sub("\n\n", formatted)
    except Exception as e:
        logger.warning("formatter.failed", error=str(e))
        return code
