"""Utility functions for AppGen."""

from appgen.utils.formatting import format_code
from appgen.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "format_code",
    "get_logger",
]
