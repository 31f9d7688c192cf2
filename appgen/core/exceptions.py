"""Custom exceptions for AppGen."""

from enum import Enum
from typing import Any


class AppGenError(Exception):
    """Base exception for AppGen."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UpstreamErrorKind(str, Enum):
    """Classification of a failed text-generation call."""

    NETWORK = "network"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    MALFORMED = "malformed"


class UpstreamCallError(AppGenError):
    """The text-generation provider call failed.

    This is the only error the generation service lets reach its caller;
    irregular model output is absorbed by the fallback path instead.
    """

    def __init__(
        self,
        kind: UpstreamErrorKind,
        message: str,
        status_code: int | None = None,
    ):
        details: dict[str, Any] = {"kind": kind.value}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(f"Upstream call failed ({kind.value}): {message}", details)
        self.kind = kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Transient failures worth another attempt. Auth and shape errors never are."""
        return self.kind in (UpstreamErrorKind.NETWORK, UpstreamErrorKind.RATE_LIMIT)
