"""Core functionality for AppGen.

The orchestrator is imported from ``appgen.core.orchestrator`` directly;
it depends on ``appgen.services``, which in turn needs the exceptions here.
"""

from appgen.core.exceptions import AppGenError, UpstreamCallError, UpstreamErrorKind
from appgen.core.validator import validate_artifact

__all__ = [
    "AppGenError",
    "UpstreamCallError",
    "UpstreamErrorKind",
    "validate_artifact",
]
