"""Deterministic artifact generators."""

from appgen.generators.fallback import fallback_artifact, fallback_frontend, fallback_manifest

__all__ = [
    "fallback_artifact",
    "fallback_frontend",
    "fallback_manifest",
]
