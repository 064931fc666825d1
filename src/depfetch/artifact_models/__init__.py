"""
Artifact models.

This package provides Pydantic data models for the table of third-party
artifacts fetched by depfetch, together with the table bundled with each release.
"""

from .artifacts import (
    ArtifactSpec,
    ArtifactsConfig,
    CopyStep,
    ExtractStep,
)

__all__ = [
    "ArtifactSpec",
    "ArtifactsConfig",
    "CopyStep",
    "ExtractStep",
]
