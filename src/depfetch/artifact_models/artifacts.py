"""
Pydantic data models for the artifacts.json table.

The table names every third-party artifact that has to be fetched, which
archives get unpacked and where the resulting files are copied.
"""

import json
import pathlib
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SHA256_PATTERN = re.compile(r"^[0-9a-f]{64}$")

DEFAULT_ARTIFACTS_PATH = pathlib.Path(__file__).parent / "artifacts.json"


class ArtifactSpec(BaseModel):
    """
    A single downloadable artifact.

    The staging file is stored as build/downloads/<filename>.
    """

    name: str = Field(..., description="Unique artifact name")
    url: str = Field(..., description="URL to download from")
    sha256: str = Field(..., description="Expected lowercase hex SHA-256")
    filename: str = Field(..., description="Local staging file name")
    description: Optional[str] = Field(None, alias="_description")

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    @field_validator("sha256")
    @classmethod
    def _check_sha256(cls, value: str) -> str:
        if not SHA256_PATTERN.match(value):
            raise ValueError(f"sha256 must be 64 lowercase hex characters, got {value!r}")
        return value

    @field_validator("filename")
    @classmethod
    def _check_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"filename must be a plain file name, got {value!r}")
        return value


class ExtractStep(BaseModel):
    """Unpack the staging file of `artifact` into build/downloads/<target>."""

    artifact: str
    target: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")


class CopyStep(BaseModel):
    """
    Copy a staged file into its consumption point.

    `source` is relative to build/downloads and `destination` to the repository root.
    When `pattern` is set, `source` is a directory and every file directly inside it
    matching the wildcard is copied into the `destination` directory.
    """

    source: str
    destination: str
    pattern: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class ArtifactsConfig(BaseModel):
    """
    Complete artifact table.

    Structure:
    {
      "_description": "...",
      "artifacts": [{"name", "url", "sha256", "filename"}, ...],
      "extract": [{"artifact", "target"}, ...],
      "copy": [{"source", "destination", "pattern"?}, ...]
    }
    """

    description: Optional[str] = Field(None, alias="_description")
    artifacts: List[ArtifactSpec] = Field(default_factory=list)
    extract: List[ExtractStep] = Field(default_factory=list)
    copy_steps: List[CopyStep] = Field(default_factory=list, alias="copy")

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    @model_validator(mode="after")
    def _check_references(self) -> "ArtifactsConfig":
        names = [artifact.name for artifact in self.artifacts]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate artifact names: {', '.join(duplicates)}")

        filenames = [artifact.filename for artifact in self.artifacts]
        duplicates = sorted({n for n in filenames if filenames.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate artifact filenames: {', '.join(duplicates)}")

        for step in self.extract:
            if step.artifact not in names:
                raise ValueError(f"Extract step refers to unknown artifact {step.artifact!r}")
        return self

    def get_artifact(self, name: str) -> ArtifactSpec:
        """
        Get an artifact by name.

        Raises:
            KeyError: If no artifact has that name
        """
        for artifact in self.artifacts:
            if artifact.name == name:
                return artifact
        raise KeyError(name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArtifactsConfig":
        return cls.model_validate(data)

    @classmethod
    def load(cls, path: pathlib.Path) -> "ArtifactsConfig":
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def load_default(cls) -> "ArtifactsConfig":
        """Load the table bundled with this release."""
        return cls.load(DEFAULT_ARTIFACTS_PATH)
