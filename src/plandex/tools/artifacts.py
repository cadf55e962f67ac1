"""Read the newest timestamp-named JSON artifact from a directory.

Artifact files are expected to be named so that plain string ordering is
chronological (zero-padded or ISO-8601 style timestamps). No date parsing
happens here; callers own that naming contract.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..plans import PlanSelection

__all__ = [
    "ArtifactError",
    "ArtifactParseError",
    "ArtifactReadError",
    "ArtifactRecord",
    "NoArtifactsError",
    "PlanDescription",
    "latest_artifact_path",
    "load_latest_artifact",
    "load_latest_plan_description",
]

LOGGER = logging.getLogger(__name__)


class ArtifactError(RuntimeError):
    """Base class for artifact lookup failures."""


class NoArtifactsError(ArtifactError):
    """Raised when the artifact directory is empty."""


class ArtifactReadError(ArtifactError):
    """Raised when the artifact directory or file cannot be read."""


class ArtifactParseError(ArtifactError):
    """Raised when the selected artifact is not valid JSON for its record type."""


@dataclass(slots=True)
class ArtifactRecord:
    """Decoded artifact and where it came from."""

    path: Path
    payload: Any

    @property
    def name(self) -> str:
        return self.path.name


class PlanDescription(BaseModel):
    """Description artifact written after each plan update."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    commit_msg: str = Field(default="", alias="commitMsg")
    made_plan: bool = Field(default=False, alias="madePlan")
    files: list[str] = Field(default_factory=list)
    response_timestamp: str | None = Field(default=None, alias="responseTimestamp")


def latest_artifact_path(directory: Path | str) -> Path:
    """Return the entry of ``directory`` whose name sorts last."""

    root = Path(directory)
    try:
        names = [entry.name for entry in root.iterdir()]
    except OSError as error:
        raise ArtifactReadError(f"error listing artifacts in {root}: {error}") from error
    if not names:
        raise NoArtifactsError(f"no artifacts found in {root}")
    return root / max(names)


def load_latest_artifact(directory: Path | str) -> ArtifactRecord:
    """Read and decode the newest artifact in ``directory``."""

    path = latest_artifact_path(directory)
    try:
        raw = path.read_bytes()
    except OSError as error:
        raise ArtifactReadError(f"error reading latest artifact {path}: {error}") from error
    try:
        payload = json.loads(raw)
    except ValueError as error:
        raise ArtifactParseError(f"error decoding latest artifact {path}: {error}") from error
    LOGGER.debug("Loaded artifact %s", path)
    return ArtifactRecord(path=path, payload=payload)


def load_latest_plan_description(plan: PlanSelection) -> PlanDescription:
    """Return the newest description recorded for ``plan``."""

    record = load_latest_artifact(plan.descriptions_dir)
    if not isinstance(record.payload, Mapping):
        raise ArtifactParseError(f"description {record.path} is not a JSON object")
    try:
        return PlanDescription.model_validate(record.payload)
    except ValidationError as error:
        raise ArtifactParseError(f"invalid description {record.path}: {error}") from error
