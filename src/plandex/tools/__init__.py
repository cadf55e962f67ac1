"""Filesystem helpers used by plan commands."""

from .artifacts import (
    ArtifactError,
    ArtifactParseError,
    ArtifactReadError,
    ArtifactRecord,
    NoArtifactsError,
    PlanDescription,
    latest_artifact_path,
    load_latest_artifact,
    load_latest_plan_description,
)
from .paths import DirectoryPolicyError, InclusionPolicy, PathResolutionError, resolve_paths
from .replicate import TreeCopyError, copy_file, copy_tree

__all__ = [
    "ArtifactError",
    "ArtifactParseError",
    "ArtifactReadError",
    "ArtifactRecord",
    "DirectoryPolicyError",
    "InclusionPolicy",
    "NoArtifactsError",
    "PathResolutionError",
    "PlanDescription",
    "TreeCopyError",
    "copy_file",
    "copy_tree",
    "latest_artifact_path",
    "load_latest_artifact",
    "load_latest_plan_description",
    "resolve_paths",
]
