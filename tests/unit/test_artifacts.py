from __future__ import annotations

import json
from pathlib import Path

import pytest

from plandex.plans import PlanSelection
from plandex.tools.artifacts import (
    ArtifactParseError,
    ArtifactReadError,
    NoArtifactsError,
    latest_artifact_path,
    load_latest_artifact,
    load_latest_plan_description,
)


def _write(directory: Path, name: str, payload: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_latest_artifact_picks_greatest_name(tmp_path: Path) -> None:
    _write(tmp_path, "2024-02-01T00-00-00.json", {"month": "february"})
    _write(tmp_path, "2024-01-01T00-00-00.json", {"month": "january"})

    record = load_latest_artifact(tmp_path)

    assert record.name == "2024-02-01T00-00-00.json"
    assert record.payload == {"month": "february"}


def test_latest_uses_plain_string_order(tmp_path: Path) -> None:
    _write(tmp_path, "9.json", {})
    _write(tmp_path, "10.json", {})

    assert latest_artifact_path(tmp_path).name == "9.json"


def test_empty_directory_is_an_explicit_error(tmp_path: Path) -> None:
    with pytest.raises(NoArtifactsError, match="no artifacts found"):
        load_latest_artifact(tmp_path)


def test_missing_directory_is_a_read_error(tmp_path: Path) -> None:
    with pytest.raises(ArtifactReadError):
        load_latest_artifact(tmp_path / "absent")


def test_undecodable_artifact_is_a_parse_error(tmp_path: Path) -> None:
    (tmp_path / "2024-03-01.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(ArtifactParseError, match="decoding"):
        load_latest_artifact(tmp_path)


def test_directory_entry_is_a_read_error(tmp_path: Path) -> None:
    _write(tmp_path, "2024-01-01.json", {})
    (tmp_path / "2024-12-31").mkdir()

    with pytest.raises(ArtifactReadError, match="reading"):
        load_latest_artifact(tmp_path)


def test_records_are_read_fresh(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.json", {"v": 1})
    assert load_latest_artifact(tmp_path).payload == {"v": 1}

    path.write_text(json.dumps({"v": 2}), encoding="utf-8")
    assert load_latest_artifact(tmp_path).payload == {"v": 2}


def test_load_latest_plan_description(tmp_path: Path) -> None:
    plan = PlanSelection.for_name(tmp_path / ".plandex", "demo")
    _write(plan.descriptions_dir, "2024-01-01T00-00-00.json", {"commitMsg": "old"})
    _write(
        plan.descriptions_dir,
        "2024-05-01T00-00-00.json",
        {"commitMsg": "Add parser", "madePlan": True, "files": ["a.py"], "extra": 1},
    )

    description = load_latest_plan_description(plan)

    assert description.commit_msg == "Add parser"
    assert description.made_plan is True
    assert description.files == ["a.py"]


def test_plan_description_must_be_an_object(tmp_path: Path) -> None:
    plan = PlanSelection.for_name(tmp_path, "demo")
    _write(plan.descriptions_dir, "1.json", ["not", "an", "object"])

    with pytest.raises(ArtifactParseError):
        load_latest_plan_description(plan)


def test_plan_description_field_types_are_checked(tmp_path: Path) -> None:
    plan = PlanSelection.for_name(tmp_path, "demo")
    _write(plan.descriptions_dir, "1.json", {"files": "a.py"})

    with pytest.raises(ArtifactParseError):
        load_latest_plan_description(plan)
