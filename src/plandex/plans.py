"""Persisted selection of the current plan inside the control directory."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict

__all__ = [
    "CURRENT_PLAN_FILE",
    "PlanSelection",
    "PlanSettings",
    "PlanStateError",
    "PlanStateParseError",
    "PlanStateReadError",
    "load_current_plan",
    "save_current_plan",
]

CURRENT_PLAN_FILE = "current_plan.json"
RESULTS_SUBDIR = "results"
DESCRIPTIONS_SUBDIR = "descriptions"
CONVERSATION_SUBDIR = "conversation"
CONTEXT_SUBDIR = "context"

LOGGER = logging.getLogger(__name__)


class PlanStateError(RuntimeError):
    """Raised when the persisted plan selection cannot be used."""


class PlanStateReadError(PlanStateError):
    """Raised when ``current_plan.json`` exists but cannot be read."""


class PlanStateParseError(PlanStateError):
    """Raised when ``current_plan.json`` does not hold a valid plan record."""


class PlanSettings(BaseModel):
    """On-disk schema of ``current_plan.json``."""

    model_config = ConfigDict(extra="ignore")

    name: str


@dataclass(slots=True, frozen=True)
class PlanSelection:
    """The selected plan together with the directories derived from its name.

    Instances are immutable; build them through :meth:`for_name` so every
    derived directory always matches ``name``.
    """

    name: str
    plan_dir: Path
    results_dir: Path
    descriptions_dir: Path
    conversation_dir: Path
    context_dir: Path

    @classmethod
    def for_name(cls, control_dir: Path | str, name: str) -> "PlanSelection":
        plan_dir = Path(control_dir) / name
        return cls(
            name=name,
            plan_dir=plan_dir,
            results_dir=plan_dir / RESULTS_SUBDIR,
            descriptions_dir=plan_dir / DESCRIPTIONS_SUBDIR,
            conversation_dir=plan_dir / CONVERSATION_SUBDIR,
            context_dir=plan_dir / CONTEXT_SUBDIR,
        )


def load_current_plan(control_dir: Path | str | None) -> PlanSelection | None:
    """Load the current plan selection, or ``None`` when none is recorded."""

    if not control_dir:
        return None
    path = Path(control_dir) / CURRENT_PLAN_FILE
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        LOGGER.debug("No current plan recorded at %s", path)
        return None
    except OSError as error:
        raise PlanStateReadError(f"error reading {CURRENT_PLAN_FILE}: {error}") from error

    try:
        settings = PlanSettings.model_validate(json.loads(raw))
    except ValueError as error:
        raise PlanStateParseError(f"error parsing {CURRENT_PLAN_FILE}: {error}") from error

    return PlanSelection.for_name(control_dir, settings.name)


def save_current_plan(control_dir: Path | str, name: str) -> PlanSelection:
    """Record ``name`` as the current plan and return its selection."""

    settings = PlanSettings(name=name)
    path = Path(control_dir) / CURRENT_PLAN_FILE
    path.write_text(json.dumps(settings.model_dump(), indent=2) + "\n", encoding="utf-8")
    LOGGER.debug("Recorded current plan %s in %s", name, path)
    return PlanSelection.for_name(control_dir, name)
