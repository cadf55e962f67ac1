"""Process-wide project context assembled once at startup."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path

from .plans import PlanSelection, load_current_plan
from .project import CONTROL_DIR_NAME, cwd_is_plan, find_control_directory

__all__ = [
    "CACHE_ENV_VAR",
    "HOME_ENV_VAR",
    "ProjectContext",
    "home_control_dir",
    "initialise_context",
    "prepare_cache_dir",
]

CACHE_ENV_VAR = "TIKTOKEN_CACHE_DIR"
HOME_ENV_VAR = "PLANDEX_HOME"

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ProjectContext:
    """Immutable view of where the project and its current plan live.

    ``control_dir`` and ``project_root`` are ``None`` when no control
    directory was found above the working directory.
    """

    cwd: Path
    control_dir: Path | None
    project_root: Path | None
    home_dir: Path
    cache_dir: Path
    plan: PlanSelection | None = None

    @property
    def has_project(self) -> bool:
        return self.control_dir is not None

    @property
    def in_plan_dir(self) -> bool:
        return cwd_is_plan(self.cwd, self.control_dir)

    def with_control_dir(self, control_dir: Path) -> "ProjectContext":
        """Return a copy pointing at a freshly created control directory."""
        return replace(self, control_dir=control_dir, project_root=control_dir.parent)

    def with_plan(self, plan: PlanSelection | None) -> "ProjectContext":
        return replace(self, plan=plan)


def home_control_dir() -> Path:
    """Return the per-user ``~/.plandex`` directory (``PLANDEX_HOME`` overrides)."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser().absolute()
    return Path.home() / CONTROL_DIR_NAME


def prepare_cache_dir(home_dir: Path) -> Path:
    """Create the token cache directory and export its location."""

    cache_dir = home_dir / "cache"
    (cache_dir / "tiktoken").mkdir(parents=True, exist_ok=True)
    os.environ[CACHE_ENV_VAR] = str(cache_dir)
    LOGGER.debug("Token cache directory prepared at %s", cache_dir)
    return cache_dir


def _locate_project(cwd: Path) -> tuple[Path | None, Path | None, PlanSelection | None]:
    control_dir, project_root = find_control_directory(cwd)
    if not control_dir:
        return None, None, None
    plan = load_current_plan(control_dir)
    return Path(control_dir), Path(project_root), plan


def initialise_context(cwd: Path | str | None = None) -> ProjectContext:
    """Build the project context for ``cwd``.

    Cache preparation and project discovery run concurrently and are joined
    before the context is returned. Errors from either side propagate.
    """

    working_dir = Path(cwd or Path.cwd()).absolute()
    home_dir = home_control_dir()

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="plandex-init") as pool:
        cache_future = pool.submit(prepare_cache_dir, home_dir)
        project_future = pool.submit(_locate_project, working_dir)
        control_dir, project_root, plan = project_future.result()
        cache_dir = cache_future.result()

    return ProjectContext(
        cwd=working_dir,
        control_dir=control_dir,
        project_root=project_root,
        home_dir=home_dir,
        cache_dir=cache_dir,
        plan=plan,
    )
