"""Locate or create the per-project ``.plandex`` control directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

__all__ = [
    "CONTROL_DIR_NAME",
    "cwd_is_plan",
    "find_control_directory",
    "find_or_create_control_directory",
]

CONTROL_DIR_NAME = ".plandex"
LOGGER = logging.getLogger(__name__)


def find_control_directory(start: Path | str | None = None) -> tuple[str, str]:
    """Search upward from ``start`` for a control directory.

    Returns ``(control_dir, project_root)`` for the nearest match, or
    ``("", "")`` when the filesystem root is reached without one. Not finding
    a control directory is not an error.
    """

    search = Path(start or Path.cwd()).absolute()
    for candidate in (search, *search.parents):
        control_dir = candidate / CONTROL_DIR_NAME
        # Anything occupying the name counts, only a definite absence moves on.
        try:
            os.lstat(control_dir)
        except FileNotFoundError:
            continue
        except OSError:
            pass
        LOGGER.debug("Found control directory %s", control_dir)
        return str(control_dir), str(candidate)

    LOGGER.debug("No control directory above %s", search)
    return "", ""


def find_or_create_control_directory(cwd: Path | str | None = None) -> tuple[Path, bool]:
    """Return the control directory under ``cwd``, creating it when absent.

    The boolean is ``True`` only when the directory was created by this call.
    """

    control_dir = Path(cwd or Path.cwd()).absolute() / CONTROL_DIR_NAME
    try:
        control_dir.stat()
    except FileNotFoundError:
        control_dir.mkdir()
        LOGGER.info("Created control directory %s", control_dir)
        return control_dir, True
    return control_dir, False


def cwd_is_plan(cwd: Path | str, control_dir: Path | str | None) -> bool:
    """Return ``True`` when ``cwd`` is a plan directory inside ``control_dir``."""
    if not control_dir:
        return False
    return Path(cwd).absolute().parent == Path(control_dir).absolute()
