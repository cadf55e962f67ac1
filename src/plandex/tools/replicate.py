"""Recursive file-by-file copies of plan directories."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

__all__ = ["TreeCopyError", "copy_file", "copy_tree"]

LOGGER = logging.getLogger(__name__)


class TreeCopyError(RuntimeError):
    """Raised when part of a tree cannot be copied; earlier copies are left in place."""

    def __init__(self, message: str, *, source: Path, destination: Path) -> None:
        super().__init__(message)
        self.source = source
        self.destination = destination


def copy_file(src: Path | str, dst: Path | str) -> None:
    """Copy ``src`` to ``dst``, creating parent directories and overwriting ``dst``."""

    source = Path(src)
    destination = Path(dst)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise TreeCopyError(
            f"failed to create directory {destination.parent}: {error}",
            source=source,
            destination=destination,
        ) from error
    try:
        shutil.copyfile(source, destination)
    except OSError as error:
        raise TreeCopyError(
            f"failed to copy {source} to {destination}: {error}",
            source=source,
            destination=destination,
        ) from error


def copy_tree(src: Path | str, dst: Path | str) -> None:
    """Reproduce every file under ``src`` at the same relative path under ``dst``.

    The walk is sequential and depth-first; the first failure aborts the copy.
    Symlinks are never descended into: a link to a file is copied as that
    file, a link to a directory fails the copy.
    """

    source = Path(src)
    destination = Path(dst)
    try:
        with os.scandir(source) as listing:
            entries = list(listing)
    except OSError as error:
        raise TreeCopyError(
            f"failed to list {source}: {error}",
            source=source,
            destination=destination,
        ) from error

    for entry in entries:
        target = destination / entry.name
        if entry.is_dir(follow_symlinks=False):
            copy_tree(entry.path, target)
        else:
            copy_file(entry.path, target)
            LOGGER.debug("Copied %s -> %s", entry.path, target)
