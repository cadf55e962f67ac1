"""Expand file and directory arguments into concrete paths, one walk per root."""

from __future__ import annotations

import logging
import os
import stat
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

from ..project import CONTROL_DIR_NAME

__all__ = [
    "DEFAULT_SKIP_DIRS",
    "DirectoryPolicyError",
    "InclusionPolicy",
    "OutcomeCollector",
    "PathResolutionError",
    "WalkOutcome",
    "resolve_paths",
]

DEFAULT_SKIP_DIRS = frozenset({".git", CONTROL_DIR_NAME})

LOGGER = logging.getLogger(__name__)


class PathResolutionError(RuntimeError):
    """Raised when a path argument cannot be walked."""


class DirectoryPolicyError(PathResolutionError):
    """Raised when a directory is reached without recursive or names-only mode."""

    def __init__(self, path: str) -> None:
        super().__init__(f"cannot process directory {path}: --recursive or --tree flag not set")
        self.path = path


class _WalkCancelled(Exception):
    pass


@dataclass(slots=True, frozen=True)
class InclusionPolicy:
    """How directories met during resolution are treated.

    ``names_only`` records directory paths and keeps descending; ``recursive``
    descends without recording them. With neither set a directory is an error.
    """

    recursive: bool = False
    names_only: bool = False

    @property
    def allows_directories(self) -> bool:
        return self.recursive or self.names_only


@dataclass(slots=True)
class WalkOutcome:
    """Message sent by one root's walk to the collector."""

    root: str
    paths: List[str] = field(default_factory=list)
    error: PathResolutionError | None = None


class OutcomeCollector:
    """Single consumer of walk outcomes.

    The first error received wins; later errors are dropped. Once an error is
    held, :meth:`result` raises it and never returns partial paths.
    """

    def __init__(self, total: int) -> None:
        self._outcomes: list[WalkOutcome | None] = [None] * total
        self.first_error: PathResolutionError | None = None

    def add(self, index: int, outcome: WalkOutcome) -> bool:
        """Record ``outcome`` for root ``index``; ``True`` if it set the first error."""
        if outcome.error is not None:
            if self.first_error is None:
                self.first_error = outcome.error
                return True
            LOGGER.debug("Dropping later error for %s: %s", outcome.root, outcome.error)
            return False
        self._outcomes[index] = outcome
        return False

    def result(self) -> list[str]:
        """Return paths in root order, keeping only the first spelling of each path."""
        if self.first_error is not None:
            raise self.first_error
        seen: set[str] = set()
        resolved: list[str] = []
        for outcome in self._outcomes:
            if outcome is None:
                continue
            for path in outcome.paths:
                key = os.path.normpath(path)
                if key in seen:
                    continue
                seen.add(key)
                resolved.append(path)
        return resolved


def _lstat(path: str) -> os.stat_result:
    try:
        return os.lstat(path)
    except OSError as error:
        raise PathResolutionError(f"failed to stat {path}: {error}") from error


def _list_dir(path: str) -> list[str]:
    try:
        return sorted(os.listdir(path))
    except OSError as error:
        raise PathResolutionError(f"failed to list {path}: {error}") from error


def _walk(
    root: str,
    policy: InclusionPolicy,
    skip_dirs: frozenset[str],
    cancel: threading.Event,
) -> list[str]:
    """Depth-first pre-order walk of ``root`` returning the recorded paths."""

    found: list[str] = []
    pending = [root]
    while pending:
        if cancel.is_set():
            raise _WalkCancelled()
        path = pending.pop()
        info = _lstat(path)

        # Symlinks are not followed and count as files.
        if not stat.S_ISDIR(info.st_mode):
            found.append(path)
            continue

        if Path(path).name in skip_dirs:
            continue
        if not policy.allows_directories:
            raise DirectoryPolicyError(path)
        if policy.names_only:
            found.append(path)

        children = _list_dir(path)
        pending.extend(os.path.join(path, name) for name in reversed(children))
    return found


def _walk_root(
    root: str,
    policy: InclusionPolicy,
    skip_dirs: frozenset[str],
    cancel: threading.Event,
) -> WalkOutcome:
    outcome = WalkOutcome(root=root)
    try:
        outcome.paths = _walk(root, policy, skip_dirs, cancel)
    except PathResolutionError as error:
        outcome.error = error
    except _WalkCancelled:
        LOGGER.debug("Walk of %s cancelled after another root failed", root)
    return outcome


def resolve_paths(
    roots: Sequence[str | os.PathLike[str]],
    policy: InclusionPolicy,
    *,
    max_workers: int | None = None,
    skip_dirs: Iterable[str] = (),
) -> list[str]:
    """Resolve ``roots`` into the files (and, in names-only mode, directories) below them.

    Every root is walked concurrently, one worker per root unless
    ``max_workers`` caps the pool. Paths of one root keep walk order, roots are
    concatenated in the order given, and a path reached from several roots is
    listed once. If any walk fails the first error received is raised, the
    remaining walks are asked to stop, and no paths are returned.
    """

    root_paths = [os.fspath(root) for root in roots]
    if not root_paths:
        return []

    skip = DEFAULT_SKIP_DIRS | frozenset(skip_dirs)
    workers = max_workers or len(root_paths)
    cancel = threading.Event()
    collector = OutcomeCollector(len(root_paths))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="plandex-walk") as pool:
        futures = {
            pool.submit(_walk_root, root, policy, skip, cancel): index
            for index, root in enumerate(root_paths)
        }
        try:
            for future in as_completed(futures):
                outcome = future.result()
                if collector.add(futures[future], outcome):
                    LOGGER.warning("Path resolution failed for %s: %s", outcome.root, outcome.error)
                    cancel.set()
        except BaseException:
            cancel.set()
            raise

    resolved = collector.result()
    LOGGER.debug("Resolved %d path(s) from %d root(s)", len(resolved), len(root_paths))
    return resolved
