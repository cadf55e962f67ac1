"""Optional per-project settings stored as YAML in the control directory."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

__all__ = ["DEFAULT_SETTINGS", "SETTINGS_FILE", "Settings", "SettingsError", "load_settings"]

SETTINGS_FILE = "config.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "paths": {
        "skip_dirs": [],
    },
    "resolver": {
        "max_workers": None,
    },
}


class SettingsError(RuntimeError):
    """Raised when the settings file exists but cannot be used."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Tunables consumed by path resolution."""

    skip_dirs: tuple[str, ...] = ()
    max_workers: int | None = None
    source: Path | None = field(default=None, compare=False)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(control_dir: Path | str | None) -> Settings:
    """Load ``config.yaml`` from ``control_dir`` merged over the defaults."""

    data = copy.deepcopy(DEFAULT_SETTINGS)
    source: Path | None = None
    if control_dir:
        path = Path(control_dir) / SETTINGS_FILE
        if path.exists():
            try:
                loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as error:
                raise SettingsError(f"Failed to load settings from {path}: {error}") from error
            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise SettingsError(f"Settings must be a mapping at the top level: {path}")
            data = _merge(data, loaded)
            source = path

    skip_dirs = data["paths"].get("skip_dirs") or []
    if not isinstance(skip_dirs, list) or not all(isinstance(name, str) for name in skip_dirs):
        raise SettingsError("paths.skip_dirs must be a list of directory names")

    max_workers = data["resolver"].get("max_workers")
    if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
        raise SettingsError("resolver.max_workers must be a positive integer")

    return Settings(skip_dirs=tuple(skip_dirs), max_workers=max_workers, source=source)
