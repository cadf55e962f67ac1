from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@dataclass(slots=True)
class SampleProject:
    """Fixture payload describing a project with a control directory."""

    root: Path
    control_dir: Path

    def select_plan(self, name: str, **extra: object) -> Path:
        """Write ``current_plan.json`` selecting ``name``."""

        path = self.control_dir / "current_plan.json"
        path.write_text(json.dumps({"name": name, **extra}), encoding="utf-8")
        return path


@pytest.fixture(autouse=True)
def plandex_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the per-user directory and token cache variable inside ``tmp_path``."""

    home = tmp_path / "home" / ".plandex"
    monkeypatch.setenv("PLANDEX_HOME", str(home))
    monkeypatch.delenv("TIKTOKEN_CACHE_DIR", raising=False)
    return home


@pytest.fixture()
def sample_project(tmp_path: Path) -> SampleProject:
    """Create ``project/.plandex`` with a nested working directory."""

    root = tmp_path / "project"
    control_dir = root / ".plandex"
    control_dir.mkdir(parents=True)
    (root / "src" / "pkg").mkdir(parents=True)
    return SampleProject(root=root, control_dir=control_dir)
