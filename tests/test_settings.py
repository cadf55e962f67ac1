from __future__ import annotations

import textwrap

import pytest

from plandex.settings import Settings, SettingsError, load_settings


def test_load_settings_defaults_without_file(sample_project) -> None:
    assert load_settings(sample_project.control_dir) == Settings()
    assert load_settings(None) == Settings()


def test_load_settings_reads_yaml(sample_project) -> None:
    path = sample_project.control_dir / "config.yaml"
    path.write_text(
        textwrap.dedent(
            """
            paths:
              skip_dirs: [node_modules, build]
            resolver:
              max_workers: 3
            """
        ).lstrip(),
        encoding="utf-8",
    )

    settings = load_settings(sample_project.control_dir)

    assert settings.skip_dirs == ("node_modules", "build")
    assert settings.max_workers == 3
    assert settings.source == path


def test_load_settings_partial_file_keeps_defaults(sample_project) -> None:
    (sample_project.control_dir / "config.yaml").write_text("resolver:\n  max_workers: 2\n", encoding="utf-8")

    settings = load_settings(sample_project.control_dir)

    assert settings.skip_dirs == ()
    assert settings.max_workers == 2


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "paths: [unclosed\n",
        "paths:\n  skip_dirs: node_modules\n",
        "resolver:\n  max_workers: 0\n",
    ],
)
def test_load_settings_rejects_invalid_content(sample_project, content: str) -> None:
    (sample_project.control_dir / "config.yaml").write_text(content, encoding="utf-8")

    with pytest.raises(SettingsError):
        load_settings(sample_project.control_dir)
