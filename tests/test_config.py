"""Tests for loading ``tutorials.yaml`` configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from tutorial_docs.config import (
    IndexConfig,
    TutorialConfig,
    TutorialConfigError,
    load_tutorial_config,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "tutorials.yaml"
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_resolve_against_config_directory(tmp_path: Path) -> None:
    config = load_tutorial_config(_write(tmp_path, "{}"))

    root = tmp_path.resolve()
    assert config.root_dir == root
    assert config.examples_dir == root / "examples"
    assert config.output_dir == root / "docs" / "examples"
    assert config.test_report == root / ".scratch" / "vitest-report.json"
    assert config.source_root == "examples"
    assert config.code_language == "ts"
    assert config.index == IndexConfig(enabled=True, readme="README.md")
    assert config.index_path == root / "docs" / "examples" / "README.md"


def test_overrides_are_applied(tmp_path: Path) -> None:
    config = load_tutorial_config(
        _write(
            tmp_path,
            """
root_dir: project
examples_dir: samples
output_dir: /srv/docs
code_language: typescript
index:
  enabled: false
  readme: index.md
""",
        )
    )

    root = tmp_path.resolve() / "project"
    assert config.root_dir == root
    assert config.examples_dir == root / "samples"
    assert config.output_dir == Path("/srv/docs")
    assert config.code_language == "typescript"
    assert config.index == IndexConfig(enabled=False, readme="index.md")


def test_index_accepts_boolean(tmp_path: Path) -> None:
    config = load_tutorial_config(_write(tmp_path, "index: false"))

    assert config.index.enabled is False


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_tutorial_config(tmp_path / "absent.yaml")


def test_non_mapping_top_level_raises(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="mapping"):
        load_tutorial_config(_write(tmp_path, "- one\n- two"))


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("examples_dir: 3", "'examples_dir' must be a non-empty string"),
        ("output_dir: ''", "'output_dir' must be a non-empty string"),
        ("index:\n  enabled: maybe", "'index.enabled' must be a boolean"),
        ("index: [1]", "'index' must be a mapping or a boolean"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(TutorialConfigError, match=message):
        load_tutorial_config(_write(tmp_path, text))


def test_tutorial_config_resolves_relative_paths(tmp_path: Path) -> None:
    config = TutorialConfig(root_dir=tmp_path, examples_dir=Path("ex"))

    assert config.examples_dir == tmp_path / "ex"
