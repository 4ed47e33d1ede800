"""Tests for include resolution and heading depth controls."""

from __future__ import annotations

from pathlib import Path

import pytest

from tutorial_docs.includes import (
    apply_header_control,
    get_include_display_name,
    get_language_hint,
    parse_header_control,
    parse_include_directive,
    process_include,
    resolve_include_path,
)
from tutorial_docs.models import HeaderControl, HeaderDepthState


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("// #+", HeaderControl.INCREASE),
        ("   // #-   ", HeaderControl.DECREASE),
        ("// #!", HeaderControl.RESET),
        ("// #+ extra", None),
        ("const a = 1 // #+", None),
    ],
)
def test_parse_header_control(line: str, expected: HeaderControl | None) -> None:
    assert parse_header_control(line) is expected


def test_parse_include_directive() -> None:
    assert parse_include_directive("  // @include ./lib/util.ts ") == "./lib/util.ts"
    assert parse_include_directive("// @include") is None
    assert parse_include_directive("// include ./x.ts") is None


def test_increase_clamps_at_six() -> None:
    state = HeaderDepthState(document_level=2, current_level=2)

    for _ in range(5):
        apply_header_control(state, HeaderControl.INCREASE)

    assert state.current_level == 6


def test_decrease_clamps_at_one() -> None:
    state = HeaderDepthState(document_level=1, current_level=1)

    apply_header_control(state, HeaderControl.DECREASE)

    assert state.current_level == 1


def test_reset_returns_to_document_level() -> None:
    state = HeaderDepthState(document_level=2, current_level=5)

    apply_header_control(state, HeaderControl.RESET)

    assert state.current_level == 2


def test_resolve_include_path_is_relative_to_current_file() -> None:
    resolved = resolve_include_path("examples/demo/index.ts", "../shared/util.ts")

    assert resolved == Path("examples/shared/util.ts")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("helpers.ts", "ts"),
        ("data.JSON", "json"),
        ("config.yml", "yaml"),
        ("notes.md", "markdown"),
        ("script.py", "python"),
        ("LICENSE", ""),
    ],
)
def test_language_hint(name: str, expected: str) -> None:
    assert get_language_hint(name) == expected


def test_display_name_uses_forward_slashes(tmp_path: Path) -> None:
    path = tmp_path / "demo" / "lib" / "util.ts"

    assert get_include_display_name(path, tmp_path / "demo") == "lib/util.ts"


def test_process_include_wraps_content(tmp_path: Path) -> None:
    (tmp_path / "helpers.ts").write_text("export const one = 1\n\n", encoding="utf-8")

    result = process_include(tmp_path / "index.ts", "./helpers.ts", tmp_path)

    assert result == (
        "---\n"
        "**Supporting File (`helpers.ts`)**\n"
        "\n"
        "```ts\n"
        "export const one = 1\n"
        "```\n"
        "---"
    )


def test_process_include_missing_file_warns(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("WARNING", logger="tutorial_docs.includes"):
        result = process_include(tmp_path / "index.ts", "./absent.ts", tmp_path)

    assert result is None
    assert "absent.ts" in caplog.text


def test_process_include_empty_file(tmp_path: Path) -> None:
    (tmp_path / "empty.ts").write_text("", encoding="utf-8")

    assert process_include(tmp_path / "index.ts", "./empty.ts", tmp_path) is None
