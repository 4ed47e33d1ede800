"""Tests for the ``tutorial-docs`` command implementations."""

from __future__ import annotations

from pathlib import Path

import pytest

from tutorial_docs import cli


def _write_config(root: Path) -> Path:
    path = root / "tutorials.yaml"
    path.write_text("output_dir: site/examples\n", encoding="utf-8")
    return path


def test_generate_prints_written_paths(
    example_project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.generate(config=_write_config(example_project))

    out = capsys.readouterr().out.splitlines()
    assert [line.split("/")[-1] for line in out] == [
        "01-basic.md",
        "02-module.md",
        "README.md",
    ]
    assert all(line.startswith("wrote ") for line in out)
    assert (example_project / "site" / "examples" / "01-basic.md").exists()


def test_generate_overrides_output_dir(example_project: Path) -> None:
    target = example_project / "custom"

    cli.generate(config=_write_config(example_project), output_dir=target)

    assert (target / "02-module.md").exists()
    assert not (example_project / "site").exists()


def test_generate_exits_when_an_example_fails(
    example_project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (example_project / "examples" / "03-broken.ts").write_text(
        "const = ;\n", encoding="utf-8"
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.generate(config=_write_config(example_project))

    assert excinfo.value.code == 1
    assert "03-broken.ts" in capsys.readouterr().err


def test_generate_with_explicit_missing_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cli.generate(config=tmp_path / "missing.yaml")


def test_render_writes_to_stdout(
    example_project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = example_project / "examples" / "01-basic.ts"

    cli.render(
        source,
        test_report=example_project / ".scratch" / "vitest-report.json",
        root_dir=example_project,
    )

    out = capsys.readouterr().out
    assert out.startswith("# Basic Example\n")
    assert "Status: ✅ pass" in out


def test_render_writes_output_file(example_project: Path) -> None:
    source = example_project / "examples" / "02-module" / "index.ts"
    output = example_project / "out" / "module.md"

    cli.render(source, output=output)

    text = output.read_text(encoding="utf-8")
    assert "**Supporting File (`helpers.ts`)**" in text
    assert "Status:" not in text



def test_generate_overrides_are_relative_to_working_directory(
    example_project: Path,
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    workdir = tmp_path_factory.mktemp("workdir")
    monkeypatch.chdir(workdir)

    cli.generate(config=_write_config(example_project), output_dir=Path("rendered"))

    assert (workdir / "rendered" / "01-basic.md").exists()
    assert not (example_project / "rendered").exists()
