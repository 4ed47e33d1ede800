"""Cyclopts CLI entrypoint for rendering annotated examples as tutorials.

The ``tutorial-docs`` console script defined here regenerates every example
document described by ``tutorials.yaml`` (``tutorial-docs generate``) or renders
a single example file to stdout (``tutorial-docs render``). Every option can
also be supplied through an ``INPUT_`` prefixed environment variable so the
commands run unchanged inside CI actions.

Examples
--------
Regenerate all example documents for the default configuration:

>>> from tutorial_docs.cli import main
>>> main()  # doctest: +SKIP

Render one example to a custom location:

>>> from tutorial_docs.cli import app
>>> app.run(
...     ["render", "examples/01-basic.ts", "--output", "basic.md"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import TutorialConfig, load_tutorial_config
from .generator import ExampleDocsGenerator, format_path
from .renderer import generate_example_doc
from .status_report import get_test_status_for_file, load_test_report

DEFAULT_CONFIG = Path("tutorials.yaml")

app = App(
    name="tutorial-docs",
    config=cyclopts.config.Env("INPUT_", command=False),  # type: ignore[unknown-argument]
)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config: Path) -> TutorialConfig:
    """Load ``config`` when present, otherwise fall back to cwd defaults."""
    if config.exists():
        return load_tutorial_config(config)
    if config != DEFAULT_CONFIG:
        msg = f"Configuration file '{config}' not found."
        raise FileNotFoundError(msg)
    return TutorialConfig(root_dir=Path.cwd())


@app.command(help="Generate tutorial documents for every example.")
def generate(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to tutorial config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    examples_dir: typ.Annotated[
        Path | None,
        Parameter(
            help="Override the examples folder (cwd-relative)",
            env_var="INPUT_EXAMPLES_DIR",
        ),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(
            help="Override the output folder (cwd-relative)",
            env_var="INPUT_OUTPUT_DIR",
        ),
    ] = None,
    test_report: typ.Annotated[
        Path | None,
        Parameter(
            help="Override the Vitest JSON report (cwd-relative)",
            env_var="INPUT_TEST_REPORT",
        ),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log each rendered example", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Render every discovered example and refresh the examples index.

    Relative override paths resolve against the working directory, unlike the
    same keys in ``tutorials.yaml``, which resolve against ``root_dir``.

    Parameters
    ----------
    config : Path, optional
        Path to ``tutorials.yaml``. When the default file is absent the
        built-in defaults apply relative to the working directory.
    examples_dir : Path or None, optional
        Override the configured examples directory.
    output_dir : Path or None, optional
        Override the configured output directory.
    test_report : Path or None, optional
        Override the configured Vitest report location.
    verbose : bool, optional
        Log progress at ``INFO`` level instead of ``WARNING``.

    Returns
    -------
    None
        Prints each written path; exits with status 1 when any example
        failed to render.
    """
    _configure_logging(verbose=verbose)
    settings = _load_config(config)
    if examples_dir is not None:
        settings.examples_dir = examples_dir
    if output_dir is not None:
        settings.output_dir = output_dir
    if test_report is not None:
        settings.test_report = test_report

    result = ExampleDocsGenerator(settings).run()
    for path in result.written:
        print(f"wrote {format_path(path)}")
    if result.failures:
        for source, message in sorted(result.failures.items()):
            print(f"failed {source}: {message}", file=sys.stderr)
        sys.exit(1)


@app.command(help="Render a single example file as a tutorial document.")
def render(
    source: Path,
    *,
    example_root: typ.Annotated[
        Path | None,
        Parameter(help="Directory that supporting files are labelled from"),
    ] = None,
    test_report: typ.Annotated[
        Path | None, Parameter(help="Vitest JSON report with test outcomes")
    ] = None,
    output: typ.Annotated[
        Path | None, Parameter(help="Write the document here instead of stdout")
    ] = None,
    root_dir: typ.Annotated[
        Path | None, Parameter(help="Project root used to match report entries")
    ] = None,
) -> None:
    """Render ``source`` and print or write the resulting Markdown.

    Parameters
    ----------
    source : Path
        Example file to render.
    example_root : Path or None, optional
        Directory supporting-file labels are relative to; defaults to the
        directory holding ``source``.
    test_report : Path or None, optional
        Vitest report; tests render without status when omitted.
    output : Path or None, optional
        Destination file; stdout when ``None``.
    root_dir : Path or None, optional
        Project root stripped from report paths; defaults to the cwd.
    """
    _configure_logging(verbose=False)
    report = load_test_report(test_report) if test_report else None
    status_map = get_test_status_for_file(report, source, root_dir or Path.cwd())
    markdown = generate_example_doc(
        source, status_map, example_root or source.parent
    )
    if output is None:
        sys.stdout.write(markdown)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    print(f"wrote {format_path(output)}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``tutorial-docs`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
