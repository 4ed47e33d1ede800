"""Generate tutorial documents for every example in a project.

The generator discovers examples under the configured examples directory,
renders each one with :class:`~tutorial_docs.renderer.TutorialRenderer`, and
writes ``<output_dir>/<name>.md``. Top-level ``*.ts`` files are examples in
their own right; directories holding an ``index.ts`` are examples rooted at
that entry point, and their supporting files are labelled relative to the
directory.

When the index is enabled, a Markdown table listing every example is upserted
into the output README between two HTML comment markers so hand-written
content around it survives regeneration.

>>> from pathlib import Path
>>> from tutorial_docs.config import load_tutorial_config
>>> from tutorial_docs.generator import ExampleDocsGenerator
>>> config = load_tutorial_config(Path("tutorials.yaml"))  # doctest: +SKIP
>>> result = ExampleDocsGenerator(config).run()  # doctest: +SKIP
>>> result.ok  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import DOC_FILE_TEMPLATE, INDEX_BEGIN_MARKER, INDEX_END_MARKER
from .markdown_parser import HeadingStructureError
from .models import ExampleInfo
from .parser import SourceParseError, parse_example_file
from .renderer import TutorialRenderer
from .status_report import get_test_status_for_file, get_test_summary, load_test_report

if typ.TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from .config import TutorialConfig
    from .models import ParsedExample, TestStatusMap
    from .status_report import VitestReport

logger = logging.getLogger(__name__)

EXCLUDED_SUFFIXES = (".d.ts", ".test.ts")
DIRECTORY_ENTRY_POINT = "index.ts"
INDEX_HEADING = "# Examples"
_ORDINAL_PREFIX = re.compile(r"^\d+[-_]")


@dc.dataclass(slots=True)
class ExampleSource:
    """A discovered example and the directory its includes are labelled from."""

    name: str
    path: Path
    example_root: Path
    is_directory: bool = False


@dc.dataclass(slots=True)
class GenerationResult:
    """Outcome of a generation run."""

    written: list[Path] = dc.field(default_factory=list)
    failures: dict[str, str] = dc.field(default_factory=dict)
    examples: list[ExampleInfo] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return ``True`` when every example rendered."""
        return not self.failures


def format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _escape_cell(value: object) -> str:
    return str(value or "").replace("|", "\\|").replace("\n", " ")


def title_from_name(name: str) -> str:
    """Derive a readable title from an example name.

    >>> title_from_name("01-basic-id-axiom")
    'Basic Id Axiom'
    """
    stem = _ORDINAL_PREFIX.sub("", name)
    words = re.split(r"[-_\s]+", stem)
    return " ".join(word.capitalize() for word in words if word)


def discover_examples(examples_dir: Path) -> list[ExampleSource]:
    """Return the examples found directly under ``examples_dir``, sorted by name.

    Parameters
    ----------
    examples_dir : Path
        Directory to scan. A missing directory yields no examples.

    Returns
    -------
    list[ExampleSource]
        File examples (``*.ts`` other than declaration and test files) and
        directory examples (directories holding ``index.ts``).
    """
    if not examples_dir.is_dir():
        logger.warning("Examples directory %s does not exist", examples_dir)
        return []

    found: list[ExampleSource] = []
    for entry in sorted(examples_dir.iterdir()):
        if entry.is_dir():
            entry_point = entry / DIRECTORY_ENTRY_POINT
            if entry_point.is_file():
                found.append(
                    ExampleSource(
                        name=entry.name,
                        path=entry_point,
                        example_root=entry,
                        is_directory=True,
                    )
                )
            continue
        if entry.suffix != ".ts" or entry.name.endswith(EXCLUDED_SUFFIXES):
            continue
        found.append(
            ExampleSource(name=entry.stem, path=entry, example_root=examples_dir)
        )
    return sorted(found, key=lambda example: (example.name, example.is_directory))


def upsert_index_block(existing: str | None, block: str) -> str:
    """Insert or replace the generated index between the index markers.

    >>> upsert_index_block(None, "| x |").splitlines()[0]
    '# Examples'
    """
    generated = f"{INDEX_BEGIN_MARKER}\n\n{block.strip()}\n\n{INDEX_END_MARKER}"
    if existing is None or not existing.strip():
        return f"{INDEX_HEADING}\n\n{generated}\n"

    start = existing.find(INDEX_BEGIN_MARKER)
    end = existing.find(INDEX_END_MARKER, start + 1) if start != -1 else -1
    if start == -1 or end == -1:
        return f"{existing.rstrip()}\n\n{generated}\n"
    tail = existing[end + len(INDEX_END_MARKER) :]
    return f"{existing[:start]}{generated}{tail}"


class ExampleDocsGenerator:
    """Render every discovered example and refresh the examples index."""

    def __init__(
        self, config: TutorialConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        config : TutorialConfig
            Resolved configuration for the build.
        templates_dir : Path, optional
            Directory containing the index template. Defaults to the
            ``tutorial_docs/templates`` directory when ``None``.
        """
        self.config = config
        self.renderer = TutorialRenderer(config.code_language)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,  # noqa: S701 - renders Markdown, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["cell"] = _escape_cell
        self.template = self.env.get_template("examples_index.md.jinja")

    def run(self) -> GenerationResult:
        """Render all examples and return what was written and what failed."""
        result = GenerationResult()
        report = load_test_report(self.config.test_report)
        self.config.output_dir.mkdir(parents=True, exist_ok=True)

        for example in discover_examples(self.config.examples_dir):
            try:
                info, output_path = self._render_example(example, report)
            except (SourceParseError, HeadingStructureError, OSError) as exc:
                logger.error("Failed to render %s: %s", example.path, exc)
                result.failures[format_path(example.path)] = str(exc)
                continue
            logger.info("Rendered %s", output_path)
            result.written.append(output_path)
            result.examples.append(info)

        if self.config.index.enabled:
            result.written.append(self.write_index(result.examples))
        return result

    def _render_example(
        self, example: ExampleSource, report: VitestReport | None
    ) -> tuple[ExampleInfo, Path]:
        parsed = parse_example_file(format_path(example.path))
        status_map = get_test_status_for_file(
            report,
            example.path,
            self.config.root_dir,
            self.config.source_root,
        )
        markdown = self.renderer.render(parsed, status_map, example.example_root)
        doc_file = DOC_FILE_TEMPLATE.format(name=example.name)
        output_path = self.config.output_dir / doc_file
        output_path.write_text(markdown, encoding="utf-8")
        return self._build_info(example, parsed, status_map, doc_file), output_path

    def _build_info(
        self,
        example: ExampleSource,
        parsed: ParsedExample,
        status_map: TestStatusMap,
        doc_file: str,
    ) -> ExampleInfo:
        metadata = parsed.metadata
        keywords = [
            keyword.strip()
            for keyword in (metadata.keywords or "").split(",")
            if keyword.strip()
        ]
        return ExampleInfo(
            name=example.name,
            path=example.path.relative_to(self.config.examples_dir).as_posix(),
            title=metadata.title or title_from_name(example.name),
            description=metadata.description or "",
            keywords=keywords,
            difficulty=metadata.difficulty,
            referenced_files=list(parsed.referenced_files),
            is_directory=example.is_directory,
            doc_file=doc_file,
            test_summary=get_test_summary(status_map),
        )

    def render_index(self, examples: typ.Sequence[ExampleInfo]) -> str:
        """Render the index table for ``examples``."""
        return self.template.render(examples=examples)

    def write_index(self, examples: typ.Sequence[ExampleInfo]) -> Path:
        """Upsert the generated index into the configured README."""
        index_path = self.config.index_path
        existing = (
            index_path.read_text(encoding="utf-8") if index_path.exists() else None
        )
        content = upsert_index_block(existing, self.render_index(examples))
        index_path.parent.mkdir(parents=True, exist_ok=True)
        index_path.write_text(content, encoding="utf-8")
        return index_path


__all__ = [
    "ExampleDocsGenerator",
    "ExampleSource",
    "GenerationResult",
    "discover_examples",
    "format_path",
    "title_from_name",
    "upsert_index_block",
]
