"""Shared dataclasses used by the tutorial generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

Difficulty = typ.Literal["introductory", "intermediate", "advanced"]
TestOutcome = typ.Literal["passed", "failed"]


class SectionKind(enum.StrEnum):
    """Classification assigned to each documented span of a source file."""

    PROSE = "prose"
    CODE = "code"
    JSDOC = "jsdoc"
    TEST = "test"
    INCLUDE = "include"
    HEADER_CONTROL = "header-control"


class HeaderControl(enum.StrEnum):
    """Heading depth directives written as ``// #+``, ``// #-`` and ``// #!``."""

    INCREASE = "+"
    DECREASE = "-"
    RESET = "!"


@dc.dataclass(frozen=True, slots=True)
class DocumentMetadata:
    """File-level metadata taken from ``@document.*`` tags.

    Attributes
    ----------
    title : str or None
        Document title; rendered as the level-one heading.
    description : str or None
        Paragraph rendered beneath the title.
    keywords : str or None
        Free-text keyword list, usually comma separated.
    difficulty : Difficulty or None
        One of ``introductory``, ``intermediate`` or ``advanced``.
    """

    title: str | None = None
    description: str | None = None
    keywords: str | None = None
    difficulty: Difficulty | None = None


@dc.dataclass(frozen=True, slots=True)
class ParamInfo:
    """A ``@param`` entry from a documentation block."""

    name: str
    type: str
    description: str


@dc.dataclass(frozen=True, slots=True)
class ReturnInfo:
    """A ``@returns`` entry from a documentation block."""

    type: str
    description: str


@dc.dataclass(frozen=True, slots=True)
class TestStatus:
    """Outcome of a single test taken from the runner report."""

    __test__ = False

    status: TestOutcome
    failure_messages: tuple[str, ...] = ()


TestStatusMap = dict[str, TestStatus]


@dc.dataclass(slots=True)
class TutorialSection:
    """One classified span of the source file, in source order.

    Attributes
    ----------
    kind : SectionKind
        Which construct produced the section.
    content : str
        Raw text carried by the section (prose, code, declaration source or
        test body). Empty for includes and header controls.
    start_line : int
        1-based first source line consumed by the section.
    end_line : int
        1-based last source line consumed by the section.
    params : list[ParamInfo]
        ``@param`` entries for ``jsdoc`` sections.
    returns : ReturnInfo or None
        ``@returns`` entry for ``jsdoc`` sections.
    description : str
        Free-text part of the documentation block for ``jsdoc`` sections.
    test_title : str or None
        Title passed to ``it`` for ``test`` sections.
    test_status : TestStatus or None
        Outcome resolved from the status map by the last render; ``None``
        when the test has no title or no reported outcome.
    include_path : str or None
        Path written in the ``@include`` directive.
    header_control : HeaderControl or None
        Directive carried by ``header-control`` sections.
    """

    kind: SectionKind
    content: str
    start_line: int
    end_line: int
    params: list[ParamInfo] = dc.field(default_factory=list)
    returns: ReturnInfo | None = None
    description: str = ""
    test_title: str | None = None
    test_status: TestStatus | None = None
    include_path: str | None = None
    header_control: HeaderControl | None = None


@dc.dataclass(slots=True)
class ParsedExample:
    """Result of parsing one example source file.

    Attributes
    ----------
    metadata : DocumentMetadata
        Values from the file-level documentation block.
    sections : list[TutorialSection]
        Classified sections in strict source order.
    referenced_files : list[str]
        Include paths in the order they were encountered; duplicates kept.
    source_path : str
        Path of the parsed file as given by the caller.
    """

    metadata: DocumentMetadata
    sections: list[TutorialSection]
    referenced_files: list[str]
    source_path: str


@dc.dataclass(slots=True)
class HeaderDepthState:
    """Heading levels threaded through one render pass.

    Attributes
    ----------
    document_level : int
        Level of the document's own top headings: 2 when a title occupies
        level 1, otherwise 1.
    current_level : int
        Absolute level that a relative ``#`` heading in prose maps to.
    """

    document_level: int
    current_level: int

    @classmethod
    def for_metadata(cls, metadata: DocumentMetadata) -> HeaderDepthState:
        """Return the initial state for a document with ``metadata``."""
        level = 2 if metadata.title else 1
        return cls(document_level=level, current_level=level)


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """Heading level and flattened text found in a prose fragment."""

    level: int
    text: str

    def __str__(self) -> str:
        """Return the heading as Markdown source, e.g. ``## Title``."""
        return f"{'#' * self.level} {self.text}"


@dc.dataclass(slots=True)
class ExampleInfo:
    """Summary of one generated example used to build the examples index.

    Attributes
    ----------
    name : str
        Example name derived from the file stem or directory name.
    path : str
        Source path relative to the examples directory.
    title : str
        Document title, falling back to a title derived from ``name``.
    description : str
        Description from the metadata; may be empty.
    keywords : list[str]
        Keywords split on commas.
    difficulty : str or None
        Difficulty from the metadata.
    referenced_files : list[str]
        Include paths referenced by the example.
    is_directory : bool
        ``True`` for directory examples rooted at ``index.ts``.
    doc_file : str
        File name of the generated Markdown document.
    test_summary : str or None
        Pass/fail summary for the example's tests, when any were reported.
    """

    name: str
    path: str
    title: str
    description: str
    keywords: list[str]
    difficulty: str | None
    referenced_files: list[str]
    is_directory: bool
    doc_file: str
    test_summary: str | None = None


__all__ = [
    "DocumentMetadata",
    "Difficulty",
    "ExampleInfo",
    "HeaderControl",
    "HeaderDepthState",
    "Heading",
    "ParamInfo",
    "ParsedExample",
    "ReturnInfo",
    "SectionKind",
    "TestOutcome",
    "TestStatus",
    "TestStatusMap",
    "TutorialSection",
]
