"""Classify annotated TypeScript example files into tutorial sections.

The source is parsed with tree-sitter, which keeps comments as syntax nodes
with their positions. Code fences, comments and declarations are merged into
one stream ordered by source line and classified in a single pass; every
source line feeds at most one section.

Inclusion rules
---------------
- ``/* ... */`` block comments become prose.
- ``// ``` `` marker pairs become code.
- Declarations preceded by a ``/** ... */`` block become documented
  declarations.
- ``it(...)`` calls inside ``if (import.meta.vitest)`` become tests.
- ``// @include <path>`` lines become includes.
- ``// #+``, ``// #-`` and ``// #!`` lines become header controls.
- Everything else stays in the source and out of the documentation.

Example
-------
>>> from tutorial_docs.parser import parse_example_source
>>> parsed = parse_example_source("/* # Hello */\\nconst x = 1\\n", "hello.ts")
>>> [section.kind.value for section in parsed.sections]
['prose']
"""

from __future__ import annotations

import codecs
import dataclasses as dc
import re
import textwrap
import typing as typ
from pathlib import Path

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Parser

from ._constants import (
    DIFFICULTY_LEVELS,
    DOCUMENT_TAG_PREFIX,
    FENCE_MARKER,
    TEST_CALL_NAME,
    TEST_HARNESS_SENTINEL,
)
from .includes import parse_header_control, parse_include_directive
from .models import (
    DocumentMetadata,
    ParamInfo,
    ParsedExample,
    ReturnInfo,
    SectionKind,
    TutorialSection,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tree_sitter import Node

    from .models import Difficulty

TYPESCRIPT = Language(ts_typescript.language_typescript())

DECLARATION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "abstract_class_declaration",
        "interface_declaration",
        "type_alias_declaration",
        "lexical_declaration",
        "variable_declaration",
    }
)
FUNCTION_VALUE_TYPES = frozenset({"arrow_function", "function_expression", "function"})

DOCUMENT_TAG_PATTERN = re.compile(
    r"@document\.(title|description|keywords|difficulty)\s+(.+?)(?=\s+@document\.|$)",
    re.MULTILINE,
)
PARAM_PATTERN = re.compile(r"@param\s+(?:\{([^}]+)\}\s+)?([\w$]+)\s*-?\s*(.*)")
RETURNS_PATTERN = re.compile(r"@returns?\b\s*(?:\{([^}]+)\}\s*)?-?\s*(.*)")
DOC_LINE_PREFIX = re.compile(r"^\*\s?")


class SourceParseError(ValueError):
    """Raised when an example source file contains invalid syntax."""


@dc.dataclass(slots=True)
class JSDocInfo:
    """Parsed content of a ``/** ... */`` documentation block."""

    description: str
    params: list[ParamInfo]
    returns: ReturnInfo | None


@dc.dataclass(slots=True)
class _SourceItem:
    """Entry of the merged, line-ordered classification stream."""

    line: int
    rank: int
    kind: typ.Literal["fence", "comment", "declaration", "tests"]
    node: Node | None = None
    end_line: int = 0


def clean_doc_comment(text: str) -> str:
    """Strip ``/**``/``*/`` delimiters and leading ``*`` gutters from a block."""
    body = text[3:-2] if text.endswith("*/") else text[3:]
    lines = [DOC_LINE_PREFIX.sub("", line.strip()) for line in body.split("\n")]
    return "\n".join(lines).strip()


def extract_document_metadata(doc_text: str) -> DocumentMetadata:
    """Read ``@document.*`` tags from a cleaned documentation block."""
    values: dict[str, str] = {}
    for match in DOCUMENT_TAG_PATTERN.finditer(doc_text):
        tag, value = match.group(1), match.group(2).strip()
        if value and tag not in values:
            values[tag] = value
    difficulty = values.get("difficulty")
    if difficulty not in DIFFICULTY_LEVELS:
        difficulty = None
    return DocumentMetadata(
        title=values.get("title"),
        description=values.get("description"),
        keywords=values.get("keywords"),
        difficulty=typ.cast("Difficulty | None", difficulty),
    )


def parse_jsdoc(doc_text: str) -> JSDocInfo:
    """Split a cleaned documentation block into description, params and returns.

    Untagged lines before the first tag form the description. ``@param`` and
    ``@returns``/``@return`` lines are parsed; any other tag line is skipped.
    """
    params: list[ParamInfo] = []
    returns: ReturnInfo | None = None
    description: list[str] = []
    in_description = True

    for raw_line in doc_text.split("\n"):
        line = raw_line.strip()
        if param := PARAM_PATTERN.match(line):
            in_description = False
            params.append(
                ParamInfo(
                    name=param.group(2),
                    type=param.group(1) or "unknown",
                    description=param.group(3).strip(),
                )
            )
            continue
        if result := RETURNS_PATTERN.match(line):
            in_description = False
            returns = ReturnInfo(
                type=result.group(1) or "unknown",
                description=result.group(2).strip(),
            )
            continue
        if line.startswith("@"):
            in_description = False
            continue
        if in_description:
            description.append(raw_line)

    return JSDocInfo(
        description="\n".join(description).strip(), params=params, returns=returns
    )


def _iter_nodes(node: Node) -> cabc.Iterator[Node]:
    """Yield ``node`` and its descendants in document order."""
    yield node
    for child in node.children:
        yield from _iter_nodes(child)


def _first_error(node: Node) -> Node | None:
    for candidate in _iter_nodes(node):
        if candidate.type == "ERROR" or candidate.is_missing:
            return candidate
    return None


def _find_fences(lines: list[str]) -> list[tuple[int, int]]:
    """Return ``(start, end)`` line pairs of ``// ``` `` fence markers."""
    fences: list[tuple[int, int]] = []
    idx = 0
    while idx < len(lines):
        if lines[idx].strip() == FENCE_MARKER:
            closing = next(
                (
                    candidate
                    for candidate in range(idx + 1, len(lines))
                    if lines[candidate].strip() == FENCE_MARKER
                ),
                None,
            )
            if closing is None:
                break
            fences.append((idx, closing))
            idx = closing
        idx += 1
    return fences


class _SourceClassifier:
    """Single-use walker that turns one parsed source into sections."""

    def __init__(self, source: str, source_path: str) -> None:
        self.source_path = source_path
        self.source_bytes = source.encode("utf-8")
        self.lines = source.split("\n")
        self.tree = Parser(TYPESCRIPT).parse(self.source_bytes)
        self.consumed: set[int] = set()
        self.sections: list[TutorialSection] = []
        self.referenced_files: list[str] = []

    def run(self) -> ParsedExample:
        root = self.tree.root_node
        if root.has_error:
            error = _first_error(root)
            line = error.start_point[0] + 1 if error is not None else 1
            msg = f"Failed to parse {self.source_path}: invalid syntax near line {line}"
            raise SourceParseError(msg)

        metadata = self._extract_metadata(root)
        for item in self._collect_items(root):
            if item.line in self.consumed:
                continue
            match item.kind:
                case "fence":
                    self._handle_fence(item.line, item.end_line)
                case "comment":
                    self._handle_comment(typ.cast("Node", item.node))
                case "declaration":
                    self._handle_declaration(typ.cast("Node", item.node))
                case "tests":
                    self._handle_tests(typ.cast("Node", item.node))

        return ParsedExample(
            metadata=metadata,
            sections=self.sections,
            referenced_files=self.referenced_files,
            source_path=self.source_path,
        )

    def _text(self, node: Node) -> str:
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8")

    def _consume(self, start: int, end: int) -> None:
        self.consumed.update(range(start, end + 1))

    def _add(
        self, kind: SectionKind, content: str, start: int, end: int, **payload: typ.Any
    ) -> None:
        self.sections.append(
            TutorialSection(
                kind=kind,
                content=content,
                start_line=start + 1,
                end_line=end + 1,
                **payload,
            )
        )

    def _extract_metadata(self, root: Node) -> DocumentMetadata:
        """Read metadata from the first doc block, consuming it when tagged."""
        doc = next(
            (
                node
                for node in _iter_nodes(root)
                if node.type == "comment" and self._text(node).startswith("/**")
            ),
            None,
        )
        if doc is None:
            return DocumentMetadata()
        text = clean_doc_comment(self._text(doc))
        if DOCUMENT_TAG_PREFIX not in text:
            return DocumentMetadata()
        self._consume(doc.start_point[0], doc.end_point[0])
        return extract_document_metadata(text)

    def _collect_items(self, root: Node) -> list[_SourceItem]:
        items = [
            _SourceItem(line=start, rank=0, kind="fence", end_line=end)
            for start, end in _find_fences(self.lines)
        ]
        for node in _iter_nodes(root):
            line = node.start_point[0]
            if node.type == "comment":
                items.append(_SourceItem(line=line, rank=1, kind="comment", node=node))
            elif self._is_test_block(node):
                items.append(_SourceItem(line=line, rank=1, kind="tests", node=node))
            elif self._is_declaration(node):
                items.append(
                    _SourceItem(line=line, rank=1, kind="declaration", node=node)
                )
        items.sort(key=lambda item: (item.line, item.rank))
        return items

    def _is_test_block(self, node: Node) -> bool:
        if node.type != "if_statement" or node.parent is None:
            return False
        if node.parent.type != "program":
            return False
        condition = node.child_by_field_name("condition")
        return condition is not None and TEST_HARNESS_SENTINEL in self._text(condition)

    @staticmethod
    def _is_declaration(node: Node) -> bool:
        if node.type == "export_statement":
            return any(child.type in DECLARATION_TYPES for child in node.named_children)
        if node.type not in DECLARATION_TYPES:
            return False
        return node.parent is None or node.parent.type != "export_statement"

    def _handle_fence(self, start: int, end: int) -> None:
        code = "\n".join(self.lines[start + 1 : end]).strip()
        if code:
            self._add(SectionKind.CODE, code, start, end)
        self._consume(start, end)

    def _handle_comment(self, node: Node) -> None:
        text = self._text(node)
        start, end = node.start_point[0], node.end_point[0]
        if text.startswith("/**"):
            return
        if text.startswith("/*"):
            content = text[2:-2].strip()
            if content:
                self._add(SectionKind.PROSE, content, start, end)
            self._consume(start, end)
            return

        line = self.lines[start]
        if control := parse_header_control(line):
            self._add(SectionKind.HEADER_CONTROL, "", start, start, header_control=control)
            self._consume(start, start)
            return
        if include_path := parse_include_directive(line):
            self._add(SectionKind.INCLUDE, "", start, start, include_path=include_path)
            self.referenced_files.append(include_path)
            self._consume(start, start)

    def _handle_declaration(self, node: Node) -> None:
        doc = node.prev_sibling
        if doc is None or doc.type != "comment":
            return
        doc_text = self._text(doc)
        if not doc_text.startswith("/**") or doc.start_point[0] in self.consumed:
            return
        info = parse_jsdoc(clean_doc_comment(doc_text))
        start, end = doc.start_point[0], node.end_point[0]
        self._add(
            SectionKind.JSDOC,
            self._text(node),
            start,
            end,
            params=info.params,
            returns=info.returns,
            description=info.description,
        )
        self._consume(start, end)

    def _handle_tests(self, node: Node) -> None:
        consequence = node.child_by_field_name("consequence")
        if consequence is not None:
            self._collect_test_calls(consequence)
        self._consume(node.start_point[0], node.end_point[0])

    def _collect_test_calls(self, node: Node) -> None:
        if node.type == "call_expression" and self._add_test_call(node):
            return
        for child in node.children:
            self._collect_test_calls(child)

    def _add_test_call(self, node: Node) -> bool:
        """Record an ``it(title, fn)`` call; return ``False`` for other calls."""
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None:
            return False
        if function.type != "identifier" or self._text(function) != TEST_CALL_NAME:
            return False
        args = [child for child in arguments.named_children if child.type != "comment"]
        if len(args) < 2:
            return False

        title_arg, body_arg = args[0], args[1]
        title = self._string_value(title_arg) if title_arg.type == "string" else ""
        body = ""
        if body_arg.type in FUNCTION_VALUE_TYPES:
            function_body = body_arg.child_by_field_name("body")
            if function_body is not None:
                body = self._function_body(function_body)

        self._add(
            SectionKind.TEST,
            body,
            node.start_point[0],
            node.end_point[0],
            test_title=title,
        )
        return True

    def _function_body(self, body: Node) -> str:
        text = self._text(body)
        if body.type != "statement_block":
            return text
        inner = text[1:-1].strip("\n").rstrip()
        return textwrap.dedent(inner).strip()

    def _string_value(self, node: Node) -> str:
        parts: list[str] = []
        for child in node.named_children:
            text = self._text(child)
            if child.type == "escape_sequence":
                try:
                    text = codecs.decode(text, "unicode_escape")
                except UnicodeDecodeError:
                    text = text[1:]
            parts.append(text)
        return "".join(parts)


def parse_example_source(source: str, source_path: str) -> ParsedExample:
    """Classify ``source`` into a :class:`ParsedExample`.

    Parameters
    ----------
    source : str
        Full text of the example file.
    source_path : str
        Path recorded on the result and used in error messages.

    Returns
    -------
    ParsedExample
        Metadata, sections in source order, and referenced include paths.

    Raises
    ------
    SourceParseError
        If the source contains syntax errors. No partial result is returned.
    """
    return _SourceClassifier(source, source_path).run()


def parse_example_file(file_path: str | Path) -> ParsedExample:
    """Read ``file_path`` as UTF-8 and classify it.

    Raises
    ------
    OSError
        If the file cannot be read.
    SourceParseError
        If the file is not valid UTF-8 or contains syntax errors.
    """
    try:
        source = Path(file_path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Failed to parse {file_path}: source is not valid UTF-8 ({exc.reason})"
        raise SourceParseError(msg) from exc
    return parse_example_source(source, str(file_path))


__all__ = [
    "JSDocInfo",
    "SourceParseError",
    "clean_doc_comment",
    "extract_document_metadata",
    "parse_example_file",
    "parse_example_source",
    "parse_jsdoc",
]
