r"""Process prose block comments as relative-heading Markdown.

Authors write headings relative to their own fragment: every fragment starts
at ``#`` and may only step one level deeper at a time. This module validates
that structure, shifts the headings to absolute levels for the current
heading depth, and serializes the result back to Markdown. Headings are never
synthesized; all structure comes from what the author wrote.

Example
-------
>>> from tutorial_docs.markdown_parser import process_block_comment
>>> from tutorial_docs.models import HeaderDepthState
>>> process_block_comment("# Intro\nBody text", HeaderDepthState(2, 2))
'## Intro\n\nBody text'
"""

from __future__ import annotations

import re
import typing as typ

from markdown_it import MarkdownIt
from mdformat.renderer import MDRenderer

from ._constants import MAX_HEADING_LEVEL, MIN_HEADING_LEVEL
from .models import HeaderDepthState, Heading

if typ.TYPE_CHECKING:
    from markdown_it.token import Token

BLANK_RUN_PATTERN = re.compile(r"\n{3,}")


class HeadingStructureError(ValueError):
    """Raised when authored headings start above level one or skip a level."""


def clean_markdown(content: str) -> str:
    """Normalize line endings, trim, and collapse runs of blank lines."""
    normalized = content.replace("\r\n", "\n").strip()
    return BLANK_RUN_PATTERN.sub("\n\n", normalized)


def _build_markdown_it() -> MarkdownIt:
    """Return a CommonMark parser configured the way mdformat expects."""
    mdit = MarkdownIt("commonmark", renderer_cls=MDRenderer)
    mdit.options["mdformat"] = {"wrap": "keep", "number": True}
    mdit.options["store_labels"] = True
    mdit.options["parser_extension"] = []
    return mdit


def parse_markdown(content: str) -> tuple[list[Token], dict[str, typ.Any]]:
    """Parse ``content`` into markdown-it tokens plus the parser environment."""
    env: dict[str, typ.Any] = {}
    tokens = _build_markdown_it().parse(content, env)
    return tokens, env


def render_markdown(tokens: list[Token], env: dict[str, typ.Any]) -> str:
    """Serialize ``tokens`` back to Markdown with mdformat's renderer."""
    mdit = _build_markdown_it()
    return mdit.renderer.render(tokens, mdit.options, env)


def _flatten_inline(token: Token) -> str:
    """Return the plain text of an inline token, keeping inline code ticks."""
    parts: list[str] = []
    for child in token.children or []:
        if child.type == "text":
            parts.append(child.content)
        elif child.type == "code_inline":
            parts.append(f"`{child.content}`")
        elif child.type in {"softbreak", "hardbreak"}:
            parts.append(" ")
    return "".join(parts).strip()


def extract_headings(tokens: list[Token]) -> list[Heading]:
    """Return every heading in ``tokens`` in document order."""
    headings: list[Heading] = []
    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        inline = tokens[idx + 1] if idx + 1 < len(tokens) else None
        text = _flatten_inline(inline) if inline and inline.type == "inline" else ""
        headings.append(Heading(level=int(token.tag[1:]), text=text))
    return headings


def validate_heading_structure(
    headings: list[Heading], source_path: str | None = None
) -> None:
    """Check that headings start at level one and never skip a level.

    Parameters
    ----------
    headings : list[Heading]
        Headings of one prose fragment in document order.
    source_path : str, optional
        File the fragment came from, used in error messages.

    Raises
    ------
    HeadingStructureError
        If the first heading is not level one, or a heading is more than one
        level deeper than the heading before it.
    """
    if not headings:
        return

    location = f" in {source_path}" if source_path else ""
    first = headings[0]
    if first.level != MIN_HEADING_LEVEL:
        msg = (
            f"Invalid heading structure{location}: First heading must be level 1 "
            f"(# not {'#' * first.level}). Found: \"{first}\""
        )
        raise HeadingStructureError(msg)

    for previous, current in zip(headings, headings[1:], strict=False):
        if current.level - previous.level > 1:
            msg = (
                f"Invalid heading structure{location}: Heading levels cannot skip "
                f"(found level {current.level} after level {previous.level}).\n"
                f'  Previous: "{previous}"\n'
                f'  Current:  "{current}"\n'
                "Headers must increment by at most 1 level."
            )
            raise HeadingStructureError(msg)


def adjust_heading_levels(
    tokens: list[Token], depth_state: HeaderDepthState
) -> list[Token]:
    """Shift relative heading levels so ``#`` lands on the current level."""
    offset = depth_state.current_level - 1
    for token in tokens:
        if token.type not in {"heading_open", "heading_close"}:
            continue
        level = int(token.tag[1:]) + offset
        level = max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, level))
        token.tag = f"h{level}"
        token.markup = "#" * level
    return tokens


def process_block_comment(
    content: str, depth_state: HeaderDepthState, source_path: str | None = None
) -> str:
    """Validate and re-level the Markdown held in a prose block comment.

    Parameters
    ----------
    content : str
        Comment text with the ``/*`` and ``*/`` delimiters removed.
    depth_state : HeaderDepthState
        Depth state of the running render pass; read, never modified.
    source_path : str, optional
        File the comment came from, used in error messages.

    Returns
    -------
    str
        Trimmed Markdown with absolute heading levels, or ``""`` when the
        comment holds no text.

    Raises
    ------
    HeadingStructureError
        If the authored headings are structurally invalid.
    """
    cleaned = clean_markdown(content)
    if not cleaned:
        return ""

    tokens, env = parse_markdown(cleaned)
    validate_heading_structure(extract_headings(tokens), source_path)
    adjusted = adjust_heading_levels(tokens, depth_state)
    return render_markdown(adjusted, env).strip()


__all__ = [
    "HeadingStructureError",
    "adjust_heading_levels",
    "clean_markdown",
    "extract_headings",
    "parse_markdown",
    "process_block_comment",
    "render_markdown",
    "validate_heading_structure",
]
