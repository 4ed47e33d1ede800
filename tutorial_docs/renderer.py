"""Render parsed examples into tutorial-style Markdown documents.

Sections are emitted strictly in source order. Prose goes through the heading
processor, includes through the inclusion resolver, and tests pick up their
outcome from the status map. A single :class:`HeaderDepthState` is threaded
through the pass and only header-control sections change it.
"""

from __future__ import annotations

import typing as typ

from ._constants import DEFAULT_CODE_LANGUAGE
from .includes import apply_header_control, process_include
from .markdown_parser import process_block_comment
from .models import HeaderDepthState, SectionKind
from .parser import parse_example_file
from .status_report import format_test_status

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .models import ParsedExample, TestStatusMap, TutorialSection


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class TutorialRenderer:
    """Render :class:`ParsedExample` objects as Markdown tutorials."""

    def __init__(self, code_language: str = DEFAULT_CODE_LANGUAGE) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        code_language : str, optional
            Language tag for code, declaration and test fences. Defaults to
            ``"ts"``.
        """
        self.code_language = code_language

    def render(
        self,
        parsed: ParsedExample,
        test_status_map: TestStatusMap,
        example_root: str | Path,
    ) -> str:
        """Render the complete document: title, description, body and footer.

        Parameters
        ----------
        parsed : ParsedExample
            Parser output for one example file.
        test_status_map : TestStatusMap
            Outcomes keyed by test title; may be empty.
        example_root : str or Path
            Directory that supporting-file labels are made relative to.

        Returns
        -------
        str
            Markdown text ending in a single newline.

        Raises
        ------
        HeadingStructureError
            If a prose section contains an invalid heading sequence.
        """
        blocks: list[str] = []
        if parsed.metadata.title:
            blocks.append(f"# {parsed.metadata.title}")
        if parsed.metadata.description:
            blocks.append(parsed.metadata.description)
        body = self.render_body(parsed, test_status_map, example_root)
        if body:
            blocks.append(body)
        blocks.append("---")
        blocks.append(self.render_footer(parsed))
        return "\n\n".join(blocks).rstrip() + "\n"

    def render_body(
        self,
        parsed: ParsedExample,
        test_status_map: TestStatusMap,
        example_root: str | Path,
        depth_state: HeaderDepthState | None = None,
    ) -> str:
        """Render the tutorial body, section by section.

        ``depth_state`` defaults to a fresh state derived from the metadata;
        callers may pass their own to observe how header controls move it.
        """
        state = depth_state
        if state is None:
            state = HeaderDepthState.for_metadata(parsed.metadata)
        blocks: list[str] = []
        for section in parsed.sections:
            match section.kind:
                case SectionKind.PROSE:
                    markdown = process_block_comment(
                        section.content, state, parsed.source_path
                    )
                    if markdown:
                        blocks.append(markdown)
                case SectionKind.CODE:
                    blocks.append(self._fence(section.content))
                case SectionKind.JSDOC:
                    blocks.extend(self._render_declaration(section))
                case SectionKind.TEST:
                    blocks.extend(self._render_test(section, test_status_map))
                case SectionKind.INCLUDE:
                    if section.include_path:
                        included = process_include(
                            parsed.source_path, section.include_path, example_root
                        )
                        if included:
                            blocks.append(included)
                case SectionKind.HEADER_CONTROL:
                    if section.header_control:
                        apply_header_control(state, section.header_control)
        return "\n\n".join(blocks).strip()

    @staticmethod
    def render_footer(parsed: ParsedExample) -> str:
        """Render the references section and, when present, the metadata."""
        lines = ["## References", "", f"**Source:** `{parsed.source_path}`"]
        if parsed.referenced_files:
            lines.extend(["", "**Referenced files:**"])
            lines.extend(f"- `{path}`" for path in parsed.referenced_files)

        metadata = parsed.metadata
        if metadata.keywords or metadata.difficulty:
            lines.extend(["", "## Metadata", ""])
            if metadata.keywords:
                lines.append(f"- **Keywords:** {metadata.keywords}")
            if metadata.difficulty:
                lines.append(f"- **Difficulty:** {metadata.difficulty}")
        return "\n".join(lines)

    def _fence(self, code: str) -> str:
        return f"```{self.code_language}\n{code}\n```"

    def _render_declaration(self, section: TutorialSection) -> list[str]:
        blocks: list[str] = []
        if section.params:
            rows = [
                "| Param | Type | Description |",
                "|-------|------|-------------|",
            ]
            rows.extend(
                f"| `{param.name}` | {_escape_cell(param.type)} | "
                f"{_escape_cell(param.description)} |"
                for param in section.params
            )
            blocks.append("\n".join(rows))
        if section.returns:
            line = f"**Returns:** `{section.returns.type}`"
            if section.returns.description:
                line = f"{line} — {section.returns.description}"
            blocks.append(line)
        blocks.append(self._fence(section.content))
        return blocks

    def _render_test(
        self, section: TutorialSection, test_status_map: TestStatusMap
    ) -> list[str]:
        blocks: list[str] = []
        if section.test_title:
            blocks.append(f"**{section.test_title}:**")
        blocks.append(self._fence(section.content))
        section.test_status = (
            test_status_map.get(section.test_title) if section.test_title else None
        )
        status = section.test_status
        if status is not None:
            formatted = format_test_status(status.status, status.failure_messages)
            blocks.append(f"Status: {formatted}")
        return blocks


def render_example(
    parsed: ParsedExample,
    test_status_map: TestStatusMap,
    example_root: str | Path,
    *,
    code_language: str = DEFAULT_CODE_LANGUAGE,
) -> str:
    """Render ``parsed`` with a default :class:`TutorialRenderer`."""
    renderer = TutorialRenderer(code_language)
    return renderer.render(parsed, test_status_map, example_root)


def generate_example_doc(
    file_path: str | Path,
    test_status_map: TestStatusMap,
    example_root: str | Path,
    *,
    code_language: str = DEFAULT_CODE_LANGUAGE,
) -> str:
    """Parse ``file_path`` and render it as a complete tutorial document."""
    parsed = parse_example_file(file_path)
    return render_example(
        parsed, test_status_map, example_root, code_language=code_language
    )


__all__ = ["TutorialRenderer", "generate_example_doc", "render_example"]
