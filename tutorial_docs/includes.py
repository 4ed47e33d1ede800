"""Resolve ``@include`` directives and heading depth controls.

Included files are embedded as opaque fenced code blocks wrapped in ``---``
delimiters with a bold "Supporting File" label. Their contents are never
parsed for directives, so an include cannot pull in further includes.

Examples
--------
>>> from tutorial_docs.includes import parse_header_control, parse_include_directive
>>> parse_header_control("  // #+  ")
<HeaderControl.INCREASE: '+'>
>>> parse_include_directive("// @include ./helpers.ts")
'./helpers.ts'
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from pygments.lexers import get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from ._constants import MAX_HEADING_LEVEL, MIN_HEADING_LEVEL
from .models import HeaderControl, HeaderDepthState

logger = logging.getLogger(__name__)

INCLUDE_PATTERN = re.compile(r"^//\s*@include\s+(.+)$")
HEADER_CONTROL_LINES = {
    "// #+": HeaderControl.INCREASE,
    "// #-": HeaderControl.DECREASE,
    "// #!": HeaderControl.RESET,
}
LANGUAGE_HINTS: dict[str, str] = {
    "ts": "ts",
    "tsx": "tsx",
    "js": "js",
    "jsx": "jsx",
    "json": "json",
    "md": "markdown",
    "yaml": "yaml",
    "yml": "yaml",
}
INCLUDE_DELIMITER = "---"


def parse_header_control(line: str) -> HeaderControl | None:
    """Return the depth directive on ``line`` or ``None`` when absent."""
    return HEADER_CONTROL_LINES.get(line.strip())


def apply_header_control(depth_state: HeaderDepthState, control: HeaderControl) -> None:
    """Apply ``control`` to ``depth_state`` in place.

    Increase and decrease move the current level by one step and clamp to
    the 1-6 heading range; reset returns to the document level.
    """
    match control:
        case HeaderControl.INCREASE:
            depth_state.current_level = min(
                MAX_HEADING_LEVEL, depth_state.current_level + 1
            )
        case HeaderControl.DECREASE:
            depth_state.current_level = max(
                MIN_HEADING_LEVEL, depth_state.current_level - 1
            )
        case HeaderControl.RESET:
            depth_state.current_level = depth_state.document_level


def parse_include_directive(line: str) -> str | None:
    """Return the path named by an ``// @include <path>`` line, if any."""
    match = INCLUDE_PATTERN.match(line.strip())
    if not match:
        return None
    return match.group(1).strip()


def resolve_include_path(current_file: str | Path, include_path: str) -> Path:
    """Resolve ``include_path`` against the directory of ``current_file``."""
    return Path(os.path.normpath(Path(current_file).parent / include_path))


def load_included_file(path: Path) -> str | None:
    """Read an included file, returning ``None`` with a warning on failure."""
    if not path.is_file():
        logger.warning("Included file not found: %s", path)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read included file %s: %s", path, exc)
        return None


def get_language_hint(path: str | Path) -> str:
    """Return the code fence language for ``path``.

    Known example extensions map directly; anything else is looked up through
    Pygments, and files Pygments cannot classify get no hint.
    """
    path = Path(path)
    extension = path.suffix.lstrip(".").lower()
    if extension in LANGUAGE_HINTS:
        return LANGUAGE_HINTS[extension]
    try:
        lexer = get_lexer_for_filename(path.name)
    except ClassNotFound:
        return ""
    if isinstance(lexer, TextLexer) or not lexer.aliases:
        return ""
    return lexer.aliases[0]


def get_include_display_name(path: Path, example_root: str | Path) -> str:
    """Return ``path`` relative to ``example_root`` using forward slashes."""
    return Path(os.path.relpath(path, example_root)).as_posix()


def render_include(content: str, display_name: str, path: str | Path) -> str:
    """Wrap included ``content`` in delimiters with a supporting-file label."""
    language = get_language_hint(path)
    lines = [
        INCLUDE_DELIMITER,
        f"**Supporting File (`{display_name}`)**",
        "",
        f"```{language}",
        content.rstrip(),
        "```",
        INCLUDE_DELIMITER,
    ]
    return "\n".join(lines)


def process_include(
    current_file: str | Path, include_path: str, example_root: str | Path
) -> str | None:
    """Resolve, load and wrap an included file.

    Parameters
    ----------
    current_file : str or Path
        File containing the ``@include`` directive.
    include_path : str
        Path written in the directive, relative to ``current_file``.
    example_root : str or Path
        Directory the supporting-file label is made relative to.

    Returns
    -------
    str or None
        The wrapped include block, or ``None`` when the file is missing,
        unreadable or empty.
    """
    absolute_path = resolve_include_path(current_file, include_path)
    content = load_included_file(absolute_path)
    if not content:
        return None
    display_name = get_include_display_name(absolute_path, example_root)
    return render_include(content, display_name, absolute_path)


__all__ = [
    "apply_header_control",
    "get_include_display_name",
    "get_language_hint",
    "load_included_file",
    "parse_header_control",
    "parse_include_directive",
    "process_include",
    "render_include",
    "resolve_include_path",
]
