"""Typed dataclasses describing tutorial generation configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from .._constants import (
    DEFAULT_CODE_LANGUAGE,
    DEFAULT_SOURCE_ROOT,
    DEFAULT_TEST_REPORT,
)


class TutorialConfigError(ValueError):
    """Raised when the tutorial configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class IndexConfig:
    """Settings for the generated examples index."""

    enabled: bool = True
    readme: str = "README.md"


@dc.dataclass(slots=True)
class TutorialConfig:
    """Resolved settings for one documentation build.

    Attributes
    ----------
    root_dir : Path
        Project root; relative paths below resolve against it.
    examples_dir : Path
        Directory holding example files and example directories.
    output_dir : Path
        Directory receiving generated Markdown documents.
    test_report : Path
        Vitest JSON report; may be absent.
    source_root : str
        Source directory segment stripped when matching report entries.
    code_language : str
        Fence language for code, declarations and tests.
    index : IndexConfig
        Examples index settings.
    """

    root_dir: Path = dc.field(default_factory=Path.cwd)
    examples_dir: Path = Path("examples")
    output_dir: Path = Path("docs/examples")
    test_report: Path = Path(DEFAULT_TEST_REPORT)
    source_root: str = DEFAULT_SOURCE_ROOT
    code_language: str = DEFAULT_CODE_LANGUAGE
    index: IndexConfig = dc.field(default_factory=IndexConfig)

    def __post_init__(self) -> None:
        """Resolve relative directories against ``root_dir``."""
        self.root_dir = Path(self.root_dir)
        self.examples_dir = self._resolve(self.examples_dir)
        self.output_dir = self._resolve(self.output_dir)
        self.test_report = self._resolve(self.test_report)

    def _resolve(self, path: Path | str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root_dir / candidate

    @property
    def index_path(self) -> Path:
        """Return the README that receives the generated index."""
        return self.output_dir / self.index.readme


__all__ = ["IndexConfig", "TutorialConfig", "TutorialConfigError"]
