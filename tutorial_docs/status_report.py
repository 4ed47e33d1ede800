"""Load Vitest JSON reports and look up test outcomes per example file.

The report is optional: a missing file simply means no status lines are
rendered, and a malformed one is reported with a warning and then treated as
missing. Only ``passed`` and ``failed`` outcomes are surfaced.

Examples
--------
>>> from pathlib import Path
>>> from tutorial_docs.status_report import get_test_status_for_file, load_test_report
>>> report = load_test_report(Path(".scratch/vitest-report.json"))  # doctest: +SKIP
>>> get_test_status_for_file(None, "examples/01-basic.ts", "/repo")
{}
"""

from __future__ import annotations

import logging
import os
import typing as typ

import msgspec
import msgspec.json as msgspec_json

from ._constants import DEFAULT_SOURCE_ROOT
from .models import TestStatus

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .models import TestOutcome, TestStatusMap

logger = logging.getLogger(__name__)

REPORTED_OUTCOMES = frozenset({"passed", "failed"})


class AssertionResult(msgspec.Struct, rename="camel"):
    """A single test result entry within a file result."""

    title: str
    status: str
    failure_messages: list[str] = msgspec.field(default_factory=list)


class FileResult(msgspec.Struct, rename="camel"):
    """Results for one test file."""

    name: str
    assertion_results: list[AssertionResult] = msgspec.field(default_factory=list)
    status: str | None = None


class VitestReport(msgspec.Struct, rename="camel"):
    """Top-level structure of ``vitest --reporter=json`` output."""

    test_results: list[FileResult]


def load_test_report(report_path: Path) -> VitestReport | None:
    """Load a Vitest JSON report from disk.

    Parameters
    ----------
    report_path : Path
        Location of the JSON report.

    Returns
    -------
    VitestReport or None
        The decoded report, or ``None`` when the file does not exist, cannot
        be read, or does not match the expected structure.
    """
    if not report_path.exists():
        return None
    try:
        payload = report_path.read_bytes()
        return msgspec_json.decode(payload, type=VitestReport)
    except (OSError, msgspec.DecodeError) as exc:
        logger.warning("Failed to load Vitest report at %s: %s", report_path, exc)
        return None


def _normalize_file_path(
    file_path: str, root_dir: str, source_root: str = DEFAULT_SOURCE_ROOT
) -> str:
    """Strip the root directory and source-root prefixes from ``file_path``."""
    normalized = file_path.replace("\\", "/")
    root = root_dir.replace("\\", "/").rstrip("/")
    if root:
        normalized = normalized.removeprefix(f"{root}/")
    normalized = normalized.removeprefix(f"{source_root.strip('/')}/")
    return os.path.normpath(normalized).replace("\\", "/")


def _paths_match(candidate: str, target: str) -> bool:
    return candidate == target or candidate.endswith(f"/{target}")


def get_test_status_for_file(
    report: VitestReport | None,
    file_path: str | Path,
    root_dir: str | Path,
    source_root: str = DEFAULT_SOURCE_ROOT,
) -> TestStatusMap:
    """Return the outcomes reported for tests defined in ``file_path``.

    Parameters
    ----------
    report : VitestReport or None
        Report returned by :func:`load_test_report`.
    file_path : str or Path
        Example source file whose tests should be looked up.
    root_dir : str or Path
        Project root; stripped from both sides before comparison.
    source_root : str, optional
        Conventional source directory (``examples``) also stripped before
        comparison.

    Returns
    -------
    TestStatusMap
        Mapping from test title to outcome. Empty when there is no report or
        no file entry matches.
    """
    status_map: TestStatusMap = {}
    if report is None:
        return status_map

    target = _normalize_file_path(str(file_path), str(root_dir), source_root)
    for result in report.test_results:
        candidate = _normalize_file_path(result.name, str(root_dir), source_root)
        if not _paths_match(candidate, target):
            continue
        for assertion in result.assertion_results:
            if assertion.status not in REPORTED_OUTCOMES:
                continue
            status_map[assertion.title] = TestStatus(
                status=typ.cast("TestOutcome", assertion.status),
                failure_messages=tuple(assertion.failure_messages),
            )
    return status_map


def format_test_status(
    status: str, failure_messages: typ.Sequence[str] = ()
) -> str:
    """Format an outcome as ``✅ pass`` or ``❌ fail`` plus failure messages."""
    if status == "passed":
        return "✅ pass"
    line = "❌ fail"
    if failure_messages:
        messages = "\n".join(message.strip() for message in failure_messages)
        line = f"{line}\n\n{messages}"
    return line


def get_test_summary(status_map: TestStatusMap) -> str | None:
    """Summarize ``status_map`` as a pass count, or ``None`` without tests."""
    if not status_map:
        return None
    total = len(status_map)
    failed = sum(1 for entry in status_map.values() if entry.status == "failed")
    passed = total - failed
    if failed == 0:
        return f"✅ {passed}/{total} tests passing"
    return f"❌ {passed}/{total} tests passing ({failed} failing)"


__all__ = [
    "AssertionResult",
    "FileResult",
    "VitestReport",
    "format_test_status",
    "get_test_status_for_file",
    "get_test_summary",
    "load_test_report",
]
