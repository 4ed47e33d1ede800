"""Shared fixtures for the tutorial documentation tests.

``sample_source`` is a small annotated example exercising metadata, prose,
a code fence, a documented declaration and an in-source test. The
``example_project`` fixture lays out a throwaway project with a file example,
a directory example that includes a supporting file, and a Vitest report.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

SAMPLE_SOURCE = """\
/**
 * @document.title Basic Example
 * @document.description Shows the basics.
 * @document.keywords ids, axioms
 * @document.difficulty introductory
 */

/*
# Overview

Body text.
*/

// ```
const total = 2 + 3
// ```

/**
 * Adds two numbers.
 * @param {number} a - First operand
 * @param {number} b - Second operand
 * @returns {number} The sum
 */
export function add(a: number, b: number): number {
  return a + b
}

if (import.meta.vitest) {
  const { it, expect } = import.meta.vitest
  it('adds numbers', () => {
    expect(add(1, 2)).toBe(3)
  })
}
"""

MODULE_INDEX_SOURCE = """\
/**
 * @document.title Module Example
 * @document.difficulty advanced
 */

/*
# Setup

The helper lives in its own file.
*/

// @include ./helpers.ts

if (import.meta.vitest) {
  const { it, expect } = import.meta.vitest
  it('greets', () => {
    expect(1).toBe(1)
  })
}
"""

HELPERS_SOURCE = "export const greet = (name: string) => `hi ${name}`\n"


@pytest.fixture
def sample_source() -> str:
    """Return the annotated sample example source."""
    return SAMPLE_SOURCE


@pytest.fixture
def example_project(tmp_path: Path) -> Path:
    """Create a project with two examples and a Vitest report; return its root."""
    examples = tmp_path / "examples"
    module_dir = examples / "02-module"
    module_dir.mkdir(parents=True)
    (examples / "01-basic.ts").write_text(SAMPLE_SOURCE, encoding="utf-8")
    (examples / "types.d.ts").write_text("export type Id = string\n", encoding="utf-8")
    (examples / "01-basic.test.ts").write_text("export {}\n", encoding="utf-8")
    (module_dir / "index.ts").write_text(MODULE_INDEX_SOURCE, encoding="utf-8")
    (module_dir / "helpers.ts").write_text(HELPERS_SOURCE, encoding="utf-8")

    report = {
        "testResults": [
            {
                "name": str(examples / "01-basic.ts"),
                "assertionResults": [
                    {"title": "adds numbers", "status": "passed"},
                ],
            },
            {
                "name": str(module_dir / "index.ts"),
                "assertionResults": [
                    {
                        "title": "greets",
                        "status": "failed",
                        "failureMessages": ["expected 1 to be 2"],
                    },
                ],
            },
        ]
    }
    report_path = tmp_path / ".scratch" / "vitest-report.json"
    report_path.parent.mkdir()
    report_path.write_text(json.dumps(report), encoding="utf-8")
    return tmp_path
