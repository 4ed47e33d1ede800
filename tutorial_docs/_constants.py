"""Common literal values used across tutorial_docs.

These constants keep directive markers, defaults and index markers centralized
so the parser, renderer, generator and tests import the same values without
drifting. Intended for internal use within the tutorial_docs package.

Examples
--------
>>> from tutorial_docs import _constants
>>> _constants.FENCE_MARKER
'// ```'
>>> _constants.DOC_FILE_TEMPLATE.format(name="01-basic")
'01-basic.md'
"""

FENCE_MARKER = "// ```"
TEST_HARNESS_SENTINEL = "import.meta.vitest"
TEST_CALL_NAME = "it"

DOCUMENT_TAG_PREFIX = "@document."
DIFFICULTY_LEVELS = ("introductory", "intermediate", "advanced")

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6

DEFAULT_CODE_LANGUAGE = "ts"
DEFAULT_SOURCE_ROOT = "examples"
DEFAULT_TEST_REPORT = ".scratch/vitest-report.json"

DOC_FILE_TEMPLATE = "{name}.md"
INDEX_BEGIN_MARKER = "<!-- BEGIN GENERATED EXAMPLES INDEX -->"
INDEX_END_MARKER = "<!-- END GENERATED EXAMPLES INDEX -->"
