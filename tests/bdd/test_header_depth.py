"""Behaviour tests for heading depth in rendered tutorials.

The scenarios in ``header_depth.feature`` render small in-memory examples and
check where prose headings land once the document title and any header
control comments have been taken into account.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from tutorial_docs.markdown_parser import HeadingStructureError
from tutorial_docs.parser import parse_example_source
from tutorial_docs.renderer import TutorialRenderer

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "header_depth.feature"
)
scenarios(FEATURE_FILE)

TITLE_BLOCK = "/**\n * @document.title Depth\n */\n"


def _prose(text: str) -> str:
    return "/*\n" + text.replace("\\n", "\n") + "\n*/\n"


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given(parsers.parse('an example with a title and the prose "{prose}"'))
def given_titled_prose(scenario_state: dict[str, object], prose: str) -> None:
    """Store a titled example holding a single prose comment."""
    scenario_state["source"] = TITLE_BLOCK + _prose(prose)


@given(
    parsers.parse(
        'an example with a title, an increase control and the prose "{prose}"'
    )
)
def given_increased_prose(scenario_state: dict[str, object], prose: str) -> None:
    """Store a titled example whose prose follows an increase control."""
    scenario_state["source"] = TITLE_BLOCK + "// #+\n" + _prose(prose)


@when("I render the example")
def when_render(scenario_state: dict[str, object], tmp_path: Path) -> None:
    """Render the stored example body."""
    source = typ.cast("str", scenario_state["source"])
    parsed = parse_example_source(source, "depth.ts")
    scenario_state["body"] = TutorialRenderer().render_body(parsed, {}, tmp_path)


@when("I try to render the example")
def when_try_render(scenario_state: dict[str, object], tmp_path: Path) -> None:
    """Render the stored example, capturing any heading error."""
    source = typ.cast("str", scenario_state["source"])
    parsed = parse_example_source(source, "depth.ts")
    try:
        TutorialRenderer().render(parsed, {}, tmp_path)
    except HeadingStructureError as exc:
        scenario_state["error"] = exc


@then(parsers.parse('the body contains the heading "{heading}"'))
def then_body_has_heading(scenario_state: dict[str, object], heading: str) -> None:
    """Verify the rendered body holds ``heading`` on its own line."""
    body = typ.cast("str", scenario_state["body"])
    assert heading in body.splitlines(), f"expected {heading!r} in {body!r}"


@then("rendering fails with a heading structure error")
def then_render_fails(scenario_state: dict[str, object]) -> None:
    """Verify rendering raised a heading structure error naming the file."""
    error = scenario_state.get("error")
    assert isinstance(error, HeadingStructureError), "expected a heading error"
    assert "depth.ts" in str(error)
