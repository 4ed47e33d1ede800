"""Behaviour tests for the generated examples index.

``examples_index.feature`` runs the batch generator over the shared
``example_project`` fixture and inspects the README it maintains.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from tutorial_docs.config import TutorialConfig
from tutorial_docs.generator import ExampleDocsGenerator

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "examples_index.feature"
)
scenarios(FEATURE_FILE)

NOTES = "Hand-written notes about the examples."


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a project with two examples")
def given_project(example_project: Path, scenario_state: dict[str, object]) -> None:
    """Use the shared example project as the generation root."""
    scenario_state["config"] = TutorialConfig(root_dir=example_project)


@given("an output README with hand-written notes")
def given_readme(scenario_state: dict[str, object]) -> None:
    """Seed the output README with content outside the index markers."""
    config = typ.cast("TutorialConfig", scenario_state["config"])
    config.output_dir.mkdir(parents=True, exist_ok=True)
    config.index_path.write_text(f"# Examples\n\n{NOTES}\n", encoding="utf-8")


@when("I generate the example documents")
def when_generate(scenario_state: dict[str, object]) -> None:
    """Run the generator and keep the README text."""
    config = typ.cast("TutorialConfig", scenario_state["config"])
    result = ExampleDocsGenerator(config).run()
    assert result.ok, f"unexpected failures: {result.failures}"
    scenario_state["readme"] = config.index_path.read_text(encoding="utf-8")


@then(parsers.parse('the README lists "{first}" and "{second}"'))
def then_readme_lists(
    scenario_state: dict[str, object], first: str, second: str
) -> None:
    """Verify both example titles are linked from the index, in order."""
    readme = typ.cast("str", scenario_state["readme"])
    assert f"[{first}]" in readme
    assert f"[{second}]" in readme
    assert readme.index(f"[{first}]") < readme.index(f"[{second}]")


@then("the README still contains the hand-written notes")
def then_notes_survive(scenario_state: dict[str, object]) -> None:
    """Verify regeneration did not drop content outside the markers."""
    readme = typ.cast("str", scenario_state["readme"])
    assert NOTES in readme
    assert readme.index(NOTES) < readme.index("[Basic Example]")
