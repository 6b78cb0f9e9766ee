"""Behaviour tests for end-to-end reference builds.

These scenarios feed a small hand-written reference document through
:class:`~dm_ref_scraper.generator.ReferenceSiteGenerator` and inspect the
Markdown files it writes. They cover the two-pass link resolution (forward
references and broken links) and the final ``$`` escaping of page bodies.

Usage:
    Run these behaviour tests with pytest, for example:

        pytest tests/bdd/test_reference_build.py -v
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from dm_ref_scraper.config import ScraperConfig
from dm_ref_scraper.generator import ReferenceSiteGenerator
from dm_ref_scraper.generator.models import BuildReport

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "reference_build.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _fragment(path: str, title: str, body: str = "") -> str:
    return f'<a name="{path}"></a><h2>{title}</h2>{body}'


@given(
    parsers.parse(
        'a reference where "{source}" links to "{target}" defined after it'
    )
)
def given_forward_reference(
    scenario_state: dict[str, object], source: str, target: str
) -> None:
    """Store a reference whose first page links to a later page."""
    link = f'<p>See <a href="#{target}">text</a>.</p>'
    scenario_state["raw"] = "<hr>".join(
        [_fragment(source, "DM", link), _fragment(target, "text")]
    )


@given(
    parsers.parse(
        'a reference where "{source}" links to "{target}" which does not exist'
    )
)
def given_broken_reference(
    scenario_state: dict[str, object], source: str, target: str
) -> None:
    """Store a reference with a link to an unregistered path."""
    link = f'<p>Go <a href="#{target}">there</a></p>'
    scenario_state["raw"] = _fragment(source, "DM", link)


@given(parsers.parse('a reference page "{path}" with the paragraph "{text}"'))
def given_single_page(scenario_state: dict[str, object], path: str, text: str) -> None:
    """Store a one-page reference with a single paragraph."""
    scenario_state["raw"] = _fragment(path, "money", f"<p>{text}</p>")


@when("the reference is built")
def when_built(scenario_state: dict[str, object], tmp_path: Path) -> None:
    """Run the generator into a temporary output root."""
    out_dir = tmp_path / "build"
    generator = ReferenceSiteGenerator(ScraperConfig(output_dir=out_dir))
    scenario_state["report"] = generator.build(str(scenario_state["raw"]))
    scenario_state["out_dir"] = out_dir


@then(parsers.parse('"{relative}" contains "{expected}"'))
def then_file_contains(
    scenario_state: dict[str, object], relative: str, expected: str
) -> None:
    """Assert that a generated file contains ``expected``."""
    out_dir = scenario_state["out_dir"]
    assert isinstance(out_dir, Path)
    text = (out_dir / relative).read_text(encoding="utf-8")
    assert expected in text, f"expected {expected!r} in {relative}"


@then("the build report lists no failed writes")
def then_no_failures(scenario_state: dict[str, object]) -> None:
    """Assert that every planned page was written."""
    report = scenario_state["report"]
    assert isinstance(report, BuildReport)
    assert report.failed == []
