"""Unit tests for cross-reference resolution and Markdown conversion."""

from __future__ import annotations

import typing as typ

import pytest

from dm_ref_scraper.generator.link_resolver import (
    CrossReferenceResolver,
    LinkKind,
    is_external,
    link_target,
)

if typ.TYPE_CHECKING:
    from dm_ref_scraper.registry import LinkGraph


@pytest.fixture
def resolver(link_graph: LinkGraph) -> CrossReferenceResolver:
    return CrossReferenceResolver(link_graph)


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("#/DM/text", "/DM/text"),
        ("/DM/text#details", "/DM/text"),
        ("/DM/text", "/DM/text"),
        ("#/operator%3C%3C", "/operator<<"),
    ],
)
def test_link_target(href: str, expected: str) -> None:
    assert link_target(href) == expected


def test_is_external() -> None:
    assert is_external("https://www.byond.com/docs/")
    assert is_external("mailto:someone@example.invalid")
    assert not is_external("/DM/text")


def test_registered_target_resolves_to_slug(resolver: CrossReferenceResolver) -> None:
    resolved = resolver.resolve("#/DM/text")
    assert resolved.kind is LinkKind.PAGE
    assert resolved.destination == "/DM/text"


def test_section_links_point_at_index(link_graph: LinkGraph) -> None:
    resolver = CrossReferenceResolver(link_graph, section_links=True)
    resolved = resolver.resolve("#/DM/text")
    assert resolved.kind is LinkKind.SECTION
    assert resolved.destination == "/DM/text/index"
    leaf = resolver.resolve("#/DM/text/macros")
    assert leaf.kind is LinkKind.PAGE, "leaf pages should not link to an index"


def test_external_target_is_kept(resolver: CrossReferenceResolver) -> None:
    resolved = resolver.resolve("https://www.byond.com/")
    assert resolved.kind is LinkKind.EXTERNAL
    assert resolved.destination == "https://www.byond.com/"


def test_missing_target_is_broken(resolver: CrossReferenceResolver) -> None:
    resolved = resolver.resolve("#/DM/missing.thing")
    assert resolved.kind is LinkKind.BROKEN
    assert resolved.destination == "/DM/missingdotthing"


def test_to_markdown_rewrites_known_link(resolver: CrossReferenceResolver) -> None:
    markdown = resolver.to_markdown('See <a href="#/DM/text">text</a> here.')
    assert markdown == "See [text](/DM/text) here."


def test_to_markdown_marks_broken_link(resolver: CrossReferenceResolver) -> None:
    markdown = resolver.to_markdown('Go <a href="#/DM/nope">there</a>')
    assert markdown == "Go **BROKEN LINK: /DM/nope**"


def test_to_markdown_keeps_external_link(resolver: CrossReferenceResolver) -> None:
    markdown = resolver.to_markdown('<a href="https://www.byond.com">BYOND</a>')
    assert markdown == "[BYOND](https://www.byond.com)"


def test_to_markdown_converts_inline_code_tags(
    resolver: CrossReferenceResolver,
) -> None:
    markdown = resolver.to_markdown("Use <tt>world.log</tt> now")
    assert markdown == "Use `world.log` now"


def test_to_markdown_unescapes_inside_code_spans(
    resolver: CrossReferenceResolver,
) -> None:
    """Engine escapes are removed inside code spans but kept in prose."""
    markdown = resolver.to_markdown("Set <code>tick_lag</code> first")
    assert "`tick_lag`" in markdown, f"expected a clean code span in {markdown!r}"


def test_to_markdown_drops_self_anchors(resolver: CrossReferenceResolver) -> None:
    markdown = resolver.to_markdown('Text<a name="/DM/x"> </a> more')
    assert markdown == "Text more"


def test_to_markdown_neutralizes_percent_pairs(
    resolver: CrossReferenceResolver,
) -> None:
    assert resolver.to_markdown("a %% b") == "a \\%\\% b"


def test_to_markdown_collapses_newlines(resolver: CrossReferenceResolver) -> None:
    assert resolver.to_markdown("line one\nline two") == "line one line two"


def test_to_markdown_renders_lists(resolver: CrossReferenceResolver) -> None:
    markdown = resolver.to_markdown(
        '<ul><li><a href="#/DM/text">text</a></li><li>plain</li></ul>'
    )
    lines = [line.strip() for line in markdown.splitlines() if line.strip()]
    assert lines == ["- [text](/DM/text)", "- plain"], f"unexpected list {lines!r}"


def test_broken_link_marker_keeps_literal_slug(
    resolver: CrossReferenceResolver,
) -> None:
    markdown = resolver.to_markdown('See <a href="#/proc/get_step">get_step</a>')
    assert markdown == "See **BROKEN LINK: /proc/get_step**"
