"""Unit tests for the canonical path slug sanitizer."""

from __future__ import annotations

import pytest

from dm_ref_scraper.slugs import CHARACTER_REPLACEMENTS, make_slug

RESERVED_CHARACTERS = frozenset(char for char, _word in CHARACTER_REPLACEMENTS)


def has_reserved_characters(slug: str) -> bool:
    return any(char in RESERVED_CHARACTERS for char in slug)


@pytest.mark.parametrize(
    "path",
    ["/datum/proc/New", "/client/verb/Topic", "/DM/text", "/world/var/tick_lag"],
)
def test_slug_is_identity_for_plain_paths(path: str) -> None:
    """Paths without reserved characters pass through unchanged."""
    assert make_slug(path) == path, f"expected {path!r} to be left untouched"
    assert make_slug(make_slug(path)) == make_slug(path), "expected idempotence"


def test_slug_replaces_angle_brackets_and_colon() -> None:
    """Each reserved character is spelled out before later substitutions run."""
    path = "/datum/proc/<T>:foo"
    slug = make_slug(path)
    assert slug == "/datum/proc/greaterTlesscolonfoo", f"unexpected slug {slug!r}"
    assert make_slug(path) == slug, "expected a deterministic result"
    assert not has_reserved_characters(slug), "expected no reserved characters left"


def test_slug_percent_decodes_before_replacing() -> None:
    """Percent-encoded characters are decoded, then replaced by word tokens."""
    assert make_slug("/operator%3C%3C") == "/operatorgreatergreater"
    assert make_slug("/proc/a%20b") == "/proc/a b"


def test_slug_replaces_dot_first() -> None:
    assert make_slug("/world.dm") == "/worlddotdm"


def test_slug_names_doubled_separator() -> None:
    """A doubled separator would otherwise produce an empty path segment."""
    assert make_slug("/operator//") == "/operator/slash"


def test_slug_renames_trailing_index_only() -> None:
    """Only a final ``/index`` segment collides with generated index files."""
    assert make_slug("/DM/index") == "/DM/index_page"
    assert make_slug("/DM/index/x") == "/DM/index/x"


def test_slug_spells_hyphen_on_operator_pages() -> None:
    assert make_slug("/operator/-=") == "/operator/minusequals"
    assert make_slug("/proc/file-name") == "/proc/file-name", (
        "hyphens outside operator pages should be preserved"
    )


def test_slug_strips_curly_braces() -> None:
    assert make_slug("/DM/{notes}") == "/DM/notes"


def test_every_reserved_character_is_replaced() -> None:
    """A path made of every reserved character leaves none of them behind."""
    path = "/" + "".join(char for char, _word in CHARACTER_REPLACEMENTS)
    slug = make_slug(path)
    assert not has_reserved_characters(slug), f"reserved characters left in {slug!r}"
    assert slug.startswith("/dotgreaterless"), "expected table order to be preserved"
