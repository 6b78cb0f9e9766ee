r"""Pure text transforms applied to converted Markdown.

Two small pipelines live here. The first cleans up the output of the HTML to
Markdown engine for a single fragment (:func:`clean_converted_markdown`). The
second prepares a fully assembled page body for the static-site templating
layer (:func:`escape_page_body`).

The order inside :func:`escape_page_body` matters: entity unescaping can
introduce characters that still need escaping, so it always runs before
:func:`escape_template_markers`.

Examples
--------
>>> from dm_ref_scraper.escaping import escape_template_markers
>>> escape_template_markers("price is $5 and `code $5`")
'price is \\$5 and `code $5`'
>>> from dm_ref_scraper.escaping import unescape_entities
>>> unescape_entities("a &lt;b&gt; &amp;amp;")
'a <b> &amp;'
"""

from __future__ import annotations

import re

from ._constants import TEMPLATE_MARKER

ENTITY_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)
CODE_TAG_PATTERN = re.compile(r"</?(?:tt|code)>")
SELF_ANCHOR_PATTERN = re.compile(r"<a name=[^>]*>\s*</a>")
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]+`")
ENGINE_ESCAPE_PATTERN = re.compile(r"\\([*_])")
PERCENT_PAIR = "%%"
ESCAPED_PERCENT_PAIR = r"\%\%"
BACKTICK = "`"


def unescape_entities(text: str) -> str:
    """Decode the ``&lt;``, ``&gt;`` and ``&amp;`` entities left in serialized HTML."""
    for entity, char in ENTITY_REPLACEMENTS:
        text = text.replace(entity, char)
    return text


def strip_code_tags(text: str) -> str:
    """Remove ``<tt>``/``<code>`` tags that survived conversion."""
    return CODE_TAG_PATTERN.sub("", text)


def strip_self_anchors(text: str) -> str:
    """Drop empty ``<a name=...>`` anchors the reference uses as link targets."""
    return SELF_ANCHOR_PATTERN.sub("", text)


def unescape_engine_escapes(text: str) -> str:
    r"""Remove the ``\*``/``\_`` escapes the Markdown engine adds to plain text."""
    return ENGINE_ESCAPE_PATTERN.sub(r"\1", text)


def unescape_code_spans(text: str) -> str:
    """Apply :func:`unescape_engine_escapes` inside inline-code spans only."""
    return INLINE_CODE_PATTERN.sub(
        lambda match: unescape_engine_escapes(match.group(0)), text
    )


def escape_percent_pairs(text: str) -> str:
    """Neutralize ``%%`` so the site generator does not read it as a comment."""
    return text.replace(PERCENT_PAIR, ESCAPED_PERCENT_PAIR)


def clean_converted_markdown(text: str) -> str:
    """Post-process the Markdown produced for one HTML fragment."""
    text = strip_self_anchors(text)
    text = unescape_code_spans(text)
    return escape_percent_pairs(text).strip()


def escape_template_markers(text: str, marker: str = TEMPLATE_MARKER) -> str:
    r"""Backslash-escape ``marker`` everywhere outside backtick code spans.

    A run of one or more backticks opens a span that closes at the next run of
    exactly the same length. Content inside a span is copied verbatim. An
    opening run with no matching closing run is copied as-is and never treated
    as open again.

    Parameters
    ----------
    text : str
        Assembled Markdown body.
    marker : str, optional
        Single character the templating layer treats specially. Defaults to
        ``"$"``.

    Returns
    -------
    str
        ``text`` with each unprotected ``marker`` prefixed by a backslash.
    """
    pieces: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == BACKTICK:
            run_end = _run_end(text, index)
            run_length = run_end - index
            closing = _find_closing_run(text, run_end, run_length)
            span_end = run_end if closing is None else closing + run_length
            pieces.append(text[index:span_end])
            index = span_end
            continue
        pieces.append(f"\\{char}" if char == marker else char)
        index += 1
    return "".join(pieces)


def escape_page_body(text: str, marker: str = TEMPLATE_MARKER) -> str:
    """Run the final body pipeline: unescape, strip code tags, escape markers."""
    return escape_template_markers(strip_code_tags(unescape_entities(text)), marker)


def _run_end(text: str, start: int) -> int:
    """Return the index just past the backtick run beginning at ``start``."""
    end = start
    while end < len(text) and text[end] == BACKTICK:
        end += 1
    return end


def _find_closing_run(text: str, start: int, run_length: int) -> int | None:
    """Return the start of the next backtick run of exactly ``run_length``."""
    position = text.find(BACKTICK, start)
    while position != -1:
        end = _run_end(text, position)
        if end - position == run_length:
            return position
        position = text.find(BACKTICK, end)
    return None


__all__ = [
    "clean_converted_markdown",
    "escape_page_body",
    "escape_percent_pairs",
    "escape_template_markers",
    "strip_code_tags",
    "strip_self_anchors",
    "unescape_code_spans",
    "unescape_engine_escapes",
    "unescape_entities",
]
