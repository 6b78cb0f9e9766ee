"""Map canonical reference paths onto filesystem and template safe slugs.

Canonical paths in the reference are DM type paths such as ``/datum/proc/New``
or operator pages such as ``/operator/<<``. Those characters either collide
with filesystem rules or confuse the static-site templating layer, so each
reserved character is spelled out as a word. The substitutions run in a fixed
order because they are not commutative.

Examples
--------
>>> from dm_ref_scraper.slugs import make_slug
>>> make_slug("/datum/proc/New")
'/datum/proc/New'
>>> make_slug("/datum/proc/<T>:foo")
'/datum/proc/greaterTlesscolonfoo'
>>> make_slug("/operator/-=")
'/operator/minusequals'
"""

from __future__ import annotations

import re
from urllib.parse import unquote

CHARACTER_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    (".", "dot"),
    ("<", "greater"),
    (">", "less"),
    ("%", "modulo"),
    ("?", "query"),
    ("&", "amp"),
    ("~", "tilde"),
    ("|", "vert"),
    ("!", "exclaim"),
    (":", "colon"),
    ("*", "asterisk"),
    ("^", "caret"),
    ("=", "equals"),
    ("+", "plus"),
    ("(", "leftparen"),
    (")", "rightparen"),
    ("[", "leftsquare"),
    ("]", "rightsquare"),
)

DOUBLE_SEPARATOR = "//"
DOUBLE_SEPARATOR_TOKEN = "/slash"
TRAILING_INDEX_PATTERN = re.compile(r"/index$")
TRAILING_INDEX_TOKEN = "/index_page"
OPERATOR_MARKER = "operator"
OPERATOR_HYPHEN_TOKEN = "minus"
CURLY_BRACE_PATTERN = re.compile(r"[{}]")


def make_slug(path: str) -> str:
    """Return the sanitized form of ``path``.

    Parameters
    ----------
    path : str
        Canonical ``/``-delimited path, optionally percent-encoded.

    Returns
    -------
    str
        Deterministic slug with every reserved character replaced by its word
        token, doubled separators and trailing ``/index`` segments renamed, and
        curly braces removed.
    """
    slug = unquote(path)
    for char, word in CHARACTER_REPLACEMENTS:
        slug = slug.replace(char, word)
    slug = slug.replace(DOUBLE_SEPARATOR, DOUBLE_SEPARATOR_TOKEN)
    slug = TRAILING_INDEX_PATTERN.sub(TRAILING_INDEX_TOKEN, slug)
    if OPERATOR_MARKER in slug:
        slug = slug.replace("-", OPERATOR_HYPHEN_TOKEN)
    return CURLY_BRACE_PATTERN.sub("", slug)


__all__ = [
    "CHARACTER_REPLACEMENTS",
    "make_slug",
]
