"""Resolve reference hyperlinks and convert HTML fragments to Markdown.

Every ``<a href>`` inside a fragment is checked against the pass 1
:class:`~dm_ref_scraper.registry.LinkGraph`. Known targets become Markdown
links to the sanitized slug, absolute URLs are kept, and anything else is
replaced with a visible ``**BROKEN LINK: ...**`` marker so the build always
completes. The rewritten HTML is then handed to ``markdownify``.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import re
import typing as typ
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup
from markdownify import markdownify

from dm_ref_scraper._constants import HTML_PARSER, INDEX_FILENAME
from dm_ref_scraper.escaping import clean_converted_markdown, unescape_engine_escapes
from dm_ref_scraper.slugs import make_slug

if typ.TYPE_CHECKING:
    from bs4.element import Tag

    from dm_ref_scraper.registry import LinkGraph

INLINE_CODE_TAG_PATTERN = re.compile(r"<(/)?(tt|code)>")
EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "ftp://", "byond://")
BROKEN_LINK_LABEL = "BROKEN LINK"
BROKEN_LINK_PATTERN = re.compile(rf"\*\*{BROKEN_LINK_LABEL}: [^*\n]+\*\*")
MARKDOWNIFY_OPTIONS: typ.Final[dict[str, typ.Any]] = {
    "heading_style": "ATX",
    "bullets": "-",
    "autolinks": False,
    "escape_misc": False,
}


class LinkKind(enum.Enum):
    """How a hyperlink target relates to the registered pages."""

    PAGE = "page"
    SECTION = "section"
    EXTERNAL = "external"
    BROKEN = "broken"


@dc.dataclass(frozen=True, slots=True)
class ResolvedLink:
    """Outcome of resolving a single ``href``."""

    kind: LinkKind
    destination: str


def link_target(href: str) -> str:
    """Return the canonical path an ``href`` addresses.

    The reference is one HTML blob, so internal links are in-document anchors
    of the form ``#/some/path``; the fragment itself is the target. For any
    other href a trailing ``#...`` fragment identifier is dropped.
    """
    href = href.strip()
    if href.startswith("#"):
        return unquote(href[1:])
    return unquote(href.split("#", 1)[0])


def is_external(target: str) -> bool:
    """Return ``True`` when ``target`` is an absolute URL outside the reference."""
    lower = target.lower()
    if lower.startswith(EXTERNAL_PREFIXES) or lower.startswith("//"):
        return True
    parsed = urlsplit(target)
    return bool(parsed.scheme and parsed.netloc)


class CrossReferenceResolver:
    """Rewrite hyperlinks against a link graph and render Markdown.

    Parameters
    ----------
    graph : LinkGraph
        Complete pass 1 snapshot. The resolver never mutates it.
    section_links : bool, optional
        When ``True``, links to section pages point at the section's index
        document (``<slug>/index``) rather than the bare slug.
    """

    def __init__(self, graph: LinkGraph, *, section_links: bool = False) -> None:
        self.graph = graph
        self.section_links = section_links

    def resolve(self, href: str) -> ResolvedLink:
        """Classify ``href`` and compute the Markdown link destination."""
        target = link_target(href)
        if target in self.graph:
            slug = make_slug(target)
            if self.section_links and self.graph.is_section(target):
                return ResolvedLink(LinkKind.SECTION, f"{slug}/{INDEX_FILENAME}")
            return ResolvedLink(LinkKind.PAGE, slug)
        if is_external(target):
            return ResolvedLink(LinkKind.EXTERNAL, href.strip())
        return ResolvedLink(LinkKind.BROKEN, make_slug(target))

    def to_markdown(self, html: str) -> str:
        """Resolve links in ``html`` and return cleaned Markdown text.

        Parameters
        ----------
        html : str
            Inner or outer markup of a single element from a page fragment.

        Returns
        -------
        str
            Markdown with links rewritten, self-reference anchors removed,
            inline-code escapes undone, and ``%%`` neutralized.
        """
        html = INLINE_CODE_TAG_PATTERN.sub("`", html.replace("\n", " "))
        soup = BeautifulSoup(html, HTML_PARSER)
        body = soup.body or soup
        remove_self_anchors(body)
        for anchor in body.find_all("a", href=True):
            self._rewrite_anchor(soup, anchor)
        converted = markdownify(body.decode_contents(), **MARKDOWNIFY_OPTIONS)
        # Broken-link markers show the literal slug.
        converted = BROKEN_LINK_PATTERN.sub(
            lambda match: unescape_engine_escapes(match.group(0)), converted
        )
        return clean_converted_markdown(converted)

    def _rewrite_anchor(self, soup: BeautifulSoup, anchor: Tag) -> None:
        """Point ``anchor`` at its resolved destination or replace it with a marker."""
        resolved = self.resolve(str(anchor["href"]))
        if resolved.kind is LinkKind.BROKEN:
            marker = soup.new_tag("b")
            marker.string = f"{BROKEN_LINK_LABEL}: {resolved.destination}"
            anchor.replace_with(marker)
            return
        anchor.attrs = {"href": resolved.destination}


def remove_self_anchors(element: Tag) -> None:
    """Delete ``<a name>`` anchors without an href and with blank content."""
    for anchor in element.find_all("a", attrs={"name": True}):
        if anchor.get("href") is None and not anchor.get_text().strip():
            anchor.decompose()


__all__ = [
    "BROKEN_LINK_LABEL",
    "CrossReferenceResolver",
    "LinkKind",
    "ResolvedLink",
    "is_external",
    "link_target",
    "remove_self_anchors",
]
