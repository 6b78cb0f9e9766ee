"""Pass 1: index every page fragment by its canonical path.

Rendering a page needs to know whether each of its hyperlinks points at a real
page, and links are frequently forward references. :func:`build_link_graph`
therefore parses every fragment first and returns an immutable
:class:`LinkGraph` snapshot; pass 2 only ever reads it.

Example
-------
>>> from dm_ref_scraper.registry import build_link_graph
>>> graph = build_link_graph(['<a name="/DM/text"></a><h2>text</h2>'])
>>> "/DM/text" in graph
True
>>> sorted(graph.sections)
['/DM']
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ
from types import MappingProxyType
from urllib.parse import unquote

from bs4 import BeautifulSoup

from ._constants import HTML_PARSER

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4.element import Tag


@dc.dataclass(frozen=True, slots=True)
class SkippedPage:
    """A fragment or page that was left out of the output.

    Attributes
    ----------
    path : str | None
        Canonical path when one was found, otherwise ``None``.
    reason : str
        Human-readable explanation.
    fragment : int | None
        Zero-based fragment index in the source document, when known.
    """

    path: str | None
    reason: str
    fragment: int | None = None

    @property
    def label(self) -> str:
        """Return the path, or a fragment label when no path was found."""
        if self.path is not None:
            return self.path
        return f"fragment #{self.fragment}"


@dc.dataclass(frozen=True, slots=True)
class LinkGraph:
    """Read-only snapshot of every registered page.

    Attributes
    ----------
    pages : Mapping[str, BeautifulSoup]
        Canonical path to parsed fragment, in source order.
    sections : frozenset[str]
        Paths that are the parent directory of at least one registered path.
    skipped : tuple[SkippedPage, ...]
        Fragments dropped while building the graph.
    """

    pages: cabc.Mapping[str, BeautifulSoup]
    sections: frozenset[str]
    skipped: tuple[SkippedPage, ...] = ()

    def __contains__(self, path: object) -> bool:
        return path in self.pages

    def __len__(self) -> int:
        return len(self.pages)

    def is_section(self, path: str) -> bool:
        """Return ``True`` when ``path`` has registered descendants."""
        return path in self.sections


def canonical_path(document: BeautifulSoup | Tag) -> str | None:
    """Return the percent-decoded ``name`` of the first named anchor, if any."""
    anchor = document.find("a", attrs={"name": True})
    if anchor is None:
        return None
    name = anchor.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return unquote(name.strip())


def parent_section(path: str) -> str | None:
    """Return the parent directory of ``path`` using plain path semantics."""
    parent = posixpath.dirname(path)
    return parent or None


def build_link_graph(fragments: cabc.Iterable[str]) -> LinkGraph:
    """Parse ``fragments`` and return the complete, immutable link graph.

    Fragments without a named anchor are skipped. When two fragments share a
    canonical path the first one wins and the duplicate is reported.
    """
    pages: dict[str, BeautifulSoup] = {}
    sections: set[str] = set()
    skipped: list[SkippedPage] = []
    for index, fragment in enumerate(fragments):
        document = BeautifulSoup(fragment, HTML_PARSER)
        path = canonical_path(document)
        if path is None:
            if fragment.strip():
                skipped.append(
                    SkippedPage(None, "no named anchor in fragment", fragment=index)
                )
            continue
        if path in pages:
            skipped.append(
                SkippedPage(path, "duplicate canonical path", fragment=index)
            )
            continue
        parent = parent_section(path)
        if parent is not None:
            sections.add(parent)
        pages[path] = document
    return LinkGraph(
        pages=MappingProxyType(pages),
        sections=frozenset(sections),
        skipped=tuple(skipped),
    )


__all__ = [
    "LinkGraph",
    "SkippedPage",
    "build_link_graph",
    "canonical_path",
    "parent_section",
]
