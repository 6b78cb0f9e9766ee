"""Pass 2: turn registered page fragments into :class:`PageRecord` objects.

Each page is read from the immutable link graph. Definition lists become
metadata blocks, paragraphs/headings/code/lists become body blocks in DOM
order, and titles drive tag inference. Facts one page reveals about another
page (a ``procs (X)`` title marks its parent object) are accumulated in a
separate set and merged only after every page has been rendered.
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import re
import typing as typ

from dm_ref_scraper._constants import DEFAULT_CODE_LANGUAGE, DEFAULT_VERSION_ATTRIBUTE
from dm_ref_scraper.escaping import strip_self_anchors, unescape_entities
from dm_ref_scraper.registry import SkippedPage

from .models import (
    FORMAT_TERM,
    Callout,
    CalloutKind,
    CodeSample,
    MetadataBlock,
    PageRecord,
    Paragraph,
    RawList,
    Subheading,
)

if typ.TYPE_CHECKING:
    from bs4 import BeautifulSoup
    from bs4.element import Tag

    from dm_ref_scraper.registry import LinkGraph

    from .link_resolver import CrossReferenceResolver
    from .models import BlockNode

TITLE_TAG = "h2"
BODY_TAGS = ("p", "h3", "xmp", "pre", "ul", "ol")
CODE_STYLE_CLASSES = frozenset({"codedd", "code"})
NOTE_CLASSES = frozenset({"note", "deprecated", "security"})
NOTE_PREFIX = "Note:"
NOTE_PREFIX_PATTERN = re.compile(
    r"^\s*(?:<(?:b|strong)>\s*)?Note:\s*(?:</(?:b|strong)>)?\s*"
)
EXAMPLE_HEADING = "Example:"
EVENT_TERM_MARKER = "When"
TITLE_TAG_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r" procs?\b"), "proc"),
    (re.compile(r" vars?\b"), "var"),
)
OBJECT_TITLE_PATTERN = re.compile(r"\b(?:procs|vars) \((?P<object>[^)]+)\)")
TARGET_SYMBOL_PATTERN = re.compile(r"^\s*(?P<symbol>\S+) (?:proc|var)\b")
OBJECT_TAG = "object"
EVENT_TAG = "event"


class PageRenderError(ValueError):
    """Raised when a single page cannot be rendered."""


class MissingTitleError(PageRenderError):
    """Raised when a page fragment has no level-2 title heading."""


@dc.dataclass(slots=True)
class RenderResult:
    """Everything pass 2 produced.

    Attributes
    ----------
    pages : dict[str, PageRecord]
        Rendered pages keyed by canonical path.
    object_markers : set[str]
        Canonical paths identified as objects by other pages' titles.
    skipped : list[SkippedPage]
        Pages that failed to render.
    """

    pages: dict[str, PageRecord] = dc.field(default_factory=dict)
    object_markers: set[str] = dc.field(default_factory=set)
    skipped: list[SkippedPage] = dc.field(default_factory=list)


@dc.dataclass(frozen=True, slots=True)
class TitleFacts:
    """Tags and cross-page facts inferred from a page title."""

    tags: frozenset[str]
    symbol: str | None
    marks_object: bool


def infer_title_facts(title: str) -> TitleFacts:
    """Derive tags, the target symbol, and the object marker from ``title``.

    Examples
    --------
    >>> facts = infer_title_facts("New proc (datum)")
    >>> sorted(facts.tags), facts.symbol, facts.marks_object
    (['proc'], 'New', False)
    >>> infer_title_facts("procs (datum)").marks_object
    True
    """
    tags = frozenset(
        tag for pattern, tag in TITLE_TAG_PATTERNS if pattern.search(title)
    )
    symbol_match = TARGET_SYMBOL_PATTERN.match(title)
    symbol = symbol_match.group("symbol").removesuffix("()") if symbol_match else None
    return TitleFacts(
        tags=tags,
        symbol=symbol or None,
        marks_object=OBJECT_TITLE_PATTERN.search(title) is not None,
    )


def callout_kind(element: Tag) -> CalloutKind | None:
    """Return the callout flavour for a paragraph, or ``None`` for plain text."""
    classes = set(element.get("class") or ())
    if "deprecated" in classes:
        return CalloutKind.DEPRECATED
    if "security" in classes:
        return CalloutKind.DANGER
    if classes & NOTE_CLASSES or element.get_text().lstrip().startswith(NOTE_PREFIX):
        return CalloutKind.NOTE
    return None


def definition_term(definition_list: Tag) -> str | None:
    """Return the colon-free term text of a ``<dl>``, unwrapping nested bold."""
    term = definition_list.find("dt") or definition_list.find("b")
    if term is None:
        return None
    if term.name != "b":
        term = term.find("b") or term
    text = term.get_text().replace(":", "").strip()
    return text or None


def is_code_styled(definition_list: Tag, term: str) -> bool:
    """Return ``True`` when entries of ``definition_list`` render as code."""
    classes = set(definition_list.get("class") or ())
    return bool(classes & CODE_STYLE_CLASSES) or term == FORMAT_TERM


def _within(element: Tag, names: tuple[str, ...]) -> bool:
    return element.find_parent(list(names)) is not None


class ReferencePageRenderer:
    """Render every page of a :class:`LinkGraph` into page records.

    Parameters
    ----------
    graph : LinkGraph
        Complete pass 1 snapshot.
    resolver : CrossReferenceResolver
        Link resolver bound to the same graph.
    code_language : str, optional
        Fence tag used for ``<xmp>`` sample code.
    version_attribute : str, optional
        Attribute on the title heading holding the version tag.
    """

    def __init__(
        self,
        graph: LinkGraph,
        resolver: CrossReferenceResolver,
        *,
        code_language: str = DEFAULT_CODE_LANGUAGE,
        version_attribute: str = DEFAULT_VERSION_ATTRIBUTE,
    ) -> None:
        self.graph = graph
        self.resolver = resolver
        self.code_language = code_language
        self.version_attribute = version_attribute

    def render_all(self) -> RenderResult:
        """Render each registered page, skipping those that fail."""
        result = RenderResult()
        for path, document in self.graph.pages.items():
            try:
                record = self.render(path, document)
            except PageRenderError as exc:
                result.skipped.append(SkippedPage(path, str(exc)))
                continue
            result.pages[path] = record
            if infer_title_facts(record.title).marks_object:
                parent = posixpath.dirname(path)
                if parent:
                    result.object_markers.add(parent)
        return result

    def render(self, path: str, document: BeautifulSoup) -> PageRecord:
        """Render a single page.

        Raises
        ------
        MissingTitleError
            If the fragment has no ``<h2>`` title.
        """
        heading = document.find(TITLE_TAG)
        if heading is None:
            msg = f"page '{path}' has no <{TITLE_TAG}> title"
            raise MissingTitleError(msg)
        raw_title = strip_self_anchors(heading.decode_contents())
        title = unescape_entities(raw_title).strip()
        facts = infer_title_facts(title)
        version = heading.get(self.version_attribute)

        tags = set(facts.tags)
        metadata = self._metadata_blocks(document)
        if any(EVENT_TERM_MARKER in block.term for block in metadata):
            tags.add(EVENT_TAG)

        return PageRecord(
            path=path,
            title=title,
            is_section=self.graph.is_section(path),
            version_tag=str(version).strip() if version else None,
            tags=tags,
            metadata_blocks=metadata,
            body_blocks=self._body_blocks(document, facts.symbol),
        )

    def _metadata_blocks(self, document: BeautifulSoup) -> list[MetadataBlock]:
        blocks: list[MetadataBlock] = []
        for definition_list in document.find_all("dl"):
            term = definition_term(definition_list)
            if term is None:
                continue
            entries = tuple(
                self.resolver.to_markdown(definition.decode_contents())
                for definition in definition_list.find_all("dd")
            )
            blocks.append(
                MetadataBlock(
                    term=term,
                    entries=entries,
                    is_code_styled=is_code_styled(definition_list, term),
                )
            )
        return blocks

    def _body_blocks(
        self, document: BeautifulSoup, symbol: str | None
    ) -> list[BlockNode]:
        blocks: list[BlockNode] = []
        for element in document.find_all(list(BODY_TAGS)):
            # Nested matches are rendered as part of their outer element.
            if _within(element, ("dl", *BODY_TAGS)):
                continue
            block = self._body_block(element, symbol)
            if block is not None:
                blocks.append(block)
        return blocks

    def _body_block(self, element: Tag, symbol: str | None) -> BlockNode | None:
        match element.name:
            case "p":
                return self._paragraph(element)
            case "h3":
                text = element.get_text().strip()
                if text == EXAMPLE_HEADING:
                    return None
                heading = self.resolver.to_markdown(element.decode_contents())
                return Subheading(heading) if heading else None
            case "xmp":
                code = element.decode_contents().strip()
                return CodeSample(self.code_language, symbol, code)
            case "pre":
                return CodeSample(None, None, element.decode_contents().strip())
            case "ul" | "ol":
                listing = self.resolver.to_markdown(str(element))
                return RawList(listing) if listing else None
            case _:
                return None

    def _paragraph(self, element: Tag) -> BlockNode | None:
        kind = callout_kind(element)
        html = element.decode_contents()
        if kind is None:
            text = self.resolver.to_markdown(html)
            return Paragraph(text) if text else None
        # Self-reference anchors may precede the "Note:" prefix.
        html = NOTE_PREFIX_PATTERN.sub("", strip_self_anchors(html), count=1)
        text = self.resolver.to_markdown(html)
        return Callout(kind, text)


def apply_object_markers(
    pages: dict[str, PageRecord], markers: set[str]
) -> dict[str, PageRecord]:
    """Return ``pages`` with the ``object`` tag merged into marked records."""
    merged = dict(pages)
    for path in markers:
        record = merged.get(path)
        if record is not None:
            merged[path] = dc.replace(record, tags=record.tags | {OBJECT_TAG})
    return merged


__all__ = [
    "MissingTitleError",
    "PageRenderError",
    "ReferencePageRenderer",
    "RenderResult",
    "TitleFacts",
    "apply_object_markers",
    "callout_kind",
    "definition_term",
    "infer_title_facts",
    "is_code_styled",
]
