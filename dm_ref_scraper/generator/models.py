"""Shared dataclasses used by the page rendering pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
import re
from pathlib import Path

from dm_ref_scraper.escaping import unescape_engine_escapes
from dm_ref_scraper.registry import SkippedPage

ARGS_TERM = "Args"
FORMAT_TERM = "Format"
DEFERRED_TERM_PATTERN = re.compile(
    r"^(?:see also|(?:[\w-]+ )?(?:procs|vars))$", re.IGNORECASE
)


class CalloutKind(enum.StrEnum):
    """Admonition flavours emitted for note-like paragraphs."""

    NOTE = "note"
    DEPRECATED = "deprecated"
    DANGER = "danger"


@dc.dataclass(frozen=True, slots=True)
class Paragraph:
    """Plain Markdown paragraph."""

    text: str

    def to_markdown(self) -> str:
        return self.text


@dc.dataclass(frozen=True, slots=True)
class Callout:
    """Quoted admonition such as ``> [!note]``."""

    kind: CalloutKind
    text: str

    def to_markdown(self) -> str:
        lines = [f"> [!{self.kind}]"]
        lines.extend(f"> {line}" if line else ">" for line in self.text.splitlines())
        return "\n".join(lines)


@dc.dataclass(frozen=True, slots=True)
class Subheading:
    """Second-level Markdown heading derived from an ``<h3>``."""

    text: str

    def to_markdown(self) -> str:
        return f"## {self.text}"


@dc.dataclass(frozen=True, slots=True)
class CodeSample:
    """Fenced code block, optionally tagged and annotated with a symbol.

    The symbol is written as a ``/word/`` highlight so every occurrence of the
    documented proc or var stands out in the sample.
    """

    language: str | None
    symbol: str | None
    text: str

    def to_markdown(self) -> str:
        info = self.language or ""
        if self.symbol:
            info = f"{info} /{self.symbol}/".strip()
        return f"```{info}\n{self.text}\n```"


@dc.dataclass(frozen=True, slots=True)
class RawList:
    """List markup already converted to Markdown by the resolver."""

    text: str

    def to_markdown(self) -> str:
        return self.text


BlockNode = Paragraph | Callout | Subheading | CodeSample | RawList


@dc.dataclass(frozen=True, slots=True)
class MetadataBlock:
    """One definition list rendered as a ``###`` heading with its entries.

    Attributes
    ----------
    term : str
        Definition term with colons removed (for example ``"Format"``).
    entries : tuple[str, ...]
        Markdown-rendered, link-resolved definition bodies.
    is_code_styled : bool
        Whether entries render as inline code.
    """

    term: str
    entries: tuple[str, ...]
    is_code_styled: bool = False

    @property
    def is_deferred(self) -> bool:
        """Return ``True`` for blocks that belong after the page body."""
        return bool(DEFERRED_TERM_PATTERN.match(self.term))

    def styled_entries(self) -> list[str]:
        """Return entries with ``Args`` splitting and code styling applied."""
        if self.term == ARGS_TERM:
            return [_format_argument(entry) for entry in self.entries]
        if not self.is_code_styled:
            return list(self.entries)
        if len(self.entries) == 1:
            return [_inline_code(self.entries[0])]
        # Link entries stay clickable even in code-styled blocks.
        return [
            entry if entry.startswith("[") else _inline_code(entry)
            for entry in self.entries
        ]

    def to_markdown(self) -> str:
        heading = f"### {self.term}"
        entries = self.styled_entries()
        if len(entries) > 1:
            bullets = "\n".join(f"- {entry}" for entry in entries)
            return f"{heading}\n\n{bullets}\n"
        if entries:
            return f"{heading}\n> {entries[0]}"
        return heading


@dc.dataclass(slots=True)
class PageRecord:
    """Fully extracted page awaiting serialization.

    Attributes
    ----------
    path : str
        Canonical path, unique within the registry.
    title : str
        Entity-decoded page title.
    is_section : bool
        Whether the page is written as an index document.
    version_tag : str | None
        Version attribute from the title heading, if present.
    tags : set[str]
        Inferred tags such as ``proc``, ``var``, ``event`` and ``object``.
    metadata_blocks : list[MetadataBlock]
        Definition-list blocks in source order.
    body_blocks : list[BlockNode]
        Body blocks in source order.
    """

    path: str
    title: str
    is_section: bool = False
    version_tag: str | None = None
    tags: set[str] = dc.field(default_factory=set)
    metadata_blocks: list[MetadataBlock] = dc.field(default_factory=list)
    body_blocks: list[BlockNode] = dc.field(default_factory=list)

    def assemble(self) -> str:
        """Join leading metadata, body blocks, and deferred metadata."""
        leading = [block for block in self.metadata_blocks if not block.is_deferred]
        deferred = [block for block in self.metadata_blocks if block.is_deferred]
        parts = [block.to_markdown() for block in leading]
        parts.extend(block.to_markdown() for block in self.body_blocks)
        parts.extend(block.to_markdown() for block in deferred)
        return "\n\n".join(parts)

    def headers(self) -> dict[str, list[str]]:
        """Return metadata terms mapped to their entries, merging repeated terms."""
        headers: dict[str, list[str]] = {}
        for block in self.metadata_blocks:
            headers.setdefault(block.term, []).extend(block.entries)
        return headers


@dc.dataclass(frozen=True, slots=True)
class FailedWrite:
    """A page whose output file could not be written."""

    path: Path
    reason: str


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a generator run."""

    written: list[Path] = dc.field(default_factory=list)
    skipped: list[SkippedPage] = dc.field(default_factory=list)
    failed: list[FailedWrite] = dc.field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable summary."""
        return {
            "written": [str(path) for path in self.written],
            "skipped": [
                {"path": item.path, "fragment": item.fragment, "reason": item.reason}
                for item in self.skipped
            ],
            "failed": [
                {"path": str(item.path), "reason": item.reason} for item in self.failed
            ],
        }


def _inline_code(entry: str) -> str:
    return f"`{unescape_engine_escapes(entry)}`"


def _format_argument(entry: str) -> str:
    """Render ``name: description`` as ``\\`name\\`: description``."""
    if ":" not in entry:
        return entry
    name, description = entry.split(":", 1)
    name = name.strip()
    if not (name.startswith("`") and name.endswith("`")):
        name = f"`{unescape_engine_escapes(name)}`"
    return f"{name}:{description}"


__all__ = [
    "BlockNode",
    "BuildReport",
    "Callout",
    "CalloutKind",
    "CodeSample",
    "FailedWrite",
    "MetadataBlock",
    "PageRecord",
    "Paragraph",
    "RawList",
    "Subheading",
]
