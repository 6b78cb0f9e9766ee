"""Serialize page records into front matter and full Markdown documents."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import tomlkit
from jinja2 import Environment, FileSystemLoader, select_autoescape

from dm_ref_scraper._constants import ROOT_START_LINK, TEMPLATE_MARKER
from dm_ref_scraper.escaping import escape_page_body, escape_percent_pairs

if typ.TYPE_CHECKING:
    from .models import PageRecord

VERSION_KEY = "byond_version"
FRONT_MATTER_FENCE = "+++"


def build_front_matter(record: PageRecord) -> tomlkit.TOMLDocument:
    """Return the TOML front matter document for ``record``.

    Parameters
    ----------
    record : PageRecord
        Rendered page, with cross-page tags already merged.

    Returns
    -------
    tomlkit.TOMLDocument
        Document with ``title``, optional ``byond_version``, sorted ``tags``,
        and a ``headers`` table of metadata entries.
    """
    document = tomlkit.document()
    document["title"] = escape_percent_pairs(record.title)
    if record.version_tag:
        document[VERSION_KEY] = record.version_tag
    document["tags"] = sorted(record.tags)
    headers = tomlkit.table()
    for term, entries in record.headers().items():
        headers[term] = entries
    document["headers"] = headers
    return document


class PageDocumentRenderer:
    """Render page records into ``+++``-fenced Markdown documents."""

    def __init__(
        self, *, templates_dir: Path | None = None, marker: str = TEMPLATE_MARKER
    ) -> None:
        """Initialize the renderer with its Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the Jinja templates; defaults to the package
            templates.
        marker : str, optional
            Character escaped outside code spans in page bodies.
        """
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.marker = marker
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("page.md.jinja")

    def render(self, record: PageRecord) -> str:
        """Return the complete Markdown document for ``record``."""
        front_matter = tomlkit.dumps(build_front_matter(record))
        body = escape_page_body(record.assemble(), self.marker)
        return self.template.render(
            fence=FRONT_MATTER_FENCE, front_matter=front_matter, body=body
        )

    def root_body(self, start_link: str = ROOT_START_LINK) -> str:
        """Return the Markdown body of the synthetic root page."""
        return self.env.get_template("root_index.md.jinja").render(
            start_link=start_link
        )


__all__ = ["FRONT_MATTER_FENCE", "PageDocumentRenderer", "build_front_matter"]
