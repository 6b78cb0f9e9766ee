"""High-level orchestration for reference site generation.

This module ties the pipeline together: it reads the reference HTML, splits it
into fragments, builds the pass 1 link graph, renders every page in pass 2,
merges cross-page object markers, and writes one Markdown document per page.
Every document is rendered in memory before the first file is written, so a
run-level failure never leaves a partial tree behind.

Example
-------
>>> from pathlib import Path
>>> from dm_ref_scraper.config import ScraperConfig
>>> from dm_ref_scraper.generator import ReferenceSiteGenerator
>>> config = ScraperConfig(source="info.html", output_dir=Path("build"))
>>> report = ReferenceSiteGenerator(config).run()  # doctest: +SKIP
>>> report.written[0]  # doctest: +SKIP
PosixPath('build/DM/index.md')
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path, PurePosixPath

from dm_ref_scraper._constants import (
    INDEX_FILENAME,
    MARKDOWN_SUFFIX,
    REPORT_FILENAME,
    ROOT_PATH,
)
from dm_ref_scraper.registry import SkippedPage, build_link_graph
from dm_ref_scraper.slugs import make_slug
from dm_ref_scraper.source import read_reference
from dm_ref_scraper.splitter import split_reference

from .front_matter import PageDocumentRenderer
from .link_resolver import CrossReferenceResolver
from .models import BuildReport, FailedWrite, PageRecord, Paragraph
from .renderer import ReferencePageRenderer, apply_object_markers

if typ.TYPE_CHECKING:
    from dm_ref_scraper.config import ScraperConfig


class OutputError(RuntimeError):
    """Raised when the output root cannot be created."""


def output_path_for(path: str, *, is_section: bool) -> PurePosixPath:
    """Return the output file, relative to the output root, for ``path``.

    Examples
    --------
    >>> output_path_for("/datum/proc/New", is_section=False)
    PurePosixPath('datum/proc/New.md')
    >>> output_path_for("/datum", is_section=True)
    PurePosixPath('datum/index.md')
    >>> output_path_for("/", is_section=True)
    PurePosixPath('index.md')
    """
    slug = make_slug(path).strip("/")
    if not slug:
        return PurePosixPath(f"{INDEX_FILENAME}{MARKDOWN_SUFFIX}")
    if is_section:
        return PurePosixPath(slug) / f"{INDEX_FILENAME}{MARKDOWN_SUFFIX}"
    return PurePosixPath(f"{slug}{MARKDOWN_SUFFIX}")


class ReferenceSiteGenerator:
    """Convert the reference HTML into a tree of Markdown documents."""

    def __init__(
        self, config: ScraperConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        config : ScraperConfig
            Resolved run configuration.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.config = config
        self.documents = PageDocumentRenderer(templates_dir=templates_dir)

    def run(self) -> BuildReport:
        """Read the configured source and build the site.

        Raises
        ------
        ReferenceSourceError
            If the source cannot be read.
        OutputError
            If the output root cannot be created.
        """
        return self.build(read_reference(self.config.source))

    def build(self, raw: str) -> BuildReport:
        """Build the site from the raw reference text ``raw``."""
        graph = build_link_graph(split_reference(raw, self.config.delimiter))
        resolver = CrossReferenceResolver(
            graph, section_links=self.config.section_links
        )
        renderer = ReferencePageRenderer(
            graph,
            resolver,
            code_language=self.config.code_language,
            version_attribute=self.config.version_attribute,
        )
        result = renderer.render_all()
        pages = apply_object_markers(result.pages, result.object_markers)
        pages[ROOT_PATH] = self._root_page()

        report = BuildReport(skipped=[*graph.skipped, *result.skipped])
        planned = self._plan_documents(pages, report)
        out_dir = self._prepare_output_dir()
        for relative, text in planned.items():
            target = out_dir.joinpath(*relative.parts)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(text, encoding="utf-8")
            except OSError as exc:
                report.failed.append(FailedWrite(target, str(exc)))
                continue
            report.written.append(target)
        if self.config.report:
            self._write_report(out_dir, report)
        return report

    def _root_page(self) -> PageRecord:
        """Return the synthetic root page."""
        return PageRecord(
            path=ROOT_PATH,
            title=self.config.root_title,
            is_section=True,
            body_blocks=[Paragraph(self.documents.root_body())],
        )

    def _plan_documents(
        self, pages: dict[str, PageRecord], report: BuildReport
    ) -> dict[PurePosixPath, str]:
        """Render every page and map it to its output path, skipping collisions."""
        planned: dict[PurePosixPath, str] = {}
        owners: dict[PurePosixPath, str] = {}
        for path, record in pages.items():
            relative = output_path_for(path, is_section=record.is_section)
            if relative in owners:
                owner = owners[relative]
                reason = f"output path '{relative}' already used by '{owner}'"
                report.skipped.append(SkippedPage(path, reason))
                continue
            owners[relative] = path
            planned[relative] = self.documents.render(record)
        return planned

    def _prepare_output_dir(self) -> Path:
        out_dir = self.config.output_dir
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Unable to create output directory '{out_dir}': {exc}"
            raise OutputError(msg) from exc
        return out_dir

    def _write_report(self, out_dir: Path, report: BuildReport) -> None:
        """Persist the build report JSON next to the generated pages."""
        path = out_dir / REPORT_FILENAME
        try:
            path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        except OSError:  # pragma: no cover - IO issues
            return


__all__ = ["OutputError", "ReferenceSiteGenerator", "output_path_for"]
