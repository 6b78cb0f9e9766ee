"""Typed dataclasses describing dm-ref-scraper configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from dm_ref_scraper._constants import (
    DEFAULT_CODE_LANGUAGE,
    DEFAULT_DELIMITER,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SOURCE,
    DEFAULT_VERSION_ATTRIBUTE,
    ROOT_TITLE,
)


class ScraperConfigError(ValueError):
    """Raised when the scraper configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ScraperConfig:
    """A fully resolved scraper run definition.

    Attributes
    ----------
    source : str
        Local path or http(s) URL of the reference HTML.
    output_dir : Path
        Root directory for generated Markdown.
    delimiter : str
        Literal token separating page fragments.
    code_language : str
        Fence tag for ``<xmp>`` sample code.
    version_attribute : str
        Title heading attribute holding the version tag.
    section_links : bool
        Link section targets to their index documents.
    root_title : str
        Title of the synthetic root page.
    report : bool
        Write the JSON build report into the output root.
    """

    source: str = DEFAULT_SOURCE
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    delimiter: str = DEFAULT_DELIMITER
    code_language: str = DEFAULT_CODE_LANGUAGE
    version_attribute: str = DEFAULT_VERSION_ATTRIBUTE
    section_links: bool = False
    root_title: str = ROOT_TITLE
    report: bool = True

    def with_overrides(
        self, *, source: str | None = None, output_dir: Path | None = None
    ) -> ScraperConfig:
        """Return a copy with CLI-level overrides applied when provided."""
        return dc.replace(
            self,
            source=source if source is not None else self.source,
            output_dir=output_dir if output_dir is not None else self.output_dir,
        )


__all__ = ["ScraperConfig", "ScraperConfigError"]
