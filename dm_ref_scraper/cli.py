"""Cyclopts CLI entrypoint for converting the DM reference into Markdown.

The ``dm-ref`` console script defined here reads the monolithic reference
HTML (a local file or URL), splits it into pages, resolves cross-references,
and writes one Markdown document per page with TOML front matter. Typical
usage is ``dm-ref build`` in a Quartz content checkout.

Examples
--------
Build from the default ``info.html`` into ``build/``:

>>> from dm_ref_scraper.cli import main
>>> main()  # doctest: +SKIP

Build from a downloaded reference into a custom directory:

>>> from dm_ref_scraper.cli import app
>>> app(["build", "--ref", "ref/info.html", "--output", "content"])  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_scraper_config
from .generator import ReferenceSiteGenerator
from .slugs import make_slug

app = App(name="dm-ref", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Convert the reference HTML into a tree of Markdown pages.")
def build(
    *,
    ref: typ.Annotated[
        str | None,
        Parameter(
            help="Reference HTML path or URL (default: info.html)",
            env_var="INPUT_REF",
        ),
    ] = None,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Output folder (default: build)", env_var="INPUT_OUTPUT"),
    ] = None,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to dm-ref.yaml", env_var="INPUT_CONFIG"),
    ] = None,
) -> None:
    """Generate Markdown pages for the configured reference document.

    Parameters
    ----------
    ref : str or None, optional
        Override the reference source; falls back to the config file and then
        ``info.html``.
    output : Path or None, optional
        Override the output root; falls back to the config file and then
        ``build``.
    config : Path or None, optional
        Configuration file. When omitted, ``dm-ref.yaml`` is used if present.

    Returns
    -------
    None
        Writes Markdown files and prints one line per written, skipped, or
        failed page.

    Raises
    ------
    ReferenceSourceError
        If the reference document cannot be read.
    OutputError
        If the output root cannot be created.
    """
    scraper_config = load_scraper_config(config).with_overrides(
        source=ref, output_dir=output
    )
    report = ReferenceSiteGenerator(scraper_config).run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    for skipped in report.skipped:
        print(f"skipped {skipped.label}: {skipped.reason}")
    for failure in report.failed:
        print(f"failed {_format_path(failure.path)}: {failure.reason}")


@app.command(help="Print the sanitized slug for a canonical reference path.")
def slug(path: str) -> None:
    """Print the output slug ``path`` maps to."""
    print(make_slug(path))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``dm-ref`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
