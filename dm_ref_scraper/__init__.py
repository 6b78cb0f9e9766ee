"""Convert the monolithic DM reference HTML into Markdown pages.

This package exposes the CLI entry points used by ``dm-ref`` to split the
reference into pages, resolve cross-references, and write a Quartz-ready
Markdown tree.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from dm_ref_scraper import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
