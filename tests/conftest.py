"""Shared fixtures for dm_ref_scraper tests."""

from __future__ import annotations

import typing as typ

import pytest

from dm_ref_scraper.registry import LinkGraph, build_link_graph

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def _page_fragment(path: str, title: str | None, body: str = "") -> str:
    """Return a reference fragment with a named anchor and optional title."""
    heading = f"<h2>{title}</h2>" if title is not None else ""
    return f'<a name="{path}"></a>{heading}{body}'


@pytest.fixture
def make_fragment() -> cabc.Callable[..., str]:
    """Return a factory building ``<a name>`` + ``<h2>`` page fragments."""
    return _page_fragment


@pytest.fixture
def link_graph() -> LinkGraph:
    """Return a small graph where ``/DM/text`` is both a page and a section."""
    return build_link_graph(
        [
            _page_fragment("/DM", "DM"),
            _page_fragment("/DM/text", "text"),
            _page_fragment("/DM/text/macros", "text macros"),
            _page_fragment("/datum/proc/Del", "Del proc (datum)"),
        ]
    )
