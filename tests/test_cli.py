"""Tests for the ``dm-ref`` command line interface."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from dm_ref_scraper import cli

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    Fragment = cabc.Callable[..., str]


def test_build_prints_written_and_skipped_pages(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    make_fragment: Fragment,
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "info.html").write_text(
        "<hr>".join([make_fragment("/DM", "DM"), "<p>orphan</p>"]),
        encoding="utf-8",
    )
    cli.build()
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "wrote build/DM.md",
        "wrote build/index.md",
        "skipped fragment #1: no named anchor in fragment",
    ]


def test_build_with_overrides(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    make_fragment: Fragment,
) -> None:
    source = tmp_path / "ref.html"
    source.write_text(make_fragment("/DM/text", "text"), encoding="utf-8")
    out_dir = tmp_path / "site"
    cli.build(ref=str(source), output=out_dir)
    assert (out_dir / "DM" / "text.md").is_file()
    assert "wrote" in capsys.readouterr().out


def test_build_reads_config_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    make_fragment: Fragment,
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "ref.html").write_text(make_fragment("/DM", "DM"), encoding="utf-8")
    config = tmp_path / "custom.yaml"
    config.write_text("source: ref.html\noutput_dir: content\n", encoding="utf-8")
    cli.build(config=config)
    assert (tmp_path / "content" / "DM.md").is_file()


def test_slug_command(capsys: pytest.CaptureFixture[str]) -> None:
    cli.slug("/<T>:foo")
    assert capsys.readouterr().out == "/greaterTlesscolonfoo\n"
