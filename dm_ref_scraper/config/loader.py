"""Load scraper configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from dm_ref_scraper._constants import DEFAULT_CONFIG_FILE

from .models import ScraperConfig, ScraperConfigError

DEFAULT_CONFIG_PATH = Path(DEFAULT_CONFIG_FILE)
_STRING_KEYS = ("source", "delimiter", "code_language", "version_attribute")
_BOOL_KEYS = ("section_links", "report")


def load_scraper_config(path: Path | None = None) -> ScraperConfig:
    """Load the YAML configuration describing a scraper run.

    Parameters
    ----------
    path : Path, optional
        Filesystem path to the YAML file. When ``None``, ``dm-ref.yaml`` in
        the working directory is used if it exists; otherwise built-in
        defaults are returned.

    Returns
    -------
    ScraperConfig
        Defaults overlaid with the values found in the file.

    Raises
    ------
    FileNotFoundError
        If an explicitly named configuration file does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    ScraperConfigError
        If a value has the wrong type or is empty.

    Examples
    --------
    >>> from dm_ref_scraper.config import load_scraper_config
    >>> load_scraper_config(Path("dm-ref.yaml")).source  # doctest: +SKIP
    'info.html'
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ScraperConfig()
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return _build_scraper_config(dict(loaded))


def _build_scraper_config(raw: typ.Mapping[str, typ.Any]) -> ScraperConfig:
    """Overlay ``raw`` onto the default :class:`ScraperConfig`."""
    base = ScraperConfig()
    values: dict[str, typ.Any] = {}
    for key in _STRING_KEYS:
        if key in raw:
            values[key] = _required_str(raw[key], key)
    for key in _BOOL_KEYS:
        if key in raw:
            values[key] = _required_bool(raw[key], key)
    if "output_dir" in raw:
        values["output_dir"] = Path(_required_str(raw["output_dir"], "output_dir"))

    match raw.get("root"):
        case None:
            pass
        case dict() as root:
            if "title" in root:
                values["root_title"] = _required_str(root["title"], "root.title")
        case _:
            msg = "'root' must be a mapping."
            raise ScraperConfigError(msg)

    return ScraperConfig(
        source=values.get("source", base.source),
        output_dir=values.get("output_dir", base.output_dir),
        delimiter=values.get("delimiter", base.delimiter),
        code_language=values.get("code_language", base.code_language),
        version_attribute=values.get("version_attribute", base.version_attribute),
        section_links=values.get("section_links", base.section_links),
        root_title=values.get("root_title", base.root_title),
        report=values.get("report", base.report),
    )


def _required_str(value: object, key: str) -> str:
    """Return ``value`` as a non-empty string or raise ``ScraperConfigError``."""
    if not isinstance(value, str) or not value.strip():
        msg = f"'{key}' must be a non-empty string."
        raise ScraperConfigError(msg)
    return value


def _required_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false."
        raise ScraperConfigError(msg)
    return value


__all__ = ["DEFAULT_CONFIG_PATH", "load_scraper_config"]
