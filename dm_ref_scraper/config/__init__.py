"""Load and validate dm-ref-scraper configuration.

This subpackage parses an optional ``dm-ref.yaml`` file, overlays it onto
built-in defaults, and produces a :class:`ScraperConfig` that the generator
consumes. CLI flags are applied on top with
:meth:`ScraperConfig.with_overrides`.

Examples
--------
>>> from pathlib import Path
>>> from dm_ref_scraper.config import load_scraper_config
>>> config = load_scraper_config(Path("dm-ref.yaml"))  # doctest: +SKIP
>>> config.output_dir  # doctest: +SKIP
PosixPath('build')
"""

from .loader import DEFAULT_CONFIG_PATH, load_scraper_config
from .models import ScraperConfig, ScraperConfigError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ScraperConfig",
    "ScraperConfigError",
    "load_scraper_config",
]
