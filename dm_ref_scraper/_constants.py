"""Common literal values used across dm_ref_scraper.

These constants keep defaults, filenames, and parser choices centralized so
the loader, generator, CLI, and tests can import the same values without
drifting. Intended for internal use within the dm_ref_scraper package.

Examples
--------
>>> from dm_ref_scraper import _constants
>>> _constants.DEFAULT_DELIMITER
'<hr>'
>>> _constants.REPORT_FILENAME.endswith("-report.json")
True
"""

DEFAULT_SOURCE = "info.html"
DEFAULT_OUTPUT_DIR = "build"
DEFAULT_DELIMITER = "<hr>"
DEFAULT_CODE_LANGUAGE = "dream-maker"
DEFAULT_VERSION_ATTRIBUTE = "byondver"
DEFAULT_CONFIG_FILE = "dm-ref.yaml"

ROOT_PATH = "/"
ROOT_TITLE = "Reference"
ROOT_START_LINK = "/DM"

REPORT_FILENAME = ".dm-ref-scraper-report.json"
INDEX_FILENAME = "index"
MARKDOWN_SUFFIX = ".md"

# html5lib treats <xmp> bodies as raw text, matching how browsers read them.
HTML_PARSER = "html5lib"
TEMPLATE_MARKER = "$"
