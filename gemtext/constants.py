"""Constants used across the gemtext package."""

from __future__ import annotations

# Line prefixes
LINK_PREFIX = "=>"
PREFORMAT_TOGGLE = "```"
HEADING_MARKER = "#"
LIST_PREFIX = "*"
QUOTE_PREFIX = ">"

# Headings deeper than this are folded into the last level
MAX_HEADING_LEVEL = 3

# Filesystem defaults
GEMTEXT_EXTENSIONS = (".gmi", ".gemini", ".txt")
DEFAULT_ENCODING = "utf-8"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
