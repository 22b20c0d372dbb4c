"""
gemtext: parser and table of contents builder for text/gemini documents.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    gemtext index.gmi --mode html

Library Usage:
    from pathlib import Path
    from gemtext import parse_file

    parser = parse_file(Path("index.gmi"))
    for entry in parser.table_of_contents():
        print(entry)
"""

from .exceptions import GemtextError, ReadError
from .models import Line, LineType, ParserState
from .parser import Parser, classify_line, parse_file, parse_gemtext
from .toc import TocEntry, build_table_of_contents, format_section_number, generate_toc_entries

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "classify_line",
    "parse_gemtext",
    "parse_file",
    "Parser",
    "build_table_of_contents",
    "format_section_number",
    "generate_toc_entries",
    # Data models
    "Line",
    "LineType",
    "ParserState",
    "TocEntry",
    # Exceptions
    "GemtextError",
    "ReadError",
    # Version
    "__version__",
]
