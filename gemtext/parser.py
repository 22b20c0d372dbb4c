"""Gemtext parsing utilities."""

from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path

from .constants import (
    DEFAULT_ENCODING,
    HEADING_MARKER,
    LINK_PREFIX,
    LIST_PREFIX,
    MAX_HEADING_LEVEL,
    PREFORMAT_TOGGLE,
    QUOTE_PREFIX,
)
from .exceptions import ReadError
from .filesystem import safe_read
from .models import Line, ParserState
from .toc import TocEntry, build_table_of_contents, find_title


def _strip_line_ending(raw: str) -> str:
    """Remove one trailing ``\\n`` and then one trailing ``\\r``.

    Examples:
        _strip_line_ending("text\\r\\n")  # "text"
        _strip_line_ending("  text  ")  # "  text  "
    """
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def _parse_link(line: str) -> Line:
    """Split a link line into its target and optional display name.

    Examples:
        _parse_link("=> gemini://example.org/  Example")
        # Line(LINK, "gemini://example.org/", "Example")
    """
    parts = line[len(LINK_PREFIX) :].strip().split(maxsplit=1)
    if not parts:
        return Line.link("")
    if len(parts) == 1:
        return Line.link(parts[0])
    return Line.link(parts[0], parts[1])


def _parse_heading(line: str) -> Line:
    """Build a heading from a line starting with ``#``.

    The level is the number of ``#`` among the first three characters, so
    ``"####"`` is a level-3 heading whose text is ``"#"``.

    Examples:
        _parse_heading("## Section")  # Line(HEADING, "Section", level=2)
    """
    level = line[:MAX_HEADING_LEVEL].count(HEADING_MARKER)
    return Line.heading(line[level:].strip(), level)


def _parse_prefixed(line: str, prefix: str) -> str:
    return line[len(prefix) :].strip()


def classify_line(line: str, state: ParserState) -> tuple[Line, ParserState]:
    """Classify a single gemtext line.

    Inside a preformatted block every line is kept verbatim until a line
    starting with ``` closes the block. Outside of one, the first characters
    of the line select its kind; lines that match no prefix are text. No line
    is ever rejected.

    Args:
        line: Line content without its line ending.
        state: Whether the previous lines left a preformatted block open.

    Returns:
        tuple[Line, ParserState]: The classified line and the state for the
            next line.

    Examples:
        classify_line("# Title", ParserState.OUTSIDE)
        # (Line(HEADING, "Title", level=1), ParserState.OUTSIDE)
        classify_line("```python", ParserState.OUTSIDE)
        # (Line(PREFORMAT_TOGGLE, "python"), ParserState.INSIDE)
    """
    if state is ParserState.INSIDE:
        if line.startswith(PREFORMAT_TOGGLE):
            return Line.preformat_toggle(), ParserState.OUTSIDE
        return Line.preformat(line), state

    if line.startswith(LINK_PREFIX):
        return _parse_link(line), state

    if line.startswith(PREFORMAT_TOGGLE):
        return Line.preformat_toggle(_parse_prefixed(line, PREFORMAT_TOGGLE)), ParserState.INSIDE

    if line.startswith(HEADING_MARKER):
        return _parse_heading(line), state

    # A lone "*" or "*text" is regular text
    if line.startswith(f"{LIST_PREFIX} "):
        return Line.list_item(_parse_prefixed(line, LIST_PREFIX)), state

    if line.startswith(QUOTE_PREFIX):
        return Line.quote(_parse_prefixed(line, QUOTE_PREFIX)), state

    return Line.text(line.rstrip()), state


class Parser:
    """Parse a gemtext document into classified lines.

    The parser keeps the lines in document order, the preformatted block
    state, and a table of contents computed on first request. The table of
    contents is only recomputed when explicitly forced, so callers that
    modify `lines` must pass ``force=True`` to see their changes.

    A parser instance is meant for a single document and a single thread.

    Attributes:
        lines: Classified lines in document order.
        state: Whether the last parsed line left a preformatted block open.
        encoding: Encoding used to decode byte input.

    Examples:
        parser = Parser()
        with open("index.gmi", "rb") as stream:
            parser.parse(stream)
        parser.title()
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.lines: list[Line] = []
        self.state = ParserState.OUTSIDE
        self.encoding = encoding
        self._toc: list[TocEntry] | None = None

    def parse(self, stream: Iterable[str] | Iterable[bytes]) -> None:
        """Read the stream to its end and classify every line.

        Args:
            stream: Text or binary stream, or any iterable of lines. Byte
                lines are decoded with the parser encoding, which must keep
                ASCII bytes unchanged. Whole documents held in a `str` go
                through `parse_gemtext` instead.

        Returns:
            None.

        Raises:
            ReadError: If reading or decoding the stream fails. Lines read
                before the failure remain in `lines`.
            TypeError: If `stream` is a string or bytes object rather than a
                stream of lines.
        """
        if isinstance(stream, (str, bytes, bytearray)):
            raise TypeError("parse() expects a stream or an iterable of lines, not a string")

        line_number = 0
        iterator = iter(stream)
        while True:
            try:
                raw = next(iterator)
                if isinstance(raw, bytes):
                    raw = raw.decode(self.encoding)
            except StopIteration:
                return
            except (OSError, UnicodeDecodeError) as error:
                raise ReadError(line_number, str(error)) from error

            line, self.state = classify_line(_strip_line_ending(raw), self.state)
            self.lines.append(line)
            line_number += 1

    def table_of_contents(self, force: bool = False) -> list[TocEntry]:
        """Return the numbered headings of the document.

        Args:
            force: Recompute from `lines` even if a table of contents was
                already computed.

        Returns:
            list[TocEntry]: Headings with their section numbers, in document
                order. The list is a copy; changing it leaves the cache
                untouched.
        """
        if self._toc is None or force:
            self._toc = build_table_of_contents(self.lines)
        return list(self._toc)

    def title(self) -> str:
        """Return the text of the first level-1 heading, or an empty string.

        Uses the cached table of contents without forcing recomputation.
        """
        return find_title(self.table_of_contents(force=False))


def parse_gemtext(content: str) -> Parser:
    """Parse gemtext content held in memory.

    Args:
        content: The document text.

    Returns:
        Parser: Parser holding the classified lines.

    Examples:
        parse_gemtext("# Title\\n\\nHello\\n").lines
    """
    parser = Parser()
    parser.parse(io.StringIO(content))
    return parser


def parse_file(filepath: Path, encoding: str = DEFAULT_ENCODING) -> Parser:
    """Parse a gemtext file.

    Args:
        filepath: Path to the document.
        encoding: Encoding of the file content.

    Returns:
        Parser: Parser holding the classified lines.

    Raises:
        ReadError: If the file cannot be opened, read, or decoded.

    Examples:
        parser = parse_file(Path("index.gmi"))
    """
    parser = Parser(encoding=encoding)
    try:
        stream = safe_read(filepath)
    except IOError as error:
        raise ReadError(0, str(error)) from error

    with stream:
        parser.parse(stream)
    return parser
