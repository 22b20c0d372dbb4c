"""Data models for gemtext."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .constants import (
    HEADING_MARKER,
    LINK_PREFIX,
    LIST_PREFIX,
    MAX_HEADING_LEVEL,
    PREFORMAT_TOGGLE,
    QUOTE_PREFIX,
)


class LineType(Enum):
    """Kinds of lines found in a gemtext document.

    Attributes:
        TEXT: Plain text line, including empty lines.
        LINK: Link line (``=> target [name]``).
        PREFORMAT_TOGGLE: Line that opens or closes a preformatted block.
        PREFORMAT: Verbatim line inside a preformatted block.
        HEADING: Heading line (``#``, ``##`` or ``###``).
        UNORDERED_LIST: Unordered list item (``* item``).
        QUOTE: Quote line (``> quote``).
    """

    TEXT = auto()
    LINK = auto()
    PREFORMAT_TOGGLE = auto()
    PREFORMAT = auto()
    HEADING = auto()
    UNORDERED_LIST = auto()
    QUOTE = auto()


class ParserState(Enum):
    """Whether the parser is currently inside a preformatted block.

    Attributes:
        OUTSIDE: Lines are classified by their prefix.
        INSIDE: Every line is preformatted until the closing toggle.
    """

    OUTSIDE = auto()
    INSIDE = auto()


# Heading, list and quote lines read as text to consumers that only group
# paragraphs and special lines.
_TEXT_LIKE = frozenset({LineType.HEADING, LineType.UNORDERED_LIST, LineType.QUOTE})

_PREFIXES = {
    LineType.TEXT: "",
    LineType.LINK: LINK_PREFIX,
    LineType.PREFORMAT_TOGGLE: PREFORMAT_TOGGLE,
    LineType.PREFORMAT: "",
    LineType.UNORDERED_LIST: LIST_PREFIX,
    LineType.QUOTE: QUOTE_PREFIX,
}


@dataclass(frozen=True)
class Line:
    """A single classified line of a gemtext document.

    Attributes:
        type: The true kind of the line.
        data: Primary payload. The target for links, the verbatim content for
            preformatted lines, and the trimmed content otherwise.
        meta: Display name of a link; empty for every other kind.
        level: Heading level between 1 and 3; zero for every other kind.

    Raises:
        ValueError: If `level` or `meta` do not fit the line type.

    Examples:
        Line.heading("Introduction", 2)
        Line.link("gemini://example.org/", "Example")
    """

    type: LineType
    data: str = ""
    meta: str = ""
    level: int = 0

    def __post_init__(self):
        if self.type is LineType.HEADING:
            if not 1 <= self.level <= MAX_HEADING_LEVEL:
                raise ValueError(
                    f"Heading level must be between 1 and {MAX_HEADING_LEVEL}, got {self.level}"
                )
        elif self.level != 0:
            raise ValueError(f"Only headings carry a level, got {self.level} for {self.type.name}")

        if self.meta and self.type is not LineType.LINK:
            raise ValueError(f"Only links carry a display name, got one for {self.type.name}")

    @classmethod
    def text(cls, data: str) -> Line:
        return cls(LineType.TEXT, data)

    @classmethod
    def link(cls, target: str, name: str = "") -> Line:
        return cls(LineType.LINK, target, name)

    @classmethod
    def preformat_toggle(cls, alt_text: str = "") -> Line:
        return cls(LineType.PREFORMAT_TOGGLE, alt_text)

    @classmethod
    def preformat(cls, data: str) -> Line:
        return cls(LineType.PREFORMAT, data)

    @classmethod
    def heading(cls, data: str, level: int) -> Line:
        return cls(LineType.HEADING, data, level=level)

    @classmethod
    def list_item(cls, data: str) -> Line:
        return cls(LineType.UNORDERED_LIST, data)

    @classmethod
    def quote(cls, data: str) -> Line:
        return cls(LineType.QUOTE, data)

    @property
    def core_type(self) -> LineType:
        """Coarse grouping where headings, list items and quotes count as text."""
        if self.type in _TEXT_LIKE:
            return LineType.TEXT
        return self.type

    @property
    def prefix(self) -> str:
        """The marker that introduces this kind of line."""
        if self.type is LineType.HEADING:
            return HEADING_MARKER * self.level
        return _PREFIXES[self.type]

    def __str__(self) -> str:
        if self.type in (LineType.TEXT, LineType.PREFORMAT, LineType.PREFORMAT_TOGGLE):
            return self.data
        if self.type is LineType.LINK and self.meta:
            return f"{self.prefix} {self.data} {self.meta}"
        return f"{self.prefix} {self.data}"

