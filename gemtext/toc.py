"""Table of contents generation for gemtext documents."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .config import GemtextConfig, normalize_config, validate_config
from .constants import MAX_HEADING_LEVEL
from .models import Line, LineType


@dataclass(frozen=True)
class TocEntry:
    """A heading together with its position in the document outline.

    Attributes:
        section: Section number path, one counter per heading level. For
            example, ``(1, 2, 0)`` is the second subsection of the first section.
        heading: The heading line the entry was built from.
    """

    section: tuple[int, ...]
    heading: Line

    @property
    def title(self) -> str:
        return self.heading.data

    @property
    def level(self) -> int:
        return self.heading.level

    def numbered(self) -> str:
        """Render the section number, e.g. ``"1."``, ``"1.2."`` or ``"2.0.1."``."""
        return format_section_number(self.section)

    def __str__(self) -> str:
        return f"{self.numbered()} {self.heading.data}"


def build_table_of_contents(lines: Iterable[Line]) -> list[TocEntry]:
    """Number every heading of a document in document order.

    A heading at level ``L`` increments counter ``L - 1`` and resets every
    deeper counter. Skipped levels are not filled in, so a level-3 heading
    directly under a level-1 heading is numbered ``(1, 0, 1)``.

    Args:
        lines: Classified lines of the document.

    Returns:
        list[TocEntry]: One entry per heading, each holding its own snapshot of
            the counters.

    Examples:
        build_table_of_contents([Line.heading("A", 1), Line.heading("B", 3)])
        # [TocEntry((1, 0, 0), ...), TocEntry((1, 0, 1), ...)]
    """
    counters = [0] * MAX_HEADING_LEVEL
    entries: list[TocEntry] = []

    for line in lines:
        level = line.level
        if line.type is not LineType.HEADING or not 1 <= level <= MAX_HEADING_LEVEL:
            continue

        counters[level - 1] += 1
        for index in range(level, MAX_HEADING_LEVEL):
            counters[index] = 0

        entries.append(TocEntry(section=tuple(counters), heading=line))

    return entries


def format_section_number(section: tuple[int, ...]) -> str:
    """Render a section number path as dotted text.

    The first counter is always printed. Later counters are printed, zeros
    included, until only zeros remain.

    Args:
        section: Section number path.

    Returns:
        str: Dotted section number ending with a period.

    Examples:
        format_section_number((1, 0, 0))  # "1."
        format_section_number((1, 2, 0))  # "1.2."
        format_section_number((2, 0, 1))  # "2.0.1."
    """
    parts = [f"{section[0]}."]
    for index in range(1, len(section)):
        if not any(section[index:]):
            break
        parts.append(f"{section[index]}.")
    return "".join(parts)


def find_title(entries: Iterable[TocEntry]) -> str:
    """Return the text of the first top-level heading, or an empty string."""
    for entry in entries:
        if entry.section[0] == 1:
            return entry.title
    return ""


def generate_toc_entries(
    entries: Iterable[TocEntry], config: GemtextConfig | None = None
) -> list[str]:
    """Render a plain-text outline from table-of-contents entries.

    Args:
        entries: Entries produced by `build_table_of_contents`.
        config: Configuration providing the indentation. Defaults to a new
            `GemtextConfig` when omitted.

    Returns:
        list[str]: Outline lines, each ending with a newline.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        generate_toc_entries(parser.table_of_contents())
        # ["1. Title\\n", "    1.1. Section\\n"]
    """
    config = normalize_config(config or GemtextConfig())
    validate_config(config)

    return [
        f"{config.indent_chars * (entry.level - 1)}{entry.numbered()} {entry.title}\n"
        for entry in entries
    ]
