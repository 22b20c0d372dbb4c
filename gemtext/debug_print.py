"""Debug dump of a parsed gemtext document."""

from __future__ import annotations

from .models import LineType
from .parser import Parser

_LABELS = {
    LineType.TEXT: "TEXT",
    LineType.UNORDERED_LIST: "LIST",
    LineType.QUOTE: "QUOT",
}


def render_debug(parser: Parser) -> list[str]:
    """Describe the table of contents and every line of a parsed document.

    The table of contents comes first, one ``"<number>\\t<heading>"`` line per
    heading, followed by an empty line and one labelled line per document line.
    Preformatted lines are indented with a tab while a block is open.

    Args:
        parser: Parser that has already consumed the document.

    Returns:
        list[str]: Output lines, each ending with a newline.

    Examples:
        render_debug(parse_gemtext("# Title\\n=> /about About\\n"))
        # ["1.\\t# Title\\n", "\\n", "H1:   Title\\n", "LINK: About (/about)\\n"]
    """
    output = [f"{entry.numbered()}\t{entry.heading}\n" for entry in parser.table_of_contents()]
    output.append("\n")

    preformatted = False
    for line in parser.lines:
        if line.type is LineType.LINK:
            output.append(f"LINK: {line.meta} ({line.data})\n")
        elif line.type is LineType.PREFORMAT_TOGGLE:
            closing = "; PFT:" if preformatted else ""
            output.append(f"PFTT: {line.data}{closing}\n")
            preformatted = not preformatted
        elif line.type is LineType.PREFORMAT:
            # Preformatted lines only show up unindented in hand-built documents
            indent = "\t" if preformatted else "PFT:  "
            output.append(f"{indent}{line.data}\n")
        elif line.type is LineType.HEADING:
            output.append(f"H{line.level}:   {line.data}\n")
        else:
            output.append(f"{_LABELS[line.type]}: {line.data}\n")

    return output
