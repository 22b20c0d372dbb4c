"""HTML rendering for parsed gemtext documents."""

from __future__ import annotations

from html import escape

from .anchors import unique_anchors
from .config import GemtextConfig, normalize_config, validate_config
from .models import LineType
from .parser import Parser


def render_contents(parser: Parser, config: GemtextConfig | None = None) -> list[str]:
    """Render the lines of a document as HTML.

    Consecutive list items share one ``<ul>``. A run of empty text lines
    separates paragraphs; a run of ``n`` empty lines followed by more content
    adds ``n - 1`` ``<br>`` lines.

    Args:
        parser: Parser that has already consumed the document.
        config: Configuration controlling anchor generation. Defaults to a
            new `GemtextConfig` when omitted.

    Returns:
        list[str]: HTML lines, each ending with a newline except the opening
            ``<pre>`` tag, which runs into the first preformatted line.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        "".join(render_contents(parse_gemtext("# Hi\\n* one\\n")))
    """
    config = normalize_config(config or GemtextConfig())
    validate_config(config)

    headings = [line.data for line in parser.lines if line.type is LineType.HEADING]
    anchors = iter(unique_anchors(headings, preserve_unicode=config.preserve_unicode))

    output: list[str] = []
    preformatted = False
    in_list = False
    breaks = 0

    for line in parser.lines:
        if in_list and line.type is not LineType.UNORDERED_LIST:
            output.append("</ul>\n")
            in_list = False

        if line.type is LineType.TEXT and line.data == "":
            breaks += 1
            continue
        if breaks > 0:
            output.extend(["<br>\n"] * (breaks - 1))
            breaks = 0

        data = escape(line.data)
        if line.type is LineType.TEXT:
            output.append(f"<p>{data}</p>\n")
        elif line.type is LineType.LINK:
            name = escape(line.meta) if line.meta else data
            output.append(f"<a href='{data}'>{name}</a>\n")
        elif line.type is LineType.PREFORMAT_TOGGLE:
            if preformatted:
                output.append("</pre>\n")
            elif line.data:
                output.append(f"<pre aria-label='{data}'>")
            else:
                output.append("<pre>")
            preformatted = not preformatted
        elif line.type is LineType.PREFORMAT:
            output.append(f"{data}\n")
        elif line.type is LineType.HEADING:
            output.append(
                f"<a name='{next(anchors)}'><h{line.level}>{data}</h{line.level}></a>\n"
            )
        elif line.type is LineType.UNORDERED_LIST:
            if not in_list:
                output.append("<ul>\n")
                in_list = True
            output.append(f"<li>{data}</li>\n")
        elif line.type is LineType.QUOTE:
            output.append(f"<blockquote>{data}</blockquote>\n")

    if in_list:
        output.append("</ul>\n")
    if preformatted:
        output.append("</pre>\n")

    return output


def render_toc(parser: Parser, config: GemtextConfig | None = None) -> list[str]:
    """Render the table of contents as an HTML navigation list.

    Entries link to the anchors produced by `render_contents`.

    Args:
        parser: Parser that has already consumed the document.
        config: Configuration controlling anchor generation.

    Returns:
        list[str]: HTML lines; empty when the document has no headings.

    Raises:
        ConfigError: If the configuration fails validation.
    """
    config = normalize_config(config or GemtextConfig())
    validate_config(config)

    entries = parser.table_of_contents()
    if not entries:
        return []

    anchors = unique_anchors(
        [entry.title for entry in entries], preserve_unicode=config.preserve_unicode
    )
    output = ["<nav>\n", "<ul>\n"]
    for entry, anchor in zip(entries, anchors):
        output.append(
            f"<li class='toc-h{entry.level}'>"
            f"<a href='#{anchor}'>{entry.numbered()} {escape(entry.title)}</a></li>\n"
        )
    output.extend(["</ul>\n", "</nav>\n"])
    return output


def render_document(parser: Parser, config: GemtextConfig | None = None) -> list[str]:
    """Render a complete HTML page titled after the first level-1 heading.

    Args:
        parser: Parser that has already consumed the document.
        config: Configuration controlling the navigation outline and anchors.

    Returns:
        list[str]: HTML lines of the page.

    Raises:
        ConfigError: If the configuration fails validation.
    """
    config = normalize_config(config or GemtextConfig())
    validate_config(config)

    output = [
        "<!DOCTYPE html>\n",
        "<html>\n",
        "<head>\n",
        "<meta charset='utf-8'>\n",
        f"<title>{escape(parser.title())}</title>\n",
        "</head>\n",
        "<body>\n",
    ]
    if config.html_toc:
        output.extend(render_toc(parser, config))
    output.extend(render_contents(parser, config))
    output.extend(["</body>\n", "</html>\n"])
    return output
