"""
Parses a gemtext document and prints it as a debug dump, HTML, or an outline.
Reads standard input when no file is given.
"""

from __future__ import annotations

import io
from pathlib import Path

import click

from .config import OUTPUT_MODES, ConfigError, GemtextConfig, build_config
from .debug_print import render_debug
from .exceptions import ReadError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    read_limited,
    write_output,
)
from .html_render import render_document
from .parser import Parser, parse_file
from .toc import generate_toc_entries

__all__ = ["cli"]


def render(parser: Parser, config: GemtextConfig) -> list[str]:
    """Render a parsed document in the configured output mode."""
    if config.mode == "html":
        return render_document(parser, config)
    if config.mode == "toc":
        return generate_toc_entries(parser.table_of_contents(), config)
    return render_debug(parser)


@click.command()
@click.version_option()
@click.option("-m", "--mode", type=click.Choice(OUTPUT_MODES), help="Output mode")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file (default: stdout)",
)
@click.option("--encoding", help="Input encoding")
@click.option("--indent-chars", help="Indentation characters for the outline")
@click.option("--toc/--no-toc", "html_toc", default=None, help="Include the outline in HTML")
@click.option("-v", "--verbose", is_flag=True, help="Report parsing statistics on stderr")
@click.argument("filepath", required=False, type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str | None = None,
    mode: str | None = None,
    output: str | None = None,
    encoding: str | None = None,
    indent_chars: str | None = None,
    html_toc: bool | None = None,
    verbose: bool = False,
):
    """
    Entry point for rendering a gemtext document.

    Args:
        filepath: Path to the gemtext document; standard input when omitted.
        mode: Output mode (`debug`, `html`, or `toc`).
        output: File receiving the output instead of standard output.
        encoding: Override for the input encoding.
        indent_chars: Indentation characters for nested outline entries.
        html_toc: Whether HTML output includes the navigation outline.
        verbose: Report the number of lines and headings on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If the input path or configuration is invalid.
        click.ClickException: If the input cannot be read, exceeds the size
            limit, or the output cannot be written.

    Examples:
        gemtext index.gmi --mode html -o index.html
    """
    source: Path | None = None
    if filepath is not None:
        try:
            source = normalize_filepath(filepath)
        except ValueError as error:
            raise click.BadParameter(str(error)) from error

    search_path = source.parent if source is not None else Path.cwd()
    try:
        config = build_config(
            search_path,
            mode=mode,
            encoding=encoding,
            indent_chars=indent_chars,
            html_toc=html_toc,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        if source is None:
            content = read_limited(click.get_binary_stream("stdin"), max_file_size, "<stdin>")
            parser = Parser(encoding=config.encoding)
            parser.parse(io.BytesIO(content))
        else:
            enforce_file_size(collect_file_stat(source), max_file_size, source)
            parser = parse_file(source, encoding=config.encoding)
    except (ReadError, IOError) as error:
        raise click.ClickException(str(error)) from error

    if verbose:
        click.echo(
            f"Parsed {len(parser.lines)} lines with "
            f"{len(parser.table_of_contents())} headings from {source or '<stdin>'}",
            err=True,
        )

    content = "".join(render(parser, config))

    if output is None:
        click.echo(content, nl=False)
        return

    try:
        write_output(
            Path(output),
            content,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
