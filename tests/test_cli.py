from __future__ import annotations

import textwrap
from pathlib import Path

from gemtext.cli import cli

SAMPLE = """
# Capsule
Welcome!
## Posts
=> /first.gmi First post
### Archive
"""


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_debug_dump_by_default(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "1.\t# Capsule",
        "1.1.\t## Posts",
        "1.1.1.\t### Archive",
        "",
        "H1:   Capsule",
        "TEXT: Welcome!",
        "H2:   Posts",
        "LINK: First post (/first.gmi)",
        "H3:   Archive",
    ]


def test_cli_toc_mode(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target), "--mode", "toc", "--indent-chars", "-"])

    assert result.exit_code == 0
    assert result.output == "1. Capsule\n-1.1. Posts\n--1.1.1. Archive\n"


def test_cli_html_mode(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target), "-m", "html"])

    assert result.exit_code == 0
    assert "<title>Capsule</title>" in result.output
    assert "<a href='#posts'>1.1. Posts</a>" in result.output
    assert "<a href='/first.gmi'>First post</a>" in result.output


def test_cli_html_without_toc(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target), "-m", "html", "--no-toc"])

    assert result.exit_code == 0
    assert "<nav>" not in result.output


def test_cli_reads_stdin(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["--mode", "toc"], input="# From stdin\n### Deep\n")

    assert result.exit_code == 0
    assert result.output == "1. From stdin\n        1.0.1. Deep\n"


def test_cli_enforces_size_limit_on_stdin(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMTEXT_MAX_FILE_SIZE", "10")

    result = cli_runner.invoke(cli, ["--mode", "toc"], input="# From stdin\n### Deep\n")

    assert result.exit_code != 0
    assert "<stdin> exceeds the maximum allowed size of 10 bytes" in result.output


def test_cli_accepts_stdin_at_size_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMTEXT_MAX_FILE_SIZE", "10")

    result = cli_runner.invoke(cli, ["--mode", "toc"], input="# Exactly\n")

    assert result.exit_code == 0
    assert result.output == "1. Exactly\n"


def test_cli_rejects_encodings_that_rewrite_ascii(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["--encoding", "utf-16"], input="# Title\n")

    assert result.exit_code != 0
    assert "ASCII-compatible" in result.output


def test_cli_writes_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.gmi", SAMPLE)
    output = tmp_path / "index.html"

    result = cli_runner.invoke(cli, [str(target), "-m", "html", "-o", str(output)])

    assert result.exit_code == 0
    assert result.output == ""
    assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_cli_uses_project_configuration(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write(tmp_path, "pyproject.toml", '[tool.gemtext]\nmode = "toc"\nindent_spaces = 1\n')
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == "1. Capsule\n 1.1. Posts\n  1.1.1. Archive\n"


def test_cli_rejects_invalid_configuration(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write(tmp_path, ".gemtext.toml", '[gemtext]\nmode = "pdf"\n')
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "`mode` must be one of" in result.output


def test_cli_rejects_unknown_extension(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.md", SAMPLE)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a gemtext file" in result.output


def test_cli_enforces_file_size_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMTEXT_MAX_FILE_SIZE", "10")
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "maximum allowed size" in result.output


def test_cli_rejects_invalid_size_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GEMTEXT_MAX_FILE_SIZE", "lots")
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "GEMTEXT_MAX_FILE_SIZE" in result.output


def test_cli_reports_decoding_errors(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "broken.gmi"
    target.write_bytes(b"# Title\n\xff\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Failed to read input after line 1" in result.output


def test_cli_honours_encoding_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "latin.gmi"
    target.write_bytes("# Café\n".encode("latin-1"))

    result = cli_runner.invoke(cli, [str(target), "--encoding", "latin-1", "-m", "toc"])

    assert result.exit_code == 0
    assert result.output == "1. Café\n"


def test_cli_verbose_reports_statistics(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.gmi", SAMPLE)

    result = cli_runner.invoke(cli, [str(target), "-v", "-m", "toc"])

    assert result.exit_code == 0
    assert "Parsed 5 lines with 3 headings" in result.output
