from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from gemtext.config import (
    ConfigError,
    GemtextConfig,
    apply_overrides,
    build_config,
    load_config,
    normalize_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".gemtext.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.gemtext]
        mode = "html"
        encoding = "latin-1"
        indent_chars = "\\t"
        html_toc = false
        preserve_unicode = true
        max_file_size = 1024
        """,
    )

    config = load_config(tmp_path)

    assert config == GemtextConfig(
        mode="html",
        encoding="latin-1",
        indent_chars="\t",
        html_toc=False,
        preserve_unicode=True,
        max_file_size=1024,
    )


def test_dashed_keys_are_accepted(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.gemtext]
        html-toc = false
        """,
    )

    assert load_config(tmp_path).html_toc is False


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [gemtext]
        mode = "toc"
        indent_spaces = 2
        """,
    )

    config = load_config(tmp_path)

    assert config.mode == "toc"
    assert config.indent_chars == "  "


def test_pyproject_takes_precedence_over_dotfile(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.gemtext]\nmode = "html"\n')
    _write_dotfile(tmp_path, '[gemtext]\nmode = "toc"\n')

    assert load_config(tmp_path).mode == "html"


def test_searches_parent_directories(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.gemtext]\nmode = "toc"\n')
    nested = tmp_path / "capsule" / "posts"
    nested.mkdir(parents=True)

    assert load_config(nested).mode == "toc"


def test_pyproject_without_table_falls_through_to_defaults(tmp_path: Path):
    _write_pyproject(tmp_path, '[project]\nname = "unrelated"\n')

    assert load_config(tmp_path) == GemtextConfig()


def test_invalid_toml_is_skipped(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.gemtext\nmode = ")

    assert load_config(tmp_path) == GemtextConfig()


def test_unknown_keys_raise(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.gemtext]\nunknown = 1\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_table_raises(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool]\ngemtext = "html"\n')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "config",
    [
        GemtextConfig(mode="pdf"),
        GemtextConfig(encoding="no-such-codec"),
        GemtextConfig(encoding=""),
        GemtextConfig(encoding="utf-16"),
        GemtextConfig(encoding="utf-32"),
        GemtextConfig(indent_chars=""),
        GemtextConfig(indent_spaces=0),
        GemtextConfig(html_toc="yes"),
        GemtextConfig(preserve_unicode=1),
        GemtextConfig(max_file_size=0),
        GemtextConfig(max_file_size=True),
    ],
)
def test_validate_config_rejects_invalid_values(config: GemtextConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_normalize_config_lowercases_mode_and_applies_indent_spaces():
    config = normalize_config(GemtextConfig(mode="HTML", indent_spaces=3))

    assert config.mode == "html"
    assert config.indent_chars == "   "


def test_apply_overrides_ignores_none():
    config = GemtextConfig()

    assert apply_overrides(config, mode=None, encoding=None) is config


def test_apply_overrides_indent_chars_clears_indent_spaces():
    config = GemtextConfig(indent_spaces=4)

    updated = apply_overrides(config, indent_chars="\t")

    assert updated.indent_spaces is None
    assert normalize_config(updated).indent_chars == "\t"


def test_build_config_applies_overrides_over_files(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.gemtext]\nmode = "toc"\nhtml_toc = false\n')

    config = build_config(tmp_path, mode="html", html_toc=None)

    assert config.mode == "html"
    assert config.html_toc is False


def test_build_config_validates(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, mode="nope")


def test_validate_config_rejects_encodings_that_rewrite_ascii():
    with pytest.raises(ConfigError, match="ASCII-compatible"):
        validate_config(GemtextConfig(encoding="utf-16-le"))

    validate_config(GemtextConfig(encoding="latin-1"))
