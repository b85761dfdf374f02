"""Tests for gobertura/gomod.py"""

import pytest

from gobertura.gomod import GoModError, read_module_path


def _write(tmp_path, content: str):
    p = tmp_path / "go.mod"
    p.write_text(content, encoding="utf-8")
    return p


def test_module_path_gets_trailing_slash(tmp_path):
    p = _write(tmp_path, "module github.com/acme/widget\n\ngo 1.22\n")
    assert read_module_path(p) == "github.com/acme/widget/"


def test_module_directive_after_comments(tmp_path):
    p = _write(tmp_path, "// Widget module\n\nmodule example.com/w // main module\n")
    assert read_module_path(p) == "example.com/w/"


def test_quoted_module_path(tmp_path):
    p = _write(tmp_path, 'module "example.com/quoted"\n')
    assert read_module_path(p) == "example.com/quoted/"


def test_tab_separated_directive(tmp_path):
    p = _write(tmp_path, "module\texample.com/tab\n")
    assert read_module_path(p) == "example.com/tab/"


def test_require_lines_are_not_modules(tmp_path):
    p = _write(tmp_path, "go 1.21\nrequire example.com/dep v1.0.0\n")
    with pytest.raises(GoModError, match="No module directive"):
        read_module_path(p)


def test_missing_go_mod(tmp_path):
    with pytest.raises(GoModError, match="Cannot read"):
        read_module_path(tmp_path / "go.mod")
