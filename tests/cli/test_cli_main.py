# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the pparser CLI entry point."""

import sys
from pathlib import Path

import pytest

from pparser.cli.main import build_parser, main

# ###############
# Helpers
# ###############

_TREE_YAML = """\
name: git
subcommands:
  - name: commit
    aliases: [ci]
    options:
      - name: message
        short-name: -m
        long-name: --message
        type: single
        required: true
      - name: all
        short-name: -a
"""


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    """Run main() with the given arguments and return its exit code."""
    monkeypatch.setattr(sys, "argv", ["pparser", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


# ###############
# Root Command
# ###############


def test_main_no_args_prints_help_and_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run(monkeypatch) == 0
    out = capsys.readouterr().out
    assert out.startswith("Usage: pparser [options] <command>")
    assert "tokenize (tok)" in out


def test_help_flag(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "--help") == 0
    assert "check" in capsys.readouterr().out


def test_unknown_subcommand(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "bogus") == 1
    assert "Error: Unexpected argument: bogus" in capsys.readouterr().err


def test_build_parser_declares_subcommands() -> None:
    root = build_parser().root_command
    assert sorted(root.subcommands) == ["check", "tokenize"]


# -------- tokenize tests --------


def test_tokenize_prints_tokens(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """tokenize prints one line per token with its location and kind."""
    source = tmp_path / "line.cli"
    source.write_text('git commit -m "msg" 42\n', encoding="utf-8")

    assert _run(monkeypatch, "tokenize", str(source)) == 0
    assert capsys.readouterr().out.splitlines() == [
        "1:1\tIDENTIFIER\tgit",
        "1:5\tIDENTIFIER\tcommit",
        "1:12\tSHORT_FLAG\t-m",
        '1:15\tSTRING_LITERAL\t"msg"',
        "1:21\tINT_LITERAL\t42",
        "2:1\tEOF\t<EOF>",
    ]


def test_tokenize_with_spans(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "line.cli"
    source.write_text("add --force", encoding="utf-8")

    assert _run(monkeypatch, "tok", "--spans", str(source)) == 0
    assert capsys.readouterr().out.splitlines() == [
        "1:1\tIDENTIFIER\tadd\t[0, 3)",
        "1:5\tLONG_FLAG\t--force\t[4, 11)",
        "1:12\tEOF\t<EOF>\t[11, 11)",
    ]


def test_tokenize_lex_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """tokenize exits with code 1 and reports the location of a lexical error."""
    source = tmp_path / "bad.cli"
    source.write_text("ok\n  @", encoding="utf-8")

    assert _run(monkeypatch, "tokenize", str(source)) == 1
    err = capsys.readouterr().err
    assert "(2:3): invalid character" in err


def test_tokenize_missing_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(monkeypatch, "tokenize", str(tmp_path / "missing.cli")) == 1
    assert "does not exist" in capsys.readouterr().err


def test_tokenize_requires_file(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "tokenize") == 1
    assert "Missing required positional argument: file" in capsys.readouterr().err


# -------- check tests --------


def test_check_prints_resolved_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """check parses the arguments after '--' against the loaded tree."""
    tree = tmp_path / "tree.yaml"
    tree.write_text(_TREE_YAML, encoding="utf-8")

    assert _run(monkeypatch, "check", str(tree), "--", "ci", "-a", "-m", "hello world") == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Command: git commit"
    assert "  message = hello world" in out
    assert "  all = true" in out


def test_check_without_arguments(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tree = tmp_path / "tree.yaml"
    tree.write_text(_TREE_YAML, encoding="utf-8")

    assert _run(monkeypatch, "check", str(tree)) == 0
    assert capsys.readouterr().out == "Command: git\n"


def test_check_reports_parse_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tree = tmp_path / "tree.yaml"
    tree.write_text(_TREE_YAML, encoding="utf-8")

    assert _run(monkeypatch, "check", str(tree), "--", "commit") == 1
    err = capsys.readouterr().err
    assert "Error: Missing required option: -m, --message <value>" in err
    assert "Usage: git commit" in err


def test_check_help_of_checked_tree(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tree = tmp_path / "tree.yaml"
    tree.write_text(_TREE_YAML, encoding="utf-8")

    assert _run(monkeypatch, "check", str(tree), "--", "--help") == 0
    assert capsys.readouterr().out.startswith("Usage: git [options] <command>")


def test_check_invalid_definition(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tree = tmp_path / "tree.yaml"
    tree.write_text("name: git\nunknown-key: 1\n", encoding="utf-8")

    assert _run(monkeypatch, "check", str(tree)) == 1
    assert "invalid command definition" in capsys.readouterr().err


def test_check_missing_definition(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(monkeypatch, "check", str(tmp_path / "nope.yaml")) == 1
    assert "not found" in capsys.readouterr().err
