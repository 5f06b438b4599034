# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for YAML command-tree definitions."""

import io
import logging
from pathlib import Path

import pytest

from pparser.config import (
    CommandConfigError,
    CommandDefinition,
    build_command,
    load_command_definition,
    parse_command_definition,
)
from pparser.parser import ArgType, ArgumentParser, ArgValue, ParseResult, ValueKind

# ###############
# Helpers
# ###############

_GIT_YAML = """\
name: git
help: A version control tool
options:
  - name: verbose
    short-name: -v
    long-name: --verbose
subcommands:
  - name: commit
    help: Record changes
    aliases: [ci]
    options:
      - name: message
        short-name: -m
        long-name: --message
        type: single
        required: true
      - name: sign
        long-name: --sign
        default: true
  - name: clone
    positionals:
      - name: url
      - name: depth
        value-type: int
        required: false
        default: 1
"""


def _write_definition(tmp_path: Path, content: str) -> Path:
    """Write a definition file and return its path."""
    path = tmp_path / "tree.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def _parse(definition_text: str, line: str) -> ParseResult:
    parser = ArgumentParser.for_command(
        parse_command_definition(definition_text), stdout=io.StringIO(), stderr=io.StringIO()
    )
    return parser.parse(line)


# ###############
# Normal Cases
# ###############


def test_load_builds_command_tree(tmp_path: Path) -> None:
    command = load_command_definition(_write_definition(tmp_path, _GIT_YAML))
    assert command.name == "git"
    assert command.help == "A version control tool"
    assert sorted(command.subcommands) == ["clone", "commit"]
    assert command.subcommands["commit"].aliases == ("ci",)


def test_option_fields_are_mapped() -> None:
    commit = parse_command_definition(_GIT_YAML).subcommands["commit"]
    message = commit.find_keyword_arg("message", short=False)
    assert message.short_name == "-m"
    assert message.type == ArgType.SINGLE
    assert message.required


def test_true_flag_gets_negation() -> None:
    commit = parse_command_definition(_GIT_YAML).subcommands["commit"]
    assert commit.find_keyword_arg("no-sign", short=False).negated_flag_name == "sign"


def test_positional_value_type_and_default() -> None:
    clone = parse_command_definition(_GIT_YAML).subcommands["clone"]
    depth = clone.positional_args[1]
    assert depth.value_type == ValueKind.INT
    assert depth.default == ArgValue.of_int(1)
    assert not depth.required


def test_parsed_tree_matches_command_lines() -> None:
    result = _parse(_GIT_YAML, 'ci -m "initial import" --no-sign')
    assert result.ok
    assert result.command_path == "git commit"
    assert result.to_dict() == {"message": "initial import", "sign": False, "no_sign": True}


def test_typed_positional_from_definition() -> None:
    result = _parse(_GIT_YAML, "clone repo 5")
    assert result.to_dict() == {"url": "repo", "depth": 5}


def test_minimal_definition() -> None:
    command = parse_command_definition("name: tool\n")
    assert [arg.name for arg in command.keyword_args] == ["help"]


def test_multiple_option_default_list() -> None:
    text = """\
name: tool
options:
  - name: include
    short-name: -I
    type: multiple
    default: [a, b]
"""
    command = parse_command_definition(text)
    assert command.find_keyword_arg("I", short=True).default == ArgValue.of_list(["a", "b"])


def test_model_accepts_field_names() -> None:
    definition = CommandDefinition.model_validate(
        {"name": "tool", "options": [{"name": "out", "long_name": "--out", "type": "single"}]}
    )
    command = build_command(definition)
    assert command.find_keyword_arg("out", short=False).type == ArgType.SINGLE


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CommandConfigError, match="not found"):
        load_command_definition(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    path = _write_definition(tmp_path, "name: [unclosed\n")
    with pytest.raises(CommandConfigError, match="Invalid YAML"):
        load_command_definition(path)


def test_top_level_must_be_mapping() -> None:
    with pytest.raises(CommandConfigError, match="must be a YAML mapping"):
        parse_command_definition("- a\n- b\n", source_label="list.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "help: no name\n",
        "name: tool\ncolour: red\n",
        "name: tool\noptions:\n  - name: x\n    short-name: -x\n    type: triple\n",
        "name: tool\npositionals:\n  - name: x\n    type: flag\n",
        "name: tool\noptions:\n  - name: x\n    short-name: -x\n    default: {a: 1}\n",
        "name: tool\noptions:\n  - name: x\n    short-name: -x\n    value-type: complex\n",
    ],
)
def test_schema_violations(text: str) -> None:
    with pytest.raises(CommandConfigError, match="invalid command definition"):
        parse_command_definition(text)


def test_builder_errors_name_the_source() -> None:
    text = "name: tool\noptions:\n  - name: help\n    short-name: -x\n"
    with pytest.raises(CommandConfigError, match=r"^tree\.yaml: Argument name 'help' is reserved"):
        parse_command_definition(text, source_label="tree.yaml")


def test_sibling_alias_conflict() -> None:
    text = "name: tool\nsubcommands:\n  - name: build\n  - name: compile\n    aliases: [build]\n"
    with pytest.raises(CommandConfigError, match="conflicts"):
        parse_command_definition(text)


def test_errors_are_chained() -> None:
    with pytest.raises(CommandConfigError) as exc_info:
        parse_command_definition("name: tool\nextra: 1\n")
    assert exc_info.value.__cause__ is not None


def test_loading_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pparser.config")
    path = _write_definition(tmp_path, "name: tool\n")
    load_command_definition(path)
    assert f"Loading command definition from {path}" in caplog.text
    assert f"Built command tree 'tool' from {path}" in caplog.text


def test_default_must_match_value_type() -> None:
    text = "name: tool\npositionals:\n  - name: n\n    value-type: int\n    required: false\n    default: abc\n"
    with pytest.raises(CommandConfigError, match="expected int, got string"):
        parse_command_definition(text)
