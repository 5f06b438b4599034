# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for parse results and their typed accessors."""

import pytest

from pparser.parser import ArgValue, ParseResult, ParseStatus


@pytest.fixture
def result() -> ParseResult:
    return ParseResult(
        command_path="tool run",
        keyword_values={
            "verbose": ArgValue.of_bool(True),
            "jobs": ArgValue.of_int(4),
            "ratio": ArgValue.of_float(0.5),
            "output": ArgValue.of_string("out.txt"),
            "include": ArgValue.of_list(["a", "b"]),
            "unset": ArgValue.none(),
        },
        positional_values=[ArgValue.of_string("target"), ArgValue.of_int(3), ArgValue.of_list(["x"])],
        positional_names=["target", "count", "rest"],
    )


def test_defaults() -> None:
    empty = ParseResult()
    assert empty.status == ParseStatus.SUCCESS
    assert empty.ok
    assert empty.exit_code == 0
    assert empty.error_message == ""
    assert empty.keyword_values == {}
    assert empty.positional_values == []


def test_not_ok_for_help_and_errors() -> None:
    assert not ParseResult(status=ParseStatus.HELP_REQUESTED).ok
    assert not ParseResult(status=ParseStatus.PARSE_ERROR, exit_code=1).ok


def test_typed_keyword_getters(result: ParseResult) -> None:
    assert result.get_bool("verbose") is True
    assert result.get_int("jobs") == 4
    assert result.get_float("ratio") == 0.5
    assert result.get_string("output") == "out.txt"
    assert result.get_string_list("include") == ["a", "b"]


def test_getter_of_wrong_kind_is_none(result: ParseResult) -> None:
    assert result.get_int("output") is None
    assert result.get_string("unset") is None


def test_missing_keyword(result: ParseResult) -> None:
    assert not result.has_keyword_arg("missing")
    assert result.keyword("missing") is None
    assert result.get_bool("missing") is None


def test_positional_by_index_and_name(result: ParseResult) -> None:
    assert result.positional(0) == ArgValue.of_string("target")
    assert result.positional("count") == ArgValue.of_int(3)
    assert result.get_positional_string(0) == "target"
    assert result.get_positional_int("count") == 3
    assert result.get_positional_string_list("rest") == ["x"]
    assert result.get_positional_float("count") is None
    assert result.get_positional_bool(1) is None


@pytest.mark.parametrize("key", [3, -1, "missing"])
def test_positional_out_of_range(result: ParseResult, key: int | str) -> None:
    assert result.positional(key) is None


def test_to_dict(result: ParseResult) -> None:
    assert result.to_dict() == {
        "verbose": True,
        "jobs": 4,
        "ratio": 0.5,
        "output": "out.txt",
        "include": ["a", "b"],
        "unset": None,
        "target": "target",
        "count": 3,
        "rest": ["x"],
    }


def test_results_are_independent() -> None:
    first = ParseResult()
    first.keyword_values["x"] = ArgValue.of_int(1)
    assert ParseResult().keyword_values == {}


def test_json_dump_round_trips() -> None:
    original = ParseResult(command_path="tool", keyword_values={"n": ArgValue.of_int(2)})
    restored = ParseResult.model_validate_json(original.model_dump_json())
    assert restored == original
