# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""The outcome of matching a command line against a command tree."""

from __future__ import annotations

import enum

from pydantic import BaseModel
from pydantic import Field as _Field

from pparser.parser.values import ArgValue

# ###############
# Public Interface
# ###############


class ParseStatus(enum.Enum):
    """Overall outcome of a parse."""

    SUCCESS = "success"
    HELP_REQUESTED = "help-requested"
    PARSE_ERROR = "parse-error"


class ParseResult(BaseModel):
    """Parsed values of the deepest matched command.

    On SUCCESS ``keyword_values`` holds one entry per non-help keyword
    argument of the matched command, and ``positional_values`` one entry per
    declared positional argument, in declaration order.
    """

    status: ParseStatus = ParseStatus.SUCCESS
    exit_code: int = 0
    error_message: str = ""
    command_path: str = ""
    keyword_values: dict[str, ArgValue] = _Field(default_factory=dict)
    positional_values: list[ArgValue] = _Field(default_factory=list)
    positional_names: list[str] = _Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.SUCCESS

    def has_keyword_arg(self, name: str) -> bool:
        return name in self.keyword_values

    def keyword(self, name: str) -> ArgValue | None:
        return self.keyword_values.get(name)

    def positional(self, key: int | str) -> ArgValue | None:
        """Look up a positional value by index or by declared name."""
        if isinstance(key, str):
            if key not in self.positional_names:
                return None
            key = self.positional_names.index(key)
        if 0 <= key < len(self.positional_values):
            return self.positional_values[key]
        return None

    # ------------------------------------------------------------------
    # Typed keyword getters (None when missing or of another kind)
    # ------------------------------------------------------------------

    def get_bool(self, name: str) -> bool | None:
        value = self.keyword(name)
        return value.get_bool() if value is not None else None

    def get_int(self, name: str) -> int | None:
        value = self.keyword(name)
        return value.get_int() if value is not None else None

    def get_float(self, name: str) -> float | None:
        value = self.keyword(name)
        return value.get_float() if value is not None else None

    def get_string(self, name: str) -> str | None:
        value = self.keyword(name)
        return value.get_string() if value is not None else None

    def get_string_list(self, name: str) -> list[str] | None:
        value = self.keyword(name)
        return value.get_string_list() if value is not None else None

    # ------------------------------------------------------------------
    # Typed positional getters
    # ------------------------------------------------------------------

    def get_positional_bool(self, key: int | str) -> bool | None:
        value = self.positional(key)
        return value.get_bool() if value is not None else None

    def get_positional_int(self, key: int | str) -> int | None:
        value = self.positional(key)
        return value.get_int() if value is not None else None

    def get_positional_float(self, key: int | str) -> float | None:
        value = self.positional(key)
        return value.get_float() if value is not None else None

    def get_positional_string(self, key: int | str) -> str | None:
        value = self.positional(key)
        return value.get_string() if value is not None else None

    def get_positional_string_list(self, key: int | str) -> list[str] | None:
        value = self.positional(key)
        return value.get_string_list() if value is not None else None

    def to_dict(self) -> dict[str, object]:
        """Plain-Python view of the parsed values keyed by argument name."""
        values: dict[str, object] = {name: value.to_python() for name, value in self.keyword_values.items()}
        for name, value in zip(self.positional_names, self.positional_values):
            values[name] = value.to_python()
        return values
