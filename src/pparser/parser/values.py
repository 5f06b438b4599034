# Copyright 2026 PParser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tagged argument values used for parsed results and declared defaults."""

from __future__ import annotations

import enum
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr, model_validator

# ###############
# Public Interface
# ###############


class ValueKind(enum.Enum):
    """The tag of an ArgValue."""

    NONE = "none"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    STRING_LIST = "string-list"


class ArgValue(BaseModel):
    """An immutable tagged union of none, bool, int, float, string or string list.

    Exactly one payload is live, selected by ``kind``. Instances are frozen and
    string lists are stored as tuples, so copies never alias mutable state.
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueKind = ValueKind.NONE
    value: StrictBool | StrictInt | StrictFloat | StrictStr | tuple[StrictStr, ...] | None = None

    @model_validator(mode="after")
    def check_payload(self) -> ArgValue:
        expected = _PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.value is not None:
                raise ValueError("a none value carries no payload")
        elif type(self.value) is not expected:
            raise ValueError(f"{self.kind.value} value requires a {expected.__name__} payload")
        return self

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def none(cls) -> ArgValue:
        return _NONE

    @classmethod
    def of_bool(cls, value: bool) -> ArgValue:
        return cls(kind=ValueKind.BOOL, value=bool(value))

    @classmethod
    def of_int(cls, value: int) -> ArgValue:
        return cls(kind=ValueKind.INT, value=int(value))

    @classmethod
    def of_float(cls, value: float) -> ArgValue:
        return cls(kind=ValueKind.FLOAT, value=float(value))

    @classmethod
    def of_string(cls, value: str) -> ArgValue:
        return cls(kind=ValueKind.STRING, value=value)

    @classmethod
    def of_list(cls, values: Iterable[str]) -> ArgValue:
        return cls(kind=ValueKind.STRING_LIST, value=tuple(values))

    @classmethod
    def from_python(cls, value: object) -> ArgValue:
        """Convert a plain Python value (or an ArgValue) into an ArgValue.

        Raises:
            TypeError: If the value has no ArgValue representation.
        """
        if isinstance(value, ArgValue):
            return value
        if value is None:
            return _NONE
        # bool before int: bool is an int subclass.
        if isinstance(value, bool):
            return cls.of_bool(value)
        if isinstance(value, int):
            return cls.of_int(value)
        if isinstance(value, float):
            return cls.of_float(value)
        if isinstance(value, str):
            return cls.of_string(value)
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            return cls.of_list(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to an argument value")

    # ------------------------------------------------------------------
    # Type checks and safe getters
    # ------------------------------------------------------------------

    def is_none(self) -> bool:
        return self.kind is ValueKind.NONE

    def is_bool(self) -> bool:
        return self.kind is ValueKind.BOOL

    def is_int(self) -> bool:
        return self.kind is ValueKind.INT

    def is_float(self) -> bool:
        return self.kind is ValueKind.FLOAT

    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    def is_string_list(self) -> bool:
        return self.kind is ValueKind.STRING_LIST

    def get_bool(self) -> bool | None:
        return self.value if self.is_bool() else None

    def get_int(self) -> int | None:
        return self.value if self.is_int() else None

    def get_float(self) -> float | None:
        return self.value if self.is_float() else None

    def get_string(self, default: str | None = None) -> str | None:
        return self.value if self.is_string() else default

    def get_string_list(self) -> list[str] | None:
        """Return a fresh list copy of a string-list payload."""
        return list(self.value) if self.is_string_list() else None

    def to_python(self) -> bool | int | float | str | list[str] | None:
        """Return the payload as a plain Python value (lists as lists)."""
        if self.is_string_list():
            return self.get_string_list()
        return self.value

    def format(self) -> str:
        """Human-readable rendering used in help text and tool output."""
        if self.kind is ValueKind.NONE:
            return "<none>"
        if self.kind is ValueKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is ValueKind.STRING_LIST:
            return "[" + ", ".join(self.value) + "]"
        return str(self.value)

    def __str__(self) -> str:
        return self.format()


# ################
# Implementation
# ################

_PAYLOAD_TYPES: dict[ValueKind, type | None] = {
    ValueKind.NONE: None,
    ValueKind.BOOL: bool,
    ValueKind.INT: int,
    ValueKind.FLOAT: float,
    ValueKind.STRING: str,
    ValueKind.STRING_LIST: tuple,
}

_NONE = ArgValue()
