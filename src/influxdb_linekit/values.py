"""Field value model for line protocol.

A :class:`Value` either wraps a typed python scalar (``native``) or keeps
already-encoded text (``raw``) together with a declared or guessed type.
Raw text keeps the caller's formatting on output; native values are
formatted from scratch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union
import math
import re

from pandas.api.types import is_bool, is_float, is_integer

from .exceptions import InvalidMeasurementError


class ValueType(Enum):
    STRING = "string"
    FLOAT = "float"
    INT = "integer"
    BOOL = "boolean"


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

TRUE_LITERALS = frozenset({"t", "T", "true", "True", "TRUE"})
FALSE_LITERALS = frozenset({"f", "F", "false", "False", "FALSE"})

_INT_RE = re.compile(r"-?[0-9]+i?")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

Native = Union[str, float, int, bool]


def guess_type(text: str) -> ValueType:
    """Guess the line-protocol type of an untyped field string."""
    if text in TRUE_LITERALS or text in FALSE_LITERALS:
        return ValueType.BOOL
    if _INT_RE.fullmatch(text):
        return ValueType.INT
    if _FLOAT_RE.fullmatch(text):
        return ValueType.FLOAT
    return ValueType.STRING


def escape_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def format_float(value: float) -> str:
    if not math.isfinite(value):
        raise InvalidMeasurementError(f"Cannot write non-finite float {value!r}")
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


@dataclass(frozen=True)
class Value:
    """One field (or query cell) value."""

    type: ValueType
    native: Optional[Native] = None
    raw: Optional[str] = None

    # -------------------- Construction --------------------

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """Build a typed value from a python (or numpy) scalar."""
        if isinstance(obj, Value):
            return obj
        if is_bool(obj):
            return cls.boolean(bool(obj))
        if is_integer(obj):
            return cls.int64(int(obj))
        if is_float(obj):
            return cls.float64(float(obj))
        if isinstance(obj, str):
            return cls.string(obj)
        raise InvalidMeasurementError(
            f"Unsupported field value type: {type(obj).__name__}"
        )

    @classmethod
    def from_text(cls, text: str, value_type: Optional[ValueType] = None) -> "Value":
        """Wrap encoded text; the type is guessed unless given explicitly.

        Integer text must fit in 64 bits and float text must be finite.
        """
        value = cls(type=value_type or guess_type(text), raw=text)
        if value.type in (ValueType.INT, ValueType.FLOAT):
            try:
                number = value.value
            except ValueError as exc:
                raise InvalidMeasurementError(
                    f"{text!r} is not a valid {value.type.value} value"
                ) from exc
            if value.type is ValueType.INT and not INT64_MIN <= number <= INT64_MAX:
                raise InvalidMeasurementError(f"Integer {text} does not fit in 64 bits")
            if value.type is ValueType.FLOAT and not math.isfinite(number):
                raise InvalidMeasurementError(f"Cannot write non-finite float {text!r}")
        return value

    @classmethod
    def string(cls, value: str) -> "Value":
        return cls(type=ValueType.STRING, native=str(value))

    @classmethod
    def float64(cls, value: float) -> "Value":
        return cls(type=ValueType.FLOAT, native=float(value))

    @classmethod
    def int64(cls, value: int) -> "Value":
        value = int(value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidMeasurementError(f"Integer {value} does not fit in 64 bits")
        return cls(type=ValueType.INT, native=value)

    @classmethod
    def boolean(cls, value: bool) -> "Value":
        return cls(type=ValueType.BOOL, native=bool(value))

    # -------------------- Access --------------------

    @property
    def is_raw(self) -> bool:
        return self.raw is not None

    @property
    def value(self) -> Native:
        """The python value, parsed from the raw text when needed."""
        if self.raw is None:
            return self.native
        if self.type is ValueType.BOOL:
            return self.raw in TRUE_LITERALS
        if self.type is ValueType.INT:
            return int(self.raw[:-1] if self.raw.endswith("i") else self.raw)
        if self.type is ValueType.FLOAT:
            return float(self.raw)
        return self.raw

    def to_line_protocol(self) -> str:
        """Format as a line-protocol field value."""
        if self.raw is not None:
            if self.type is ValueType.INT and not self.raw.endswith("i"):
                return self.raw + "i"
            if self.type is ValueType.STRING:
                return f'"{escape_string(self.raw)}"'
            return self.raw

        if self.type is ValueType.BOOL:
            return "true" if self.native else "false"
        if self.type is ValueType.INT:
            return f"{self.native}i"
        if self.type is ValueType.FLOAT:
            return format_float(self.native)
        return f'"{escape_string(self.native)}"'

    def __str__(self) -> str:
        return self.to_line_protocol()
