"""
confex — concrete validators.

File: src/confex/validators.py

Purpose
- Implement the type-specific parse and constraint logic for each value kind.

What should be included in this file
- String (length bounds, full-match pattern), Number (integer flag, inclusive bounds),
  Boolean (true/false/1/0), Enum (stringified membership) and Tuple (JSON shape match).

Functional requirements
- Raw inputs are the shapes an environment source can produce: ``str``, ``int`` or ``float``.
- The first failing check wins; errors carry the key being validated.

Non-functional requirements
- Deterministic error descriptions.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from confex.errors import RawValue, ValidationError
from confex.validator import T, Validator

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"true", "1"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"false", "0"})
_BOOLEAN_EXPECTED: Final[str] = 'boolean ("true", "false", "1", or "0")'

# ASCII-only numeric literals; "_" separators and non-ASCII digits are not numbers here.
_INTEGER_LITERAL: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
_DECIMAL_LITERAL: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_PREFIXED_INTEGER: Final[re.Pattern[str]] = re.compile(
    r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)"
)
_INFINITY_LITERAL: Final[re.Pattern[str]] = re.compile(r"[+-]?inf(?:inity)?", re.IGNORECASE)


@dataclass(frozen=True, slots=True, kw_only=True)
class StringValidator(Validator[str]):
    type_name = "string"

    min_len: int | None = None
    max_len: int | None = None
    regex: re.Pattern[str] | None = None

    def parse(self, raw: RawValue, key: str = "") -> str:
        text = stringify(raw)
        if self.min_len is not None and len(text) < self.min_len:
            raise ValidationError.constraint_violation(key, f"length >= {self.min_len}", raw)
        if self.max_len is not None and len(text) > self.max_len:
            raise ValidationError.constraint_violation(key, f"length <= {self.max_len}", raw)
        if self.regex is not None and self.regex.fullmatch(text) is None:
            raise ValidationError.constraint_violation(key, f"matches {self.regex.pattern}", raw)
        return text

    def min_length(self, value: int) -> StringValidator:
        return self._clone(min_len=_as_length(value, "min_length"))

    def max_length(self, value: int) -> StringValidator:
        return self._clone(max_len=_as_length(value, "max_length"))

    def pattern(self, value: str | re.Pattern[str]) -> StringValidator:
        compiled = value if isinstance(value, re.Pattern) else re.compile(value)
        return self._clone(regex=compiled)


@dataclass(frozen=True, slots=True, kw_only=True)
class NumberValidator(Validator[int | float]):
    type_name = "number"

    min_value: int | float | None = None
    max_value: int | float | None = None
    must_be_integer: bool = False

    def parse(self, raw: RawValue, key: str = "") -> int | float:
        value = _coerce_number(raw, key)

        if self.must_be_integer:
            if isinstance(value, float):
                if not value.is_integer():
                    raise ValidationError.constraint_violation(key, "integer", raw)
                value = int(value)

        if self.min_value is not None and value < self.min_value:
            raise ValidationError.constraint_violation(
                key, f">= {_format_number(self.min_value)}", raw
            )
        if self.max_value is not None and value > self.max_value:
            raise ValidationError.constraint_violation(
                key, f"<= {_format_number(self.max_value)}", raw
            )
        return value

    def describe_type(self) -> str:
        return "integer" if self.must_be_integer else self.type_name

    def min(self, value: int | float) -> NumberValidator:
        return self._clone(min_value=_as_bound(value, "min"))

    def max(self, value: int | float) -> NumberValidator:
        return self._clone(max_value=_as_bound(value, "max"))

    def integer(self) -> NumberValidator:
        return self._clone(must_be_integer=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class BooleanValidator(Validator[bool]):
    type_name = "boolean"

    def parse(self, raw: RawValue, key: str = "") -> bool:
        normalized = stringify(raw).strip().lower()
        if normalized in _BOOLEAN_TRUE:
            return True
        if normalized in _BOOLEAN_FALSE:
            return False
        raise ValidationError.type_mismatch(key, _BOOLEAN_EXPECTED, raw)

    def describe_type(self) -> str:
        return _BOOLEAN_EXPECTED


@dataclass(frozen=True, slots=True, kw_only=True)
class EnumValidator(Validator[T]):
    """Accepts one of a fixed set of values, compared by their text form."""

    type_name = "enum"

    def __post_init__(self) -> None:
        Validator.__post_init__(self)
        if not self.allowed_values:
            raise ValueError("EnumValidator requires at least one allowed value")

    def parse(self, raw: RawValue, key: str = "") -> T:
        text = stringify(raw)
        for choice in self.allowed_values or ():
            if stringify(choice) == text:
                return choice
        raise ValidationError.not_allowed(key, self.describe_allowed(), raw)


@dataclass(frozen=True, slots=True, kw_only=True)
class TupleValidator(Validator[tuple[object, ...]]):
    """Accepts one of a fixed set of tuples, given as JSON arrays in the environment."""

    type_name = "tuple"

    def __post_init__(self) -> None:
        if self.allowed_values is not None:
            for item in self.allowed_values:
                if isinstance(item, (str, bytes)) or not isinstance(item, Sequence):
                    raise ValueError(f"tuple value {item!r} is not a sequence")
            object.__setattr__(
                self, "allowed_values", tuple(tuple(item) for item in self.allowed_values)
            )
        if not self.allowed_values:
            raise ValueError("TupleValidator requires at least one allowed value")
        for item in self.allowed_values:
            try:
                canonical_json(item)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"tuple value {item!r} is not JSON serializable") from exc

    def parse(self, raw: RawValue, key: str = "") -> tuple[object, ...]:
        candidate: object = raw
        if isinstance(raw, str):
            try:
                candidate = json.loads(raw)
            except (json.JSONDecodeError, RecursionError):
                candidate = raw

        serialized = canonical_json(candidate)
        for choice in self.allowed_values or ():
            if canonical_json(choice) == serialized:
                return choice
        raise ValidationError.not_allowed(key, self.describe_allowed(), raw)

    def describe_allowed(self) -> str:
        values = self.allowed_values or ()
        return "one of: " + ", ".join(canonical_json(item) for item in values)


def stringify(value: object) -> str:
    """Return the text form used for comparisons (``true``/``false``, ``3`` for ``3.0``)."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def canonical_json(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _coerce_number(raw: RawValue, key: str) -> int | float:
    if isinstance(raw, bool):
        raise ValidationError.type_mismatch(key, "number", raw)

    value: int | float
    if isinstance(raw, (int, float)):
        value = raw
    else:
        text = str(raw).strip()
        if _INFINITY_LITERAL.fullmatch(text):
            raise ValidationError.type_mismatch(key, "finite number", raw)
        prefixed = _PREFIXED_INTEGER.fullmatch(text) is not None
        if not prefixed and _DECIMAL_LITERAL.fullmatch(text) is None:
            raise ValidationError.type_mismatch(key, "number", raw)
        try:
            if prefixed:
                value = int(text, 0)
            elif _INTEGER_LITERAL.fullmatch(text):
                value = int(text)
            else:
                value = float(text)
        except ValueError as exc:
            # int() refuses literals past sys.get_int_max_str_digits().
            raise ValidationError.type_mismatch(key, "number", raw) from exc

    if isinstance(value, float):
        if math.isnan(value):
            raise ValidationError.type_mismatch(key, "number", raw)
        if not math.isfinite(value):
            raise ValidationError.type_mismatch(key, "finite number", raw)
    return value


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_length(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


def _as_bound(value: int | float, name: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    return value


__all__ = [
    "BooleanValidator",
    "EnumValidator",
    "NumberValidator",
    "StringValidator",
    "TupleValidator",
    "canonical_json",
    "stringify",
]
