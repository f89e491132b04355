"""Option-style constructors for the concrete validators."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from confex.validator import T
from confex.validators import (
    BooleanValidator,
    EnumValidator,
    NumberValidator,
    StringValidator,
    TupleValidator,
)


def string(
    *,
    optional: bool = False,
    default: str | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | re.Pattern[str] | None = None,
) -> StringValidator:
    validator = StringValidator()
    if min_length is not None:
        validator = validator.min_length(min_length)
    if max_length is not None:
        validator = validator.max_length(max_length)
    if pattern is not None:
        validator = validator.pattern(pattern)
    if optional:
        validator = validator.optional()
    if default is not None:
        validator = validator.default(default)
    return validator


def number(
    *,
    optional: bool = False,
    default: int | float | None = None,
    min: int | float | None = None,  # noqa: A002
    max: int | float | None = None,  # noqa: A002
    integer: bool = False,
) -> NumberValidator:
    validator = NumberValidator()
    if min is not None:
        validator = validator.min(min)
    if max is not None:
        validator = validator.max(max)
    if integer:
        validator = validator.integer()
    if optional:
        validator = validator.optional()
    if default is not None:
        validator = validator.default(default)
    return validator


def boolean(*, optional: bool = False, default: bool | None = None) -> BooleanValidator:
    validator = BooleanValidator()
    if optional:
        validator = validator.optional()
    if default is not None:
        validator = validator.default(default)
    return validator


def enumeration(
    values: Iterable[T],
    *,
    optional: bool = False,
    default: T | None = None,
) -> EnumValidator[T]:
    """Build an enum validator accepting exactly ``values`` (declaration order kept)."""

    validator: EnumValidator[T] = EnumValidator(allowed_values=tuple(values))
    if optional:
        validator = validator.optional()
    if default is not None:
        validator = validator.default(default)
    return validator


def tuple_of(
    values: Iterable[Sequence[object]],
    *,
    optional: bool = False,
    default: Sequence[object] | None = None,
) -> TupleValidator:
    """Build a tuple validator accepting one of the fixed-shape ``values``."""

    validator = TupleValidator(allowed_values=tuple(values))
    if optional:
        validator = validator.optional()
    if default is not None:
        validator = validator.default(tuple(default))
    return validator


__all__ = ["boolean", "enumeration", "number", "string", "tuple_of"]
