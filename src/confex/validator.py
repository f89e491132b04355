"""
confex — validator protocol.

File: src/confex/validator.py

Purpose
- Define the immutable base validator shared by every value kind.

What should be included in this file
- The validate-or-default-or-fail contract.
- Fluent configuration (``optional``/``default``/``one_of``/``secret``) that always
  returns a new instance and never mutates the receiver.
- Allowed-values membership enforcement after type-specific parsing.

Functional requirements
- Subclasses only implement ``parse`` and, optionally, ``describe_type``.
- Errors raised from ``parse`` carry the key being validated.

Non-functional requirements
- Instances are frozen; constraint containers are tuples so chains never alias state.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Generic, Self, TypeVar, cast

from confex.errors import RawValue, ValidationError

T = TypeVar("T")


class _MissingType(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _MissingType.MISSING


@dataclass(frozen=True, slots=True, kw_only=True)
class Validator(ABC, Generic[T]):
    """Immutable rule that parses and constrains one raw value into ``T``."""

    type_name: ClassVar[str] = "valid value"

    required: bool = True
    default_value: T | _MissingType = MISSING
    allowed_values: tuple[T, ...] | None = None
    sensitive: bool = False

    def __post_init__(self) -> None:
        if self.allowed_values is not None and not isinstance(self.allowed_values, tuple):
            object.__setattr__(self, "allowed_values", tuple(self.allowed_values))

    @abstractmethod
    def parse(self, raw: RawValue, key: str = "") -> T:
        """Convert a present raw value into ``T`` or raise ``ValidationError``."""

    def validate(self, raw: RawValue | None, key: str = "") -> T:
        if raw is None:
            if not self.required and self.default_value is not MISSING:
                return cast("T", self.default_value)
            raise ValidationError.missing_required(key, self.describe_expected())

        parsed = self.parse(raw, key)

        if self.allowed_values is not None and parsed not in self.allowed_values:
            raise ValidationError.not_allowed(key, self.describe_allowed(), raw)

        return parsed

    @property
    def has_default(self) -> bool:
        return self.default_value is not MISSING

    def describe_type(self) -> str:
        return self.type_name

    def describe_allowed(self) -> str:
        values = self.allowed_values or ()
        return "one of " + " | ".join(f'"{_display(item)}"' for item in values)

    def describe_expected(self) -> str:
        if self.allowed_values is not None:
            return self.describe_allowed()
        return self.describe_type()

    def optional(self) -> Self:
        return self._clone(required=False)

    def default(self, value: T) -> Self:
        return self._clone(required=False, default_value=value)

    def one_of(self, values: Iterable[T]) -> Self:
        return self._clone(allowed_values=tuple(values))

    def secret(self) -> Self:
        """Mark values of this validator as sensitive for redacted dumps."""

        return self._clone(sensitive=True)

    def _clone(self, **changes: object) -> Self:
        return dataclasses.replace(self, **changes)


def _display(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = ["MISSING", "T", "Validator"]
