"""
confex — structured validation errors.

File: src/confex/errors.py

Purpose
- Define the single error taxonomy raised by validators and the schema runner.

What should be included in this file
- ``ValidationError`` carrying key, expected description, actual raw value and context.
- Named constructors for the failure kinds (missing, type mismatch, constraint, not allowed).
- An aggregate error for collect-all reports and the call-order error for runner queries.

Functional requirements
- Messages are deterministic and name the offending key.

Non-functional requirements
- No side effects; errors never log.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

RawValue = str | int | float

MISSING_REQUIRED_CONTEXT: Final[str] = "environment variable is required but not set"
TYPE_MISMATCH_CONTEXT: Final[str] = "type validation failed"
CONSTRAINT_CONTEXT: Final[str] = "constraint validation failed"
NOT_ALLOWED_CONTEXT: Final[str] = "value is not in the allowed set"
UNDECLARED_CONTEXT: Final[str] = "undeclared variable in strict mode"


class ValidationError(ValueError):
    """Raised when a raw value fails its validator."""

    def __init__(
        self,
        key: str,
        expected: str,
        actual: RawValue | None,
        context: str | None = None,
    ) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        self.context = context
        super().__init__(_render(key, expected, actual, context))

    @classmethod
    def missing_required(cls, key: str, expected: str) -> ValidationError:
        return cls(key, expected, None, MISSING_REQUIRED_CONTEXT)

    @classmethod
    def type_mismatch(cls, key: str, expected: str, actual: RawValue | None) -> ValidationError:
        return cls(key, expected, actual, TYPE_MISMATCH_CONTEXT)

    @classmethod
    def constraint_violation(
        cls, key: str, constraint: str, actual: RawValue | None
    ) -> ValidationError:
        return cls(key, constraint, actual, CONSTRAINT_CONTEXT)

    @classmethod
    def not_allowed(cls, key: str, allowed: str, actual: RawValue | None) -> ValidationError:
        return cls(key, allowed, actual, NOT_ALLOWED_CONTEXT)

    @property
    def is_missing(self) -> bool:
        return self.actual is None and self.context == MISSING_REQUIRED_CONTEXT

    def to_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "expected": self.expected,
            "actual": self.actual,
            "context": self.context,
        }


class ValidationErrorGroup(ValueError):
    """Raised when a collect-all validation pass found one or more failures."""

    def __init__(self, errors: Sequence[ValidationError]) -> None:
        self.errors = tuple(errors)
        if not self.errors:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(
                f"- {item.key or 'value'}: expected {item.expected}" for item in self.errors
            )
        super().__init__(f"invalid environment:\n{rendered}")


class InvalidCallOrderError(RuntimeError):
    """Raised when configuration values are queried before a successful validation."""


def _render(key: str, expected: str, actual: RawValue | None, context: str | None) -> str:
    formatted_key = f'"{key}"' if key else "value"
    formatted_actual = "undefined" if actual is None else f'"{actual}"'
    context_part = f" ({context})" if context else ""
    return (
        f"Validation failed for {formatted_key}{context_part}.\n"
        f"  Expected: {expected}\n"
        f"  Received: {formatted_actual}"
    )


__all__ = [
    "CONSTRAINT_CONTEXT",
    "InvalidCallOrderError",
    "MISSING_REQUIRED_CONTEXT",
    "NOT_ALLOWED_CONTEXT",
    "RawValue",
    "TYPE_MISMATCH_CONTEXT",
    "UNDECLARED_CONTEXT",
    "ValidationError",
    "ValidationErrorGroup",
]
