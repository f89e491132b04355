"""Incremental schema builder producing ``Confex`` runners."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from confex.runner import Confex
from confex.validator import Validator


class ConfexBuilder:
    """Collect fields one at a time, then build a runner.

    Keys are the short names used to index the validated result. A prefix set with
    ``with_prefix`` is prepended to every key for environment lookups only, so
    ``builder().with_prefix("APP_").field("PORT", port()).build()`` reads ``APP_PORT``
    and exposes the value as ``PORT``.
    """

    def __init__(self) -> None:
        self._schema: dict[str, Validator[Any]] = {}
        self._prefix = ""
        self._strict = False

    def field(self, key: str, validator: Validator[Any]) -> ConfexBuilder:
        if not isinstance(key, str) or not key:
            raise ValueError("field key must be a non-empty string")
        if not isinstance(validator, Validator):
            raise TypeError(f"field {key!r} needs a Validator, got {type(validator).__name__}")
        self._schema[key] = validator
        return self

    def fields(self, schema: Mapping[str, Validator[Any]]) -> ConfexBuilder:
        for key, validator in schema.items():
            self.field(key, validator)
        return self

    def with_prefix(self, prefix: str) -> ConfexBuilder:
        if not isinstance(prefix, str):
            raise TypeError(f"prefix must be a string, got {type(prefix).__name__}")
        self._prefix = prefix
        return self

    def strict_mode(self, strict: bool = True) -> ConfexBuilder:
        """Reject undeclared variables that carry the configured prefix."""

        self._strict = strict
        return self

    def build(self) -> Confex:
        return Confex(self._schema, prefix=self._prefix, strict=self._strict)


def builder() -> ConfexBuilder:
    return ConfexBuilder()


__all__ = ["ConfexBuilder", "builder"]
