"""
confex — schema runner.

File: src/confex/runner.py

Purpose
- Run a schema (key -> validator) against an explicit key/value source and expose the
  typed result.

What should be included in this file
- ``Confex``: validate (first failure aborts), get/get_value/is_validated queries,
  a non-raising collect-all ``check`` pass and a redacted dump for logs.
- Optional key prefix for lookups and strict rejection of undeclared prefixed variables.
- ``define_config`` one-shot helper.

Functional requirements
- Queries before a successful validation raise ``InvalidCallOrderError``.
- A failed validation discards any previously stored result.
- Results are keyed by the short schema key; lookups and errors use ``prefix + key``.

Non-functional requirements
- Never mutates the environment; logs key names only, never values.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

import structlog

from confex.errors import (
    UNDECLARED_CONTEXT,
    InvalidCallOrderError,
    ValidationError,
    ValidationErrorGroup,
)
from confex.validator import Validator

Schema = Mapping[str, Validator[Any]]

REDACTED_VALUE: Final[str] = "<redacted>"

_CAMEL_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SENSITIVE_KEY_TOKENS: Final[frozenset[str]] = frozenset(
    {
        "secret",
        "token",
        "password",
        "passwd",
        "apikey",
        "private",
        "credential",
        "credentials",
        "auth",
    }
)
_SENSITIVE_KEY_PHRASES: Final[tuple[str, ...]] = (
    "api_key",
    "access_token",
    "refresh_token",
    "client_secret",
    "private_key",
    "password",
    "secret",
)
_NOT_VALIDATED_MESSAGE: Final[str] = (
    "Configuration must be validated before calling get(). Call validate() first."
)


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of a collect-all validation pass."""

    values: dict[str, Any] | None
    errors: tuple[ValidationError, ...] = field(default=())

    @property
    def is_valid(self) -> bool:
        return self.values is not None and not self.errors

    def raise_for_errors(self) -> dict[str, Any]:
        if self.values is None or self.errors:
            raise ValidationErrorGroup(self.errors)
        return self.values


class Confex:
    """Validate environment values against a schema and expose the typed result."""

    def __init__(
        self,
        schema: Schema,
        *,
        prefix: str = "",
        strict: bool = False,
        logger: Any | None = None,
    ) -> None:
        if not isinstance(prefix, str):
            raise TypeError(f"prefix must be a string, got {type(prefix).__name__}")
        self._schema: dict[str, Validator[Any]] = dict(schema)
        self._prefix = prefix
        self._strict = strict
        self._values: dict[str, Any] | None = None
        self._logger = (
            logger if logger is not None else structlog.wrap_logger(logging.getLogger(__name__))
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(keys={list(self._schema)!r}, prefix={self._prefix!r}, "
            f"strict={self._strict!r}, validated={self.is_validated()!r})"
        )

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def schema(self) -> dict[str, Validator[Any]]:
        return dict(self._schema)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._schema)

    def env_names(self) -> tuple[str, ...]:
        """Return the variable names looked up in the environment, in schema order."""

        return tuple(self._env_name(key) for key in self._schema)

    def validate(self, environ: Mapping[str, str] | None = None) -> Confex:
        """Validate every schema key in declared order; the first failure aborts the pass."""

        env_map = os.environ if environ is None else environ
        self._values = None

        result: dict[str, Any] = {}
        try:
            for key, validator in self._schema.items():
                result[key] = self._validate_one(key, validator, env_map)
            self._reject_undeclared(env_map)
        except ValidationError as exc:
            self._logger.debug(
                "confex_validation_failed",
                key=exc.key,
                expected=exc.expected,
                validated_keys=len(result),
            )
            raise

        self._values = result
        self._logger.debug(
            "confex_validation_passed",
            keys=list(result),
            prefix=self._prefix or None,
            strict=self._strict,
        )
        return self

    def check(self, environ: Mapping[str, str] | None = None) -> ValidationReport:
        """Validate every key and collect all failures; runner state is left untouched."""

        env_map = os.environ if environ is None else environ
        errors: list[ValidationError] = []
        values: dict[str, Any] = {}

        for key, validator in self._schema.items():
            try:
                values[key] = self._validate_one(key, validator, env_map)
            except ValidationError as exc:
                errors.append(exc)
        errors.extend(self._undeclared_errors(env_map))

        if errors:
            return ValidationReport(values=None, errors=tuple(errors))
        return ValidationReport(values=values)

    def get(self) -> dict[str, Any]:
        if self._values is None:
            raise InvalidCallOrderError(_NOT_VALIDATED_MESSAGE)
        return dict(self._values)

    def get_value(self, key: str) -> Any:
        values = self.get()
        if key not in values:
            raise KeyError(key)
        return values[key]

    def is_validated(self) -> bool:
        return self._values is not None

    def redacted(self) -> dict[str, Any]:
        """Return validated values with sensitive entries masked, suitable for logging."""

        return self.redact(self.get())

    def redact(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Mask entries whose validator is marked secret or whose key looks sensitive."""

        out: dict[str, Any] = {}
        for key, value in values.items():
            out[key] = REDACTED_VALUE if self.is_sensitive(key) else value
        return out

    def is_sensitive(self, key: str) -> bool:
        """Return whether ``key`` (short key or prefixed variable name) holds a secret."""

        short_key = key
        if key not in self._schema and self._prefix and key.startswith(self._prefix):
            short_key = key[len(self._prefix) :]
        validator = self._schema.get(short_key)
        if validator is not None and validator.sensitive:
            return True
        return looks_sensitive_key(short_key)

    def _validate_one(
        self, key: str, validator: Validator[Any], environ: Mapping[str, str]
    ) -> Any:
        env_name = self._env_name(key)
        return validator.validate(environ.get(env_name), env_name)

    def _env_name(self, key: str) -> str:
        return self._prefix + key

    def _reject_undeclared(self, environ: Mapping[str, str]) -> None:
        errors = self._undeclared_errors(environ)
        if errors:
            raise errors[0]

    def _undeclared_errors(self, environ: Mapping[str, str]) -> list[ValidationError]:
        if not self._strict or not self._prefix:
            return []
        declared = set(self.env_names())
        errors: list[ValidationError] = []
        for name in sorted(environ):
            if not name.startswith(self._prefix) or name in declared:
                continue
            errors.append(
                ValidationError(
                    name,
                    f"no undeclared variables with prefix {self._prefix!r}",
                    environ[name],
                    UNDECLARED_CONTEXT,
                )
            )
        return errors


def define_config(schema: Schema, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Validate ``schema`` against ``environ`` (default ``os.environ``) and return the values."""

    return Confex(schema).validate(environ).get()


def looks_sensitive_key(key: str) -> bool:
    normalized = _normalize_key(key)
    if any(phrase in normalized for phrase in _SENSITIVE_KEY_PHRASES):
        return True
    tokens = tuple(token for token in normalized.split("_") if token)
    return any(token in _SENSITIVE_KEY_TOKENS for token in tokens)


def _normalize_key(key: str) -> str:
    with_boundaries = _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", key.strip())
    return _NON_ALNUM.sub("_", with_boundaries.lower()).strip("_")


__all__ = [
    "Confex",
    "REDACTED_VALUE",
    "Schema",
    "ValidationReport",
    "define_config",
    "looks_sensitive_key",
]
