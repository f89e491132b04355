"""Pre-configured validators and small helpers for common environment settings."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Final, Literal, Protocol, TypeVar

from confex.factories import boolean, enumeration, number, string
from confex.validators import BooleanValidator, EnumValidator, NumberValidator, StringValidator

NodeEnv = Literal["development", "staging", "production"]
LogLevel = Literal["error", "warn", "info", "debug"]

NODE_ENVS: Final[tuple[NodeEnv, ...]] = ("development", "staging", "production")
LOG_LEVELS: Final[tuple[LogLevel, ...]] = ("error", "warn", "info", "debug")
PORT_MIN: Final[int] = 1
PORT_MAX: Final[int] = 65535
NODE_ENV_VAR: Final[str] = "NODE_ENV"

_V_co = TypeVar("_V_co", covariant=True)


class _SupportsOptional(Protocol[_V_co]):
    def optional(self) -> _V_co: ...


def port(default: int = 3000) -> NumberValidator:
    return number(min=PORT_MIN, max=PORT_MAX, integer=True, default=default)


def node_env(default: NodeEnv = "development") -> EnumValidator[NodeEnv]:
    return enumeration(NODE_ENVS, default=default)


def log_level(default: LogLevel = "info") -> EnumValidator[LogLevel]:
    return enumeration(LOG_LEVELS, default=default)


def flag(default: bool = False) -> BooleanValidator:
    return boolean(default=default)


def url() -> StringValidator:
    return string()


def database_url() -> StringValidator:
    return string()


def email() -> StringValidator:
    return string()


def secret() -> StringValidator:
    """Required string with no default, masked in redacted dumps."""

    return string().secret()


def csv_list(defaults: Iterable[str] = ()) -> StringValidator:
    """Comma-separated list kept as text; split it with ``parse_csv``."""

    return string(default=",".join(defaults))


def timeout(default_ms: int = 5000) -> NumberValidator:
    return number(min=0, integer=True, default=default_ms)


def optional_of(validator: _SupportsOptional[_V_co]) -> _V_co:
    return validator.optional()


def is_development(env: str | None = None, environ: Mapping[str, str] | None = None) -> bool:
    return _node_env(env, environ) == "development"


def is_production(env: str | None = None, environ: Mapping[str, str] | None = None) -> bool:
    return _node_env(env, environ) == "production"


def parse_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def ensure_protocol(value: str, default_protocol: str = "https") -> str:
    if "://" in value:
        return value
    return f"{default_protocol}://{value}"


def _node_env(env: str | None, environ: Mapping[str, str] | None) -> str | None:
    if env is not None:
        return env
    env_map = os.environ if environ is None else environ
    return env_map.get(NODE_ENV_VAR)


__all__ = [
    "LOG_LEVELS",
    "LogLevel",
    "NODE_ENVS",
    "NODE_ENV_VAR",
    "NodeEnv",
    "PORT_MAX",
    "PORT_MIN",
    "csv_list",
    "database_url",
    "email",
    "ensure_protocol",
    "flag",
    "is_development",
    "is_production",
    "log_level",
    "node_env",
    "optional_of",
    "parse_csv",
    "port",
    "secret",
    "timeout",
    "url",
]
