"""Structured logging setup for the confex CLI, with secret redaction."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Mapping, MutableMapping
from typing import IO, Any, Final, Literal

import structlog

LogFormat = Literal["json", "text"]

_MASK: Final[str] = "***REDACTED***"
_DEFAULT_LOGGER_NAME: Final[str] = "confex"
_LEVEL_ALIASES: Final[dict[str, str]] = {"WARN": "WARNING"}

# Substrings of event keys whose values are always masked.
_SECRET_KEY_FRAGMENTS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "password",
    "passphrase",
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "cookie",
    "private_key",
)

_INLINE_CREDENTIAL: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret|client_secret|authorization)\s*([:=])\s*[^\s,;]+"
)
_BEARER_CREDENTIAL: Final[re.Pattern[str]] = re.compile(r"(?i)\bbearer\s+[\w.~+/-]+=*")


def setup_logging(
    level: int | str = "WARNING",
    *,
    fmt: LogFormat = "text",
    stream: IO[str] | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Route confex log events to ``stream`` (stderr by default) and return the stdlib logger.

    Parameters
    ----------
    level:
        Level name or number; events below it are dropped.
    fmt:
        ``json`` for one JSON object per line, ``text`` for key=value lines.
    stream:
        Output stream. Never stdout by default, so command output stays parseable.
    logger_name:
        Stdlib logger to configure; library modules log beneath ``confex``.
    """

    resolved_level = parse_log_level(level)
    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    elif fmt == "text":
        renderer = structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "event"], sort_keys=True
        )
    else:
        raise ValueError(f"unsupported log format {fmt!r}")

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_event,
            renderer,
        ],
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = _detach_handlers(logger_name)
    logger.addHandler(handler)
    logger.setLevel(resolved_level)
    logger.propagate = False
    return logger


def reset_logging(logger_name: str = _DEFAULT_LOGGER_NAME) -> None:
    """Detach handlers installed by ``setup_logging`` and restore structlog defaults."""

    logger = _detach_handlers(logger_name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    structlog.reset_defaults()


def redact_event(
    _logger: object, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking sensitive keys and secret-looking strings."""

    for key, value in list(event_dict.items()):
        event_dict[key] = _mask(value, key)
    return event_dict


def parse_log_level(value: int | str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        level = logging.getLevelNamesMapping().get(_LEVEL_ALIASES.get(name, name))
        if level is not None:
            return level
    raise ValueError(f"unsupported logging level {value!r}")


def _detach_handlers(logger_name: str) -> logging.Logger:
    logger = logging.getLogger(logger_name)
    while logger.handlers:
        handler = logger.handlers[0]
        logger.removeHandler(handler)
        handler.close()
    return logger


def _mask(value: object, key: str | None = None) -> object:
    if key is not None and any(part in key.lower() for part in _SECRET_KEY_FRAGMENTS):
        return _MASK
    if isinstance(value, str):
        masked = _INLINE_CREDENTIAL.sub(lambda m: f"{m.group(1)}{m.group(2)}{_MASK}", value)
        return _BEARER_CREDENTIAL.sub(f"Bearer {_MASK}", masked)
    if isinstance(value, Mapping):
        return {name: _mask(item, str(name)) for name, item in value.items()}
    if isinstance(value, (list, tuple)):
        items = [_mask(item) for item in value]
        return items if isinstance(value, list) else tuple(items)
    return value


__all__ = ["LogFormat", "parse_log_level", "redact_event", "reset_logging", "setup_logging"]
