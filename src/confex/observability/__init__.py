"""Public observability primitives: structured logging setup and redaction."""

from confex.observability.logging import (
    LogFormat,
    parse_log_level,
    redact_event,
    reset_logging,
    setup_logging,
)

__all__ = [
    "LogFormat",
    "parse_log_level",
    "redact_event",
    "reset_logging",
    "setup_logging",
]
