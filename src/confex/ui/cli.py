"""Command-line interface router for confex."""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any, Final

import structlog
import yaml

from confex.builder import ConfexBuilder
from confex.errors import ValidationError
from confex.factories import enumeration
from confex.observability.logging import setup_logging
from confex.patterns import log_level
from confex.runner import REDACTED_VALUE, Confex
from confex.ui.render import TextReport

ENV_PREFIX: Final[str] = "CONFEX_"
OUTPUT_FORMATS: Final[tuple[str, ...]] = ("text", "json", "yaml")
EXIT_INVALID: Final[int] = 2

_CLI_SETTINGS: Final[dict[str, Any]] = {
    "LOG_LEVEL": log_level(default="warn"),
    "LOG_FORMAT": enumeration(("text", "json"), default="text"),
}


class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_INVALID) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="confex",
        description=(
            "confex: validate environment variables against a declared schema.\n\n"
            "Common workflows:\n"
            "  confex check app.settings:SCHEMA          Validate the current environment\n"
            "  confex describe app.settings:SCHEMA       List keys and expected values\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "target",
        help=(
            "Schema as module:attribute; the attribute may be a mapping of key to validator, "
            "a ConfexBuilder, a Confex runner, or a callable returning one of these."
        ),
    )
    common.add_argument(
        "--app-dir",
        default=".",
        help="Directory prepended to sys.path before importing the schema (default: .).",
    )
    common.add_argument("--prefix", default=None, help="Prefix prepended to every key.")
    common.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Reject undeclared variables carrying the prefix.",
    )
    common.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help=f"Log level for diagnostics on stderr (env: {ENV_PREFIX}LOG_LEVEL).",
    )
    common.add_argument(
        "--log-format",
        choices=("text", "json"),
        default=None,
        help=f"Log line format (env: {ENV_PREFIX}LOG_FORMAT).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Validate the process environment against a schema",
        description="Validate every declared key and report all failures at once.",
    )
    check_parser.add_argument(
        "--show-secrets",
        action="store_true",
        default=False,
        help="Print sensitive values instead of masking them.",
    )
    check_parser.set_defaults(handler=_cmd_check)

    describe_parser = subparsers.add_parser(
        "describe",
        parents=[common],
        help="List schema keys, variable names and expectations",
    )
    describe_parser.set_defaults(handler=_cmd_describe)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(
    argv: Sequence[str] | None = None, *, environ: Mapping[str, str] | None = None
) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    env_map = os.environ if environ is None else environ
    namespace.environ = env_map

    try:
        _configure_logging(namespace, env_map)
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


def main(argv: Sequence[str] | None = None) -> int:
    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace) -> int:
    runner = load_runner(args.target, prefix=args.prefix, strict=args.strict, app_dir=args.app_dir)
    report = runner.check(args.environ)
    show_secrets = bool(getattr(args, "show_secrets", False))

    values: dict[str, Any] | None = None
    if report.values is not None:
        values = dict(report.values) if show_secrets else runner.redact(report.values)
    errors = [_error_payload(runner, item, show_secrets=show_secrets) for item in report.errors]

    _cli_logger().info(
        "confex_check_completed",
        target=args.target,
        valid=report.is_valid,
        error_count=len(errors),
    )

    payload: dict[str, object] = {
        "command": "check",
        "target": args.target,
        "valid": report.is_valid,
        "values": values,
        "errors": errors,
    }
    exit_code = 0 if report.is_valid else EXIT_INVALID

    if args.output_format != "text":
        _emit(payload, args.output_format)
        return exit_code

    text = TextReport()
    if values is not None:
        text.line(f"Environment is valid ({len(values)} keys)")
        rows = [
            [key, runner.prefix + key, _display_value(value)] for key, value in values.items()
        ]
        text.table(["KEY", "VARIABLE", "VALUE"], rows)
    else:
        text.line(f"Environment is invalid ({len(errors)} errors)")
        for item in errors:
            text.failure(
                f"{item['key']}: expected {item['expected']}, received "
                f"{_display_actual(item['actual'])}"
            )
    text.write()
    return exit_code


def _cmd_describe(args: argparse.Namespace) -> int:
    runner = load_runner(args.target, prefix=args.prefix, strict=args.strict, app_dir=args.app_dir)

    entries: list[dict[str, object]] = []
    for key, validator in runner.schema.items():
        sensitive = runner.is_sensitive(key)
        default: object = None
        if validator.has_default:
            default = REDACTED_VALUE if sensitive else validator.default_value
        entries.append(
            {
                "key": key,
                "variable": runner.prefix + key,
                "expected": validator.describe_expected(),
                "required": validator.required,
                "default": default,
                "sensitive": sensitive,
            }
        )

    if args.output_format != "text":
        _emit({"command": "describe", "target": args.target, "fields": entries}, args.output_format)
        return 0

    text = TextReport()
    text.field("Schema", args.target)
    text.field("Strict", "yes" if runner.strict else "no")
    rows = [
        [
            str(entry["variable"]),
            str(entry["expected"]),
            "yes" if entry["required"] else "no",
            "" if entry["default"] is None else _display_value(entry["default"]),
        ]
        for entry in entries
    ]
    text.table(["VARIABLE", "EXPECTED", "REQUIRED", "DEFAULT"], rows, title="Fields:")
    text.write()
    return 0


# ---------------------------------------------------------------------------
# Schema loading
# ---------------------------------------------------------------------------


def load_runner(
    target: str,
    *,
    prefix: str | None = None,
    strict: bool = False,
    app_dir: str | None = None,
) -> Confex:
    """Import ``module:attribute`` and turn it into a ``Confex`` runner."""

    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise CLIError(f"schema target must look like module:attribute, got {target!r}")

    if app_dir is not None:
        resolved_dir = os.path.abspath(app_dir)
        if resolved_dir not in sys.path:
            sys.path.insert(0, resolved_dir)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise CLIError(f"unable to import schema module {module_name!r}: {exc}") from exc

    obj: object = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise CLIError(f"{module_name!r} has no attribute {attr_path!r}") from exc

    if callable(obj) and not isinstance(obj, (Confex, ConfexBuilder, type)):
        obj = obj()

    return _as_runner(obj, target, prefix=prefix, strict=strict)


def _as_runner(obj: object, target: str, *, prefix: str | None, strict: bool) -> Confex:
    if isinstance(obj, Mapping):
        schema_builder = ConfexBuilder()
        try:
            schema_builder.fields(obj)
        except (TypeError, ValueError) as exc:
            raise CLIError(f"{target!r} is not a valid schema: {exc}") from exc
        obj = schema_builder
    if isinstance(obj, ConfexBuilder):
        if prefix is not None:
            obj.with_prefix(prefix)
        if strict:
            obj.strict_mode(True)
        return obj.build()
    if isinstance(obj, Confex):
        if prefix is None and not strict:
            return obj
        return Confex(
            obj.schema,
            prefix=obj.prefix if prefix is None else prefix,
            strict=obj.strict or strict,
        )
    raise CLIError(
        f"{target!r} must be a mapping of validators, a ConfexBuilder or a Confex, "
        f"got {type(obj).__name__}"
    )


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _emit(payload: Mapping[str, object], output_format: str) -> None:
    if output_format == "json":
        _emit_json(payload)
    else:
        _emit_yaml(payload)


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _emit_yaml(payload: Mapping[str, object]) -> None:
    rendered = yaml.safe_dump(
        _plain(payload), sort_keys=False, default_flow_style=False, allow_unicode=True
    )
    sys.stdout.write(rendered)


def _plain(value: object) -> object:
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _error_payload(
    runner: Confex, error: ValidationError, *, show_secrets: bool
) -> dict[str, object]:
    payload = error.to_dict()
    if not show_secrets and error.actual is not None and runner.is_sensitive(error.key):
        payload["actual"] = REDACTED_VALUE
    return payload


def _display_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _display_actual(value: object) -> str:
    if value is None:
        return "nothing (not set)"
    return f'"{value}"'


def _configure_logging(args: argparse.Namespace, environ: Mapping[str, str]) -> None:
    settings = Confex(_CLI_SETTINGS, prefix=ENV_PREFIX).validate(environ).get()
    level = args.log_level if args.log_level is not None else settings["LOG_LEVEL"]
    fmt = args.log_format if args.log_format is not None else settings["LOG_FORMAT"]
    try:
        setup_logging(level, fmt=fmt)
    except ValueError as exc:
        raise CLIError(str(exc)) from exc


def _cli_logger() -> Any:
    return structlog.wrap_logger(logging.getLogger(__name__))


__all__ = ["CLIError", "build_parser", "load_runner", "main", "run_cli"]
