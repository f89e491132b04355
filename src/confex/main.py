"""Process entrypoint for ``confex``: runs the CLI and maps every outcome to an exit code."""

from __future__ import annotations

import sys
import traceback
from collections.abc import Iterator, Sequence
from enum import IntEnum
from typing import Final

from confex.ui import cli as cli_module


class ExitCode(IntEnum):
    """Exit codes shared by ``python -m confex`` and the ``confex`` console script."""

    SUCCESS = 0
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


# ValidationError and ValidationErrorGroup are ValueErrors.
_CONFIG_ERROR_TYPES: Final[tuple[type[BaseException], ...]] = (
    ValueError,
    FileNotFoundError,
    PermissionError,
)


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    try:
        code: object = cli_module.run_cli(argv)
    except SystemExit as exc:
        code = exc.code
    except Exception as exc:  # noqa: BLE001 - process boundary
        exit_code = classify_exception(exc)
        _report_failure(exc, exit_code)
        return int(exit_code)
    return _coerce_exit_code(code)


def console_main() -> None:
    raise SystemExit(cli_entrypoint())


def classify_exception(exc: BaseException) -> ExitCode:
    """Config errors anywhere in the cause/context chain win; anything else is internal."""

    if any(isinstance(item, _CONFIG_ERROR_TYPES) for item in _walk_chain(exc)):
        return ExitCode.CONFIG_ERROR
    return ExitCode.INTERNAL_ERROR


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return int(ExitCode.SUCCESS)
    if isinstance(code, int) and not isinstance(code, bool):
        if code in {member.value for member in ExitCode}:
            return code
    elif isinstance(code, str) and code.strip():
        print(code.strip(), file=sys.stderr)
    return int(ExitCode.INTERNAL_ERROR)


def _walk_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__


def _report_failure(exc: BaseException, exit_code: ExitCode) -> None:
    if exit_code is ExitCode.INTERNAL_ERROR:
        traceback.print_exception(exc, file=sys.stderr)
        return
    print(str(exc).strip() or type(exc).__name__, file=sys.stderr)


__all__ = ["ExitCode", "classify_exception", "cli_entrypoint", "console_main"]
