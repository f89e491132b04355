"""Plain-text rendering for ``confex check`` and ``confex describe``.

File: src/confex/ui/render.py

Purpose
- Build the human-readable report for one command and write it to stdout in one go.

Functional requirements
- Deterministic output: no color, no terminal probing, column widths derived from content.
"""

from __future__ import annotations

import sys
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

_INDENT = "  "
_COLUMN_GAP = "  "


class TextReport:
    """Line buffer for a single command's text output."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def line(self, text: str = "") -> TextReport:
        self._lines.append(text)
        return self

    def field(self, label: str, value: object) -> TextReport:
        return self.line(f"{label}: {value}")

    def failure(self, text: str) -> TextReport:
        return self.line(f"{_INDENT}FAIL  {text}")

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> TextReport:
        if not rows:
            return self
        if title:
            self.line().line(title)
        self._lines.extend(format_table(headers, rows))
        return self

    def render(self) -> str:
        return "".join(f"{item}\n" for item in self._lines)

    def write(self, stream: IO[str] | None = None) -> None:
        (stream if stream is not None else sys.stdout).write(self.render())


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    """Left-aligned columns, a dashed rule under the header, two-space indent."""

    width = len(headers)
    cells = [list(headers)]
    cells.extend([str(row[i]) if i < len(row) else "" for i in range(width)] for row in rows)
    widths = [max(len(line[i]) for line in cells) for i in range(width)]

    def _join(values: Sequence[str]) -> str:
        padded = _COLUMN_GAP.join(value.ljust(size) for value, size in zip(values, widths))
        return f"{_INDENT}{padded}".rstrip()

    rule = _join(["-" * size for size in widths])
    return [_join(cells[0]), rule, *(_join(line) for line in cells[1:])]


__all__ = ["TextReport", "format_table"]
