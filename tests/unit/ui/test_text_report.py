"""
confex — unit tests for plain-text report rendering

File: tests/unit/ui/test_text_report.py
"""

from __future__ import annotations

import io

import pytest

from confex.ui.render import TextReport, format_table


def test_format_table_aligns_columns_to_widest_cell() -> None:
    lines = format_table(["KEY", "VALUE"], [["PORT", "8080"], ["DATABASE_URL", "x"]])

    assert lines == [
        "  KEY           VALUE",
        "  ------------  -----",
        "  PORT          8080",
        "  DATABASE_URL  x",
    ]


def test_format_table_pads_short_rows() -> None:
    lines = format_table(["A", "B"], [["1"]])

    assert lines[-1] == "  1"


def test_report_renders_fields_failures_and_titled_table() -> None:
    stream = io.StringIO()

    (
        TextReport()
        .field("Schema", "app:SCHEMA")
        .failure("PORT: expected number")
        .table(["K"], [["v"]], title="Fields:")
        .write(stream)
    )

    assert stream.getvalue() == (
        "Schema: app:SCHEMA\n  FAIL  PORT: expected number\n\nFields:\n  K\n  -\n  v\n"
    )


def test_empty_table_renders_nothing() -> None:
    assert TextReport().table(["K"], [], title="Fields:").render() == ""


def test_write_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    TextReport().line("hello").write()

    assert capsys.readouterr().out == "hello\n"
