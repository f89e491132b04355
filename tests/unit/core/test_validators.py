"""
confex — unit tests for the concrete validators

File: tests/unit/core/test_validators.py

Purpose
- Pin parse and constraint behavior for string, number, boolean, enum and tuple validators.

What this test file should cover
- Accepted inputs and the values they produce.
- Rejected inputs and the expected-value descriptions carried by their errors.
- Constraint evaluation order.
"""

from __future__ import annotations

import re

import pytest

from confex import ValidationError, boolean, enumeration, number, string, tuple_of
from confex.errors import CONSTRAINT_CONTEXT, TYPE_MISMATCH_CONTEXT
from confex.validators import (
    EnumValidator,
    NumberValidator,
    StringValidator,
    TupleValidator,
    canonical_json,
    stringify,
)


def _expected_for(validator: object, raw: object, key: str = "KEY") -> str:
    with pytest.raises(ValidationError) as excinfo:
        validator.validate(raw, key)  # type: ignore[attr-defined]
    assert excinfo.value.key == key
    return excinfo.value.expected


# ---------------------------------------------------------------------------
# string
# ---------------------------------------------------------------------------


def test_string_returns_text_unchanged() -> None:
    assert string().validate("hello") == "hello"
    assert string().validate("") == ""
    assert string().validate("  padded  ") == "  padded  "


def test_string_stringifies_numeric_raw_values() -> None:
    assert string().validate(42) == "42"
    assert string().validate(1.5) == "1.5"
    assert string().validate(3.0) == "3"


def test_string_length_bounds() -> None:
    validator = string(min_length=3, max_length=5)

    assert validator.validate("abc") == "abc"
    assert validator.validate("abcde") == "abcde"
    assert _expected_for(validator, "ab") == "length >= 3"
    assert _expected_for(validator, "abcdef") == "length <= 5"


def test_string_pattern_must_match_whole_value() -> None:
    validator = string(pattern=r"[a-z]+")

    assert validator.validate("abc") == "abc"
    assert _expected_for(validator, "abc1") == "matches [a-z]+"
    assert _expected_for(validator, "1abc") == "matches [a-z]+"


def test_string_pattern_accepts_compiled_expression() -> None:
    validator = StringValidator().pattern(re.compile(r"\d{3}"))

    assert validator.validate("123") == "123"
    assert _expected_for(validator, "12") == r"matches \d{3}"


def test_string_checks_length_before_pattern() -> None:
    validator = string(min_length=5, pattern=r"\d+")

    assert _expected_for(validator, "12") == "length >= 5"


def test_string_constraint_errors_use_constraint_context() -> None:
    with pytest.raises(ValidationError) as excinfo:
        string(max_length=1).validate("ab", "CODE")

    assert excinfo.value.context == CONSTRAINT_CONTEXT
    assert excinfo.value.actual == "ab"


def test_string_length_setters_reject_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        StringValidator().min_length(-1)
    with pytest.raises(TypeError):
        StringValidator().max_length(2.5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        StringValidator().max_length(True)


# ---------------------------------------------------------------------------
# number
# ---------------------------------------------------------------------------


def test_number_bounds_are_inclusive() -> None:
    validator = number(min=10, max=20)

    assert validator.validate(15) == 15
    assert validator.validate("20") == 20
    assert validator.validate("10") == 10
    assert _expected_for(validator, "5") == ">= 10"
    assert _expected_for(validator, "21") == "<= 20"


def test_number_parses_integer_and_decimal_text() -> None:
    validator = number()

    parsed_int = validator.validate("15")
    assert parsed_int == 15
    assert isinstance(parsed_int, int)
    assert validator.validate("1.5") == 1.5
    assert validator.validate(" 42 ") == 42
    assert validator.validate("-7") == -7
    assert validator.validate("1e3") == 1000.0


@pytest.mark.parametrize(
    "raw",
    [
        "abc",
        "",
        "   ",
        "nan",
        "12px",
        "1_000",
        "1_0.5",
        "١٢",
        "１２",
        "1.2.3",
        "0x",
        "-0x10",
        "0x1g",
        ".",
        "1e",
    ],
)
def test_number_rejects_non_numeric_text(raw: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        number().validate(raw, "PORT")

    assert excinfo.value.expected == "number"
    assert excinfo.value.context == TYPE_MISMATCH_CONTEXT
    assert excinfo.value.__cause__ is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("0x10", 16), ("0XfF", 255), ("0o17", 15), ("0b101", 5), (" 0x10 ", 16)],
)
def test_number_accepts_prefixed_integer_literals(raw: str, expected: int) -> None:
    parsed = number().validate(raw)

    assert parsed == expected
    assert isinstance(parsed, int)


def test_number_accepts_signed_and_bare_decimal_literals() -> None:
    assert number().validate(".5") == 0.5
    assert number().validate("1.") == 1.0
    assert number().validate("+2") == 2


def test_number_rejects_oversized_integer_literals() -> None:
    with pytest.raises(ValidationError) as excinfo:
        number().validate("9" * 10_000, "N")

    assert excinfo.value.key == "N"
    assert excinfo.value.context == TYPE_MISMATCH_CONTEXT


def test_number_rejects_infinite_values() -> None:
    assert _expected_for(number(), "inf") == "finite number"
    assert _expected_for(number(), "-Infinity") == "finite number"


def test_number_rejects_booleans() -> None:
    assert _expected_for(number(), True) == "number"


def test_integer_flag_rejects_fractional_values() -> None:
    validator = number(integer=True)

    assert _expected_for(validator, "3.5") == "integer"
    coerced = validator.validate("4.0")
    assert coerced == 4
    assert isinstance(coerced, int)
    assert isinstance(validator.validate(7.0), int)


def test_integer_check_runs_before_bounds() -> None:
    assert _expected_for(number(min=10, integer=True), "2.5") == "integer"


def test_number_bound_descriptions_drop_trailing_zero() -> None:
    assert _expected_for(number(min=1.0), "0") == ">= 1"
    assert _expected_for(number(max=2.5), "3") == "<= 2.5"


def test_number_describes_integer_type() -> None:
    assert number().describe_expected() == "number"
    assert number().integer().describe_expected() == "integer"


def test_number_bound_setters_reject_invalid_arguments() -> None:
    with pytest.raises(TypeError):
        NumberValidator().min(True)
    with pytest.raises(TypeError):
        NumberValidator().max("10")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        NumberValidator().min(float("nan"))


# ---------------------------------------------------------------------------
# boolean
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("TRUE", True),
        (" 1 ", True),
        (1, True),
        ("false", False),
        ("False", False),
        ("0", False),
        (0, False),
    ],
)
def test_boolean_accepts_canonical_spellings(raw: object, expected: bool) -> None:
    assert boolean().validate(raw) is expected  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["yes", "no", "on", "", "2"])
def test_boolean_rejects_other_spellings(raw: str) -> None:
    assert _expected_for(boolean(), raw) == 'boolean ("true", "false", "1", or "0")'


# ---------------------------------------------------------------------------
# enum
# ---------------------------------------------------------------------------


def test_enum_accepts_declared_values_only() -> None:
    validator = enumeration(["debug", "info"])

    assert validator.validate("info") == "info"
    assert _expected_for(validator, "warn") == 'one of "debug" | "info"'


def test_enum_comparison_is_case_sensitive() -> None:
    with pytest.raises(ValidationError):
        enumeration(["Debug"]).validate("debug")


def test_enum_returns_declared_member_with_its_type() -> None:
    numeric = enumeration([1, 2, 3]).validate("2")
    assert numeric == 2
    assert isinstance(numeric, int)

    assert enumeration([True, False]).validate("true") is True
    assert enumeration([0.5, 1.0]).validate("1") == 1.0


def test_enum_requires_allowed_values() -> None:
    with pytest.raises(ValueError):
        enumeration([])
    with pytest.raises(ValueError):
        EnumValidator()


def test_enum_one_of_narrows_the_choices() -> None:
    validator = enumeration(["a", "b", "c"]).one_of(["a"])

    assert validator.validate("a") == "a"
    with pytest.raises(ValidationError):
        validator.validate("b")


def test_enum_default_applies_when_missing() -> None:
    assert enumeration(["a", "b"], default="b").validate(None) == "b"


# ---------------------------------------------------------------------------
# tuple
# ---------------------------------------------------------------------------


def test_tuple_matches_json_arrays() -> None:
    validator = tuple_of([(1, 2), (3, 4)])

    assert validator.validate("[1,2]") == (1, 2)
    assert validator.validate("[3, 4]") == (3, 4)
    assert validator.validate(" [1 ,2] ") == (1, 2)


def test_tuple_rejects_unknown_shapes() -> None:
    validator = tuple_of([(1, 2), (3, 4)])

    assert _expected_for(validator, "[2,1]") == "one of: [1,2], [3,4]"
    assert _expected_for(validator, "[1,2,3]") == "one of: [1,2], [3,4]"
    assert _expected_for(validator, "not json") == "one of: [1,2], [3,4]"
    assert _expected_for(validator, 1) == "one of: [1,2], [3,4]"


def test_tuple_treats_deeply_nested_text_as_a_plain_string() -> None:
    validator = tuple_of([("a", 1)])
    raw = "[" * 100_000 + "]" * 100_000

    with pytest.raises(ValidationError) as excinfo:
        validator.validate(raw, "T")

    assert excinfo.value.key == "T"
    assert excinfo.value.expected == 'one of: ["a",1]'
    assert excinfo.value.actual == raw


def test_tuple_matches_string_members() -> None:
    validator = tuple_of([("a", "b")])

    assert validator.validate('["a","b"]') == ("a", "b")
    with pytest.raises(ValidationError):
        validator.validate("a,b")


def test_tuple_members_are_normalized_to_tuples() -> None:
    validator = TupleValidator(allowed_values=([1, 2], ["x"]))

    assert validator.allowed_values == ((1, 2), ("x",))
    assert validator.validate('["x"]') == ("x",)


def test_tuple_requires_serializable_values() -> None:
    with pytest.raises(ValueError):
        tuple_of([])
    with pytest.raises(ValueError):
        tuple_of([(object(),)])


@pytest.mark.parametrize("member", [5, "ab", b"ab", None, {1, 2}])
def test_tuple_members_must_be_sequences(member: object) -> None:
    with pytest.raises(ValueError, match="is not a sequence"):
        tuple_of([member])  # type: ignore[list-item]
    with pytest.raises(ValueError, match="is not a sequence"):
        TupleValidator(allowed_values=((1, 2), member))  # type: ignore[arg-type]


def test_tuple_default_is_stored_as_tuple() -> None:
    assert tuple_of([(1, 2)], default=[1, 2]).validate(None) == (1, 2)


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def test_stringify_and_canonical_json() -> None:
    assert stringify(True) == "true"
    assert stringify(False) == "false"
    assert stringify(3.0) == "3"
    assert stringify(3.25) == "3.25"
    assert canonical_json((1, "a")) == '[1,"a"]'
    assert canonical_json(["é"]) == '["é"]'
