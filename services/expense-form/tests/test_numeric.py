import math

import pytest

from expense_form.numeric import format_amount, to_number


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2", 2.0),
        ("10.50", 10.5),
        ("007", 7.0),
        ("-12.5kg", -12.5),
        ("$1,200.75", 1200.75),
        (" 3 ", 3.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e3", 13.0),
    ],
)
def test_to_number_extracts_digits_point_and_minus(raw: str, expected: float) -> None:
    assert to_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    "raw",
    ["", "abc", "∞", "Infinity", "NaN", "1.2.3", "12-5", "-", ".", "--1", None],
)
def test_to_number_defaults_to_zero_when_nothing_parses(raw) -> None:
    assert to_number(raw) == 0.0


def test_to_number_rejects_overflow_to_infinity() -> None:
    huge = "9" * 400

    result = to_number(huge)

    assert result == 0.0
    assert math.isfinite(result)


def test_to_number_accepts_non_string_values() -> None:
    assert to_number(4) == 4.0
    assert to_number(2.5) == 2.5


def test_format_amount_uses_two_decimals() -> None:
    assert format_amount(22.05) == "22.05"
    assert format_amount(0) == "0.00"
    assert format_amount(-0.0) == "0.00"
    assert format_amount(1234.5) == "1234.50"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.125, "0.13"),
        (1.125, "1.13"),
        (-0.125, "-0.13"),
        (2.675, "2.67"),
        (-0.001, "0.00"),
        (1e22, "10000000000000000000000.00"),
    ],
)
def test_format_amount_rounds_exact_ties_away_from_zero(value: float, expected: str) -> None:
    assert format_amount(value) == expected
