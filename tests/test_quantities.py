import math

import pytest

from src.wastecore.services.quantities import ParsedQuantity, parse_quantity, quantity_or_zero


@pytest.mark.parametrize(
    "raw, expected",
    [
        (250, 250.0),
        (12.5, 12.5),
        ("300", 300.0),
        ("  42.5 ", 42.5),
        (0, 0.0),
    ],
)
def test_parse_quantity_accepts_numbers_and_numeric_strings(raw, expected):
    assert parse_quantity(raw) == ParsedQuantity(value=expected, valid=True)


@pytest.mark.parametrize("raw", ["abc", "", "   ", None, True, -5, "-1", math.nan, math.inf, "inf", [1], {"q": 1}])
def test_parse_quantity_falls_back_to_flagged_zero(raw):
    parsed = parse_quantity(raw)

    assert parsed.value == 0.0
    assert parsed.valid is False


def test_quantity_or_zero():
    assert quantity_or_zero("15") == 15.0
    assert quantity_or_zero("fifteen") == 0.0
