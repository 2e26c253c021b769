import math

from balloonmap.utils.numbers import safe_number


def test_numbers_pass_through():
    assert safe_number(12) == 12.0
    assert safe_number(-3.25) == -3.25
    assert safe_number(0) == 0.0


def test_numeric_strings_are_parsed():
    assert safe_number("12.5") == 12.5
    assert safe_number(" -7 ") == -7.0
    assert safe_number("1e3") == 1000.0


def test_unparseable_and_non_finite_are_absent():
    assert safe_number("abc") is None
    assert safe_number("") is None
    assert safe_number("NaN") is None
    assert safe_number("Infinity") is None
    assert safe_number("-inf") is None
    assert safe_number("1e999") is None
    assert safe_number(math.nan) is None
    assert safe_number(math.inf) is None


def test_other_types_are_absent():
    for value in (None, True, False, [], [1], {}, {"lat": 1}, object()):
        assert safe_number(value) is None
