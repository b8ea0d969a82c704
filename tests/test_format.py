import pytest

from ipm_panel.utils.format import format3, format_money, parse_money, to_english_digits, to_persian_digits


def test_digit_conversion():
    assert to_english_digits("۱۴۰۳-٠٧") == "1403-07"
    assert to_persian_digits(2024) == "۲۰۲۴"
    assert to_english_digits(None) == ""


@pytest.mark.parametrize("value,expected", [
    (0, "0"), (999, "999"), (1000, "1,000"), (-1234567, "-1,234,567"), ("12.9", "12"), (None, ""),
])
def test_format_money(value, expected):
    assert format_money(value) == expected


@pytest.mark.parametrize("text,expected", [
    ("۱,۲۵۰,۰۰۰", 1250000), (" -3,000 ریال", -3000), ("", 0), (None, 0), ("abc", 0),
])
def test_parse_money(text, expected):
    assert parse_money(text) == expected


def test_format3_drops_non_digits():
    assert format3("12a3456") == "123,456"
