import datetime

import pytest

from ipm_panel.utils import jalali


def test_gregorian_filename_date():
    found = jalali.extract_date_from_filename("2025-03-18_report.pdf")
    assert found.calendar == jalali.GREGORIAN
    assert found.iso == "2025-03-18"
    assert found.as_pair() == ("1403-12-28", "2025-03-18")


def test_compact_jalali_filename_date():
    found = jalali.extract_date_from_filename("14040118.jpg")
    assert (found.year, found.month, found.day) == (1404, 1, 18)
    assert found.calendar == jalali.JALALI
    assert found.as_pair() == ("1404-01-18", "2025-04-07")


@pytest.mark.parametrize("name", ["", "report.pdf", "2025-13-01.pdf", "1404_01_40.png", "20251.txt"])
def test_filename_without_valid_date(name):
    assert jalali.extract_date_from_filename(name) is None


def test_persian_digits_in_filename():
    found = jalali.extract_date_from_filename("گزارش ۱۴۰۳-۰۷-۰۱.docx")
    assert found.iso == "1403-07-01"
    assert found.calendar == jalali.JALALI


def test_round_trip_over_several_years():
    day = datetime.date(2017, 3, 1)
    while day < datetime.date(2027, 3, 1):
        g = day.strftime("%Y-%m-%d")
        j = jalali.gregorian_to_jalali(g)
        assert jalali.jalali_to_gregorian(j) == g
        assert jalali.gregorian_to_jalali(jalali.jalali_to_gregorian(j)) == j
        day += datetime.timedelta(days=11)


def test_known_conversions():
    assert jalali.jalali_to_gregorian("1403-01-01") == "2024-03-20"
    assert jalali.gregorian_to_jalali("2024-03-20") == "1403-01-01"


def test_conversion_failure_returns_input():
    assert jalali.jalali_to_gregorian("not-a-date") == "not-a-date"
    assert jalali.gregorian_to_jalali("2024-02-30") == "2024-02-30"
    assert jalali.jalali_to_gregorian("") == ""


def test_convert_rejects_unknown_calendar():
    assert jalali.convert("2024-03-20", jalali.GREGORIAN) == "1403-01-01"
    with pytest.raises(ValueError):
        jalali.convert("2024-03-20", "hijri")


def test_month_days_and_weekday():
    assert jalali.jalali_month_days(1403, 1) == 31
    assert jalali.jalali_month_days(1403, 7) == 30
    assert jalali.jalali_month_days(1403, 12) == 30
    assert jalali.jalali_month_days(1404, 12) == 29
    # 2024-03-20 was a Wednesday
    assert jalali.jalali_weekday_name("1403-01-01") == "چهارشنبه"
    assert jalali.jalali_weekday_name("bad") == ""


def test_datetime_string_to_jalali():
    assert jalali.to_jalali_dt_str("2024-03-20 14:05:00") == "1403-01-01 14:05"
    assert jalali.to_jalali_dt_str(None) == ""
    assert jalali.to_jalali_dt_str("garbage") == "garbage"
