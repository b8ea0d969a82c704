# -*- coding: utf-8 -*-
"""Jalali (Shamsi) <-> Gregorian conversion helpers built on jdatetime.

All public conversions take and return `YYYY-MM-DD` strings. Conversion failures
never reach the user: the input string is returned unchanged.
"""
from __future__ import annotations
import datetime
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

import jdatetime

from .format import to_english_digits

log = logging.getLogger(__name__)

JALALI = "jalali"
GREGORIAN = "gregorian"

PERSIAN_MONTHS = [
    "فروردین", "اردیبهشت", "خرداد", "تیر", "مرداد", "شهریور",
    "مهر", "آبان", "آذر", "دی", "بهمن", "اسفند",
]

# jdatetime weekday(): Saturday == 0
PERSIAN_WEEKDAYS = ["شنبه", "یکشنبه", "دوشنبه", "سه‌شنبه", "چهارشنبه", "پنجشنبه", "جمعه"]

_YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_FILENAME_DATE_RE = re.compile(r"(13|14|20)\d{2}[-_./]?\d{1,2}[-_./]?\d{1,2}")


def _split_ymd(ymd: str) -> Tuple[int, int, int]:
    y, m, d = to_english_digits(ymd).strip().split("-")
    return int(y), int(m), int(d)


def is_jalali_ymd(value) -> bool:
    return bool(_YMD_RE.match(str(value or "")))


def jalali_to_gregorian(ymd: str) -> str:
    if not ymd:
        return ""
    try:
        jy, jm, jd = _split_ymd(ymd)
        return jdatetime.date(jy, jm, jd).togregorian().strftime("%Y-%m-%d")
    except (ValueError, TypeError, OverflowError) as exc:
        log.debug("Jalali->Gregorian conversion failed for %r: %s", ymd, exc)
        return ymd


def gregorian_to_jalali(ymd: str) -> str:
    if not ymd:
        return ""
    try:
        gy, gm, gd = _split_ymd(ymd)
        return jdatetime.date.fromgregorian(date=datetime.date(gy, gm, gd)).strftime("%Y-%m-%d")
    except (ValueError, TypeError, OverflowError) as exc:
        log.debug("Gregorian->Jalali conversion failed for %r: %s", ymd, exc)
        return ymd


def convert(ymd: str, calendar: str) -> str:
    """Express `ymd` (tagged with its own `calendar`) in the other calendar."""
    if calendar == JALALI:
        return jalali_to_gregorian(ymd)
    if calendar == GREGORIAN:
        return gregorian_to_jalali(ymd)
    raise ValueError(f"unknown calendar: {calendar!r}")


def today_jalali_ymd() -> str:
    return jdatetime.date.today().strftime("%Y-%m-%d")


def jalali_month_days(jy: int, jm: int) -> int:
    if jm <= 6:
        return 31
    if jm <= 11:
        return 30
    return 30 if jdatetime.date(jy, 1, 1).isleap() else 29


def jalali_weekday_name(ymd: str) -> str:
    """Persian weekday of a Jalali date, or "" when the date is invalid."""
    try:
        jy, jm, jd = _split_ymd(ymd)
        return PERSIAN_WEEKDAYS[jdatetime.date(jy, jm, jd).weekday()]
    except (ValueError, TypeError, IndexError):
        return ""


@dataclass(frozen=True)
class FilenameDate:
    year: int
    month: int
    day: int
    calendar: str

    @property
    def iso(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def as_pair(self) -> Tuple[str, str]:
        """(jalali_ymd, gregorian_ymd) for this date."""
        if self.calendar == JALALI:
            return self.iso, jalali_to_gregorian(self.iso)
        return gregorian_to_jalali(self.iso), self.iso


def extract_date_from_filename(filename: str) -> Optional[FilenameDate]:
    """Find a date such as `2025-03-18` or `14040118` inside a file name.

    Years 1300..1499 are taken as Jalali, anything else as Gregorian.
    """
    if not filename:
        return None
    match = _FILENAME_DATE_RE.search(to_english_digits(filename))
    if not match:
        return None
    digits = re.sub(r"[^\d]", "", match.group(0))
    if len(digits) != 8:
        return None
    y, m, d = int(digits[:4]), int(digits[4:6]), int(digits[6:8])
    if m < 1 or m > 12 or d < 1 or d > 31:
        return None
    calendar = JALALI if 1300 <= y <= 1499 else GREGORIAN
    return FilenameDate(y, m, d, calendar)


def to_jalali_dt_str(dt_val) -> str:
    """Convert a datetime-like value or string to a Jalali date with HH:MM.
    Accepts formats like 'YYYY-MM-DD HH:MM:SS' or ISO strings; falls back to input str.
    """
    if dt_val is None or dt_val == "":
        return ""
    if isinstance(dt_val, datetime.datetime):
        dt = dt_val
    elif isinstance(dt_val, datetime.date):
        dt = datetime.datetime(dt_val.year, dt_val.month, dt_val.day)
    else:
        s = str(dt_val)
        dt = None
        for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d"):
            try:
                dt = datetime.datetime.strptime(s[:19], fmt)
                break
            except ValueError:
                continue
        if dt is None:
            try:
                dt = datetime.datetime.fromisoformat(s.replace("Z", ""))
            except ValueError:
                return s
    jd = jdatetime.date.fromgregorian(date=dt.date())
    return f"{jd.year:04d}-{jd.month:02d}-{jd.day:02d} {dt.hour:02d}:{dt.minute:02d}"
