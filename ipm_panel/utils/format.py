# -*- coding: utf-8 -*-
"""Digit and money formatting helpers for Persian input/output."""
import re

_FA_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
_AR_DIGITS = "٠١٢٣٤٥٦٧٨٩"
_TO_EN = str.maketrans({**{d: str(i) for i, d in enumerate(_FA_DIGITS)},
                        **{d: str(i) for i, d in enumerate(_AR_DIGITS)}})
_TO_FA = str.maketrans({str(i): d for i, d in enumerate(_FA_DIGITS)})


def to_english_digits(value) -> str:
    return str(value if value is not None else "").translate(_TO_EN)


def to_persian_digits(value) -> str:
    return str(value if value is not None else "").translate(_TO_FA)


def format3(value) -> str:
    """Group digits by three; every non-digit is dropped."""
    digits = re.sub(r"[^\d]", "", to_english_digits(value))
    return re.sub(r"\B(?=(\d{3})+(?!\d))", ",", digits)


def format_money(n) -> str:
    if n is None or n == "":
        return ""
    try:
        num = int(float(n))
    except (TypeError, ValueError):
        num = 0
    sign = "-" if num < 0 else ""
    return sign + format3(abs(num))


def parse_money(text) -> int:
    if text is None:
        return 0
    s = to_english_digits(text)
    sign = -1 if re.match(r"^\s*-", s) else 1
    digits = re.sub(r"[^\d]", "", s)
    if not digits:
        return 0
    return sign * int(digits)
