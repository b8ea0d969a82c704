# -*- coding: utf-8 -*-
"""Global English->Persian status and enum mapping for frontend display.
Use these helpers to ensure UI always shows Persian labels.
"""

STATUS_MAP_FA = {
    # Payment request
    "pending": "در انتظار",
    "approved": "تایید شده",
    "rejected": "رد شده",
    # User role
    "admin": "مدیر سیستم",
    "user": "کاربر",
}

SCOPE_LABELS_FA = {
    "office": "دفتر مرکزی",
    "site": "سایت",
    "finance": "مالی",
    "cash": "نقدی",
    "capex": "سرمایه‌ای",
    "projects": "پروژه‌ها",
}

ACCESS_LABELS_FA = {
    "budget:projects": "پروژه‌ها",
    "budget:office": "دفتر مرکزی",
    "budget:site": "سایت",
    "budget:finance": "مالی",
    "budget:cash": "نقدی",
    "budget:capex": "سرمایه‌ای",
    "contracts:all": "قراردادها (همه اطلاعات)",
    "contracts:nonfinancial": "قراردادها (غیرمالی)",
    "pack:pm": "برنامه‌ریزی و کنترل پروژه",
    "pack:com": "بازرگانی",
    "pack:hr": "منابع انسانی و اداری",
    "pack:fin": "مالی",
    "pack:siteA": "کارگاه A",
    "pack:siteB": "کارگاه B",
    "pack:site": "سایت",
}


def t_status(en_value: str) -> str:
    return STATUS_MAP_FA.get((en_value or "").lower(), en_value)


def t_scope(scope: str) -> str:
    return SCOPE_LABELS_FA.get((scope or "").lower(), scope or "—")


def t_access(key: str) -> str:
    return ACCESS_LABELS_FA.get(key or "", key)
