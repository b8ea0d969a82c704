# -*- coding: utf-8 -*-
"""Navigation model: routes, active-route highlighting and the collapsible
sections whose open/closed state persists under `nav_open`.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ipm_panel.state.storage import MemoryStorage, read_json, write_json

NAV_OPEN_KEY = "nav_open"


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    admin_only: bool = False


@dataclass(frozen=True)
class NavSection:
    key: str
    label: str
    items: List[NavItem] = field(default_factory=list)


TOP_ITEMS = [
    NavItem("/", "داشبورد"),
    NavItem("/payment", "درخواست پرداخت"),
    NavItem("/letters", "نامه‌ها"),
]

SECTIONS = [
    NavSection("projects", "پروژه‌ها", [
        NavItem("/centers/contract-info", "اطلاعات قراردادی"),
        NavItem("/projects/financial-worksheet", "کاربرگ مالی"),
        NavItem("/projects/reports", "گزارش‌ها"),
        NavItem("/projects/statements", "صورت وضعیت‌ها"),
        NavItem("/projects/receipts", "دریافتی‌ها"),
        NavItem("/projects/balance", "ترازمالی پروژه"),
        NavItem("/projects/daily-log", "روزنگار پروژه"),
    ]),
    NavSection("budget", "بودجه‌بندی", [
        NavItem("/budget/centers", "تعریف مراکز بودجه"),
        NavItem("/estimates", "برآورد هزینه‌ها"),
        NavItem("/revenue-estimates", "برآورد درآمد"),
        NavItem("/budget-allocation", "تخصیص بودجه"),
        NavItem("/budget/reports", "گزارش‌ها"),
    ]),
    NavSection("base", "اطلاعات پایه", [
        NavItem("/base/units", "واحدها"),
        NavItem("/base/user-roles", "نقش‌های کاربری"),
        NavItem("/admin/users", "کاربران", admin_only=True),
        NavItem("/centers/projects", "پروژه‌ها"),
        NavItem("/base/currencies", "ارزها"),
        NavItem("/base/tags", "برچسب‌ها"),
    ]),
]


def clean_path(p: Optional[str]) -> str:
    return (p or "").rstrip("/") or "/"


def strip_base(p: str, base: str = "/") -> str:
    cp = clean_path(p)
    b = (base or "/").rstrip("/")
    if not b:
        return cp
    return clean_path(cp[len(b):] or "/") if cp.startswith(b) else cp


def is_active(current: str, to: str, base: str = "/") -> bool:
    p = strip_base(current, base)
    t = strip_base(to, base)
    return p == t or (t != "/" and p.startswith(t + "/"))


def section_from_path(p: str) -> Optional[str]:
    path = clean_path(p)
    if (
        path.startswith("/budget/")
        or path in ("/estimates", "/revenue-estimates", "/budget-allocation")
    ):
        return "budget"
    if path.startswith("/base/") or path == "/centers/projects" or path.startswith("/admin/"):
        return "base"
    if (
        path.startswith("/centers/contract-info")
        or path.startswith("/projects/")
        or path.startswith("/contracts/")
    ):
        return "projects"
    return None


def visible_items(section: NavSection, is_main_admin: bool) -> List[NavItem]:
    return [it for it in section.items if is_main_admin or not it.admin_only]


class NavState:
    """Exclusive open/closed state of the navigation sections."""

    def __init__(self, storage: MemoryStorage):
        self.storage = storage
        raw = read_json(storage, NAV_OPEN_KEY, {})
        self.open: Dict[str, bool] = {str(k): bool(v) for k, v in raw.items()} if isinstance(raw, dict) else {}

    def is_open(self, key: str) -> bool:
        return bool(self.open.get(key))

    def toggle(self, key: str) -> Dict[str, bool]:
        self.open = {} if self.is_open(key) else {key: True}
        write_json(self.storage, NAV_OPEN_KEY, self.open)
        return self.open

    def parent_active(self, key: str, current_path: str) -> bool:
        return self.is_open(key) or section_from_path(current_path) == key
