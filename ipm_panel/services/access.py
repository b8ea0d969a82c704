# -*- coding: utf-8 -*-
"""Access helpers: main-admin detection, access-key sanitization, workflow role
slugs and per-page access rules.
"""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ipm_panel import config

ALLOWED_ACCESS_RE = re.compile(
    r"^(budget:(projects|office|site|finance|cash|capex)"
    r"|contracts:(all|nonfinancial)"
    r"|pack:(pm|com|hr|fin|site|siteA|siteB))$"
)

BUDGET_ACCESS_KEYS = [
    "budget:projects", "budget:office", "budget:site",
    "budget:finance", "budget:cash", "budget:capex",
]
CONTRACT_ACCESS_KEYS = ["contracts:all", "contracts:nonfinancial"]
DEFAULT_CONTRACT_ACCESS = "contracts:nonfinancial"
PACK_ACCESS_KEYS = ["pack:pm", "pack:com", "pack:hr", "pack:fin", "pack:siteA", "pack:siteB", "pack:site"]

# Workflow positions a user can hold
ROLE_SLUG_TO_FA = {
    "project_control": "کنترل پروژه",
    "project_manager": "مدیر پروژه",
    "accounting_specialist": "کارشناس حسابداری",
    "finance_manager": "مدیر مالی",
    "executive": "مدیریت",
}
ROLE_FA_TO_SLUG = {fa: slug for slug, fa in ROLE_SLUG_TO_FA.items()}


def sanitize_access(keys: Optional[Iterable[Any]]) -> List[str]:
    """Keep allowed access keys only, first occurrence wins."""
    out: List[str] = []
    seen = set()
    for k in keys or []:
        s = str(k if k is not None else "")
        if not ALLOWED_ACCESS_RE.match(s) or s in seen:
            continue
        seen.add(s)
        out.append(s)
    return out


def is_main_admin_user(u: Optional[Mapping[str, Any]]) -> bool:
    if not u:
        return False
    email = str(u.get("email") or "").lower().strip()
    uname = str(u.get("username") or "").lower().strip()
    if (email and email == config.get_main_admin_email()) or (uname and uname == config.get_main_admin_username()):
        return True
    scopes = u.get("scopes")
    return (
        u.get("role") == "admin"
        or u.get("can_manage_users") is True
        or (isinstance(scopes, list) and "all" in scopes)
    )


def normalize_user(u: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Give main admins full administrative scopes; other users pass through."""
    if not u:
        return None
    out = dict(u)
    if is_main_admin_user(u):
        scopes = list(out.get("scopes") or [])
        if "all" not in scopes:
            scopes.append("all")
        out.update(role="admin", can_manage_users=True, scopes=scopes)
    return out


def role_slug(raw: Any) -> str:
    s = str(raw if raw is not None else "").strip()
    return ROLE_FA_TO_SLUG.get(s, s)


@dataclass
class RoleItem:
    id: Any
    name: str
    label: str


def normalize_role_items(items: Iterable[Mapping[str, Any]]) -> List[RoleItem]:
    """Collapse backend user roles to one entry per slug.
    An English slug row wins over a Persian-named duplicate.
    """
    by_slug: Dict[str, tuple] = {}
    for it in items or []:
        raw = str(it.get("name") or "").strip()
        if not raw:
            continue
        if raw in ROLE_SLUG_TO_FA:
            slug, label, priority = raw, ROLE_SLUG_TO_FA[raw], 2
        elif raw in ROLE_FA_TO_SLUG:
            slug = ROLE_FA_TO_SLUG[raw]
            label, priority = ROLE_SLUG_TO_FA.get(slug, raw), 1
        else:
            slug, label, priority = raw, str(it.get("label") or raw), 1
        prev = by_slug.get(slug)
        if prev is None or priority > prev[0]:
            by_slug[slug] = (priority, RoleItem(it.get("id"), slug, label))
    return [entry for _, entry in by_slug.values()]


def normalize_positions(raw: Iterable[Any], id_to_name: Mapping[str, str]) -> List[str]:
    """Map position entries (slug, Persian name, role id or role object) to slugs."""
    out: List[str] = []
    for p in raw or []:
        slug = ""
        if isinstance(p, bool):
            continue
        if isinstance(p, str):
            slug = role_slug(p)
        elif isinstance(p, (int, float)):
            slug = id_to_name.get(str(p), "")
        elif isinstance(p, Mapping):
            if p.get("name"):
                slug = role_slug(p["name"])
            elif p.get("id") is not None:
                slug = id_to_name.get(str(p["id"]), "")
        if slug and slug not in out:
            out.append(slug)
    return out


# ---- page access ----

_MISSING = object()


def _truthy(v: Any) -> bool:
    return v is True or v == 1 or v in ("1", "true")


@dataclass
class PageAccess:
    can_access: bool
    tabs: List[str] = field(default_factory=list)


def resolve_page_access(rule: Any, all_tabs: Iterable[Any], is_admin: bool = False) -> PageAccess:
    """Evaluate one entry of the backend `pages` access map.

    Pass `_MISSING` (see `page_rule`) when the page key is absent: no access.
    `None` grants every tab; a list grants the listed tabs; an object
    `{permitted, tabs}` grants per-tab flags, all tabs when none are flagged.
    """
    tabs = [str(t) for t in all_tabs or []]
    if is_admin or rule is None:
        return PageAccess(bool(tabs), tabs)
    if rule is _MISSING:
        return PageAccess(False, [])
    if isinstance(rule, list):
        wanted = {str(x) for x in rule}
        ok = [t for t in tabs if t in wanted]
        return PageAccess(bool(ok), ok)
    if isinstance(rule, Mapping):
        permitted = True if "permitted" not in rule or rule.get("permitted") is None else _truthy(rule.get("permitted"))
        if not permitted:
            return PageAccess(False, [])
        tab_rule = rule.get("tabs")
        if isinstance(tab_rule, Mapping):
            ok = [t for t in tabs if _truthy(tab_rule.get(t))]
            final = ok or tabs
            return PageAccess(bool(final), final)
        return PageAccess(bool(tabs), tabs)
    return PageAccess(False, [])


def page_rule(pages: Mapping[str, Any], page_key: str) -> Any:
    """Fetch a page rule, distinguishing an absent key from an explicit null."""
    if not isinstance(pages, Mapping) or page_key not in pages:
        return _MISSING
    return pages[page_key]
