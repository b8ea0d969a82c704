# -*- coding: utf-8 -*-
"""Small base-data records: tags, budget codes and projects."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping

# Fixed budget-code prefix of every scope
SCOPE_PREFIXES = {
    "office": "OB",
    "site": "SB",
    "finance": "FB",
    "cash": "CB",
    "capex": "IB",
    "projects": "",
}


def normalize_label(value: Any) -> str:
    """Case-folded, whitespace-collapsed form used for duplicate checks."""
    return " ".join(str(value or "").split()).casefold()


@dataclass
class Tag:
    id: Any = None
    label: str = ""

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "Tag":
        return cls(id=raw.get("id"), label=str(raw.get("label") or raw.get("name") or "").strip())


@dataclass
class BudgetCode:
    id: Any = None
    scope: str = "office"
    suffix: str = ""
    description: str = ""

    @property
    def prefix(self) -> str:
        return SCOPE_PREFIXES.get(self.scope, "")

    @property
    def full_code(self) -> str:
        return self.prefix + self.suffix

    @classmethod
    def from_api(cls, raw: Mapping[str, Any], scope: str) -> "BudgetCode":
        return cls(
            id=raw.get("id"),
            scope=scope,
            suffix=str(raw.get("suffix") or ""),
            description=str(raw.get("description") or ""),
        )


@dataclass
class Project:
    id: Any = None
    code: str = ""
    name: str = ""

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "Project":
        return cls(
            id=raw.get("id"),
            code=str(raw.get("code") or ""),
            name=str(raw.get("name") or raw.get("title") or ""),
        )

    @property
    def title(self) -> str:
        return self.name or self.code
