# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ipm_panel.services.access import DEFAULT_CONTRACT_ACCESS, normalize_positions, sanitize_access


@dataclass
class User:
    """Panel user as listed by /admin/users.

    `positions` holds workflow-role slugs (see access.ROLE_SLUG_TO_FA);
    `access` holds sanitized access keys.
    """

    id: Any = None
    username: str = ""
    name: str = ""
    email: str = ""
    department: str = ""
    role: str = "user"
    access: List[str] = field(default_factory=list)
    positions: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: Mapping[str, Any], id_to_name: Optional[Mapping[str, str]] = None) -> "User":
        acc = raw.get("access_labels")
        if not isinstance(acc, list):
            acc = raw.get("access") if isinstance(raw.get("access"), list) else []
        pos = raw.get("positions")
        if not isinstance(pos, list):
            pos = raw.get("roles") if isinstance(raw.get("roles"), list) else []
        return cls(
            id=raw.get("id"),
            username=str(raw.get("username") or ""),
            name=str(raw.get("name") or ""),
            email=str(raw.get("email") or ""),
            department=str(raw.get("department") or ""),
            role="admin" if raw.get("role") == "admin" else "user",
            access=sanitize_access(acc),
            positions=normalize_positions(pos, id_to_name or {}),
        )

    @property
    def contracts_access(self) -> str:
        for k in self.access:
            if k.startswith("contracts:"):
                return k
        return DEFAULT_CONTRACT_ACCESS

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email or "-"
