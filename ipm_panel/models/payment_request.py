# -*- coding: utf-8 -*-
"""Canonical payment-request record.

The backend sends role/status/history fields under many names; `from_api`
maps every known alias onto one shape so the workflow resolver only ever
sees `PaymentRequest`.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from ipm_panel.utils.format import parse_money

log = logging.getLogger(__name__)

STATUSES = ("pending", "approved", "rejected")
SCOPES = ("office", "site", "finance", "cash", "capex", "projects")


def _first(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        v = record.get(k)
        if v is not None and v != "":
            return v
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value if v is not None)
    return str(value).strip()


@dataclass
class WorkflowAction:
    action: str = ""
    from_role: str = ""
    to_role: str = ""
    status: str = ""
    note: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "WorkflowAction":
        return cls(
            action=_text(_first(raw, ("action", "type"))).lower(),
            from_role=_text(raw.get("from_role")),
            to_role=_text(_first(raw, ("to_role", "current_role"))),
            status=_text(raw.get("status")).lower(),
            note=_text(_first(raw, ("note", "comment"))),
            created_at=_first(raw, ("created_at", "createdAt")),
        )


def _parse_history(raw: Mapping[str, Any]) -> List[WorkflowAction]:
    items = raw.get("actions")
    if not isinstance(items, list) or not items:
        items = _first(raw, ("history_json", "history"))
        if isinstance(items, str):
            try:
                items = json.loads(items) if items.strip() else []
            except ValueError:
                log.debug("Unparseable history on payment request %s", raw.get("id"))
                items = []
    if not isinstance(items, list):
        return []
    return [WorkflowAction.from_api(a) for a in items if isinstance(a, Mapping)]


@dataclass
class PaymentRequest:
    id: Any = None
    amount: int = 0
    status: str = "pending"
    scope: str = "office"
    actions: List[WorkflowAction] = field(default_factory=list)
    current_role: str = ""
    assigned_role: str = ""
    workflow_unit: str = ""
    stage_hint: str = ""
    serial: str = ""
    title: str = ""
    budget_code: str = ""
    project_id: Any = None
    created_by_name: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "PaymentRequest":
        meta = raw.get("meta")
        if isinstance(meta, str):
            try:
                meta = json.loads(meta) if meta.strip() else {}
            except ValueError:
                meta = {}
        if not isinstance(meta, Mapping):
            meta = {}
        status = _text(raw.get("status")).lower() or "pending"
        scope = _text(_first(meta, ("scope",)) or _first(raw, ("scope", "type"))).lower()
        amount = _first(raw, ("amount",))
        if amount is None:
            amount = _first(meta, ("amount",))
        return cls(
            id=raw.get("id"),
            amount=parse_money(amount) if isinstance(amount, str) else int(amount or 0),
            status=status,
            scope=scope if scope in SCOPES else "office",
            actions=_parse_history(raw) or _parse_history(meta),
            current_role=_text(_first(raw, (
                "current_role", "currentRole", "assigned_user_role",
                "assignedUserRole", "current_role_from_action",
            ))),
            assigned_role=_text(_first(raw, ("assignedRole", "assigned_role"))),
            workflow_unit=_text(_first(raw, ("workflow_unit", "workflowUnit"))),
            stage_hint=_text(_first(raw, (
                "stageKey", "stage_key", "stage", "wfStage", "wf_state",
                "lastStatusFa", "last_status_fa", "last_state_fa",
            ))),
            serial=_text(_first(meta, ("serial",)) or raw.get("serial")),
            title=_text(_first(meta, ("title", "desc")) or raw.get("title")),
            budget_code=_text(_first(meta, ("budget_code",)) or raw.get("sub_budget")),
            project_id=_first(meta, ("project_id",)) or raw.get("project_id"),
            created_by_name=_text(_first(meta, ("createdByName",)) or _first(raw, (
                "created_by_name", "created_by_username", "created_by_email",
            ))),
            created_at=_first(raw, ("created_at", "createdAt")),
        )
