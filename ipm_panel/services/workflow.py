# -*- coding: utf-8 -*-
"""Payment-request workflow: step sequences per budget scope, role-text
classification and the status badge shown in the request table.

Resolution order for the current step of a request:
1) explicit current role
2) destination role of the latest status/approve/reject/return action
3) `payment_done` for approved requests whose scope ends with it
4) assigned role, workflow unit, free-text stage hint, then the scope's first step
A candidate that is not part of the scope's sequence is skipped.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from ipm_panel.models.payment_request import PaymentRequest

log = logging.getLogger(__name__)

CREATOR = "creator"
PROJECT_CONTROL = "project_control"
PROJECT_MANAGER = "project_manager"
ACCOUNTING_SPECIALIST = "accounting_specialist"
FINANCE_MANAGER = "finance_manager"
PAYMENT_ORDER = "payment_order"
PAYMENT_DONE = "payment_done"

WORKFLOW_STEPS_BY_SCOPE = {
    "office": [CREATOR, ACCOUNTING_SPECIALIST, FINANCE_MANAGER, PAYMENT_ORDER, PAYMENT_DONE],
    "site": [CREATOR, PROJECT_CONTROL, ACCOUNTING_SPECIALIST, FINANCE_MANAGER, PAYMENT_ORDER, PAYMENT_DONE],
    "finance": [CREATOR, FINANCE_MANAGER, PAYMENT_ORDER, PAYMENT_DONE],
    "cash": [CREATOR, PAYMENT_ORDER, PAYMENT_DONE],
    "capex": [CREATOR, PROJECT_CONTROL, ACCOUNTING_SPECIALIST, FINANCE_MANAGER, PAYMENT_ORDER, PAYMENT_DONE],
    "projects": [CREATOR, PROJECT_CONTROL, PROJECT_MANAGER, ACCOUNTING_SPECIALIST, FINANCE_MANAGER, PAYMENT_ORDER, PAYMENT_DONE],
}

WORKFLOW_STEP_META = {
    CREATOR: ("درخواست‌کننده", "#e5e7eb"),
    PROJECT_CONTROL: ("کنترل پروژه", "#b1feff"),
    PROJECT_MANAGER: ("مدیر پروژه", "#fee1b9"),
    ACCOUNTING_SPECIALIST: ("کارشناس حسابداری", "#c2cdff"),
    FINANCE_MANAGER: ("مدیر مالی", "#c4b5fd"),
    PAYMENT_ORDER: ("مدیریت / دستور پرداخت", "#a9efa4"),
    PAYMENT_DONE: ("انجام پرداخت", "#d4d4d8"),
}

DEFAULT_STEP_COLOR = "#e5e7eb"
DEFAULT_TEXT_COLOR = "#111827"
PAYMENT_DONE_COLOR = "#008000"
PAYMENT_DONE_TEXT_COLOR = "#ffffff"

LABEL_AWAITING_PAYMENT = "در انتظار پرداخت"
LABEL_AWAITING_APPROVAL = "در انتظار تایید {label}"
LABEL_PAYMENT_COMPLETED = "انجام پرداخت"

HISTORY_MOVE_TYPES = frozenset({"status", "approve", "approved", "reject", "rejected", "return", "returned"})


@dataclass(frozen=True)
class WorkflowStep:
    key: str
    index: int
    label: str
    color: str


@dataclass(frozen=True)
class StatusBadge:
    step_key: str
    label: str
    color: str
    text_color: str = DEFAULT_TEXT_COLOR


def _has_any(*words: str) -> Callable[[str], bool]:
    return lambda s: any(w in s for w in words)


# Ordered (predicate, step) pairs; the first predicate that matches wins.
ROLE_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_has_any("project_control", "project control", "planning", "کنترل پروژه", "برنامه‌ریزی", "برنامه ریزی"),
     PROJECT_CONTROL),
    (_has_any("project_manager", "project manager", "project_management", "مدیر پروژه", "مدیریت پروژه"),
     PROJECT_MANAGER),
    (_has_any("accounting", "حسابداری"),
     ACCOUNTING_SPECIALIST),
    (lambda s: _has_any("finance_manager", "finance manager", "مدیر مالی")(s) or ("manager" in s and "مالی" in s),
     FINANCE_MANAGER),
    (lambda s: _has_any("executive", "payment", "دستور پرداخت", "مدیریت", "مدیرعامل")(s)
        or ("manager" in s and "finance" not in s and "مالی" not in s),
     PAYMENT_ORDER),
    (_has_any("creator", "requester", "درخواست‌کننده", "درخواست کننده"),
     CREATOR),
]

# Last-resort guesses from free-text stage/status fields
STAGE_GUESS_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_has_any("planning", "control", "program", "برنامه", "کنترل"), PROJECT_CONTROL),
    (_has_any("finance", "account", "مالی", "حسابداری"), FINANCE_MANAGER),
    (_has_any("payment", "executive", "manager", "admin", "دستور پرداخت", "مدیریت", "مدیر", "ادمین"), PAYMENT_ORDER),
]


def _flatten(role_input: Any) -> str:
    if role_input is None:
        return ""
    if isinstance(role_input, (list, tuple)):
        return " ".join(str(x) for x in role_input if x is not None)
    return str(role_input)


def _classify(text: Any, rules: Iterable[Tuple[Callable[[str], bool], str]]) -> Optional[str]:
    s = _flatten(text).strip().lower()
    if not s:
        return None
    for predicate, step in rules:
        if predicate(s):
            return step
    return None


def role_to_step_key(role_input: Any) -> Optional[str]:
    """Map free role text (English or Persian) to a workflow step key."""
    return _classify(role_input, ROLE_RULES)


def guess_step_from_stage(text: Any) -> Optional[str]:
    return _classify(text, STAGE_GUESS_RULES)


def step_sequence(scope: Optional[str]) -> List[str]:
    return list(WORKFLOW_STEPS_BY_SCOPE.get((scope or "office").lower(), WORKFLOW_STEPS_BY_SCOPE["office"]))


def get_workflow_steps(scope: Optional[str]) -> List[WorkflowStep]:
    steps = []
    for idx, key in enumerate(step_sequence(scope)):
        label, color = WORKFLOW_STEP_META.get(key, ("", DEFAULT_STEP_COLOR))
        steps.append(WorkflowStep(key, idx, label, color))
    return steps


def latest_move(request: PaymentRequest):
    """Most recent action that moves the request between roles, or None."""
    for action in reversed(request.actions):
        if action.action in HISTORY_MOVE_TYPES:
            return action
    return None


def resolve_step_key(request: PaymentRequest) -> str:
    sequence = step_sequence(request.scope)

    def accept(key: Optional[str]) -> Optional[str]:
        return key if key in sequence else None

    key = accept(role_to_step_key(request.current_role))
    if key:
        return key

    move = latest_move(request)
    if move is not None and move.to_role:
        key = accept(role_to_step_key(move.to_role))
        if key:
            return key

    if request.status == "approved" and PAYMENT_DONE in sequence:
        return PAYMENT_DONE

    for raw in (request.assigned_role, request.workflow_unit):
        key = accept(role_to_step_key(raw))
        if key:
            return key

    for raw in (request.workflow_unit, request.stage_hint, request.current_role):
        key = accept(guess_step_from_stage(raw))
        if key:
            return key

    return sequence[0] if sequence else CREATOR


def _is_approved_action(action) -> bool:
    return (
        action.status == "approved"
        or action.action in ("approve", "approved")
        or "status=approved" in action.note.lower()
    )


def has_payment_order_approved(request: PaymentRequest) -> bool:
    """True once the payment-order step has approved the request at some point."""
    for action in request.actions:
        to_key = role_to_step_key(action.to_role)
        from_key = role_to_step_key(action.from_role)
        if PAYMENT_ORDER in (to_key, from_key) and _is_approved_action(action):
            return True
    return False


def status_badge(request: PaymentRequest) -> StatusBadge:
    step_key = resolve_step_key(request)
    label, color = WORKFLOW_STEP_META.get(step_key, WORKFLOW_STEP_META[CREATOR])
    status = request.status

    if status == "pending":
        if step_key == FINANCE_MANAGER and has_payment_order_approved(request):
            text = LABEL_AWAITING_PAYMENT
        else:
            text = LABEL_AWAITING_APPROVAL.format(label=label or "—")
    elif step_key == PAYMENT_DONE and status == "approved":
        return StatusBadge(step_key, LABEL_PAYMENT_COMPLETED, PAYMENT_DONE_COLOR, PAYMENT_DONE_TEXT_COLOR)
    else:
        text = label or "—"
    return StatusBadge(step_key, text, color or DEFAULT_STEP_COLOR)


def step_states(request: PaymentRequest) -> List[Tuple[WorkflowStep, str]]:
    """Each step of the request's scope tagged "done", "current" or "upcoming"."""
    current = resolve_step_key(request)
    steps = get_workflow_steps(request.scope)
    cur_idx = next((s.index for s in steps if s.key == current), 0)
    out = []
    for s in steps:
        if s.index < cur_idx or (s.key == PAYMENT_DONE and request.status == "approved" and current == PAYMENT_DONE):
            state = "done"
        elif s.index == cur_idx:
            state = "current"
        else:
            state = "upcoming"
        out.append((s, state))
    return out


def detect_user_step(user: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Workflow step the signed-in user acts as, from their role fields."""
    if not user:
        return None
    candidates: List[Any] = []
    for key in ("current_role", "currentRole", "role", "roles", "user_roles", "permissions", "positions"):
        value = user.get(key)
        if isinstance(value, (list, tuple)):
            candidates.extend(value)
        elif value:
            candidates.append(value)
    for c in candidates:
        if isinstance(c, Mapping):
            c = c.get("name") or c.get("label")
        key = role_to_step_key(c)
        if key:
            return key
    return None


def is_pending_for(request: PaymentRequest, step_key: Optional[str]) -> bool:
    return bool(step_key) and request.status == "pending" and resolve_step_key(request) == step_key
