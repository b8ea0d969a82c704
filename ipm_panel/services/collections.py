# -*- coding: utf-8 -*-
"""Page controllers for the list/form pages.

Every controller follows one contract: `load()` fetches the collection,
`add()` validates before sending anything, `update()` sends a partial update
and merges the answer, `delete()` removes the row locally once the server
agrees. Failures end up in `controller.error` as a user-facing string; the
methods return False instead of raising. Nothing is retried automatically.
"""
from __future__ import annotations
import logging
import re
from dataclasses import asdict, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ipm_panel.errors import ApiError, PanelError, ValidationError
from ipm_panel.models.catalog import BudgetCode, Project, Tag, normalize_label
from ipm_panel.models.daily_report import DailyReport
from ipm_panel.models.payment_request import PaymentRequest
from ipm_panel.models.user import User
from ipm_panel.services import workflow
from ipm_panel.services.access import (
    DEFAULT_CONTRACT_ACCESS, RoleItem, normalize_role_items, sanitize_access,
)
from ipm_panel.services.api_client import ApiClient
from ipm_panel.services.serials import SerialCounter
from ipm_panel.utils import jalali

log = logging.getLogger(__name__)


def _natural_key(value: Any):
    parts = re.split(r"(\d+)", str(value or "").casefold())
    return [(0, int(p), "") if p.isdigit() else (1, 0, p) for p in parts]


class CollectionController:
    resource = ""
    list_keys = ("items",)
    load_error = "خطا در دریافت اطلاعات"
    save_error = "خطا در ثبت"
    update_error = "خطا در ویرایش"
    delete_error = "خطا در حذف"

    def __init__(self, api: ApiClient):
        self.api = api
        self.items: List[Any] = []
        self.error = ""
        self.loading = False
        self.saving = False
        self.closed = False
        self.sort_key = ""
        self.sort_dir = "asc"

    # ---- hooks ----
    def parse(self, raw: Mapping[str, Any]):
        return dict(raw)

    def item_id(self, item) -> Any:
        return item.get("id") if isinstance(item, Mapping) else getattr(item, "id", None)

    def merge(self, item, changes: Mapping[str, Any]):
        if isinstance(item, dict):
            return {**item, **changes}
        known = {k: v for k, v in changes.items() if hasattr(item, k)}
        return replace(item, **known)

    # ---- lifecycle ----
    def close(self) -> None:
        """Mark the owning page as gone; late results are dropped."""
        self.closed = True

    def _rows(self, data: Mapping[str, Any]) -> List[Mapping[str, Any]]:
        for key in self.list_keys:
            rows = data.get(key)
            if isinstance(rows, list):
                return [r for r in rows if isinstance(r, Mapping)]
        return []

    def load(self) -> bool:
        if self.loading:
            return False
        self.loading = True
        self.error = ""
        try:
            data = self.api.get(self.resource)
        except ApiError as exc:
            if not self.closed:
                self.error = exc.message or self.load_error
            return False
        finally:
            self.loading = False
        if self.closed:
            return False
        self.items = [self.parse(r) for r in self._rows(data)]
        return True

    def _guarded(self, fn: Callable[[], bool], fallback: str) -> bool:
        if self.saving:
            return False
        self.saving = True
        self.error = ""
        try:
            return fn()
        except ValidationError as exc:
            self.error = exc.message
            return False
        except PanelError as exc:
            self.error = exc.message or fallback
            return False
        finally:
            self.saving = False

    def find(self, item_id: Any):
        for it in self.items:
            if str(self.item_id(it)) == str(item_id):
                return it
        return None

    # ---- sorting ----
    def toggle_sort(self, key: str) -> None:
        if self.sort_key == key:
            self.sort_dir = "desc" if self.sort_dir == "asc" else "asc"
        else:
            self.sort_key, self.sort_dir = key, "asc"

    def sorted_items(self) -> List[Any]:
        if not self.sort_key:
            return list(self.items)

        def value(it):
            v = it.get(self.sort_key) if isinstance(it, Mapping) else getattr(it, self.sort_key, "")
            return _natural_key(v)

        return sorted(self.items, key=value, reverse=self.sort_dir == "desc")

    # ---- generic operations ----
    def _append_or_reload(self, resp: Mapping[str, Any], fallback: Mapping[str, Any]) -> bool:
        raw = resp.get("item")
        if not isinstance(raw, Mapping):
            raw = {**fallback, "id": resp.get("id")} if resp.get("id") is not None else None
        if raw is not None and raw.get("id") is not None:
            self.items.append(self.parse(raw))
            return True
        return self.load()

    def _patch(self, item_id: Any, changes: Dict[str, Any]) -> bool:
        resp = self.api.patch_json(self.resource, {"id": item_id, **changes})
        merged = resp.get("item") if isinstance(resp.get("item"), Mapping) else {}
        self.items = [
            self.merge(it, {**changes, **merged}) if str(self.item_id(it)) == str(item_id) else it
            for it in self.items
        ]
        return True

    def delete(self, item_id: Any) -> bool:
        def run():
            self.api.delete(self.resource, {"id": item_id})
            self.items = [it for it in self.items if str(self.item_id(it)) != str(item_id)]
            return True
        return self._guarded(run, self.delete_error)


class TagsController(CollectionController):
    resource = "/tags"
    load_error = "خطا در دریافت برچسب‌ها"
    save_error = "خطا در ثبت برچسب"

    def parse(self, raw):
        return Tag.from_api(raw)

    def _check_label(self, label: str, exclude_id: Any = None) -> str:
        v = (label or "").strip()
        if not v:
            raise ValidationError("نام برچسب را وارد کنید")
        norm = normalize_label(v)
        for it in self.items:
            if exclude_id is not None and str(it.id) == str(exclude_id):
                continue
            if normalize_label(it.label) == norm:
                raise ValidationError("این برچسب قبلاً ثبت شده است")
        return v

    def add(self, label: str) -> bool:
        def run():
            v = self._check_label(label)
            resp = self.api.post_json(self.resource, {"label": v})
            return self._append_or_reload(resp, {"label": v})
        return self._guarded(run, self.save_error)

    def update(self, tag_id: Any, label: str) -> bool:
        def run():
            v = self._check_label(label, exclude_id=tag_id)
            return self._patch(tag_id, {"label": v})
        return self._guarded(run, self.update_error)


class BudgetCodesController(CollectionController):
    save_error = "خطا در ثبت ردیف"

    def __init__(self, api: ApiClient, scope: str):
        super().__init__(api)
        self.scope = scope
        self.resource = f"/centers/{scope}"

    def parse(self, raw):
        return BudgetCode.from_api(raw, self.scope)

    def add(self, suffix: str, description: str) -> bool:
        def run():
            s, d = (suffix or "").strip(), (description or "").strip()
            if not s and not d:
                raise ValidationError("کد یا شرح را وارد کنید")
            self.api.post_json(self.resource, {"suffix": s, "description": d})
            return self.load()
        return self._guarded(run, self.save_error)

    def update(self, code_id: Any, suffix: str, description: str) -> bool:
        def run():
            s, d = (suffix or "").strip(), (description or "").strip()
            if not s and not d:
                raise ValidationError("کد یا شرح را وارد کنید")
            return self._patch(code_id, {"suffix": s, "description": d})
        return self._guarded(run, self.update_error)


class ProjectsController(CollectionController):
    resource = "/projects"
    list_keys = ("projects", "items")
    load_error = "خطا در دریافت پروژه‌ها"

    def parse(self, raw):
        return Project.from_api(raw)

    def sorted_items(self) -> List[Project]:
        if self.sort_key:
            return super().sorted_items()
        return sorted(self.items, key=lambda p: (_natural_key(p.code), _natural_key(p.name)))

    @staticmethod
    def _check(code: str, name: str):
        c, n = (code or "").strip(), (name or "").strip()
        if not c and not n:
            raise ValidationError("کد یا نام پروژه را وارد کنید")
        return c, n

    def add(self, code: str, name: str) -> bool:
        def run():
            c, n = self._check(code, name)
            resp = self.api.post_json(self.resource, {"code": c, "name": n})
            return self._append_or_reload(resp, {"code": c, "name": n})
        return self._guarded(run, self.save_error)

    def update(self, project_id: Any, code: str, name: str) -> bool:
        def run():
            c, n = self._check(code, name)
            return self._patch(project_id, {"code": c, "name": n})
        return self._guarded(run, self.update_error)


ROLES_NOT_READY = "نقش‌ها هنوز بارگذاری نشده‌اند. چند ثانیه بعد دوباره ذخیره کنید."


class UsersController(CollectionController):
    resource = "/admin/users"
    list_keys = ("users",)
    roles_resource = "/base/user-roles"
    load_error = "خطا در دریافت کاربران"
    save_error = "خطا در ایجاد کاربر"
    update_error = "خطا در ذخیره تغییرات"

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.roles: List[RoleItem] = []

    @property
    def name_to_id(self) -> Dict[str, Any]:
        return {r.name: r.id for r in self.roles}

    @property
    def id_to_name(self) -> Dict[str, str]:
        return {str(r.id): r.name for r in self.roles if r.id is not None}

    def parse(self, raw):
        return User.from_api(raw, self.id_to_name)

    def load_roles(self) -> bool:
        try:
            data = self.api.get(self.roles_resource)
        except ApiError as exc:
            log.warning("Loading user roles failed: %s", exc.message)
            self.roles = []
            return False
        items = data.get("items") if isinstance(data.get("items"), list) else []
        self.roles = normalize_role_items(i for i in items if isinstance(i, Mapping))
        return True

    def load_all(self) -> bool:
        """Roles first, so positions in the user list can be mapped to slugs."""
        self.load_roles()
        return self.load()

    def _position_ids(self, positions: Iterable[str]) -> List[Any]:
        ids = self.name_to_id
        return [ids[n] for n in positions or [] if ids.get(n) is not None]

    def _check_roles_ready(self, positions) -> None:
        if positions and not self.roles:
            raise ValidationError(ROLES_NOT_READY)

    @staticmethod
    def build_access(role: str, budgets: Iterable[str], contracts: str, pack: str = "") -> List[str]:
        if role == "admin":
            return []
        keys = list(budgets or [])
        if contracts:
            keys.append(contracts)
        if pack:
            keys.append(pack)
        return sanitize_access(keys)

    def add(self, form: Mapping[str, Any]) -> bool:
        def run():
            username = str(form.get("username") or "").strip()
            password = str(form.get("password") or "")
            if not username or not password.strip():
                raise ValidationError("نام کاربری و گذرواژه الزامی است.")
            positions = list(form.get("positions") or [])
            self._check_roles_ready(positions)
            role = form.get("role") or "user"
            ids = self._position_ids(positions)
            self.api.post_json(self.resource, {
                "name": str(form.get("name") or "").strip() or None,
                "email": str(form.get("email") or "").strip() or None,
                "username": username,
                "password": password,
                "department": form.get("department") or None,
                "role": role,
                "access": self.build_access(
                    role, form.get("budgets") or [],
                    form.get("contracts") or DEFAULT_CONTRACT_ACCESS, form.get("pack") or "",
                ),
                "positions": ids,
                "roles": ids,
            })
            return self.load()
        return self._guarded(run, self.save_error)

    def update(self, user_id: Any, form: Mapping[str, Any]) -> bool:
        def run():
            positions = list(form.get("positions") or [])
            self._check_roles_ready(positions)
            payload: Dict[str, Any] = {
                "id": user_id,
                "name": str(form.get("name") or "").strip(),
                "email": str(form.get("email") or "").strip(),
                "username": str(form.get("username") or "").strip(),
                "department": form.get("department") or "",
                "role": form.get("role") or "user",
            }
            if payload["role"] != "admin":
                base = [k for k in form.get("access") or [] if not str(k).startswith("contracts:")]
                base.append(form.get("contracts") or DEFAULT_CONTRACT_ACCESS)
                payload["access"] = sanitize_access(base)
            if form.get("password"):
                payload["password"] = form["password"]
            ids = self._position_ids(positions)
            payload["positions"] = ids
            payload["roles"] = ids
            self.api.patch_json(self.resource, payload)
            return self.load()
        return self._guarded(run, self.update_error)


class PaymentRequestsController(CollectionController):
    resource = "/requests"
    list_keys = ("items", "requests")
    load_error = "خطا در دریافت درخواست‌ها"
    action_error = "خطا در ثبت اقدام"

    def __init__(self, api: ApiClient, serials: Optional[SerialCounter] = None):
        super().__init__(api)
        self.serials = serials
        self.projects: List[Project] = []

    def parse(self, raw):
        return PaymentRequest.from_api(raw)

    def load_projects(self) -> List[Project]:
        """Projects offered for requests filed under the projects scope."""
        projects = ProjectsController(self.api)
        if not projects.load():
            log.warning("Loading projects failed: %s", projects.error)
        self.projects = projects.sorted_items()
        return self.projects

    def badge(self, request: PaymentRequest) -> workflow.StatusBadge:
        return workflow.status_badge(request)

    def filtered(self, scope: Optional[str] = None, step_key: Optional[str] = None) -> List[PaymentRequest]:
        """Rows of one scope (None: all); with `step_key`, only those pending at that step."""
        rows = [r for r in self.items if not scope or r.scope == scope]
        if step_key:
            rows = [r for r in rows if workflow.is_pending_for(r, step_key)]
        return rows

    def preview_serial(self) -> str:
        return self.serials.preview() if self.serials else ""

    def create(self, form: Mapping[str, Any]) -> bool:
        def run():
            title = str(form.get("title") or "").strip()
            budget_code = str(form.get("budget_code") or "").strip()
            scope = form.get("scope") or "office"
            missing = []
            if not title:
                missing.append("عنوان")
            if not budget_code:
                missing.append("کد بودجه")
            if scope == "projects" and not form.get("project_id"):
                missing.append("پروژه")
            if missing:
                raise ValidationError("فیلدهای اجباری: " + "، ".join(missing))
            serial = self.preview_serial()
            self.api.post_json(self.resource, {
                "serial": serial,
                "scope": scope,
                "title": title,
                "budget_code": budget_code,
                "amount": int(form.get("amount") or 0),
                "project_id": form.get("project_id") or None,
                "desc": str(form.get("desc") or "").strip(),
            })
            if self.serials:
                self.serials.consume()
            return self.load()
        return self._guarded(run, self.save_error)

    def record_action(self, request_id: Any, action: str, note: str = "") -> bool:
        """Approve, reject or return a request, then reload the whole list."""
        status = {"approved": "approved", "rejected": "rejected"}.get(action, "returned")

        def run():
            self.api.post_json(f"{self.resource}/status", {"id": request_id, "status": status, "note": note})
            return self.load()
        return self._guarded(run, self.action_error)

    def delete(self, item_id: Any) -> bool:
        def run():
            self.api.delete(f"{self.resource}/{item_id}")
            self.items = [it for it in self.items if str(it.id) != str(item_id)]
            return True
        return self._guarded(run, self.delete_error)


class DailyReportController:
    """Draft form plus the locally kept list of daily reports."""

    projects_resource = "/projects"
    tags_resource = "/base/tags"

    def __init__(self, api: ApiClient):
        self.api = api
        self.projects: List[Project] = []
        self.tags: List[Tag] = []
        self.reports: List[DailyReport] = []
        self.error = ""
        self.saving = False
        self.reset()

    def reset(self) -> None:
        self.project_id: Any = None
        self.day = ""
        self.date_jalali = ""
        self.date_gregorian = ""
        self.items: List[str] = []
        self.selected_tags: List[Tag] = []
        self.files: List[str] = []

    def load(self) -> None:
        try:
            data = self.api.get(self.projects_resource)
            rows = data.get("projects") if isinstance(data.get("projects"), list) else []
            self.projects = [Project.from_api(r) for r in rows if isinstance(r, Mapping)]
        except ApiError as exc:
            log.warning("Loading projects failed: %s", exc.message)
        try:
            data = self.api.get(self.tags_resource)
            rows = data.get("items") if isinstance(data.get("items"), list) else []
            self.tags = [Tag.from_api(r) for r in rows if isinstance(r, Mapping)]
        except ApiError as exc:
            log.warning("Loading tags failed: %s", exc.message)

    # ---- draft editing ----
    def add_item(self, text: str) -> bool:
        v = (text or "").strip()
        if not v:
            return False
        self.items.append(v)
        return True

    def remove_item(self, index: int) -> None:
        if 0 <= index < len(self.items):
            del self.items[index]

    def _tag(self, tag_id: Any) -> Optional[Tag]:
        return next((t for t in self.tags if str(t.id) == str(tag_id)), None)

    def add_tag(self, tag_id: Any, target: Optional[List[Tag]] = None) -> None:
        target = self.selected_tags if target is None else target
        t = self._tag(tag_id)
        if t and not any(str(x.id) == str(t.id) for x in target):
            target.append(t)

    def remove_tag(self, tag_id: Any) -> None:
        self.selected_tags = [t for t in self.selected_tags if str(t.id) != str(tag_id)]

    def set_jalali_date(self, ymd: str) -> None:
        self.date_jalali = ymd or ""
        self.date_gregorian = jalali.jalali_to_gregorian(ymd) if ymd else ""
        if ymd:
            self.day = jalali.jalali_weekday_name(ymd) or self.day

    def apply_files(self, names: Iterable[str]) -> None:
        """Attach files; with no date chosen yet, the first dated filename sets it."""
        self.files = [str(n) for n in names or []]
        if self.date_jalali or self.date_gregorian:
            return
        for name in self.files:
            found = jalali.extract_date_from_filename(name)
            if found is None:
                continue
            jy, gy = found.as_pair()
            self.date_jalali = jy
            self.date_gregorian = gy
            if not self.day:
                self.day = jalali.jalali_weekday_name(jy)
            return

    # ---- save / edit ----
    def save(self) -> bool:
        self.error = ""
        if self.saving:
            return False
        if not self.project_id:
            self.error = "پروژه را انتخاب کنید"
            return False
        if not self.date_jalali:
            self.error = "تاریخ گزارش روزانه را انتخاب کنید"
            return False
        if not self.items:
            self.error = "حداقل یک مورد در شرح وارد کنید"
            return False
        self.saving = True
        try:
            project = next((p for p in self.projects if str(p.id) == str(self.project_id)), None)
            report = DailyReport(
                id=max((r.id for r in self.reports), default=0) + 1,
                project_id=self.project_id,
                project_title=project.title if project else "",
                day=self.day,
                date_jalali=self.date_jalali,
                date_gregorian=self.date_gregorian,
                items=list(self.items),
                tags=list(self.selected_tags),
                files=list(self.files),
                created_at=jalali.today_jalali_ymd(),
            )
            self.reports.insert(0, report)
            self.reset()
            return True
        finally:
            self.saving = False

    def update_report(self, report_id: int, items: Iterable[str], tags: Iterable[Tag]) -> bool:
        for idx, r in enumerate(self.reports):
            if r.id == report_id:
                self.reports[idx] = replace(r, items=[i for i in items if str(i).strip()], tags=list(tags))
                return True
        return False

    def report_dict(self, report_id: int) -> Dict[str, Any]:
        r = next((x for x in self.reports if x.id == report_id), None)
        return asdict(r) if r else {}
