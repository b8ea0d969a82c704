from ipm_panel.errors import ApiError
from ipm_panel.services.collections import (
    BudgetCodesController, DailyReportController, PaymentRequestsController,
    ProjectsController, TagsController, UsersController, ROLES_NOT_READY,
)
from ipm_panel.services.serials import SerialCounter


def test_tags_load_and_duplicate_rejected_without_request(fake_api):
    fake_api.responses[("GET", "/tags")] = {"items": [{"id": 1, "label": "Concrete  Work"}]}
    ctl = TagsController(fake_api)
    assert ctl.load()
    before = len(fake_api.calls)
    assert not ctl.add("  concrete work ")
    assert ctl.error == "این برچسب قبلاً ثبت شده است"
    assert len(fake_api.calls) == before


def test_tags_add_empty_label(fake_api):
    ctl = TagsController(fake_api)
    assert not ctl.add("   ")
    assert ctl.error == "نام برچسب را وارد کنید"
    assert fake_api.calls == []


def test_tags_add_appends_returned_item(fake_api):
    fake_api.responses[("POST", "/tags")] = {"item": {"id": 9, "label": "بتن"}}
    ctl = TagsController(fake_api)
    assert ctl.add(" بتن ")
    assert fake_api.calls[-1] == ("POST", "/tags", {"label": "بتن"})
    assert [t.label for t in ctl.items] == ["بتن"]


def test_tags_update_merges_and_delete_removes(fake_api):
    fake_api.responses[("GET", "/tags")] = {"items": [{"id": 1, "label": "a"}, {"id": 2, "label": "b"}]}
    ctl = TagsController(fake_api)
    ctl.load()
    assert ctl.update(1, "aa")
    assert fake_api.calls[-1] == ("PATCH", "/tags", {"id": 1, "label": "aa"})
    assert ctl.find(1).label == "aa"
    # renaming to its own label is not a duplicate
    assert ctl.update(2, "B")
    assert ctl.delete(1)
    assert fake_api.calls[-1] == ("DELETE", "/tags", {"id": 1})
    assert [t.id for t in ctl.items] == [2]


def test_failure_becomes_inline_error(fake_api):
    fake_api.responses[("GET", "/tags")] = ApiError("boom", 500)
    ctl = TagsController(fake_api)
    assert not ctl.load()
    assert ctl.error == "boom"
    assert not ctl.loading


def test_closed_controller_ignores_late_results(fake_api):
    fake_api.responses[("GET", "/tags")] = {"items": [{"id": 1, "label": "a"}]}
    ctl = TagsController(fake_api)
    ctl.close()
    assert not ctl.load()
    assert ctl.items == []


def test_budget_codes_use_scope_prefix_and_reload(fake_api):
    fake_api.responses[("GET", "/centers/site")] = {"items": [{"id": 1, "suffix": "101", "description": "x"}]}
    ctl = BudgetCodesController(fake_api, "site")
    assert not ctl.add("", " ")
    assert ctl.error == "کد یا شرح را وارد کنید"
    assert ctl.add("101", "x")
    assert fake_api.methods() == ["POST", "GET"]
    assert ctl.items[0].full_code == "SB101"


def test_projects_sorted_by_code_then_name(fake_api):
    fake_api.responses[("GET", "/projects")] = {"projects": [
        {"id": 1, "code": "P10", "name": "b"},
        {"id": 2, "code": "P2", "name": "z"},
        {"id": 3, "code": "P2", "name": "a"},
    ]}
    ctl = ProjectsController(fake_api)
    ctl.load()
    assert [p.id for p in ctl.sorted_items()] == [3, 2, 1]
    ctl.toggle_sort("name")
    ctl.toggle_sort("name")
    assert [p.name for p in ctl.sorted_items()] == ["z", "b", "a"]
    assert not ctl.add(" ", "")
    assert ctl.error == "کد یا نام پروژه را وارد کنید"


def _users_api(fake_api):
    fake_api.responses[("GET", "/base/user-roles")] = {"items": [
        {"id": 3, "name": "finance_manager"}, {"id": 4, "name": "مدیر پروژه"},
    ]}
    fake_api.responses[("GET", "/admin/users")] = {"users": [
        {"id": 1, "username": "ali", "access": ["budget:office", "bogus"], "positions": [3]},
    ]}
    return fake_api


def test_users_load_maps_positions(fake_api):
    ctl = UsersController(_users_api(fake_api))
    assert ctl.load_all()
    user = ctl.items[0]
    assert user.positions == ["finance_manager"]
    assert user.access == ["budget:office"]
    assert user.contracts_access == "contracts:nonfinancial"


def test_users_add_requires_credentials(fake_api):
    ctl = UsersController(fake_api)
    assert not ctl.add({"username": "x", "password": " "})
    assert ctl.error == "نام کاربری و گذرواژه الزامی است."
    assert fake_api.calls == []


def test_users_refuse_positions_before_roles_load(fake_api):
    ctl = UsersController(fake_api)
    assert not ctl.add({"username": "x", "password": "p", "positions": ["finance_manager"]})
    assert ctl.error == ROLES_NOT_READY


def test_users_add_sends_ids_and_sanitized_access(fake_api):
    ctl = UsersController(_users_api(fake_api))
    ctl.load_roles()
    assert ctl.add({
        "username": "sara", "password": "p", "role": "user",
        "budgets": ["budget:site", "budget:site"], "contracts": "contracts:all", "pack": "pack:pm",
        "positions": ["project_manager", "finance_manager"],
    })
    post = next(c for c in fake_api.calls if c[0] == "POST")
    assert post[2]["access"] == ["budget:site", "contracts:all", "pack:pm"]
    assert post[2]["positions"] == [4, 3]
    assert post[2]["roles"] == [4, 3]


def test_admin_update_sends_no_access_and_keeps_password(fake_api):
    ctl = UsersController(_users_api(fake_api))
    ctl.load_roles()
    assert ctl.update(1, {"username": "ali", "role": "admin", "password": ""})
    patch = next(c for c in fake_api.calls if c[0] == "PATCH")
    assert "access" not in patch[2]
    assert "password" not in patch[2]


def test_daily_report_validation_and_save(fake_api):
    fake_api.responses[("GET", "/projects")] = {"projects": [{"id": 5, "code": "P5", "name": "Tower"}]}
    fake_api.responses[("GET", "/base/tags")] = {"items": [{"id": 1, "label": "بتن"}]}
    ctl = DailyReportController(fake_api)
    ctl.load()
    assert not ctl.save() and ctl.error == "پروژه را انتخاب کنید"
    ctl.project_id = 5
    assert not ctl.save() and ctl.error == "تاریخ گزارش روزانه را انتخاب کنید"
    ctl.set_jalali_date("1403-01-01")
    assert ctl.date_gregorian == "2024-03-20"
    assert ctl.day == "چهارشنبه"
    assert not ctl.save() and ctl.error == "حداقل یک مورد در شرح وارد کنید"
    assert not ctl.add_item("  ")
    ctl.add_item("pouring")
    ctl.add_tag(1)
    ctl.add_tag(1)
    assert len(ctl.selected_tags) == 1
    assert ctl.save()
    report = ctl.reports[0]
    assert report.project_title == "Tower"
    assert report.items == ["pouring"]
    assert ctl.project_id is None and ctl.items == []


def test_daily_report_date_from_first_dated_file(fake_api):
    ctl = DailyReportController(fake_api)
    ctl.apply_files(["notes.txt", "14040118.jpg", "2025-03-18.pdf"])
    assert ctl.date_jalali == "1404-01-18"
    assert ctl.date_gregorian == "2025-04-07"
    ctl.apply_files(["2025-03-18.pdf"])
    assert ctl.date_jalali == "1404-01-18"


def test_daily_report_newest_first_and_edit(fake_api):
    ctl = DailyReportController(fake_api)
    for day in ("1403-01-01", "1403-01-02"):
        ctl.project_id = 1
        ctl.set_jalali_date(day)
        ctl.add_item("x")
        ctl.save()
    assert [r.date_jalali for r in ctl.reports] == ["1403-01-02", "1403-01-01"]
    rid = ctl.reports[1].id
    assert ctl.update_report(rid, ["a", " ", "b"], [])
    assert ctl.report_dict(rid)["items"] == ["a", "b"]


def _requests_api(fake_api):
    fake_api.responses[("GET", "/requests")] = {"requests": [
        {"id": 1, "scope": "office", "status": "pending", "current_role": "accounting"},
        {"id": 2, "scope": "site", "status": "pending", "current_role": "project_control"},
        {"id": 3, "scope": "office", "status": "approved"},
    ]}
    return fake_api


def test_payment_requests_filters_and_badges(fake_api):
    ctl = PaymentRequestsController(_requests_api(fake_api))
    ctl.load()
    assert [r.id for r in ctl.filtered("office")] == [1, 3]
    assert [r.id for r in ctl.filtered(None, "project_control")] == [2]
    assert ctl.badge(ctl.find(3)).label == "انجام پرداخت"


def test_payment_request_action_posts_status_and_reloads(fake_api):
    ctl = PaymentRequestsController(_requests_api(fake_api))
    assert ctl.record_action(1, "approved", "ok")
    assert fake_api.calls[0] == ("POST", "/requests/status", {"id": 1, "status": "approved", "note": "ok"})
    assert fake_api.calls[1][:2] == ("GET", "/requests")


def test_payment_request_create_consumes_serial(fake_api, storage):
    import jdatetime
    serials = SerialCounter(storage, today=lambda: jdatetime.date(1403, 5, 2))
    ctl = PaymentRequestsController(fake_api, serials)
    assert not ctl.create({"scope": "projects", "title": "t", "budget_code": "B1"})
    assert "پروژه" in ctl.error
    assert ctl.preview_serial() == "PR0305001"
    assert ctl.create({"scope": "office", "title": "t", "budget_code": "OB1", "amount": 1200})
    post = fake_api.calls[0]
    assert post[1] == "/requests"
    assert post[2]["serial"] == "PR0305001"
    assert ctl.preview_serial() == "PR0305002"


def test_payment_request_failed_create_keeps_serial(fake_api, storage):
    import jdatetime
    serials = SerialCounter(storage, today=lambda: jdatetime.date(1403, 5, 2))
    fake_api.responses[("POST", "/requests")] = ApiError("boom", 500)
    ctl = PaymentRequestsController(fake_api, serials)
    assert not ctl.create({"scope": "office", "title": "t", "budget_code": "OB1"})
    assert ctl.error == "boom"
    assert ctl.preview_serial() == "PR0305001"
    del fake_api.responses[("POST", "/requests")]
    assert ctl.create({"scope": "office", "title": "t", "budget_code": "OB1"})
    assert [c[2]["serial"] for c in fake_api.calls if c[:2] == ("POST", "/requests")] == ["PR0305001", "PR0305001"]
    assert ctl.preview_serial() == "PR0305002"


def test_payment_requests_load_projects_sorted(fake_api):
    fake_api.responses[("GET", "/projects")] = {"projects": [
        {"id": 2, "code": "P10", "name": "B"},
        {"id": 1, "code": "P2", "name": "A"},
    ]}
    ctl = PaymentRequestsController(fake_api)
    assert [p.id for p in ctl.load_projects()] == [1, 2]


def test_payment_requests_projects_failure_leaves_list_empty(fake_api):
    fake_api.responses[("GET", "/projects")] = ApiError("down", 503)
    ctl = PaymentRequestsController(fake_api)
    assert ctl.load_projects() == []
    assert ctl.error == ""
