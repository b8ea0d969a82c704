import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtWidgets import QApplication, QMessageBox

from ipm_panel.services import auth_service
from ipm_panel.state.session import SessionContext
from ipm_panel.state.storage import MemoryStorage
from tests.helpers import FakeApi


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


def _api():
    return FakeApi({
        ("GET", "/tags"): {"items": [{"id": 1, "label": "بتن"}]},
        ("GET", "/base/tags"): {"items": [{"id": 1, "label": "بتن"}]},
        ("GET", "/projects"): {"projects": [{"id": 5, "code": "P5", "name": "Tower"}]},
        ("GET", "/centers/office"): {"items": [{"id": 1, "suffix": "101", "description": "rent"}]},
        ("GET", "/admin/users"): {"users": [{"id": 1, "username": "ali"}]},
        ("GET", "/requests"): {"items": [
            {"id": 1, "scope": "office", "status": "approved", "serial": "PR0301001"},
            {"id": 2, "scope": "office", "status": "pending", "current_role": "finance_manager"},
        ]},
    })


def test_tags_view_duplicate_shows_inline_error(qapp):
    from ipm_panel.views.tags_view import TagsView
    api = _api()
    view = TagsView(api)
    assert view.table.rowCount() == 1
    view.in_label.setText(" بتن ")
    view._add()
    assert view.lbl_error.text() == "این برچسب قبلاً ثبت شده است"
    assert [m for m, _, _ in api.calls] == ["GET"]


def test_tags_view_delete_after_confirmation(qapp, monkeypatch):
    from ipm_panel.views.tags_view import TagsView
    api = _api()
    view = TagsView(api)
    monkeypatch.setattr(QMessageBox, "question", lambda *a, **k: QMessageBox.StandardButton.Yes)
    view._delete(view.ctl.items[0])
    assert view.table.rowCount() == 0
    assert api.calls[-1] == ("DELETE", "/tags", {"id": 1})


def test_payment_requests_view_renders_badges(qapp):
    from ipm_panel.views.payment_requests_view import PaymentRequestsView
    session = SessionContext(MemoryStorage())
    session.set_user({"id": 2, "username": "fm", "positions": ["finance_manager"]})
    view = PaymentRequestsView(_api(), session)
    assert view.table.rowCount() == 2
    assert view.table.cellWidget(0, 6).text() == "انجام پرداخت"
    assert view.table.cellWidget(1, 6).text() == "در انتظار تایید مدیر مالی"
    view.chk_mine.setChecked(True)
    assert view.table.rowCount() == 1


def test_new_request_dialog_offers_loaded_projects(qapp):
    from ipm_panel.views.payment_requests_view import NewRequestDialog, PaymentRequestsView
    view = PaymentRequestsView(_api(), SessionContext(MemoryStorage()))
    assert [p.id for p in view.projects] == [5]
    dlg = NewRequestDialog(view, "PR0301001", view.projects)
    assert [dlg.cb_project.itemData(i) for i in range(dlg.cb_project.count())] == [None, 5]
    dlg.cb_project.setCurrentIndex(1)
    assert dlg.form()["project_id"] == 5


def test_other_views_build(qapp):
    from ipm_panel.views.budget_codes_view import BudgetCodesView
    from ipm_panel.views.daily_report_view import DailyReportView
    from ipm_panel.views.projects_view import ProjectsView
    from ipm_panel.views.users_view import UsersView
    api = _api()
    codes = BudgetCodesView(api)
    assert codes.table.item(0, 0).text() == "OB101"
    assert ProjectsView(api).table.rowCount() == 1
    assert UsersView(api).table.rowCount() == 1
    daily = DailyReportView(api)
    assert daily.cb_project.count() == 2
    daily.date_edit.set_jalali("1403-01-01")
    assert daily.lbl_gregorian.text() == "2024-03-20"


def test_dashboard_navigation(qapp):
    from ipm_panel.main import DashboardWindow
    storage = MemoryStorage()
    session = SessionContext(storage)
    auth_service.login(session, "marandi", "1234")
    win = DashboardWindow(session, _api(), storage, lambda: None)
    assert "/admin/users" in win._items
    win.navigate("/base/tags")
    assert win.current_path == "/base/tags"
    assert win._sections["base"].isExpanded()
    win._logout()
    assert not session.is_authenticated
