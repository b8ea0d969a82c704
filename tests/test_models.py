from ipm_panel.models.catalog import BudgetCode, Project, Tag, normalize_label
from ipm_panel.models.payment_request import PaymentRequest
from ipm_panel.models.user import User


def test_payment_request_aliases():
    req = PaymentRequest.from_api({
        "id": 7,
        "status": "PENDING",
        "meta": '{"scope": "capex", "amount": "۱۲,۵۰۰"}',
        "currentRole": "مدیر مالی",
        "assignedRole": "accounting",
        "workflowUnit": "finance",
        "history_json": '[{"type": "approve", "from_role": "creator", "current_role": "finance", "comment": "ok"}]',
    })
    assert req.scope == "capex"
    assert req.amount == 12500
    assert req.status == "pending"
    assert req.current_role == "مدیر مالی"
    assert req.assigned_role == "accounting"
    assert req.workflow_unit == "finance"
    action = req.actions[0]
    assert (action.action, action.from_role, action.to_role, action.note) == ("approve", "creator", "finance", "ok")


def test_payment_request_defaults():
    req = PaymentRequest.from_api({"id": 1, "scope": "unknown", "history": "not json"})
    assert req.scope == "office"
    assert req.status == "pending"
    assert req.actions == []
    assert req.amount == 0


def test_catalog_records():
    assert normalize_label("  Steel   Bars ") == "steel bars"
    assert Tag.from_api({"id": 1, "name": " x "}).label == "x"
    code = BudgetCode.from_api({"id": 2, "suffix": "12", "description": "d"}, "capex")
    assert code.full_code == "IB12"
    assert BudgetCode.from_api({"suffix": "9"}, "projects").full_code == "9"
    assert Project.from_api({"code": "P1"}).title == "P1"


def test_user_record():
    u = User.from_api({
        "id": 1, "email": "a@b.c", "role": "superuser",
        "access_labels": ["contracts:all", "budget:cash"], "roles": [{"name": "مدیریت"}],
    })
    assert u.role == "user"
    assert u.contracts_access == "contracts:all"
    assert u.positions == ["executive"]
    assert u.display_name == "a@b.c"
