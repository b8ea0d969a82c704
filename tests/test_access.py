from ipm_panel.services import access


def test_sanitize_access_filters_and_dedupes_in_order():
    keys = [
        "pack:hr", "budget:office", "contracts:all", "budget:office",
        "budget:moon", "contracts:financial", "pack:siteA", None, 42, "pack:hr",
    ]
    assert access.sanitize_access(keys) == ["pack:hr", "budget:office", "contracts:all", "pack:siteA"]
    assert access.sanitize_access(None) == []


def test_main_admin_detection():
    assert access.is_main_admin_user({"username": "Marandi"})
    assert access.is_main_admin_user({"email": "MARANDI@ipecgroup.net"})
    assert access.is_main_admin_user({"role": "admin"})
    assert access.is_main_admin_user({"scopes": ["all"]})
    assert access.is_main_admin_user({"can_manage_users": True})
    assert not access.is_main_admin_user({"username": "ali", "role": "user"})
    assert not access.is_main_admin_user(None)


def test_normalize_user_grants_scopes_without_duplicates():
    u = access.normalize_user({"username": "marandi", "scopes": ["budget", "all"]})
    assert u["role"] == "admin"
    assert u["can_manage_users"] is True
    assert u["scopes"] == ["budget", "all"]
    plain = {"username": "ali", "role": "user"}
    assert access.normalize_user(plain) == plain
    assert access.normalize_user(None) is None


def test_role_items_prefer_english_slug():
    items = access.normalize_role_items([
        {"id": 7, "name": "مدیر مالی"},
        {"id": 3, "name": "finance_manager"},
        {"id": 9, "name": "custom", "label": "سفارشی"},
        {"id": 10, "name": ""},
    ])
    by_name = {r.name: r for r in items}
    assert by_name["finance_manager"].id == 3
    assert by_name["finance_manager"].label == "مدیر مالی"
    assert by_name["custom"].label == "سفارشی"
    assert len(items) == 2


def test_normalize_positions_accepts_mixed_shapes():
    id_to_name = {"3": "finance_manager", "5": "project_control"}
    raw = ["مدیر پروژه", 3, {"id": 5}, {"name": "کنترل پروژه"}, True, "finance_manager"]
    assert access.normalize_positions(raw, id_to_name) == [
        "project_manager", "finance_manager", "project_control",
    ]


def test_page_access_rules():
    tabs = ["list", "new", "report"]
    missing = access.page_rule({}, "payment")
    assert access.resolve_page_access(missing, tabs) == access.PageAccess(False, [])
    assert access.resolve_page_access(missing, tabs, is_admin=True).tabs == tabs
    assert access.resolve_page_access(None, tabs).tabs == tabs
    assert access.resolve_page_access(["new", "ghost"], tabs) == access.PageAccess(True, ["new"])
    assert access.resolve_page_access({"permitted": False}, tabs).can_access is False
    assert access.resolve_page_access({"tabs": {"report": 1}}, tabs).tabs == ["report"]
    assert access.resolve_page_access({"permitted": "1", "tabs": {}}, tabs).tabs == tabs
    assert access.page_rule({"payment": None}, "payment") is None
