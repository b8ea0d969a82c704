import pytest

from ipm_panel.services import navigation
from ipm_panel.state.storage import MemoryStorage, read_json


@pytest.mark.parametrize("current,to,expected", [
    ("/projects/balance", "/projects", True),
    ("/projects/balance/", "/projects/balance", True),
    ("/projectsx", "/projects", False),
    ("/x", "/", False),
    ("/", "/", True),
    ("", "/", True),
])
def test_is_active(current, to, expected):
    assert navigation.is_active(current, to) is expected


def test_is_active_with_base():
    assert navigation.is_active("/app/base/tags", "/base/tags", base="/app/")
    assert navigation.strip_base("/app", "/app") == "/"


@pytest.mark.parametrize("path,section", [
    ("/budget/centers", "budget"),
    ("/estimates", "budget"),
    ("/base/tags", "base"),
    ("/admin/users", "base"),
    ("/centers/projects", "base"),
    ("/centers/contract-info", "projects"),
    ("/projects/daily-log", "projects"),
    ("/contracts/list", "projects"),
    ("/payment", None),
])
def test_section_from_path(path, section):
    assert navigation.section_from_path(path) == section


def test_admin_only_items_hidden():
    base = next(s for s in navigation.SECTIONS if s.key == "base")
    assert "/admin/users" not in [i.path for i in navigation.visible_items(base, False)]
    assert "/admin/users" in [i.path for i in navigation.visible_items(base, True)]


def test_toggle_is_exclusive_and_persisted():
    storage = MemoryStorage()
    state = navigation.NavState(storage)
    assert state.toggle("budget") == {"budget": True}
    assert state.toggle("base") == {"base": True}
    assert read_json(storage, navigation.NAV_OPEN_KEY) == {"base": True}
    assert navigation.NavState(storage).is_open("base")
    assert state.toggle("base") == {}


def test_corrupt_nav_state_is_empty():
    state = navigation.NavState(MemoryStorage({navigation.NAV_OPEN_KEY: "{oops"}))
    assert state.open == {}
    assert state.parent_active("budget", "/budget/reports")
    assert not state.parent_active("base", "/budget/reports")
