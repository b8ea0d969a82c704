import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from ipm_panel.state.storage import MemoryStorage
from tests.helpers import FakeApi


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def storage():
    return MemoryStorage()
