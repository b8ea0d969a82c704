import jdatetime

from ipm_panel.services.serials import SerialCounter
from ipm_panel.state.storage import MemoryStorage


def _counter(storage, y=1403, m=7):
    return SerialCounter(storage, today=lambda: jdatetime.date(y, m, 10))


def test_preview_does_not_change_counter():
    storage = MemoryStorage()
    c = _counter(storage)
    assert c.key() == "pr_seq_140307"
    assert c.preview() == "PR0307001"
    assert c.preview() == "PR0307001"
    assert storage.get_item(c.key()) is None


def test_consume_increments_per_month():
    storage = MemoryStorage()
    c = _counter(storage)
    assert c.consume() == "PR0307001"
    assert c.consume() == "PR0307002"
    assert storage.get_item("pr_seq_140307") == "2"
    assert _counter(storage, m=8).consume() == "PR0308001"


def test_non_numeric_counter_counts_as_zero():
    storage = MemoryStorage({"pr_seq_140307": "abc"})
    assert _counter(storage).consume() == "PR0307001"
