# -*- coding: utf-8 -*-
"""Per-month serial numbers for payment-request documents: PR<YY><MM><NNN>.
The counter for a Jalali month lives in storage under pr_seq_<YYYY><MM>.
"""
from __future__ import annotations
import logging
from typing import Callable, Optional, Tuple

import jdatetime

from ipm_panel.state.storage import MemoryStorage

log = logging.getLogger(__name__)


class SerialCounter:
    def __init__(self, storage: MemoryStorage, today: Optional[Callable[[], jdatetime.date]] = None):
        self.storage = storage
        self._today = today or jdatetime.date.today

    def _parts(self) -> Tuple[str, str, str]:
        d = self._today()
        y4 = f"{d.year:04d}"
        return y4, y4[-2:], f"{d.month:02d}"

    def key(self) -> str:
        y4, _, m2 = self._parts()
        return f"pr_seq_{y4}{m2}"

    def _last(self, key: str) -> int:
        raw = self.storage.get_item(key)
        try:
            return max(0, int(raw or 0))
        except ValueError:
            log.warning("Serial counter %s holds %r; treating it as 0", key, raw)
            return 0

    def preview(self) -> str:
        """Next serial without reserving it."""
        y4, y2, m2 = self._parts()
        nxt = self._last(f"pr_seq_{y4}{m2}") + 1
        return f"PR{y2}{m2}{nxt:03d}"

    def consume(self) -> str:
        y4, y2, m2 = self._parts()
        key = f"pr_seq_{y4}{m2}"
        nxt = self._last(key) + 1
        self.storage.set_item(key, str(nxt))
        return f"PR{y2}{m2}{nxt:03d}"
