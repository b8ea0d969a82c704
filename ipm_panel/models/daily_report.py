# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ipm_panel.models.catalog import Tag


@dataclass
class DailyReport:
    id: int
    project_id: Any
    project_title: str = ""
    day: str = ""
    date_jalali: str = ""
    date_gregorian: str = ""
    items: List[str] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
