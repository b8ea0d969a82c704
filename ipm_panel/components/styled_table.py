# -*- coding: utf-8 -*-
"""Styled table component shared by the list pages"""
from typing import Iterable

from PySide6.QtWidgets import QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView, QLabel
from PySide6.QtCore import Qt

from ..utils.styles import badge_style


class StyledTableWidget(QTableWidget):
    """QTableWidget with the panel's header styling and RTL layout"""

    def __init__(self, headers: Iterable[str] = (), parent=None):
        headers = list(headers)
        super().__init__(0, len(headers), parent)
        if headers:
            self.setHorizontalHeaderLabels(headers)
        self._setup_styling()

    def _setup_styling(self):
        self.setStyleSheet("""
            QTableWidget {
                background-color: white;
                alternate-background-color: #fafafa;
                gridline-color: #e5e5e5;
                border: 1px solid #e5e5e5;
                border-radius: 6px;
            }
            QHeaderView::section {
                background-color: #f5f5f5;
                color: #404040;
                padding: 8px 12px;
                border: 1px solid #e5e5e5;
                font-weight: bold;
                font-size: 13px;
                min-height: 32px;
            }
            QTableWidget::item {
                padding: 8px 12px;
                color: #171717;
            }
            QTableWidget::item:selected {
                background-color: #fde7d3;
                color: #171717;
            }
        """)
        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.verticalHeader().setDefaultSectionSize(40)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.horizontalHeader().setVisible(True)
        self.verticalHeader().setVisible(False)
        self.setLayoutDirection(Qt.RightToLeft)

    def add_row(self, values: Iterable) -> int:
        """Append a row of plain text cells and return its index."""
        r = self.rowCount(); self.insertRow(r)
        for c, val in enumerate(values):
            self.setItem(r, c, QTableWidgetItem("" if val is None else str(val)))
        return r

    def set_badge(self, row: int, col: int, text: str, bg: str, fg: str) -> QLabel:
        badge = QLabel(text); badge.setAlignment(Qt.AlignCenter)
        badge.setStyleSheet(badge_style(bg, fg))
        self.setCellWidget(row, col, badge)
        return badge
