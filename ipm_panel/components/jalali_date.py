# -*- coding: utf-8 -*-
# Jalali (Shamsi) date picker widgets for PySide6
from __future__ import annotations
from typing import Optional, Tuple

import jdatetime
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QLineEdit, QPushButton, QDialog, QVBoxLayout,
    QComboBox, QDialogButtonBox, QLabel
)

from ..utils.jalali import (
    PERSIAN_MONTHS, gregorian_to_jalali, is_jalali_ymd, jalali_month_days, jalali_to_gregorian,
)
from ..utils.styles import style_dialog_buttons


class JalaliDatePickerDialog(QDialog):
    def __init__(self, parent=None, jy: int = 1403, jm: int = 1, jd: int = 1):
        super().__init__(parent)
        self.setWindowTitle("انتخاب تاریخ (شمسی)")
        self.setLayoutDirection(Qt.RightToLeft)
        self.setMinimumWidth(480)
        v = QVBoxLayout(self); v.setContentsMargins(12, 12, 12, 12); v.setSpacing(12)
        row = QHBoxLayout(); row.setSpacing(8); v.addLayout(row)
        self.cb_year = QComboBox(); self.cb_month = QComboBox(); self.cb_day = QComboBox()
        self.setStyleSheet("""
            QLabel{font-size:13px;}
            QComboBox{padding:8px 10px; min-height:36px; border:1px solid #d4d4d4; border-radius:6px; font-size:13px;}
            QDialog QPushButton{min-width:100px;padding:6px 12px;border-radius:6px;}
        """)
        for y in range(1390, 1451):
            self.cb_year.addItem(str(y), y)
        self.cb_month.addItems(PERSIAN_MONTHS)
        row.addWidget(QLabel("سال")); row.addWidget(self.cb_year)
        row.addWidget(QLabel("ماه")); row.addWidget(self.cb_month)
        row.addWidget(QLabel("روز")); row.addWidget(self.cb_day)
        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        style_dialog_buttons(btns)
        v.addWidget(btns)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)
        self.cb_year.currentIndexChanged.connect(self._refill_days)
        self.cb_month.currentIndexChanged.connect(self._refill_days)
        yi = self.cb_year.findData(jy)
        if yi >= 0:
            self.cb_year.setCurrentIndex(yi)
        self.cb_month.setCurrentIndex(max(0, jm - 1))
        self._refill_days()
        di = self.cb_day.findData(jd)
        if di >= 0:
            self.cb_day.setCurrentIndex(di)

    def _refill_days(self):
        y = self.cb_year.currentData()
        m = self.cb_month.currentIndex() + 1
        if y is None:
            return
        cur = self.cb_day.currentText()
        self.cb_day.blockSignals(True)
        self.cb_day.clear()
        for d in range(1, jalali_month_days(y, m) + 1):
            self.cb_day.addItem(str(d), d)
        # keep the previous day when the new month still has it
        idx = self.cb_day.findText(cur)
        if idx >= 0:
            self.cb_day.setCurrentIndex(idx)
        self.cb_day.blockSignals(False)

    def get_jalali(self) -> Tuple[int, int, int]:
        return (self.cb_year.currentData(), self.cb_month.currentIndex() + 1, self.cb_day.currentData())


class JalaliDateEdit(QWidget):
    """
    Read-only line edit + button that opens the Jalali picker.
    Empty until a date is picked or set; values are `YYYY-MM-DD` strings.
    """
    dateChanged = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setLayoutDirection(Qt.RightToLeft)
        h = QHBoxLayout(self); h.setContentsMargins(0, 0, 0, 0); h.setSpacing(6)
        self.le = QLineEdit(); self.le.setReadOnly(True)
        self.le.setMinimumHeight(34)
        self.le.setPlaceholderText("انتخاب تاریخ")
        self.le.setStyleSheet("QLineEdit{padding:8px 10px; border:1px solid #d4d4d4; border-radius:6px; font-size:13px;}")
        self.btn = QPushButton("📅"); self.btn.setFixedWidth(40)
        self.btn.setStyleSheet("QPushButton{padding:6px 10px; border:1px solid #d4d4d4; border-radius:6px; background:#fafafa;} QPushButton:hover{background:#f5f5f5}")
        h.addWidget(self.le, 1); h.addWidget(self.btn, 0)
        self.btn.clicked.connect(self._open_picker)
        self._ymd = ""

    def _open_picker(self):
        today = jdatetime.date.today()
        jy, jm, jd = today.year, today.month, today.day
        if is_jalali_ymd(self._ymd):
            jy, jm, jd = (int(x) for x in self._ymd.split("-"))
        dlg = JalaliDatePickerDialog(self, jy, jm, jd)
        if dlg.exec():
            y, m, d = dlg.get_jalali()
            self.set_jalali(f"{y:04d}-{m:02d}-{d:02d}")

    # -- public helpers --
    def set_jalali(self, ymd: str):
        self._ymd = ymd or ""
        self.le.setText(self._ymd)
        self.dateChanged.emit(self._ymd)

    def set_from_gregorian_str(self, iso: str):
        if iso:
            self.set_jalali(gregorian_to_jalali(iso))

    def jalali(self) -> str:
        return self._ymd

    def get_gregorian_iso(self) -> Optional[str]:
        return jalali_to_gregorian(self._ymd) if self._ymd else None

    def clear(self):
        self.set_jalali("")

    def text(self) -> str:
        return self.le.text()
