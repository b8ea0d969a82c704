# -*- coding: utf-8 -*-
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QGroupBox,
    QInputDialog, QMessageBox
)
from PySide6.QtCore import Qt

from ..components.styled_table import StyledTableWidget
from ..services.collections import TagsController
from ..utils.format import to_persian_digits
from ..utils.styles import primary_button, secondary_button, ERROR_TEXT, MUTED_TEXT

CARD_STYLE = (
    "QGroupBox{font-weight:bold; border:1px solid #e5e5e5; border-radius:10px; margin-top:10px;} "
    "QGroupBox::title{subcontrol-origin: margin; subcontrol-position: top right; padding: 0 10px;}"
)


class TagsView(QWidget):
    def __init__(self, api):
        super().__init__()
        self.ctl = TagsController(api)
        layout = QVBoxLayout(); layout.setSpacing(12)

        title = QLabel("برچسب‌ها")
        title.setStyleSheet("font-size:18px;font-weight:700;color:#171717;")
        desc = QLabel("برچسب‌های قابل استفاده در گزارش روزانه پروژه")
        desc.setStyleSheet(MUTED_TEXT)
        layout.addWidget(title); layout.addWidget(desc)

        bar = QHBoxLayout(); bar.setSpacing(8)
        self.in_label = QLineEdit(); self.in_label.setPlaceholderText("نام برچسب")
        self.in_label.returnPressed.connect(self._add)
        self.btn_add = primary_button("افزودن")
        self.btn_add.clicked.connect(self._add)
        btn_refresh = secondary_button("نوسازی")
        btn_refresh.clicked.connect(self._load)
        bar.addWidget(self.in_label, 1); bar.addWidget(self.btn_add); bar.addWidget(btn_refresh)
        layout.addLayout(bar)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)

        card = QGroupBox("فهرست برچسب‌ها"); card.setStyleSheet(CARD_STYLE)
        card_layout = QVBoxLayout(card)
        self.table = StyledTableWidget(["#", "برچسب", "ویرایش", "حذف"])
        card_layout.addWidget(self.table)
        layout.addWidget(card)

        self.lbl_status = QLabel(""); self.lbl_status.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.lbl_status)
        self.setLayout(layout)
        self._load()

    def closeEvent(self, event):
        self.ctl.close()
        super().closeEvent(event)

    def _sync(self):
        self.lbl_error.setText(self.ctl.error)
        self._render()

    def _load(self):
        self.lbl_status.setText("در حال بارگذاری…")
        self.ctl.load()
        self.lbl_status.setText("" if self.ctl.items else "برچسبی ثبت نشده است.")
        self._sync()

    def _render(self):
        self.table.setRowCount(0)
        for i, tag in enumerate(self.ctl.items, start=1):
            r = self.table.add_row([to_persian_digits(i), tag.label])
            btn_edit = secondary_button("ویرایش")
            btn_edit.clicked.connect(lambda _, t=tag: self._edit(t))
            self.table.setCellWidget(r, 2, btn_edit)
            btn_del = QPushButton("🗑️")
            btn_del.setFixedSize(32, 28)
            btn_del.clicked.connect(lambda _, t=tag: self._delete(t))
            self.table.setCellWidget(r, 3, btn_del)

    def _add(self):
        self.btn_add.setEnabled(False)
        try:
            if self.ctl.add(self.in_label.text()):
                self.in_label.clear()
        finally:
            self.btn_add.setEnabled(True)
        self._sync()

    def _edit(self, tag):
        text, ok = QInputDialog.getText(self, "ویرایش برچسب", "نام برچسب", text=tag.label)
        if ok:
            self.ctl.update(tag.id, text)
            self._sync()

    def _delete(self, tag):
        m = QMessageBox.question(self, "حذف برچسب", f"برچسب «{tag.label}» حذف شود؟")
        if m == QMessageBox.StandardButton.Yes:
            self.ctl.delete(tag.id)
            self._sync()
