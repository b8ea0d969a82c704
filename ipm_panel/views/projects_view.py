# -*- coding: utf-8 -*-
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QGroupBox,
    QDialog, QFormLayout, QDialogButtonBox, QMessageBox
)
from PySide6.QtCore import Qt

from ..components.styled_table import StyledTableWidget
from ..services.collections import ProjectsController
from ..utils.styles import primary_button, secondary_button, style_dialog_buttons, ERROR_TEXT, MUTED_TEXT
from .tags_view import CARD_STYLE

SORT_COLUMNS = {0: "code", 1: "name"}


class ProjectEditDialog(QDialog):
    def __init__(self, parent=None, code: str = "", name: str = ""):
        super().__init__(parent)
        self.setWindowTitle("ویرایش پروژه")
        self.setModal(True)
        self.setMinimumWidth(420)
        layout = QVBoxLayout(self)
        form = QFormLayout(); form.setLabelAlignment(Qt.AlignRight)
        self.in_code = QLineEdit(code)
        self.in_name = QLineEdit(name)
        form.addRow("کد پروژه", self.in_code)
        form.addRow("نام پروژه", self.in_name)
        layout.addLayout(form)
        buttons = QDialogButtonBox(QDialogButtonBox.Cancel | QDialogButtonBox.Save)
        style_dialog_buttons(buttons)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)


class ProjectsView(QWidget):
    def __init__(self, api):
        super().__init__()
        self.ctl = ProjectsController(api)
        layout = QVBoxLayout(); layout.setSpacing(12)

        title = QLabel("پروژه‌ها")
        title.setStyleSheet("font-size:18px;font-weight:700;color:#171717;")
        desc = QLabel("تعریف کد و نام پروژه‌ها")
        desc.setStyleSheet(MUTED_TEXT)
        layout.addWidget(title); layout.addWidget(desc)

        bar = QHBoxLayout(); bar.setSpacing(8)
        self.in_code = QLineEdit(); self.in_code.setPlaceholderText("کد پروژه")
        self.in_name = QLineEdit(); self.in_name.setPlaceholderText("نام پروژه")
        self.btn_add = primary_button("افزودن پروژه")
        self.btn_add.clicked.connect(self._add)
        btn_refresh = secondary_button("نوسازی")
        btn_refresh.clicked.connect(self._load)
        bar.addWidget(self.in_code); bar.addWidget(self.in_name, 1)
        bar.addWidget(self.btn_add); bar.addWidget(btn_refresh)
        layout.addLayout(bar)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)

        card = QGroupBox("فهرست پروژه‌ها"); card.setStyleSheet(CARD_STYLE)
        card_layout = QVBoxLayout(card)
        self.table = StyledTableWidget(["کد", "نام پروژه", "ویرایش", "حذف"])
        self.table.horizontalHeader().sectionClicked.connect(self._sort_by)
        card_layout.addWidget(self.table)
        layout.addWidget(card)
        self.setLayout(layout)
        self._load()

    def closeEvent(self, event):
        self.ctl.close()
        super().closeEvent(event)

    def _sync(self):
        self.lbl_error.setText(self.ctl.error)
        self._render()

    def _load(self):
        self.ctl.load()
        self._sync()

    def _sort_by(self, col: int):
        key = SORT_COLUMNS.get(col)
        if key:
            self.ctl.toggle_sort(key)
            self._render()

    def _render(self):
        self.table.setRowCount(0)
        for p in self.ctl.sorted_items():
            r = self.table.add_row([p.code, p.name])
            btn_edit = secondary_button("ویرایش")
            btn_edit.clicked.connect(lambda _, x=p: self._edit(x))
            self.table.setCellWidget(r, 2, btn_edit)
            btn_del = QPushButton("🗑️")
            btn_del.setFixedSize(32, 28)
            btn_del.clicked.connect(lambda _, x=p: self._delete(x))
            self.table.setCellWidget(r, 3, btn_del)

    def _add(self):
        if self.ctl.add(self.in_code.text(), self.in_name.text()):
            self.in_code.clear(); self.in_name.clear()
        self._sync()

    def _edit(self, project):
        dlg = ProjectEditDialog(self, project.code, project.name)
        if dlg.exec():
            self.ctl.update(project.id, dlg.in_code.text(), dlg.in_name.text())
            self._sync()

    def _delete(self, project):
        m = QMessageBox.question(self, "حذف پروژه", f"پروژه «{project.title}» حذف شود؟")
        if m == QMessageBox.StandardButton.Yes:
            self.ctl.delete(project.id)
            self._sync()
