# -*- coding: utf-8 -*-
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QGroupBox,
    QComboBox, QDialog, QFormLayout, QDialogButtonBox, QMessageBox
)
from PySide6.QtCore import Qt

from ..components.styled_table import StyledTableWidget
from ..models.catalog import SCOPE_PREFIXES
from ..services.collections import BudgetCodesController
from ..utils.i18n import t_scope
from ..utils.styles import primary_button, secondary_button, style_dialog_buttons, ERROR_TEXT, MUTED_TEXT
from .tags_view import CARD_STYLE


class BudgetCodesView(QWidget):
    """Budget centers of one scope at a time; the scope combo swaps the controller."""

    def __init__(self, api, scope: str = "office"):
        super().__init__()
        self.api = api
        self.ctl = BudgetCodesController(api, scope)
        layout = QVBoxLayout(); layout.setSpacing(12)

        title = QLabel("تعریف مراکز بودجه")
        title.setStyleSheet("font-size:18px;font-weight:700;color:#171717;")
        desc = QLabel("کدهای بودجه هر حوزه با پیشوند ثابت همان حوزه ساخته می‌شوند")
        desc.setStyleSheet(MUTED_TEXT)
        layout.addWidget(title); layout.addWidget(desc)

        top = QHBoxLayout(); top.setSpacing(8)
        self.cb_scope = QComboBox()
        for key in SCOPE_PREFIXES:
            self.cb_scope.addItem(t_scope(key), key)
        self.cb_scope.setCurrentIndex(max(0, self.cb_scope.findData(scope)))
        self.cb_scope.currentIndexChanged.connect(self._on_scope)
        top.addWidget(QLabel("حوزه")); top.addWidget(self.cb_scope); top.addStretch(1)
        layout.addLayout(top)

        bar = QHBoxLayout(); bar.setSpacing(8)
        self.lbl_prefix = QLabel(""); self.lbl_prefix.setStyleSheet("font-weight:700;")
        self.in_suffix = QLineEdit(); self.in_suffix.setPlaceholderText("کد")
        self.in_desc = QLineEdit(); self.in_desc.setPlaceholderText("شرح")
        self.btn_add = primary_button("افزودن ردیف")
        self.btn_add.clicked.connect(self._add)
        bar.addWidget(self.lbl_prefix); bar.addWidget(self.in_suffix)
        bar.addWidget(self.in_desc, 1); bar.addWidget(self.btn_add)
        layout.addLayout(bar)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)

        card = QGroupBox("ردیف‌های بودجه"); card.setStyleSheet(CARD_STYLE)
        card_layout = QVBoxLayout(card)
        self.table = StyledTableWidget(["کد کامل", "شرح", "ویرایش", "حذف"])
        card_layout.addWidget(self.table)
        layout.addWidget(card)
        self.setLayout(layout)
        self._load()

    def closeEvent(self, event):
        self.ctl.close()
        super().closeEvent(event)

    def _on_scope(self, _idx):
        self.ctl.close()
        self.ctl = BudgetCodesController(self.api, self.cb_scope.currentData())
        self._load()

    def _sync(self):
        self.lbl_prefix.setText(SCOPE_PREFIXES.get(self.ctl.scope, ""))
        self.lbl_error.setText(self.ctl.error)
        self._render()

    def _load(self):
        self.ctl.load()
        self._sync()

    def _render(self):
        self.table.setRowCount(0)
        for code in self.ctl.items:
            r = self.table.add_row([code.full_code, code.description])
            btn_edit = secondary_button("ویرایش")
            btn_edit.clicked.connect(lambda _, c=code: self._edit(c))
            self.table.setCellWidget(r, 2, btn_edit)
            btn_del = QPushButton("🗑️")
            btn_del.setFixedSize(32, 28)
            btn_del.clicked.connect(lambda _, c=code: self._delete(c))
            self.table.setCellWidget(r, 3, btn_del)

    def _add(self):
        if self.ctl.add(self.in_suffix.text(), self.in_desc.text()):
            self.in_suffix.clear(); self.in_desc.clear()
        self._sync()

    def _edit(self, code):
        dlg = QDialog(self)
        dlg.setWindowTitle("ویرایش ردیف بودجه")
        lay = QVBoxLayout(dlg)
        form = QFormLayout(); form.setLabelAlignment(Qt.AlignRight)
        in_suffix = QLineEdit(code.suffix); in_desc = QLineEdit(code.description)
        form.addRow(f"کد ({code.prefix})", in_suffix)
        form.addRow("شرح", in_desc)
        lay.addLayout(form)
        btns = QDialogButtonBox(QDialogButtonBox.Cancel | QDialogButtonBox.Save)
        style_dialog_buttons(btns)
        btns.accepted.connect(dlg.accept); btns.rejected.connect(dlg.reject)
        lay.addWidget(btns)
        if dlg.exec():
            self.ctl.update(code.id, in_suffix.text(), in_desc.text())
            self._sync()

    def _delete(self, code):
        m = QMessageBox.question(self, "حذف ردیف", f"ردیف «{code.full_code}» حذف شود؟")
        if m == QMessageBox.StandardButton.Yes:
            self.ctl.delete(code.id)
            self._sync()
