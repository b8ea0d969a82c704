# -*- coding: utf-8 -*-
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QGroupBox, QComboBox, QCheckBox,
    QDialog, QFormLayout, QDialogButtonBox, QInputDialog, QMessageBox, QTextEdit
)
from PySide6.QtCore import Qt

from ..components.styled_table import StyledTableWidget
from ..models.payment_request import SCOPES
from ..services import workflow
from ..services.collections import PaymentRequestsController
from ..utils.format import format_money, parse_money
from ..utils.i18n import t_scope
from ..utils.jalali import to_jalali_dt_str
from ..utils.styles import (
    primary_button, secondary_button, danger_button, style_dialog_buttons, ERROR_TEXT, MUTED_TEXT
)
from .tags_view import CARD_STYLE

ACTIONS_FA = {"approved": "تایید", "rejected": "رد", "returned": "بازگشت"}


class NewRequestDialog(QDialog):
    def __init__(self, parent, serial: str, projects=()):
        super().__init__(parent)
        self.setWindowTitle("درخواست پرداخت جدید")
        self.setModal(True)
        self.setMinimumWidth(460)
        layout = QVBoxLayout(self)
        form = QFormLayout(); form.setLabelAlignment(Qt.AlignRight)
        self.lbl_serial = QLabel(serial or "—"); self.lbl_serial.setStyleSheet("font-weight:700;")
        self.cb_scope = QComboBox()
        for s in SCOPES:
            self.cb_scope.addItem(t_scope(s), s)
        self.cb_project = QComboBox(); self.cb_project.addItem("—", None)
        for p in projects:
            self.cb_project.addItem(p.title, p.id)
        self.in_title = QLineEdit()
        self.in_budget = QLineEdit(); self.in_budget.setPlaceholderText("مثال: OB101")
        self.in_amount = QLineEdit(); self.in_amount.setPlaceholderText("مبلغ (ریال)")
        self.in_amount.textEdited.connect(self._format_amount)
        self.in_desc = QTextEdit(); self.in_desc.setMaximumHeight(80)
        form.addRow("شماره سریال", self.lbl_serial)
        form.addRow("حوزه", self.cb_scope)
        form.addRow("پروژه", self.cb_project)
        form.addRow("عنوان", self.in_title)
        form.addRow("کد بودجه", self.in_budget)
        form.addRow("مبلغ", self.in_amount)
        form.addRow("توضیحات", self.in_desc)
        layout.addLayout(form)
        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)
        buttons = QDialogButtonBox(QDialogButtonBox.Cancel | QDialogButtonBox.Save)
        style_dialog_buttons(buttons)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _format_amount(self, text: str):
        self.in_amount.setText(format_money(parse_money(text)) if text.strip() else "")

    def form(self):
        return {
            "scope": self.cb_scope.currentData(),
            "project_id": self.cb_project.currentData(),
            "title": self.in_title.text(),
            "budget_code": self.in_budget.text(),
            "amount": parse_money(self.in_amount.text()),
            "desc": self.in_desc.toPlainText(),
        }


class PaymentRequestsView(QWidget):
    def __init__(self, api, session, serials=None, projects=()):
        super().__init__()
        self.session = session
        self.ctl = PaymentRequestsController(api, serials)
        self.projects = list(projects) or self.ctl.load_projects()
        self.user_step: Optional[str] = workflow.detect_user_step(session.user)
        layout = QVBoxLayout(); layout.setSpacing(12)

        title = QLabel("درخواست پرداخت")
        title.setStyleSheet("font-size:18px;font-weight:700;color:#171717;")
        desc = QLabel("گردش تایید درخواست‌های پرداخت به تفکیک حوزه بودجه")
        desc.setStyleSheet(MUTED_TEXT)
        layout.addWidget(title); layout.addWidget(desc)

        bar = QHBoxLayout(); bar.setSpacing(8)
        self.cb_scope = QComboBox(); self.cb_scope.addItem("همه حوزه‌ها", None)
        for s in SCOPES:
            self.cb_scope.addItem(t_scope(s), s)
        self.cb_scope.currentIndexChanged.connect(self._render)
        self.chk_mine = QCheckBox("فقط کارتابل من")
        self.chk_mine.setEnabled(bool(self.user_step))
        self.chk_mine.toggled.connect(self._render)
        btn_new = primary_button("درخواست جدید")
        btn_new.clicked.connect(self._open_new)
        btn_refresh = secondary_button("نوسازی")
        btn_refresh.clicked.connect(self._load)
        bar.addWidget(self.cb_scope); bar.addWidget(self.chk_mine); bar.addStretch(1)
        bar.addWidget(btn_refresh); bar.addWidget(btn_new)
        layout.addLayout(bar)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)

        card = QGroupBox("درخواست‌ها"); card.setStyleSheet(CARD_STYLE)
        card_layout = QVBoxLayout(card)
        self.table = StyledTableWidget(["سریال", "عنوان", "کد بودجه", "مبلغ", "حوزه", "تاریخ", "وضعیت", "اقدام"])
        self.table.cellDoubleClicked.connect(self._show_steps)
        card_layout.addWidget(self.table)
        layout.addWidget(card)
        self.setLayout(layout)
        self._rows = []
        self._load()

    def closeEvent(self, event):
        self.ctl.close()
        super().closeEvent(event)

    def _load(self):
        self.ctl.load()
        self._render()

    def _render(self, *_):
        self.lbl_error.setText(self.ctl.error)
        step = self.user_step if self.chk_mine.isChecked() else None
        self._rows = self.ctl.filtered(self.cb_scope.currentData(), step)
        self.table.setRowCount(0)
        for req in self._rows:
            r = self.table.add_row([
                req.serial, req.title, req.budget_code, format_money(req.amount),
                t_scope(req.scope), to_jalali_dt_str(req.created_at),
            ])
            badge = self.ctl.badge(req)
            self.table.set_badge(r, 6, badge.label, badge.color, badge.text_color)
            if self.user_step and workflow.is_pending_for(req, self.user_step):
                cell = QWidget(); h = QHBoxLayout(cell); h.setContentsMargins(2, 2, 2, 2); h.setSpacing(4)
                for action, make in (("approved", primary_button), ("returned", secondary_button), ("rejected", danger_button)):
                    btn = make(ACTIONS_FA[action])
                    btn.clicked.connect(lambda _, x=req.id, a=action: self._act(x, a))
                    h.addWidget(btn)
                self.table.setCellWidget(r, 7, cell)

    def _open_new(self):
        dlg = NewRequestDialog(self, self.ctl.preview_serial(), self.projects)
        while dlg.exec():
            if self.ctl.create(dlg.form()):
                break
            dlg.lbl_error.setText(self.ctl.error)
        self._render()

    def _act(self, request_id, action: str):
        note, ok = QInputDialog.getText(self, ACTIONS_FA[action], "توضیحات (اختیاری)")
        if not ok:
            return
        if not self.ctl.record_action(request_id, action, note.strip()):
            QMessageBox.warning(self, "خطا", self.ctl.error)
        self._render()

    def _show_steps(self, row: int, _col: int):
        if not (0 <= row < len(self._rows)):
            return
        req = self._rows[row]
        marks = {"done": "✔", "current": "●", "upcoming": "○"}
        lines = [f"{marks[state]} {step.label}" for step, state in workflow.step_states(req)]
        QMessageBox.information(self, req.serial or "گردش کار", "\n".join(lines))
