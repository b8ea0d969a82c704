# -*- coding: utf-8 -*-
from typing import Any, Dict, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QGroupBox,
    QDialog, QFormLayout, QComboBox, QCheckBox, QDialogButtonBox, QMessageBox, QGridLayout
)
from PySide6.QtCore import Qt

from ..components.styled_table import StyledTableWidget
from ..models.user import User
from ..services.access import (
    BUDGET_ACCESS_KEYS, CONTRACT_ACCESS_KEYS, DEFAULT_CONTRACT_ACCESS, PACK_ACCESS_KEYS, ROLE_SLUG_TO_FA, RoleItem,
)
from ..services.collections import UsersController
from ..utils.i18n import t_access, t_status
from ..utils.styles import primary_button, secondary_button, style_dialog_buttons, ERROR_TEXT, MUTED_TEXT
from .tags_view import CARD_STYLE


class UserDialog(QDialog):
    """Add/edit form for one user. `user` is None when adding."""

    def __init__(self, parent, roles, user: Optional[User] = None):
        super().__init__(parent)
        self.setWindowTitle("ویرایش کاربر" if user else "افزودن کاربر")
        self.setModal(True)
        self.setMinimumWidth(520)
        self.user = user
        layout = QVBoxLayout(self)
        form = QFormLayout(); form.setLabelAlignment(Qt.AlignRight)

        self.in_name = QLineEdit(user.name if user else "")
        self.in_email = QLineEdit(user.email if user else "")
        self.in_username = QLineEdit(user.username if user else "")
        self.in_password = QLineEdit(); self.in_password.setEchoMode(QLineEdit.Password)
        if user:
            self.in_password.setPlaceholderText("برای عدم تغییر خالی بگذارید")
        self.in_department = QLineEdit(user.department if user else "")
        self.cb_role = QComboBox()
        for key in ("user", "admin"):
            self.cb_role.addItem(t_status(key), key)
        self.cb_role.setCurrentIndex(max(0, self.cb_role.findData(user.role if user else "user")))
        self.cb_role.currentIndexChanged.connect(self._toggle_access)

        form.addRow("نام", self.in_name)
        form.addRow("ایمیل", self.in_email)
        form.addRow("نام کاربری", self.in_username)
        form.addRow("گذرواژه", self.in_password)
        form.addRow("واحد", self.in_department)
        form.addRow("نقش سیستمی", self.cb_role)
        layout.addLayout(form)

        access = set(user.access if user else [])
        self.access_box = QGroupBox("دسترسی‌ها")
        grid = QGridLayout(self.access_box)
        self.chk_budgets: Dict[str, QCheckBox] = {}
        for i, key in enumerate(BUDGET_ACCESS_KEYS):
            chk = QCheckBox(t_access(key)); chk.setChecked(key in access)
            self.chk_budgets[key] = chk
            grid.addWidget(chk, i // 3, i % 3)
        row = len(BUDGET_ACCESS_KEYS) // 3 + 1
        self.cb_contracts = QComboBox()
        for key in CONTRACT_ACCESS_KEYS:
            self.cb_contracts.addItem(t_access(key), key)
        self.cb_contracts.setCurrentIndex(max(0, self.cb_contracts.findData(user.contracts_access if user else DEFAULT_CONTRACT_ACCESS)))
        self.cb_pack = QComboBox(); self.cb_pack.addItem("—", "")
        for key in PACK_ACCESS_KEYS:
            self.cb_pack.addItem(t_access(key), key)
        current_pack = next((k for k in access if k.startswith("pack:")), "")
        self.cb_pack.setCurrentIndex(max(0, self.cb_pack.findData(current_pack)))
        grid.addWidget(QLabel("قراردادها"), row, 0); grid.addWidget(self.cb_contracts, row, 1, 1, 2)
        grid.addWidget(QLabel("بسته کاری"), row + 1, 0); grid.addWidget(self.cb_pack, row + 1, 1, 1, 2)
        layout.addWidget(self.access_box)

        pos_box = QGroupBox("سمت‌ها در گردش کار")
        pos_layout = QGridLayout(pos_box)
        held = set(user.positions if user else [])
        self.chk_positions: Dict[str, QCheckBox] = {}
        items = roles or [RoleItem(None, k, v) for k, v in ROLE_SLUG_TO_FA.items()]
        for i, r in enumerate(items):
            chk = QCheckBox(r.label); chk.setChecked(r.name in held)
            self.chk_positions[r.name] = chk
            pos_layout.addWidget(chk, i // 3, i % 3)
        layout.addWidget(pos_box)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)

        buttons = QDialogButtonBox(QDialogButtonBox.Cancel | QDialogButtonBox.Save)
        style_dialog_buttons(buttons)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
        self._toggle_access()

    def _toggle_access(self, *_):
        # admins get every scope; their access keys are not sent
        self.access_box.setEnabled(self.cb_role.currentData() != "admin")

    def form(self) -> Dict[str, Any]:
        budgets = [k for k, chk in self.chk_budgets.items() if chk.isChecked()]
        pack = self.cb_pack.currentData() or ""
        return {
            "name": self.in_name.text(),
            "email": self.in_email.text(),
            "username": self.in_username.text(),
            "password": self.in_password.text(),
            "department": self.in_department.text(),
            "role": self.cb_role.currentData(),
            "budgets": budgets,
            "contracts": self.cb_contracts.currentData(),
            "pack": pack,
            "access": budgets + ([pack] if pack else []),
            "positions": [k for k, chk in self.chk_positions.items() if chk.isChecked()],
        }


class UsersView(QWidget):
    def __init__(self, api):
        super().__init__()
        self.ctl = UsersController(api)
        layout = QVBoxLayout(); layout.setSpacing(12)

        title = QLabel("کاربران")
        title.setStyleSheet("font-size:18px;font-weight:700;color:#171717;")
        desc = QLabel("مدیریت کاربران، دسترسی‌ها و سمت‌های گردش کار")
        desc.setStyleSheet(MUTED_TEXT)
        layout.addWidget(title); layout.addWidget(desc)

        bar = QHBoxLayout(); bar.setSpacing(8)
        btn_add = primary_button("افزودن کاربر")
        btn_add.clicked.connect(self._open_add)
        btn_refresh = secondary_button("نوسازی")
        btn_refresh.clicked.connect(self._load)
        bar.addStretch(1); bar.addWidget(btn_refresh); bar.addWidget(btn_add)
        layout.addLayout(bar)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        layout.addWidget(self.lbl_error)

        card = QGroupBox("فهرست کاربران"); card.setStyleSheet(CARD_STYLE)
        card_layout = QVBoxLayout(card)
        self.table = StyledTableWidget(["نام", "نام کاربری", "نقش", "دسترسی‌ها", "سمت‌ها", "ویرایش", "حذف"])
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
        self.ctl.load_all()
        self._sync()

    def _render(self):
        labels = {r.name: r.label for r in self.ctl.roles}
        self.table.setRowCount(0)
        for u in self.ctl.items:
            r = self.table.add_row([
                u.display_name,
                u.username,
                t_status(u.role),
                "، ".join(t_access(k) for k in u.access) or "—",
                "، ".join(labels.get(p) or ROLE_SLUG_TO_FA.get(p, p) for p in u.positions) or "—",
            ])
            btn_edit = secondary_button("ویرایش")
            btn_edit.clicked.connect(lambda _, x=u: self._open_edit(x))
            self.table.setCellWidget(r, 5, btn_edit)
            btn_del = QPushButton("🗑️")
            btn_del.setFixedSize(32, 28)
            btn_del.clicked.connect(lambda _, x=u: self._delete(x))
            self.table.setCellWidget(r, 6, btn_del)

    def _open_add(self):
        dlg = UserDialog(self, self.ctl.roles)
        while dlg.exec():
            if self.ctl.add(dlg.form()):
                break
            dlg.lbl_error.setText(self.ctl.error)
        self._sync()

    def _open_edit(self, user: User):
        dlg = UserDialog(self, self.ctl.roles, user)
        while dlg.exec():
            if self.ctl.update(user.id, dlg.form()):
                break
            dlg.lbl_error.setText(self.ctl.error)
        self._sync()

    def _delete(self, user: User):
        m = QMessageBox.question(self, "حذف کاربر", f"کاربر «{user.display_name}» حذف شود؟")
        if m == QMessageBox.StandardButton.Yes:
            self.ctl.delete(user.id)
            self._sync()
