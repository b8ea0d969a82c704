# -*- coding: utf-8 -*-
import os

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QGroupBox,
    QComboBox, QListWidget, QFormLayout, QFileDialog, QDialog, QDialogButtonBox, QTextEdit
)
from PySide6.QtCore import Qt

from ..components.jalali_date import JalaliDateEdit
from ..components.styled_table import StyledTableWidget
from ..services.collections import DailyReportController
from ..utils.format import to_persian_digits
from ..utils.styles import primary_button, secondary_button, style_dialog_buttons, ERROR_TEXT, MUTED_TEXT
from .tags_view import CARD_STYLE


class DailyReportView(QWidget):
    """Project daily log: a draft form on top, saved reports below."""

    def __init__(self, api):
        super().__init__()
        self.ctl = DailyReportController(api)
        layout = QVBoxLayout(); layout.setSpacing(12)

        title = QLabel("روزنگار پروژه")
        title.setStyleSheet("font-size:18px;font-weight:700;color:#171717;")
        desc = QLabel("ثبت گزارش روزانه کارگاه با شرح، برچسب و پیوست")
        desc.setStyleSheet(MUTED_TEXT)
        layout.addWidget(title); layout.addWidget(desc)

        card = QGroupBox("گزارش جدید"); card.setStyleSheet(CARD_STYLE)
        form = QFormLayout(card); form.setLabelAlignment(Qt.AlignRight)
        self.cb_project = QComboBox()
        self.cb_project.currentIndexChanged.connect(self._on_project)
        self.date_edit = JalaliDateEdit()
        self.date_edit.dateChanged.connect(self._on_date)
        self.lbl_day = QLabel("—")
        self.lbl_gregorian = QLabel(""); self.lbl_gregorian.setStyleSheet(MUTED_TEXT)
        form.addRow("پروژه", self.cb_project)
        form.addRow("تاریخ", self.date_edit)
        form.addRow("روز", self.lbl_day)
        form.addRow("میلادی", self.lbl_gregorian)

        item_row = QHBoxLayout()
        self.in_item = QLineEdit(); self.in_item.setPlaceholderText("شرح فعالیت")
        self.in_item.returnPressed.connect(self._add_item)
        btn_item = secondary_button("افزودن")
        btn_item.clicked.connect(self._add_item)
        item_row.addWidget(self.in_item, 1); item_row.addWidget(btn_item)
        form.addRow("شرح", item_row)
        self.lst_items = QListWidget(); self.lst_items.setMaximumHeight(120)
        self.lst_items.itemDoubleClicked.connect(lambda it: self._remove_item(self.lst_items.row(it)))
        form.addRow("", self.lst_items)

        tag_row = QHBoxLayout()
        self.cb_tag = QComboBox()
        btn_tag = secondary_button("افزودن برچسب")
        btn_tag.clicked.connect(self._add_tag)
        tag_row.addWidget(self.cb_tag, 1); tag_row.addWidget(btn_tag)
        form.addRow("برچسب‌ها", tag_row)
        self.lst_tags = QListWidget(); self.lst_tags.setMaximumHeight(80)
        self.lst_tags.itemDoubleClicked.connect(self._remove_tag)
        form.addRow("", self.lst_tags)

        file_row = QHBoxLayout()
        btn_files = secondary_button("انتخاب فایل‌ها")
        btn_files.clicked.connect(self._pick_files)
        self.lbl_files = QLabel(""); self.lbl_files.setStyleSheet(MUTED_TEXT)
        file_row.addWidget(btn_files); file_row.addWidget(self.lbl_files, 1)
        form.addRow("پیوست", file_row)

        self.lbl_error = QLabel(""); self.lbl_error.setStyleSheet(ERROR_TEXT)
        self.btn_save = primary_button("ثبت گزارش")
        self.btn_save.clicked.connect(self._save)
        form.addRow(self.lbl_error, self.btn_save)
        layout.addWidget(card)

        reports = QGroupBox("گزارش‌های ثبت‌شده"); reports.setStyleSheet(CARD_STYLE)
        rl = QVBoxLayout(reports)
        self.table = StyledTableWidget(["تاریخ", "روز", "پروژه", "موارد", "برچسب‌ها", "پیوست", "ویرایش"])
        rl.addWidget(self.table)
        layout.addWidget(reports)
        self.setLayout(layout)
        self._load()

    def _load(self):
        self.ctl.load()
        self.cb_project.blockSignals(True)
        self.cb_project.clear()
        self.cb_project.addItem("انتخاب پروژه", None)
        for p in self.ctl.projects:
            self.cb_project.addItem(f"{p.code} - {p.name}" if p.code and p.name else p.title, p.id)
        self.cb_project.blockSignals(False)
        self.cb_tag.clear()
        for t in self.ctl.tags:
            self.cb_tag.addItem(t.label, t.id)
        self._sync_draft()

    def _sync_draft(self):
        c = self.ctl
        self.lbl_day.setText(c.day or "—")
        self.lbl_gregorian.setText(c.date_gregorian)
        if self.date_edit.jalali() != c.date_jalali:
            self.date_edit.blockSignals(True)
            self.date_edit.set_jalali(c.date_jalali)
            self.date_edit.blockSignals(False)
        self.lst_items.clear()
        self.lst_items.addItems([f"{to_persian_digits(i)}. {txt}" for i, txt in enumerate(c.items, start=1)])
        self.lst_tags.clear()
        self.lst_tags.addItems([t.label for t in c.selected_tags])
        self.lbl_files.setText("، ".join(os.path.basename(f) for f in c.files))
        self.lbl_error.setText(c.error)

    def _on_project(self, _idx):
        self.ctl.project_id = self.cb_project.currentData()

    def _on_date(self, ymd: str):
        self.ctl.set_jalali_date(ymd)
        self._sync_draft()

    def _add_item(self):
        if self.ctl.add_item(self.in_item.text()):
            self.in_item.clear()
        self._sync_draft()

    def _remove_item(self, row: int):
        self.ctl.remove_item(row)
        self._sync_draft()

    def _add_tag(self):
        self.ctl.add_tag(self.cb_tag.currentData())
        self._sync_draft()

    def _remove_tag(self, item):
        row = self.lst_tags.row(item)
        if 0 <= row < len(self.ctl.selected_tags):
            self.ctl.remove_tag(self.ctl.selected_tags[row].id)
        self._sync_draft()

    def _pick_files(self):
        names, _ = QFileDialog.getOpenFileNames(self, "انتخاب پیوست")
        if names:
            self.ctl.apply_files([os.path.basename(n) for n in names])
            self._sync_draft()

    def _save(self):
        if self.ctl.save():
            self.cb_project.setCurrentIndex(0)
            self._render()
        self._sync_draft()

    def _render(self):
        self.table.setRowCount(0)
        for rep in self.ctl.reports:
            r = self.table.add_row([
                rep.date_jalali, rep.day, rep.project_title,
                " / ".join(rep.items), "، ".join(t.label for t in rep.tags),
                to_persian_digits(len(rep.files)),
            ])
            btn_edit = secondary_button("ویرایش")
            btn_edit.clicked.connect(lambda _, x=rep.id: self._edit(x))
            self.table.setCellWidget(r, 6, btn_edit)

    def _edit(self, report_id: int):
        rep = next((x for x in self.ctl.reports if x.id == report_id), None)
        if rep is None:
            return
        dlg = QDialog(self)
        dlg.setWindowTitle("ویرایش گزارش")
        dlg.setMinimumWidth(460)
        lay = QVBoxLayout(dlg)
        lay.addWidget(QLabel("هر مورد در یک خط"))
        te = QTextEdit(); te.setPlainText("\n".join(rep.items))
        lay.addWidget(te)
        btns = QDialogButtonBox(QDialogButtonBox.Cancel | QDialogButtonBox.Save)
        style_dialog_buttons(btns)
        btns.accepted.connect(dlg.accept); btns.rejected.connect(dlg.reject)
        lay.addWidget(btns)
        if dlg.exec():
            self.ctl.update_report(report_id, te.toPlainText().splitlines(), rep.tags)
            self._render()
