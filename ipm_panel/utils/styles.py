# -*- coding: utf-8 -*-
from PySide6.QtWidgets import QDialogButtonBox, QPushButton

# Color palette (panel accent + neutral grays)
PRIMARY = "#171717"; PRIMARY_HOVER = "#262626"
ACCENT = "#F48B35"; ACCENT_HOVER = "#f5882c"
SECONDARY = "#6b7280"; SECONDARY_HOVER = "#4b5563"
DANGER = "#dc2626"; DANGER_HOVER = "#b91c1c"
ERROR_TEXT = "color:#dc2626;"
MUTED_TEXT = "color:#6b7280;"

_BASE = "color:white;padding:6px 12px;border-radius:8px;"


def _btn_style(bg: str, hover: str) -> str:
    return (
        f"QPushButton{{background:{bg};{_BASE}}} "
        f"QPushButton:hover{{background:{hover}}} "
        f"QPushButton:disabled{{background:#a3a3a3}}"
    )


def primary_button(text: str) -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(_btn_style(PRIMARY, PRIMARY_HOVER))
    return btn


def secondary_button(text: str) -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(_btn_style(SECONDARY, SECONDARY_HOVER))
    return btn


def danger_button(text: str) -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(_btn_style(DANGER, DANGER_HOVER))
    return btn


def badge_style(bg: str, fg: str) -> str:
    return f"QLabel{{background:{bg};color:{fg};padding:2px 8px;border-radius:8px;font-size:12px;}}"


def style_dialog_buttons(buttons: QDialogButtonBox) -> None:
    """Apply consistent styles to common dialog buttons.

    - Save / OK / Yes: Primary (dark)
    - Cancel / Close / No: Secondary (gray)
    - Destructive role (if any): Danger (red)
    """
    mapping = {
        QDialogButtonBox.Save: _btn_style(PRIMARY, PRIMARY_HOVER),
        QDialogButtonBox.Ok: _btn_style(PRIMARY, PRIMARY_HOVER),
        QDialogButtonBox.Yes: _btn_style(PRIMARY, PRIMARY_HOVER),
        QDialogButtonBox.Cancel: _btn_style(SECONDARY, SECONDARY_HOVER),
        QDialogButtonBox.Close: _btn_style(SECONDARY, SECONDARY_HOVER),
        QDialogButtonBox.No: _btn_style(SECONDARY, SECONDARY_HOVER),
    }
    for std, style in mapping.items():
        btn = buttons.button(std)
        if btn:
            btn.setStyleSheet(style)
    for btn in buttons.buttons():
        if buttons.buttonRole(btn) == QDialogButtonBox.DestructiveRole:
            btn.setStyleSheet(_btn_style(DANGER, DANGER_HOVER))
