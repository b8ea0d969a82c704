# -*- coding: utf-8 -*-
import sys
import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Callable, Dict

from PySide6.QtWidgets import (
    QApplication,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLineEdit,
    QLabel,
    QGroupBox,
    QStackedWidget,
    QTreeWidget,
    QTreeWidgetItem,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFontDatabase, QFont

from ipm_panel import config
from ipm_panel.errors import AuthError
from ipm_panel.services import auth_service, navigation
from ipm_panel.services.access import is_main_admin_user, page_rule, resolve_page_access
from ipm_panel.services.api_client import ApiClient
from ipm_panel.services.serials import SerialCounter
from ipm_panel.state.session import SessionContext
from ipm_panel.state.storage import FileStorage
from ipm_panel.utils.styles import primary_button, secondary_button, ERROR_TEXT

log = logging.getLogger(__name__)

PATH_ROLE = Qt.ItemDataRole.UserRole


def _placeholder(title: str) -> QWidget:
    w = QWidget(); v = QVBoxLayout(w)
    lbl = QLabel(title); lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
    lbl.setStyleSheet("font-size:16px;color:#6b7280;")
    v.addWidget(lbl)
    return w


class DashboardWindow(QWidget):
    """Sidebar navigation tree on the right, page stack on the left."""

    def __init__(self, session: SessionContext, api: ApiClient, storage, back_to_login: Callable[[], None]):
        super().__init__()
        self.setWindowTitle("پنل مدیریت پروژه")
        self.session = session
        self.api = api
        self.storage = storage
        self.back_to_login = back_to_login
        self.nav_state = navigation.NavState(storage)
        self.serials = SerialCounter(storage)
        self.current_path = "/"
        self._pages: Dict[str, int] = {}
        self._items: Dict[str, QTreeWidgetItem] = {}
        self._sections: Dict[str, QTreeWidgetItem] = {}

        root = QHBoxLayout()
        sidebar = QVBoxLayout()
        header = QLabel(f"خوش آمدید، {session.display_name}")
        header.setAlignment(Qt.AlignmentFlag.AlignCenter)
        sidebar.addWidget(header)

        self.nav_tree = QTreeWidget(); self.nav_tree.setHeaderHidden(True)
        self.nav_tree.setStyleSheet(
            "QTreeWidget{background:#ffffff;border:1px solid #e5e5e5;} "
            "QTreeWidget::item{padding:6px 8px;} QTreeWidget::item:selected{background:#fde7d3;color:#171717;}"
        )
        sidebar.addWidget(self.nav_tree)
        btn_logout = secondary_button("خروج از حساب")
        btn_logout.clicked.connect(self._logout)
        sidebar.addWidget(btn_logout)

        self.content_stack = QStackedWidget()
        self._build_nav()
        self.nav_tree.itemClicked.connect(self._on_item_clicked)
        self.navigate("/")

        root.addWidget(self.content_stack, 4)
        side_container = QWidget(); side_container.setLayout(sidebar)
        side_container.setFixedWidth(280)
        root.addWidget(side_container, 0)
        self.setLayout(root)

    def _allowed(self, path: str) -> bool:
        pages = (self.session.user or {}).get("pages")
        if not isinstance(pages, dict):
            return True
        return resolve_page_access(page_rule(pages, path), [path], self.session.is_admin).can_access

    def _build_nav(self):
        main_admin = is_main_admin_user(self.session.user)
        for it in navigation.TOP_ITEMS:
            if self._allowed(it.path):
                node = QTreeWidgetItem([it.label]); node.setData(0, PATH_ROLE, it.path)
                self.nav_tree.addTopLevelItem(node)
                self._items[it.path] = node
        for section in navigation.SECTIONS:
            items = [it for it in navigation.visible_items(section, main_admin) if self._allowed(it.path)]
            if not items:
                continue
            parent = QTreeWidgetItem([section.label]); parent.setData(0, PATH_ROLE, None)
            self.nav_tree.addTopLevelItem(parent)
            self._sections[section.key] = parent
            for it in items:
                child = QTreeWidgetItem([it.label]); child.setData(0, PATH_ROLE, it.path)
                parent.addChild(child)
                self._items[it.path] = child
        self._sync_expanded()

    def _sync_expanded(self):
        for key, node in self._sections.items():
            node.setExpanded(self.nav_state.parent_active(key, self.current_path))

    def _on_item_clicked(self, item, _col):
        path = item.data(0, PATH_ROLE)
        if path is None:
            key = next((k for k, n in self._sections.items() if n is item), None)
            if key:
                self.nav_state.toggle(key)
                self._sync_expanded()
            return
        self.navigate(path)

    def _build_page(self, path: str) -> QWidget:
        # page modules import lazily, like the rest of the sidebar pages
        if path == "/payment":
            from ipm_panel.views.payment_requests_view import PaymentRequestsView
            return PaymentRequestsView(self.api, self.session, self.serials)
        if path == "/budget/centers":
            from ipm_panel.views.budget_codes_view import BudgetCodesView
            return BudgetCodesView(self.api)
        if path == "/centers/projects":
            from ipm_panel.views.projects_view import ProjectsView
            return ProjectsView(self.api)
        if path == "/base/tags":
            from ipm_panel.views.tags_view import TagsView
            return TagsView(self.api)
        if path == "/admin/users":
            from ipm_panel.views.users_view import UsersView
            return UsersView(self.api)
        if path == "/projects/daily-log":
            from ipm_panel.views.daily_report_view import DailyReportView
            return DailyReportView(self.api)
        node = self._items.get(path)
        return _placeholder(node.text(0) if node else "داشبورد")

    def navigate(self, path: str):
        path = navigation.clean_path(path)
        if path not in self._pages:
            self._pages[path] = self.content_stack.addWidget(self._build_page(path))
        self.content_stack.setCurrentIndex(self._pages[path])
        self.current_path = path
        for p, node in self._items.items():
            node.setSelected(navigation.is_active(path, p))
        self._sync_expanded()

    def _logout(self):
        auth_service.logout(self.session)
        self.close()
        if callable(self.back_to_login):
            self.back_to_login()


class LoginWindow(QWidget):
    def __init__(self, session: SessionContext, api: ApiClient, storage):
        super().__init__()
        self.session = session
        self.api = api
        self.storage = storage
        self.dashboard = None
        self.setWindowTitle("ورود")

        layout = QVBoxLayout(); layout.setSpacing(14)
        title = QLabel("ورود به پنل")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size:20px; font-weight:bold; margin-bottom:6px;")

        self.in_username = QLineEdit(); self.in_username.setPlaceholderText("نام کاربری")
        self.in_password = QLineEdit(); self.in_password.setPlaceholderText("رمز عبور")
        self.in_password.setEchoMode(QLineEdit.Password)
        self.in_password.returnPressed.connect(self.submit)
        self.btn_login = primary_button("ورود")
        self.btn_login.clicked.connect(self.submit)
        self.lbl_status = QLabel(""); self.lbl_status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.lbl_status.setStyleSheet(ERROR_TEXT)

        card = QGroupBox("")
        card.setStyleSheet("QGroupBox{border:1px solid #e5e5e5; border-radius:10px; padding:16px; background:#ffffff;} ")
        form = QVBoxLayout(card); form.setSpacing(10)
        form.addWidget(title)
        form.addWidget(self.in_username)
        form.addWidget(self.in_password)
        form.addWidget(self.btn_login)
        form.addWidget(self.lbl_status)

        layout.addStretch(1); layout.addWidget(card); layout.addStretch(1)
        self.setLayout(layout)
        self.setMinimumWidth(420)

    def submit(self):
        username = self.in_username.text().strip()
        password = self.in_password.text().strip()
        if not username or not password:
            self.lbl_status.setText("نام کاربری و رمز عبور الزامی است")
            return
        try:
            auth_service.login(self.session, username, password)
        except AuthError as exc:
            self.lbl_status.setText(exc.message)
            return
        self.open_dashboard()

    def open_dashboard(self):
        def back_to_login():
            self.in_username.clear(); self.in_password.clear(); self.lbl_status.clear()
            self.show()
        self.dashboard = DashboardWindow(self.session, self.api, self.storage, back_to_login)
        self.dashboard.showMaximized()
        self.hide()


def configure_logging():
    logs_dir = config.get_log_dir()
    os.makedirs(logs_dir, exist_ok=True)
    log_path = os.path.join(logs_dir, "panel.log")
    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)
    handler.setLevel(logging.INFO)
    logging.getLogger().setLevel(logging.INFO)
    logging.getLogger().addHandler(handler)


def _apply_global_font(app: QApplication):
    """Load and apply Vazir font globally when it ships with the package."""
    base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "assets", "fonts"))
    for name in ("Vazir.ttf", "Vazir-Medium.ttf", "Vazir-Bold.ttf"):
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            QFontDatabase.addApplicationFont(path)
    app.setFont(QFont("Vazir", 11))


def main():
    configure_logging()
    app = QApplication(sys.argv)
    app.setLayoutDirection(Qt.RightToLeft)
    _apply_global_font(app)
    app.setStyleSheet("""
        QWidget{background:#ffffff;color:#171717;}
        QLineEdit, QTextEdit, QComboBox {background:#ffffff; border:1px solid #d4d4d4; border-radius:4px; padding:4px;}
        QLineEdit:focus, QTextEdit:focus, QComboBox:focus {border-color:#F48B35;}
        QGroupBox{border:1px solid #e5e5e5; border-radius:6px; margin-top:12px;}
        QHeaderView::section{background:#f5f5f5;}
    """)
    storage = FileStorage(config.get_storage_path())
    session = SessionContext(storage)
    api = ApiClient(token_provider=session.get_token)
    log.info("Starting panel against %s", api.base_url)

    window = LoginWindow(session, api, storage)
    window.resize(420, 240)
    if session.is_authenticated:
        window.open_dashboard()
    else:
        window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
