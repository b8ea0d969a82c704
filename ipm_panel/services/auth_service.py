# -*- coding: utf-8 -*-
"""Auth service helpers for login/logout that set/clear the session.

`login` is the built-in sample provider: it accepts exactly one configured
credential pair. `remote_login`/`reload_me`/`remote_logout` talk to the backend
auth endpoints instead.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from ipm_panel import config
from ipm_panel.errors import ApiError, AuthError, GENERIC_REQUEST_FAILED
from ipm_panel.services.api_client import ApiClient
from ipm_panel.state.session import SessionContext, TOKEN_KEY

log = logging.getLogger(__name__)

API_LOGIN = "/auth/login"
API_LOGOUT = "/auth/logout"
API_ME = "/auth/me"

INVALID_CREDENTIALS_FA = "نام کاربری یا رمز عبور اشتباه است"

_AUTH_ERRORS_FA = {
    "invalid_credentials": INVALID_CREDENTIALS_FA,
    "username_password_required": "نام کاربری و رمز عبور الزامی است",
    "user_has_no_password": "برای این کاربر رمز تعریف نشده است",
    GENERIC_REQUEST_FAILED: "خطا در ارتباط با سرور",
}


def map_auth_error(message: str) -> str:
    m = str(message or "")
    return _AUTH_ERRORS_FA.get(m, m or "خطای ورود")


def login(session: SessionContext, username: str, password: str) -> Dict[str, Any]:
    u = str(username or "").strip().lower()
    p = str(password or "").strip()
    if u and u == config.get_main_admin_username() and p == config.get_sample_password():
        user = session.set_user({
            "id": 1,
            "username": u,
            "email": config.get_main_admin_email(),
            "name": "مهندس مرندی",
            "role": "admin",
            "can_manage_users": True,
            "scopes": ["all"],
        })
        session.storage.remove_item(TOKEN_KEY)
        log.info("Login success for username: %s", u)
        return user
    log.warning("Login failed for username: %s", u)
    raise AuthError(INVALID_CREDENTIALS_FA)


def logout(session: SessionContext) -> None:
    session.clear()
    log.info("Logged out")


def remote_login(session: SessionContext, api: ApiClient, username: str, password: str) -> Dict[str, Any]:
    try:
        data = api.post_json(API_LOGIN, {
            "username": str(username or "").strip(),
            "password": str(password or "").strip(),
        })
    except ApiError as exc:
        raise AuthError(map_auth_error(exc.message)) from exc
    user = data.get("user")
    if not isinstance(user, dict):
        raise AuthError("خطا در ورود")
    return session.set_user(user)


def reload_me(session: SessionContext, api: ApiClient) -> Optional[Dict[str, Any]]:
    """Refresh the session user from the backend; any failure signs out locally."""
    try:
        data = api.get(API_ME)
    except ApiError as exc:
        log.info("Session refresh failed, signing out locally: %s", exc.message)
        session.set_user(None)
        return None
    user = data.get("user")
    return session.set_user(user if isinstance(user, dict) else None)


def remote_logout(session: SessionContext, api: ApiClient) -> None:
    try:
        api.post_json(API_LOGOUT, {})
    except ApiError as exc:
        log.warning("Server logout failed: %s", exc.message)
    finally:
        session.clear()
