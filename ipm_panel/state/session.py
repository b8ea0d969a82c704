# -*- coding: utf-8 -*-
"""Session context owned by the application root.
Holds the current user and persists it to the injected storage under `user`.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from ipm_panel.services.access import is_main_admin_user, normalize_user
from ipm_panel.state.storage import MemoryStorage, read_json, write_json

log = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"


class SessionContext:
    def __init__(self, storage: Optional[MemoryStorage] = None):
        self.storage = storage if storage is not None else MemoryStorage()
        self._user: Optional[Dict[str, Any]] = self._rehydrate()

    def _rehydrate(self) -> Optional[Dict[str, Any]]:
        raw = read_json(self.storage, USER_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            log.warning("Stored session user is not an object; starting signed out")
            return None
        return normalize_user(raw)

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self._user) and (is_main_admin_user(self._user) or self._user.get("role") == "admin")

    @property
    def display_name(self) -> str:
        u = self._user or {}
        return str(u.get("name") or u.get("username") or u.get("email") or "")

    def get_token(self) -> Optional[str]:
        return self.storage.get_item(TOKEN_KEY) or None

    def set_user(self, user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        self._user = normalize_user(user)
        if self._user is None:
            self.storage.remove_item(USER_KEY)
        else:
            write_json(self.storage, USER_KEY, self._user)
        return self._user

    def clear(self) -> None:
        self._user = None
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)
