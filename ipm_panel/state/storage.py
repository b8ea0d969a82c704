# -*- coding: utf-8 -*-
"""Small persistent key/value store for session and UI state.
Values are strings, like browser local storage; callers serialize JSON themselves.
Known keys: user, token, nav_open, pr_seq_<year><month>.
"""
from __future__ import annotations
import json
import logging
import os
from typing import Dict, Optional

log = logging.getLogger(__name__)


class MemoryStorage:
    """In-memory store, used by tests and as a fallback when no file is configured."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def keys(self):
        return list(self._data.keys())

    def _flush(self) -> None:
        pass


class FileStorage(MemoryStorage):
    """JSON-file backed store. A missing or corrupt file starts empty."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(self._load(path))

    @staticmethod
    def _load(path: str) -> Dict[str, str]:
        if not os.path.exists(path):
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            log.warning("Storage file %s unreadable, starting empty: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Storage file %s does not hold an object, starting empty", path)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _flush(self) -> None:
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)


def read_json(storage: MemoryStorage, key: str, default=None):
    """Read a JSON value from the store; absent or corrupt values yield `default`."""
    raw = storage.get_item(key)
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except ValueError:
        log.warning("Stored value for %r is not valid JSON; ignoring it", key)
        return default


def write_json(storage: MemoryStorage, key: str, value) -> None:
    storage.set_item(key, json.dumps(value, ensure_ascii=False))
