# -*- coding: utf-8 -*-
"""Centralized panel configuration loader.
Priority order for every setting:
1) Environment variable (a `.env` file in the working directory is loaded first)
2) config.json next to the packaged executable / inside the one-file bundle
3) ipm_panel/config.json (development/source tree)
4) Built-in default
"""
from __future__ import annotations
import os
import sys
import json
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

_PKG_DIR = os.path.dirname(os.path.abspath(__file__))
_CONFIG_JSON_PATH = os.path.join(_PKG_DIR, "config.json")

DEFAULT_API_URL = "http://127.0.0.1:5000/api"
DEFAULT_TIMEOUT = 15
DEFAULT_MAIN_ADMIN_USERNAME = "marandi"
DEFAULT_MAIN_ADMIN_EMAIL = "marandi@ipecgroup.net"
DEFAULT_SAMPLE_PASSWORD = "1234"


def _read_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _json_candidates():
    exe = getattr(sys, "executable", None)
    if exe and getattr(sys, "frozen", False):
        yield os.path.join(os.path.dirname(exe), "config.json")
    bundle_dir = getattr(sys, "_MEIPASS", None)
    if bundle_dir:
        yield os.path.join(bundle_dir, "config.json")
    yield _CONFIG_JSON_PATH


def _lookup(env_name: str, json_key: str, default: Optional[str]) -> Optional[str]:
    env = os.getenv(env_name)
    if env and env.strip():
        return env.strip()
    for path in _json_candidates():
        value = _read_json(path).get(json_key)
        if isinstance(value, (str, int, float)) and str(value).strip():
            return str(value).strip()
    return default


def get_api_url() -> str:
    return (_lookup("IPM_API_URL", "api_base_url", DEFAULT_API_URL) or DEFAULT_API_URL).rstrip("/")


def get_timeout() -> int:
    raw = _lookup("IPM_HTTP_TIMEOUT", "http_timeout", str(DEFAULT_TIMEOUT))
    try:
        return max(1, int(float(raw)))
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT


def get_storage_path() -> str:
    default = os.path.join(os.path.expanduser("~"), ".ipm_panel", "storage.json")
    return os.path.abspath(os.path.expanduser(_lookup("IPM_STORAGE_PATH", "storage_path", default)))


def get_log_dir() -> str:
    default = os.path.abspath(os.path.join(_PKG_DIR, "..", "logs"))
    return os.path.abspath(_lookup("IPM_LOG_DIR", "log_dir", default))


def get_main_admin_username() -> str:
    return (_lookup("IPM_MAIN_ADMIN_USERNAME", "main_admin_username", DEFAULT_MAIN_ADMIN_USERNAME) or "").lower()


def get_main_admin_email() -> str:
    return (_lookup("IPM_MAIN_ADMIN_EMAIL", "main_admin_email", DEFAULT_MAIN_ADMIN_EMAIL) or "").lower()


def get_sample_password() -> str:
    return _lookup("IPM_SAMPLE_PASSWORD", "sample_password", DEFAULT_SAMPLE_PASSWORD) or ""
