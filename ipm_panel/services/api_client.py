# -*- coding: utf-8 -*-
"""Shared HTTP client for every page.
Use this instead of calling requests directly in views or controllers.
- Supports absolute URLs (http/https) and resource paths like "/tags"
- Base URL comes from ipm_panel.config (env > config.json > default)
- Every failure is normalized into ApiError: the server's `error`, then its
  `message`, then the generic "request_failed"
"""
from __future__ import annotations
from typing import Any, Callable, Dict, Optional
import json
import logging

import requests

from ipm_panel import config
from ipm_panel.errors import ApiError, GENERIC_REQUEST_FAILED

log = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


def parse_json(resp: requests.Response) -> Dict[str, Any]:
    """Decode a response body or raise ApiError.
    - Empty 2xx bodies decode to {}.
    - Bare JSON lists are wrapped as {"items": [...]}.
    """
    status = resp.status_code
    text = resp.text or ""
    data: Any = {}
    if text.strip():
        try:
            data = resp.json()
        except ValueError:
            if not resp.ok:
                raise ApiError(GENERIC_REQUEST_FAILED, status)
            raise ApiError(f"server returned non-json: {text[:160]}", status)
    if not resp.ok:
        msg = None
        if isinstance(data, dict):
            msg = data.get("error") or data.get("message")
        raise ApiError(str(msg) if msg else GENERIC_REQUEST_FAILED, status)
    if isinstance(data, list):
        return {"items": data}
    if not isinstance(data, dict):
        return {}
    return data


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[int] = None,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.get_api_url()).rstrip("/")
        self.timeout = timeout or config.get_timeout()
        self.token_provider = token_provider
        self.http = http or requests.Session()

    def _normalize_url(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        if not url.startswith("/"):
            url = "/" + url
        return self.base_url + url

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        h = {"Content-Type": "application/json", "Accept": "application/json"}
        tok = self.token_provider() if self.token_provider else None
        if tok:
            h["X-Auth-Token"] = tok
        if extra:
            h.update(extra)
        return h

    def request(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = None
        if payload is not None:
            body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        full = self._normalize_url(url)
        try:
            resp = self.http.request(method, full, headers=self._headers(), data=body, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, full, exc)
            raise ApiError(GENERIC_REQUEST_FAILED) from exc
        try:
            return parse_json(resp)
        except ApiError as exc:
            log.warning("%s %s -> HTTP %s: %s", method, full, exc.status_code, exc.message)
            raise

    def get(self, url: str) -> Dict[str, Any]:
        return self.request("GET", url)

    def post_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", url, payload)

    def patch_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PATCH", url, payload)

    def delete(self, url: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("DELETE", url, payload)
