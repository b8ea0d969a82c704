# -*- coding: utf-8 -*-
"""Error types shared by services, controllers and views.
Views show `str(exc)` of any PanelError inline or in a message box.
"""
from __future__ import annotations
from typing import Optional

GENERIC_REQUEST_FAILED = "request_failed"


class PanelError(Exception):
    """Base class for all panel errors; the message is user-facing Persian text."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(PanelError):
    """Raised before any request is sent; never reaches the backend."""


class ApiError(PanelError):
    """Normalized request failure (HTTP error, non-JSON body, transport error)."""

    def __init__(self, message: str = GENERIC_REQUEST_FAILED, status_code: Optional[int] = None):
        super().__init__(message or GENERIC_REQUEST_FAILED)
        self.status_code = status_code


class AuthError(PanelError):
    """Login/logout failure with a Persian message."""
