"""Exceptions raised by the raffle client."""

from __future__ import annotations

from typing import Optional


class UshindiError(Exception):
    """Base error for the raffle client."""


class ApiError(UshindiError):
    """A request failed in transport or returned a non-2xx status."""

    def __init__(
        self,
        method: str,
        path: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else "request failed"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"{method} {path} {detail}")


class SchemaError(UshindiError, ValueError):
    """A response body did not match the expected shape."""


class FormError(UshindiError, ValueError):
    """User input violated a form constraint; no request was sent."""
