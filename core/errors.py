# core/errors.py
from __future__ import annotations
from typing import Dict, Optional

GENERIC_ERROR_MESSAGE = "An error occurred"


class ApiError(Exception):
    """
    Raised by the HTTP client adapter.

    kind is "network" when no response arrived at all, "server" when the
    backend answered with a non-2xx status or a {success: false} envelope.
    """

    def __init__(self, message: str, status: Optional[int] = None, kind: str = "server"):
        super().__init__(message)
        self.message = message or GENERIC_ERROR_MESSAGE
        self.status = status
        self.kind = kind

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind!r}, status={self.status!r}, message={self.message!r})"


class FormValidationError(Exception):
    """Client-side validation failure. errors maps field name -> message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        first = next(iter(self.errors.values()), "Invalid input")
        super().__init__(first)


class RecordSchemaError(Exception):
    """A backend record did not match the resource schema."""

    def __init__(self, resource: str, detail: str):
        super().__init__(f"{resource}: {detail}")
        self.resource = resource
        self.detail = detail


def user_message(exc: BaseException, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """Most specific message available for a notification."""
    if isinstance(exc, ApiError):
        return exc.message or fallback
    if isinstance(exc, FormValidationError):
        return str(exc) or fallback
    return fallback
