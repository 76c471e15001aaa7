"""Keysmith error types.

Every error raised toward the HTTP layer is a KeysmithError subclass and is
rendered by the app's exception handler with a stable shape:

    {"error": "<message>", "code": "<code>", "details": {...}, "request_id": "..."}

``error`` is a plain string so that clients can surface it verbatim.
"""

from __future__ import annotations

from typing import Any


class KeysmithError(Exception):
    """Base error for all Keysmith exceptions."""

    code: str = "internal_error"
    message: str = "An internal error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self, request_id: str | None = None) -> dict[str, Any]:
        """Serialize to the API error body."""
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }
        if request_id:
            body["request_id"] = request_id
        return body


class ConstraintViolation(KeysmithError):
    """A write violated a store constraint, e.g. a duplicate key (409)."""

    code = "constraint_violation"
    message = "API key already exists"
    status_code = 409


class UnauthorizedError(KeysmithError):
    """Authentication required (401)."""

    code = "unauthorized"
    message = "Authentication required"
    status_code = 401


class StoreError(KeysmithError):
    """The store failed for a reason other than a constraint (500)."""

    code = "store_error"
    message = "Failed to generate API key"
    status_code = 500
