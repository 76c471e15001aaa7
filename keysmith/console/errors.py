"""Key service client error types.

Every failure the key manager can see is one of these. The view converts
them to a single user-facing string; none propagate past it.
"""

from __future__ import annotations

from typing import Any


class KeyServiceError(Exception):
    """Base error for all key service client exceptions."""

    message: str = "Request to the key service failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class FetchFailure(KeyServiceError):
    """Listing keys failed: transport error or non-2xx response."""

    message = "Failed to fetch API keys"


class GenerationFailure(KeyServiceError):
    """Creating a key failed: transport error or non-2xx response."""

    message = "Failed to generate key. Is the backend running?"


class ParseFailure(KeyServiceError):
    """The response body was not the expected shape."""

    message = "Received a malformed response from the key service"
