"""Type definitions for the key service client.

Pydantic models that responses are validated into. Anything that does not
fit raises ParseFailure in the client rather than flowing through untyped.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiKeyInfo(BaseModel):
    """An issued API key as returned by the service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    key: str = Field(min_length=1)
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Epoch numbers and offset-less ISO strings are UTC on the wire
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class ApiKeyList(BaseModel):
    """Body of GET /v1/keys."""

    keys: list[ApiKeyInfo]
