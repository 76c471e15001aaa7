"""API keys endpoints.

GET  /v1/keys - List issued keys, newest first
POST /v1/keys - Issue a new key
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from keysmith.api.dependencies import AdminDep, ApiKeyStoreDep
from keysmith.models.api_key import ApiKey
from keysmith.utils.datetime import as_utc

router = APIRouter()


class ApiKeyResponse(BaseModel):
    """A single issued key."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    key: str
    created_at: datetime = Field(alias="createdAt")


class ApiKeyListResponse(BaseModel):
    """Issued keys, newest first."""

    keys: list[ApiKeyResponse]


def _key_to_response(record: ApiKey) -> ApiKeyResponse:
    """Convert ApiKey model to API response."""
    return ApiKeyResponse(
        id=record.id,
        key=record.key,
        created_at=as_utc(record.created_at),
    )


@router.get("", response_model=ApiKeyListResponse, response_model_by_alias=True)
async def list_keys(store: ApiKeyStoreDep) -> ApiKeyListResponse:
    """List all issued keys, most recently created first."""
    records = await store.list_all()
    return ApiKeyListResponse(keys=[_key_to_response(r) for r in records])


@router.post("", response_model=ApiKeyResponse, response_model_by_alias=True)
async def create_key(store: ApiKeyStoreDep, _admin: AdminDep) -> ApiKeyResponse:
    """Issue a new key.

    Open unless ``security.admin_token`` is configured.
    """
    record = await store.insert()
    return _key_to_response(record)
