"""API key data model.

One row per issued key. The plaintext key is stored because the key
manager lists every issued key in full.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from keysmith.utils.datetime import utcnow


class ApiKey(SQLModel, table=True):
    """An issued API key."""

    __tablename__ = "api_keys"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(unique=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
