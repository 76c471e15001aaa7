"""API key store.

Handles key generation, persistence and listing. Records are only ever
inserted; there is no update or delete path.
"""

from __future__ import annotations

import secrets
from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from keysmith.config import KeysConfig
from keysmith.errors import ConstraintViolation, StoreError
from keysmith.models.api_key import ApiKey
from keysmith.utils.datetime import as_utc, utcnow

logger = structlog.get_logger()

_KEY_DISPLAY_LEN = 8  # chars of the key allowed into log lines


class ApiKeyStore:
    """Durable, unique-constrained storage of issued API keys."""

    def __init__(self, db_session: AsyncSession, config: KeysConfig | None = None) -> None:
        self._db = db_session
        self._config = config or KeysConfig()
        self._log = logger.bind(store="api_key")

    def generate_key(self) -> str:
        """Generate a new opaque key value.

        Returns:
            ``{prefix}{hex}`` where hex carries ``token_bytes`` bytes from
            the OS CSPRNG.
        """
        return f"{self._config.prefix}{secrets.token_hex(self._config.token_bytes)}"

    async def insert(
        self,
        key: str | None = None,
        *,
        created_at: datetime | None = None,
    ) -> ApiKey:
        """Persist a new key record.

        Args:
            key: Key value to store. Generated when omitted.
            created_at: Creation time. Naive values are taken as UTC.
                Defaults to now.

        Returns:
            The stored record with its assigned id

        Raises:
            ConstraintViolation: If the key value already exists
            StoreError: If the write fails for any other database reason
        """
        record = ApiKey(
            key=key if key is not None else self.generate_key(),
            created_at=as_utc(created_at) if created_at is not None else utcnow(),
        )
        key_prefix = record.key[:_KEY_DISPLAY_LEN]
        self._db.add(record)
        try:
            await self._db.commit()
        except IntegrityError as exc:
            await self._db.rollback()
            self._log.warning(
                "api_key.insert.conflict",
                key_prefix=key_prefix,
            )
            raise ConstraintViolation(
                details={"key_prefix": key_prefix},
            ) from exc
        except SQLAlchemyError as exc:
            await self._db.rollback()
            self._log.error("api_key.insert.failed", error=str(exc))
            raise StoreError() from exc
        await self._db.refresh(record)

        self._log.info(
            "api_key.created",
            id=record.id,
            key_prefix=key_prefix,
        )
        return record

    async def list_all(self) -> list[ApiKey]:
        """List every record, most recently created first."""
        result = await self._db.execute(
            select(ApiKey).order_by(col(ApiKey.created_at).desc(), col(ApiKey.id).desc())
        )
        return list(result.scalars().all())
