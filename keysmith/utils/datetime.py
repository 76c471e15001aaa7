"""Datetime helpers.

Timestamps are written as timezone-aware UTC. SQLite keeps no offset, so
depending on the column type a value may read back naive; ``as_utc``
normalizes either form on the way out.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return current UTC time as an aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
