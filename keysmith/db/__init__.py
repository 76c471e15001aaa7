"""Database layer."""

from keysmith.db.session import Database

__all__ = ["Database"]
