"""Keysmith services."""

from keysmith.services.api_key import ApiKeyStore

__all__ = ["ApiKeyStore"]
