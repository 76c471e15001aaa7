"""SQLModel data models."""

from keysmith.models.api_key import ApiKey

__all__ = [
    "ApiKey",
]
