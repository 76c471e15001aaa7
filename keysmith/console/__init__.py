"""Key manager console.

A typed client for the key service API and the key manager view built on it.
"""

from keysmith.console.client import KeysClient
from keysmith.console.errors import (
    FetchFailure,
    GenerationFailure,
    KeyServiceError,
    ParseFailure,
)
from keysmith.console.types import ApiKeyInfo, ApiKeyList
from keysmith.console.view import KeyManager, ViewState

__all__ = [
    # Client
    "KeysClient",
    # View
    "KeyManager",
    "ViewState",
    # Types
    "ApiKeyInfo",
    "ApiKeyList",
    # Errors
    "KeyServiceError",
    "FetchFailure",
    "GenerationFailure",
    "ParseFailure",
]
