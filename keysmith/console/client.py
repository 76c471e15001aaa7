"""KeysClient - typed access to the key service API."""

from __future__ import annotations

import os
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from keysmith.console._http import HTTPClient
from keysmith.console.errors import FetchFailure, GenerationFailure, ParseFailure
from keysmith.console.types import ApiKeyInfo, ApiKeyList


def _parse(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ParseFailure(details={"errors": exc.errors(include_url=False)}) from exc


class KeysClient:
    """Client for the key service API.

    Use as an async context manager to ensure proper cleanup.

    Example:
        async with KeysClient("http://localhost:8000") as client:
            created = await client.create_key()
            keys = await client.list_keys()
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        *,
        access_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint_url: Service base URL. Falls back to KEYSMITH_ENDPOINT env var.
            access_token: Admin token for key creation. Falls back to
                KEYSMITH_TOKEN env var; may be absent.
            timeout: Request timeout in seconds
            transport: Custom httpx transport

        Raises:
            ValueError: If no endpoint is provided or found in the environment.
        """
        self._endpoint_url = endpoint_url or os.environ.get("KEYSMITH_ENDPOINT")
        if not self._endpoint_url:
            raise ValueError("endpoint_url required (or set KEYSMITH_ENDPOINT env var)")
        self._access_token = access_token or os.environ.get("KEYSMITH_TOKEN")
        self._timeout = timeout
        self._transport = transport
        self._http: HTTPClient | None = None

    async def __aenter__(self) -> KeysClient:
        """Enter async context, initializing HTTP client."""
        self._http = HTTPClient(
            self._endpoint_url,
            access_token=self._access_token,
            timeout=self._timeout,
            transport=self._transport,
        )
        await self._http.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context, closing HTTP client."""
        if self._http:
            await self._http.__aexit__(exc_type, exc_val, exc_tb)
            self._http = None

    @property
    def http(self) -> HTTPClient:
        """Get the HTTP client."""
        if self._http is None:
            raise RuntimeError("KeysClient not initialized. Use 'async with' context.")
        return self._http

    async def list_keys(self) -> list[ApiKeyInfo]:
        """List issued keys, newest first.

        Raises:
            FetchFailure: On transport error or non-2xx response
            ParseFailure: If the body is not ``{"keys": [...]}``
        """
        payload = await self.http.request("GET", "/v1/keys", failure=FetchFailure)
        return _parse(ApiKeyList, payload).keys

    async def create_key(self) -> ApiKeyInfo:
        """Issue a new key.

        Raises:
            GenerationFailure: On transport error or non-2xx response; the
                message is the server's ``error`` string when it sent one
            ParseFailure: If the body is not a key record
        """
        payload = await self.http.request(
            "POST",
            "/v1/keys",
            failure=GenerationFailure,
            surface_error_body=True,
        )
        return _parse(ApiKeyInfo, payload)
