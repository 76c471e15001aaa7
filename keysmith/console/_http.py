"""HTTP client wrapper for the key service API.

Handles connection setup, status checking and JSON decoding. Requests are
made exactly once; there is no retry policy.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from keysmith.console.errors import KeyServiceError, ParseFailure

logger = logging.getLogger("keysmith.console")


def error_message_from(response: httpx.Response) -> str | None:
    """Extract the server's ``error`` string from a failed response, if any."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, str) and error:
        return error
    # Tolerate nested {"error": {"message": ...}} bodies
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


class HTTPClient:
    """Async HTTP client for the key service API.

    Wraps httpx.AsyncClient with:
    - Optional bearer token
    - Mapping of transport errors and non-2xx responses to KeyServiceError
    - JSON decoding with ParseFailure on malformed bodies
    """

    def __init__(
        self,
        base_url: str,
        *,
        access_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Service base URL (e.g., "http://localhost:8000")
            access_token: Bearer token sent with every request, if set
            timeout: Request timeout in seconds
            transport: Custom httpx transport (e.g. ASGITransport in tests)
        """
        self._base_url = base_url.rstrip("/")
        self._access_token = access_token
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HTTPClient:
        """Enter async context, creating HTTP client."""
        headers: dict[str, str] = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context, closing HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("HTTPClient not initialized. Use 'async with' context.")
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        failure: type[KeyServiceError],
        surface_error_body: bool = False,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: API path (e.g., "/v1/keys")
            failure: Error class raised on transport errors and non-2xx
            surface_error_body: Use the server's ``error`` string as the
                failure message when the response carries one

        Raises:
            KeyServiceError: ``failure`` on transport error or non-2xx status
            ParseFailure: If a 2xx body is not valid JSON
        """
        logger.debug("Request: %s %s", method, path)
        try:
            response = await self.client.request(method, path)
        except httpx.HTTPError as exc:
            logger.debug("Transport error: %s %s: %s", method, path, exc)
            raise failure(details={"transport_error": str(exc)}) from exc

        logger.debug("Response: %s %s", response.status_code, path)

        if not response.is_success:
            message = error_message_from(response) if surface_error_body else None
            raise failure(
                message,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ParseFailure(status_code=response.status_code) from exc
