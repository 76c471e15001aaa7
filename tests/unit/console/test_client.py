"""Tests for KeysClient."""

import httpx
import pytest

from keysmith.console import (
    FetchFailure,
    GenerationFailure,
    KeysClient,
    ParseFailure,
)

BASE = "http://localhost:8000"


def _record(id_: int, key: str, created_at="2026-10-19T12:00:00Z") -> dict:
    return {"id": id_, "key": key, "createdAt": created_at}


class TestKeysClient:
    """Tests for KeysClient initialization and context management."""

    def test_requires_endpoint_url(self, monkeypatch):
        monkeypatch.delenv("KEYSMITH_ENDPOINT", raising=False)

        with pytest.raises(ValueError, match="endpoint_url required"):
            KeysClient()

    def test_uses_env_vars(self, monkeypatch):
        monkeypatch.setenv("KEYSMITH_ENDPOINT", "http://env-endpoint:8000")
        monkeypatch.setenv("KEYSMITH_TOKEN", "env-token")

        client = KeysClient()
        assert client._endpoint_url == "http://env-endpoint:8000"
        assert client._access_token == "env-token"

    async def test_http_outside_context_raises(self):
        client = KeysClient(BASE)
        with pytest.raises(RuntimeError, match="not initialized"):
            await client.list_keys()


class TestListKeys:
    async def test_parses_records(self, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{BASE}/v1/keys",
            json={"keys": [_record(2, "sk-b"), _record(1, "sk-a", 1760875200)]},
        )

        async with KeysClient(BASE) as client:
            keys = await client.list_keys()

        assert [k.id for k in keys] == [2, 1]
        assert keys[0].key == "sk-b"
        # Epoch seconds and ISO strings both come back timezone-aware
        assert keys[1].created_at.utcoffset() is not None
        assert keys[0].created_at.utcoffset() is not None

    async def test_empty(self, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{BASE}/v1/keys", json={"keys": []})

        async with KeysClient(BASE) as client:
            assert await client.list_keys() == []

    async def test_non_2xx_is_generic_fetch_failure(self, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{BASE}/v1/keys",
            status_code=500,
            json={"error": "database is locked"},
        )

        async with KeysClient(BASE) as client:
            with pytest.raises(FetchFailure) as exc_info:
                await client.list_keys()

        assert exc_info.value.message == "Failed to fetch API keys"
        assert exc_info.value.status_code == 500

    async def test_transport_error_is_fetch_failure(self, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("refused"), method="GET", url=f"{BASE}/v1/keys")

        async with KeysClient(BASE) as client:
            with pytest.raises(FetchFailure):
                await client.list_keys()

    async def test_missing_keys_field_is_parse_failure(self, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{BASE}/v1/keys", json={"items": []})

        async with KeysClient(BASE) as client:
            with pytest.raises(ParseFailure):
                await client.list_keys()

    async def test_malformed_record_is_parse_failure(self, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{BASE}/v1/keys",
            json={"keys": [{"id": 1, "createdAt": "2026-10-19T12:00:00Z"}]},
        )

        async with KeysClient(BASE) as client:
            with pytest.raises(ParseFailure):
                await client.list_keys()

    async def test_non_json_body_is_parse_failure(self, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{BASE}/v1/keys", text="<html>")

        async with KeysClient(BASE) as client:
            with pytest.raises(ParseFailure):
                await client.list_keys()

    async def test_failed_request_is_not_retried(self, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{BASE}/v1/keys", status_code=503)

        async with KeysClient(BASE) as client:
            with pytest.raises(FetchFailure):
                await client.list_keys()

        assert len(httpx_mock.get_requests()) == 1


class TestCreateKey:
    async def test_returns_record(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{BASE}/v1/keys", json=_record(7, "sk-new"))

        async with KeysClient(BASE) as client:
            created = await client.create_key()

        assert created.id == 7
        assert created.key == "sk-new"

    async def test_sends_bearer_token(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{BASE}/v1/keys", json=_record(1, "sk-a"))

        async with KeysClient(BASE, access_token="s3cret") as client:
            await client.create_key()

        request = httpx_mock.get_requests()[0]
        assert request.headers["Authorization"] == "Bearer s3cret"

    async def test_error_string_surfaced_verbatim(self, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{BASE}/v1/keys",
            status_code=409,
            json={"error": "API key already exists", "code": "constraint_violation"},
        )

        async with KeysClient(BASE) as client:
            with pytest.raises(GenerationFailure) as exc_info:
                await client.create_key()

        assert exc_info.value.message == "API key already exists"
        assert exc_info.value.status_code == 409

    async def test_error_without_body_uses_default_message(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{BASE}/v1/keys", status_code=502, text="bad gateway")

        async with KeysClient(BASE) as client:
            with pytest.raises(GenerationFailure) as exc_info:
                await client.create_key()

        assert exc_info.value.message == "Failed to generate key. Is the backend running?"

    async def test_transport_error_is_generation_failure(self, httpx_mock):
        httpx_mock.add_exception(httpx.ReadTimeout("slow"), method="POST", url=f"{BASE}/v1/keys")

        async with KeysClient(BASE) as client:
            with pytest.raises(GenerationFailure):
                await client.create_key()

    async def test_malformed_record_is_parse_failure(self, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{BASE}/v1/keys", json={"id": "x"})

        async with KeysClient(BASE) as client:
            with pytest.raises(ParseFailure):
                await client.create_key()
