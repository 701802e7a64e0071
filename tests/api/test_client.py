#!/usr/bin/env python3
"""Unit tests for NetBoxClient.

Tests cover:
    - Initialization and configuration errors
    - Session lifecycle (async context manager)
    - Request construction and JSON handling
    - Mapping of HTTP status codes to typed exceptions
    - Mapping of transport failures to network errors

Note: These tests replace the aiohttp session with mocks rather than
making real HTTP calls.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from nbsync.api.client import NetBoxClient
from nbsync.api.exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    ServerError,
    TimeoutError,
)
from nbsync.config import NetBoxSettings


def make_response(status: int, json_data=None, text: str = "") -> MagicMock:
    """Create a mock aiohttp response usable with ``async with``."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def make_session(response: MagicMock | None = None, side_effect=None) -> MagicMock:
    session = MagicMock()
    session.request = MagicMock(return_value=response, side_effect=side_effect)
    session.close = AsyncMock()
    return session


# ============================================
# Initialization Tests
# ============================================


class TestNetBoxClientInit:
    """Test NetBoxClient initialization."""

    def test_strips_trailing_slash(self):
        client = NetBoxClient("https://netbox.example.com/", "abc")

        assert client.base_url == "https://netbox.example.com"

    def test_requires_base_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            NetBoxClient("", "abc")

        assert exc_info.value.missing_keys == ["NETBOX_URL"]

    def test_requires_token(self):
        with pytest.raises(ConfigurationError) as exc_info:
            NetBoxClient("https://netbox.example.com", "")

        assert exc_info.value.missing_keys == ["NETBOX_API_TOKEN"]

    def test_from_settings(self):
        settings = NetBoxSettings(
            url="https://netbox.example.com",
            token="abc",
            timeout=15,
            verify_ssl=False,
        )

        client = NetBoxClient.from_settings(settings)

        assert client.base_url == "https://netbox.example.com"
        assert client.token == "abc"
        assert client.timeout == 15
        assert client.verify_ssl is False

    def test_token_header(self):
        client = NetBoxClient("https://netbox.example.com", "abc")

        headers = client._headers()

        assert headers["Authorization"] == "Token abc"
        assert headers["Content-Type"] == "application/json"


# ============================================
# Session Lifecycle Tests
# ============================================


class TestSessionLifecycle:
    """Test the async context manager protocol."""

    @pytest.mark.asyncio
    async def test_request_outside_context_raises(self):
        client = NetBoxClient("https://netbox.example.com", "abc")

        with pytest.raises(RuntimeError, match="async context manager"):
            await client.get("/api/ipam/ip-ranges/")

    @pytest.mark.asyncio
    async def test_context_creates_and_closes_session(self):
        mock_session = make_session()

        with patch("aiohttp.ClientSession", return_value=mock_session) as session_cls, \
                patch("aiohttp.TCPConnector"):
            async with NetBoxClient("https://netbox.example.com", "abc") as client:
                assert client._session is mock_session

        session_cls.assert_called_once()
        assert session_cls.call_args.kwargs["headers"]["Authorization"] == "Token abc"
        mock_session.close.assert_awaited_once()
        assert client._session is None


# ============================================
# Request Tests
# ============================================


class TestRequests:
    """Test request construction and success handling."""

    @pytest.fixture
    def client(self):
        return NetBoxClient("https://netbox.example.com", "abc")

    @pytest.mark.asyncio
    async def test_get_returns_json(self, client):
        client._session = make_session(make_response(200, {"id": 7}))

        data = await client.get("/api/ipam/ip-ranges/7/", params={"brief": 1})

        assert data == {"id": 7}
        call = client._session.request.call_args
        assert call.kwargs["method"] == "GET"
        assert call.kwargs["url"] == "https://netbox.example.com/api/ipam/ip-ranges/7/"
        assert call.kwargs["params"] == {"brief": 1}
        assert call.kwargs["json"] is None

    @pytest.mark.asyncio
    async def test_post_sends_body(self, client):
        client._session = make_session(make_response(201, {"id": 9}))

        data = await client.post("/api/dcim/device-types/", json_body={"model": "X"})

        assert data == {"id": 9}
        call = client._session.request.call_args
        assert call.kwargs["method"] == "POST"
        assert call.kwargs["json"] == {"model": "X"}

    @pytest.mark.asyncio
    async def test_put_and_patch_methods(self, client):
        client._session = make_session(make_response(200, {"id": 1}))

        await client.put("/api/ipam/ip-ranges/1/", json_body={"status": "active"})
        assert client._session.request.call_args.kwargs["method"] == "PUT"

        await client.patch("/api/ipam/ip-ranges/1/", json_body={"status": "active"})
        assert client._session.request.call_args.kwargs["method"] == "PATCH"

    @pytest.mark.asyncio
    async def test_delete_no_content(self, client):
        response = make_response(204)
        client._session = make_session(response)

        result = await client.delete("/api/ipam/ip-ranges/1/")

        assert result is None
        response.json.assert_not_awaited()


# ============================================
# Error Mapping Tests
# ============================================


class TestErrorMapping:
    """Test HTTP and transport failures become typed exceptions."""

    @pytest.fixture
    def client(self):
        return NetBoxClient("https://netbox.example.com", "abc")

    @pytest.mark.asyncio
    async def test_404_is_not_found(self, client):
        client._session = make_session(make_response(404, text='{"detail": "Not found."}'))

        with pytest.raises(NotFoundError) as exc_info:
            await client.get("/api/ipam/ip-ranges/99/")

        assert exc_info.value.status_code == 404
        assert exc_info.value.endpoint == "/api/ipam/ip-ranges/99/"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_cls",
        [
            (400, BadRequestError),
            (422, BadRequestError),
            (401, AuthenticationError),
            (403, AuthenticationError),
            (500, ServerError),
            (503, ServerError),
        ],
    )
    async def test_status_mapping(self, client, status, error_cls):
        client._session = make_session(make_response(status, text="error"))

        with pytest.raises(error_cls) as exc_info:
            await client.post("/api/ipam/ip-ranges/", json_body={})

        assert exc_info.value.status_code == status
        assert exc_info.value.method == "POST"

    @pytest.mark.asyncio
    async def test_other_status_is_generic_api_error(self, client):
        client._session = make_session(make_response(409, text="conflict"))

        with pytest.raises(APIError) as exc_info:
            await client.delete("/api/ipam/ip-ranges/1/")

        assert type(exc_info.value) is APIError
        assert exc_info.value.code == "API_ERROR_409"
        assert exc_info.value.response_body == "conflict"

    @pytest.mark.asyncio
    async def test_connection_error(self, client):
        cause = aiohttp.ClientConnectionError("refused")
        client._session = make_session(side_effect=cause)

        with pytest.raises(ConnectionError) as exc_info:
            await client.get("/api/ipam/ip-ranges/")

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.recoverable

    @pytest.mark.asyncio
    async def test_timeout_error(self, client):
        client._session = make_session(side_effect=asyncio.TimeoutError())

        with pytest.raises(TimeoutError) as exc_info:
            await client.get("/api/ipam/ip-ranges/")

        assert exc_info.value.details["timeout_seconds"] == 60.0

    @pytest.mark.asyncio
    async def test_other_client_error(self, client):
        client._session = make_session(side_effect=aiohttp.ClientPayloadError("bad payload"))

        with pytest.raises(NetworkError):
            await client.get("/api/ipam/ip-ranges/")

    @pytest.mark.asyncio
    async def test_requests_are_not_retried(self, client):
        client._session = make_session(make_response(503, text="down"))

        with pytest.raises(ServerError):
            await client.get("/api/ipam/ip-ranges/")

        assert client._session.request.call_count == 1
