#!/usr/bin/env python3
"""Async HTTP Client for the NetBox REST API.

This module provides a small, composable HTTP client that handles the
common concerns of talking to NetBox:

    - Token authentication (``Authorization: Token <token>``)
    - Connection pooling via a shared aiohttp session
    - Mapping of HTTP failures onto typed exceptions

Design Philosophy:
    This client knows HOW to talk to NetBox, but not WHAT to manage.
    It has no knowledge of IP ranges, device types, or any specific resource.
    That knowledge belongs in the resource kinds and adapters that compose it.

    Requests are never retried. A failure surfaces immediately so that the
    caller can decide whether to rerun a whole reconciliation cycle.

Usage:
    async with NetBoxClient(settings) as client:
        data = await client.get("/api/ipam/ip-ranges/", params={"limit": 2})
        created = await client.post("/api/ipam/ip-ranges/", json_body={...})
        await client.delete("/api/ipam/ip-ranges/17/")
"""
import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

import aiohttp

from .exceptions import (
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

if TYPE_CHECKING:
    from ..config import NetBoxSettings

logger = logging.getLogger(__name__)


class NetBoxClient:
    """Async HTTP client for the NetBox REST API.

    The client must be used as an async context manager so that the
    underlying session is always closed:

        async with NetBoxClient(settings) as client:
            data = await client.get("/api/dcim/device-types/3/")

    Attributes:
        base_url: NetBox base URL (e.g., "https://netbox.example.com")
        token: API token
        timeout: Total request timeout in seconds
        verify_ssl: Whether TLS certificates are verified
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 60.0,
        verify_ssl: bool = True,
    ):
        """Initialize the NetBoxClient.

        Args:
            base_url: NetBox base URL
            token: API token
            timeout: Total request timeout in seconds
            verify_ssl: Verify TLS certificates

        Raises:
            ConfigurationError: If base_url or token is empty.
        """
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        if not self.base_url or not self.token:
            raise ConfigurationError(
                "NetBox base URL and API token are required",
                missing_keys=[
                    key
                    for key, value in (("NETBOX_URL", self.base_url), ("NETBOX_API_TOKEN", self.token))
                    if not value
                ],
            )

        # Session is created in __aenter__, closed in __aexit__
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: "NetBoxSettings") -> "NetBoxClient":
        """Build a client from loaded settings."""
        return cls(
            base_url=settings.url,
            token=settings.token,
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl,
        )

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "NetBoxClient":
        """Enter async context: create the HTTP session."""
        self._session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=10,
                limit_per_host=10,
                ssl=self.verify_ssl,
            ),
            timeout=aiohttp.ClientTimeout(
                total=self.timeout,
                connect=10,
            ),
            headers=self._headers(),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context: close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    # ----------------------------------------
    # Low-Level Request Method
    # ----------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Token {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> Optional[dict[str, Any]]:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            endpoint: API endpoint path (e.g., "/api/ipam/ip-ranges/")
            params: Query parameters
            json_body: JSON request body (for POST/PUT/PATCH)

        Returns:
            Parsed JSON response, or None for an empty (204) response

        Raises:
            APIError: If response status is 4xx/5xx (typed by status)
            RuntimeError: If called outside of async context manager
            ConnectionError: If connection to server fails
            TimeoutError: If request times out
            NetworkError: For any other transport failure
        """
        if not self._session:
            raise RuntimeError(
                "NetBoxClient must be used as async context manager: "
                "async with NetBoxClient(...) as client:"
            )

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {endpoint} params={params}")

        try:
            async with self._session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
            ) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    raise self._create_api_error(
                        status=response.status,
                        method=method,
                        endpoint=endpoint,
                        response_body=error_text,
                    )

                if response.status == 204:
                    return None

                return await response.json()

        except aiohttp.ClientConnectionError as e:
            raise ConnectionError(
                f"Failed to connect to {self.base_url}",
                host=self.base_url,
                cause=e,
            )

        except asyncio.TimeoutError as e:
            raise TimeoutError(
                f"Request to {endpoint} timed out",
                timeout_seconds=self.timeout,
                cause=e,
            )

        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Network error during {method} {endpoint}: {e}",
                cause=e,
            )

    def _create_api_error(
        self,
        status: int,
        method: str,
        endpoint: str,
        response_body: str,
    ) -> APIError:
        """Create appropriate APIError subclass based on status code."""
        if status == 404:
            return NotFoundError(
                resource_type="Resource",
                resource_id=endpoint,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        if status in (401, 403):
            return AuthenticationError(
                f"Not authorized for {method} {endpoint}",
                status_code=status,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        if status in (400, 422):
            return BadRequestError(
                f"Request rejected for {method} {endpoint}",
                status_code=status,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        if status >= 500:
            return ServerError(
                f"Server error ({status}) for {method} {endpoint}",
                status_code=status,
                endpoint=endpoint,
                method=method,
                response_body=response_body,
            )

        return APIError(
            f"{method} {endpoint} failed",
            status_code=status,
            endpoint=endpoint,
            method=method,
            response_body=response_body,
        )

    # ----------------------------------------
    # High-Level Request Methods
    # ----------------------------------------

    async def get(self, endpoint: str, params: Optional[dict] = None) -> dict[str, Any]:
        """Make a GET request."""
        return await self._request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json_body: dict,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a POST request.

        Args:
            endpoint: API endpoint path
            json_body: Request body as dict (will be JSON-encoded)
            params: Query parameters

        Returns:
            Parsed JSON response
        """
        return await self._request("POST", endpoint, params=params, json_body=json_body)

    async def put(self, endpoint: str, json_body: dict) -> dict[str, Any]:
        """Make a PUT request (full replace)."""
        return await self._request("PUT", endpoint, json_body=json_body)

    async def patch(self, endpoint: str, json_body: dict) -> dict[str, Any]:
        """Make a PATCH request (partial update)."""
        return await self._request("PATCH", endpoint, json_body=json_body)

    async def delete(self, endpoint: str) -> None:
        """Make a DELETE request. NetBox answers 204 with no body."""
        await self._request("DELETE", endpoint)
