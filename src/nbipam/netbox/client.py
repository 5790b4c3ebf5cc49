"""
NetBox REST API client.

Provides the IPAM list, count, create and delete calls used by the
command-line tools.

API Documentation: https://demo.netbox.dev/api/docs/

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
from typing import Any

import httpx

from nbipam import __version__
from nbipam.config import NetBoxConfig, get_config
from nbipam.netbox.models import IPAddress, Page, Prefix, VRF

logger = logging.getLogger(__name__)

# API routes, relative to the API base URL
VRFS_ENDPOINT = "ipam/vrfs/"
PREFIXES_ENDPOINT = "ipam/prefixes/"
IP_ADDRESSES_ENDPOINT = "ipam/ip-addresses/"


class NetBoxError(Exception):
    """Base exception for NetBox errors."""
    pass


class NetBoxAPIError(NetBoxError):
    """The API answered with an error status or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NetBoxRequestError(NetBoxError):
    """The API could not be reached."""
    pass


class NotImplementedCommandError(NetBoxError):
    """The requested operation is not supported by this client."""

    def __init__(self, operation: str):
        super().__init__(f"{operation}: not implemented")
        self.operation = operation


async def _log_request(request: httpx.Request) -> None:
    logger.debug(f"--> {request.method} {request.url}")


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(f"<-- {response.status_code} {request.method} {request.url}")


class NetBoxClient:
    """
    Async client for the NetBox REST API.

    One client (and one connection pool) serves every call made by a
    single command run.

    Usage:
        async with NetBoxClient() as client:
            prefixes = await client.list_prefixes({"mask_length": "32"})
    """

    def __init__(
        self,
        config: NetBoxConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or get_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "NetBoxClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def connect(self):
        """Initialize the HTTP client."""
        base_url = self.config.api_url()
        token = self.config.require_token()

        headers = {
            "User-Agent": f"nbipam/{__version__}",
            "Accept": "application/json",
            "Authorization": f"Token {token}",
        }

        event_hooks = {}
        if self.config.debug:
            event_hooks = {"request": [_log_request], "response": [_log_response]}

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
            event_hooks=event_hooks,
            transport=self._transport,
        )

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Make a request to the NetBox API. No retries are attempted."""
        if not self._client:
            await self.connect()

        if params:
            # Filter out None values
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._client.request(method, endpoint, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = e.response.text
            raise NetBoxAPIError(
                f"{method} {endpoint} failed with HTTP {status}: {body}",
                status_code=status,
                body=body,
            ) from e
        except httpx.RequestError as e:
            raise NetBoxRequestError(f"{method} {endpoint} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise NetBoxAPIError(
                f"{method} {endpoint} returned an invalid JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from e

    async def list_page(self, endpoint: str, params: dict[str, Any] | None = None) -> Page:
        """Fetch one page of a list endpoint."""
        data = await self._request("GET", endpoint, params=params)
        return Page.from_netbox(data or {})

    async def count(self, endpoint: str, params: dict[str, Any] | None = None) -> int:
        """Return the number of objects matching the filter."""
        query = dict(params or {})
        query["limit"] = 1
        page = await self.list_page(endpoint, query)
        return page.count

    # ================================================================
    # VRFs
    # ================================================================

    async def list_vrfs(self, params: dict[str, Any] | None = None) -> list[VRF]:
        """List VRFs matching the filter."""
        page = await self.list_page(VRFS_ENDPOINT, params)
        return [VRF.from_netbox(vrf) for vrf in page.results]

    # ================================================================
    # Prefixes
    # ================================================================

    async def list_prefixes(self, params: dict[str, Any] | None = None) -> list[Prefix]:
        """List prefixes matching the filter."""
        page = await self.list_page(PREFIXES_ENDPOINT, params)
        return [Prefix.from_netbox(prefix) for prefix in page.results]

    async def count_prefixes(self, params: dict[str, Any] | None = None) -> int:
        """Count prefixes matching the filter."""
        return await self.count(PREFIXES_ENDPOINT, params)

    async def delete_prefix(self, prefix_id: int) -> None:
        """Delete a single prefix by ID."""
        await self._request("DELETE", f"{PREFIXES_ENDPOINT}{prefix_id}/")

    # ================================================================
    # IP addresses
    # ================================================================

    async def list_ip_addresses(self, params: dict[str, Any] | None = None) -> list[IPAddress]:
        """List IP addresses matching the filter."""
        page = await self.list_page(IP_ADDRESSES_ENDPOINT, params)
        return [IPAddress.from_netbox(address) for address in page.results]

    async def count_ip_addresses(self, params: dict[str, Any] | None = None) -> int:
        """Count IP addresses matching the filter."""
        return await self.count(IP_ADDRESSES_ENDPOINT, params)

    async def create_ip_address(self, payload: dict[str, Any]) -> IPAddress:
        """Create an IP address and return the stored record."""
        data = await self._request("POST", IP_ADDRESSES_ENDPOINT, json=payload)
        if not data:
            raise NetBoxAPIError(f"POST {IP_ADDRESSES_ENDPOINT} returned an empty body")
        return IPAddress.from_netbox(data)
