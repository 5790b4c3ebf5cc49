"""Pytest configuration and fixtures for nbipam tests.

HTTP traffic is served by an in-process fake NetBox through
httpx.MockTransport, so no test needs a real NetBox instance.
"""

import asyncio
import json
import re
from typing import Any, Callable

import httpx
import pytest

from nbipam.config import NetBoxConfig, set_config
from nbipam.netbox.client import NetBoxClient


NETBOX_ENV_VARS = [
    "NETBOX_HOST",
    "NETBOX_TOKEN",
    "NETBOX_VRF",
    "NETBOX_DEBUG",
    "NETBOX_TIMEOUT",
    "NETBOX_VERIFY_SSL",
    "NETBOX_CONCURRENCY",
]

BOX_CHARS = "│┃║ "


def prefix_record(id: int, prefix: str, vrf_id: int | None = None, vrf_name: str | None = None) -> dict:
    """Prefix as NetBox returns it."""
    vrf = {"id": vrf_id, "name": vrf_name or f"vrf-{vrf_id}"} if vrf_id is not None else None
    return {"id": id, "prefix": prefix, "vrf": vrf, "status": {"value": "active", "label": "Active"}}


def vrf_record(id: int, name: str) -> dict:
    return {"id": id, "name": name, "rd": None, "description": ""}


class FakeNetBox:
    """
    Minimal NetBox API double.

    Records every request and answers list, count, create and delete
    calls from in-memory fixtures. Filtering is NetBox's job, so list
    calls return the configured records as-is; tests check the query
    parameters that were sent.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.vrfs: list[dict] = []
        self.prefixes: list[dict] = []
        self.ip_addresses: list[dict] = []
        # (vrf_id, mask_length) -> count, keys as query-string values
        self.prefix_counts: dict[tuple[str, str], int] = {}
        self.address_counts: dict[str, int] = {}
        self.created_vrf: dict | None = None
        self.failures: list[Callable[[httpx.Request], bool]] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def fail_when(self, predicate: Callable[[httpx.Request], bool]) -> None:
        """Answer HTTP 500 to every request matching the predicate."""
        self.failures.append(predicate)

    # Request views

    def calls(self, method: str, path_pattern: str = r".*") -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and re.fullmatch(path_pattern, r.url.path)
        ]

    def deleted_ids(self) -> list[int]:
        return [int(r.url.path.rstrip("/").rsplit("/", 1)[1]) for r in self.calls("DELETE")]

    def count_queries(self, path: str) -> list[httpx.Request]:
        return [r for r in self.calls("GET", path) if r.url.params.get("limit") == "1"]

    # Handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if any(predicate(request) for predicate in self.failures):
            return httpx.Response(500, json={"detail": "simulated failure"})

        path = request.url.path
        params = request.url.params

        if request.method == "GET" and path == "/api/ipam/vrfs/":
            return self._page(self.vrfs)

        if request.method == "GET" and path == "/api/ipam/prefixes/":
            if params.get("limit") == "1":
                key = (params.get("vrf_id", ""), params.get("mask_length", ""))
                return self._count(self.prefix_counts.get(key, 0))
            return self._page(self.prefixes)

        if request.method == "DELETE" and re.fullmatch(r"/api/ipam/prefixes/\d+/", path):
            return httpx.Response(204)

        if request.method == "GET" and path == "/api/ipam/ip-addresses/":
            if params.get("limit") == "1":
                return self._count(self.address_counts.get(params.get("vrf_id", ""), 0))
            return self._page(self.ip_addresses)

        if request.method == "POST" and path == "/api/ipam/ip-addresses/":
            body = json.loads(request.content)
            record = {
                "id": 1001,
                "address": body["address"],
                "vrf": self.created_vrf,
                "dns_name": body.get("dns_name", ""),
                "description": body.get("description", ""),
                "status": {"value": body.get("status"), "label": "Active"},
            }
            return httpx.Response(201, json=record)

        return httpx.Response(404, json={"detail": "Not found."})

    @staticmethod
    def _page(results: list[dict]) -> httpx.Response:
        return httpx.Response(
            200, json={"count": len(results), "next": None, "previous": None, "results": results}
        )

    @staticmethod
    def _count(count: int) -> httpx.Response:
        return httpx.Response(200, json={"count": count, "next": None, "previous": None, "results": []})


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the caller's NetBox settings."""
    for name in NETBOX_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def config() -> NetBoxConfig:
    return NetBoxConfig(host="netbox.example.com", token="0123456789abcdef")


@pytest.fixture
def netbox() -> FakeNetBox:
    return FakeNetBox()


@pytest.fixture
def run_op(config, netbox):
    """Run an async operation against a client wired to the fake NetBox."""
    def _run(operation: Callable[..., Any], *args, **kwargs):
        async def runner():
            async with NetBoxClient(config, transport=netbox.transport()) as client:
                return await operation(client, *args, **kwargs)
        return asyncio.run(runner())
    return _run


def table_cells(output: str) -> list[str]:
    """Text content of a rendered single-column rich table, one entry per line."""
    cells = []
    for line in output.splitlines():
        text = line.strip(BOX_CHARS)
        if not text or not any(ch.isalnum() for ch in text):
            continue
        cells.append(text.strip())
    return cells
