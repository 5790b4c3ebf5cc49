"""
Unit tests for the NetBox REST client transport behaviour.
"""

import asyncio

import httpx
import pytest

from conftest import prefix_record, vrf_record
from nbipam.config import ConfigError, NetBoxConfig
from nbipam.netbox.client import (
    NetBoxAPIError,
    NetBoxClient,
    NetBoxRequestError,
)


def run(coro):
    return asyncio.run(coro)


class TestNetBoxClient:
    def test_token_header_on_every_request(self, run_op, netbox):
        netbox.vrfs = [vrf_record(1, "blue")]
        netbox.prefixes = [prefix_record(5, "10.0.0.0/24")]

        async def two_calls(client):
            await client.list_vrfs({"limit": 1000})
            await client.delete_prefix(5)

        run_op(two_calls)

        assert len(netbox.requests) == 2
        for request in netbox.requests:
            assert request.headers["Authorization"] == "Token 0123456789abcdef"
            assert request.headers["Accept"] == "application/json"

    def test_routes_under_api_base_path(self, run_op, netbox):
        async def calls(client):
            await client.list_vrfs()
            await client.list_prefixes()
            await client.list_ip_addresses()
            await client.delete_prefix(42)

        run_op(calls)

        assert [(r.method, r.url.path) for r in netbox.requests] == [
            ("GET", "/api/ipam/vrfs/"),
            ("GET", "/api/ipam/prefixes/"),
            ("GET", "/api/ipam/ip-addresses/"),
            ("DELETE", "/api/ipam/prefixes/42/"),
        ]
        assert netbox.requests[0].url.host == "netbox.example.com"
        assert netbox.requests[0].url.scheme == "https"

    def test_none_params_are_dropped(self, run_op, netbox):
        run_op(lambda client: client.list_prefixes({"vrf_id": None, "limit": 1000}))

        params = netbox.requests[0].url.params
        assert "vrf_id" not in params
        assert params["limit"] == "1000"

    def test_models_parsed_from_results(self, run_op, netbox):
        netbox.prefixes = [prefix_record(7, "10.0.0.0/24", vrf_id=17, vrf_name="blue")]

        prefixes = run_op(lambda client: client.list_prefixes())

        assert len(prefixes) == 1
        assert prefixes[0].id == 7
        assert prefixes[0].prefix == "10.0.0.0/24"
        assert prefixes[0].vrf.id == 17
        assert prefixes[0].vrf.name == "blue"
        assert prefixes[0].status == "active"

    def test_count_uses_limit_one(self, run_op, netbox):
        netbox.prefix_counts[("17", "24")] = 12

        count = run_op(lambda client: client.count_prefixes({"vrf_id": "17", "mask_length": "24"}))

        assert count == 12
        assert netbox.requests[0].url.params["limit"] == "1"

    def test_http_error_raises_api_error(self, run_op, netbox):
        netbox.fail_when(lambda request: True)

        with pytest.raises(NetBoxAPIError) as exc_info:
            run_op(lambda client: client.list_vrfs())

        assert exc_info.value.status_code == 500
        assert "simulated failure" in str(exc_info.value)

    def test_no_retry_on_failure(self, run_op, netbox):
        netbox.fail_when(lambda request: True)

        with pytest.raises(NetBoxAPIError):
            run_op(lambda client: client.list_prefixes())

        assert len(netbox.requests) == 1

    def test_network_error_raises_request_error(self, config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def call():
            async with NetBoxClient(config, transport=httpx.MockTransport(handler)) as client:
                await client.list_vrfs()

        with pytest.raises(NetBoxRequestError, match="connection refused"):
            run(call())

    def test_invalid_json_raises_api_error(self, config):
        def handler(request):
            return httpx.Response(200, text="<html>login</html>")

        async def call():
            async with NetBoxClient(config, transport=httpx.MockTransport(handler)) as client:
                await client.list_vrfs()

        with pytest.raises(NetBoxAPIError, match="invalid JSON"):
            run(call())

    def test_missing_host_fails_before_any_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        async def call():
            config = NetBoxConfig(host="", token="abc")
            async with NetBoxClient(config, transport=httpx.MockTransport(handler)) as client:
                await client.list_vrfs()

        with pytest.raises(ConfigError):
            run(call())
        assert calls == []

    def test_create_returns_record(self, run_op, netbox):
        netbox.created_vrf = {"id": 17, "name": "blue"}

        record = run_op(lambda client: client.create_ip_address({"address": "192.0.2.5/32", "vrf": 17}))

        assert record.id == 1001
        assert record.address == "192.0.2.5/32"
        assert record.vrf.name == "blue"
