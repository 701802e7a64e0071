"""Tests for the NetBoxProvider composition root."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nbsync.api.client import NetBoxClient
from nbsync.config import NetBoxSettings
from nbsync.provider import NetBoxProvider
from nbsync.reconcile.adapters.netbox_api_adapter import NetBoxResourceAPI
from nbsync.reconcile.adapters.state_store import InMemoryStateStore
from nbsync.reconcile.domain.entities import IPRangeRecord
from nbsync.reconcile.kinds import UpdateMode, ip_range_kind


@pytest.fixture
def settings():
    return NetBoxSettings(url="https://netbox.example.com/", token="secret", auto_create_tags=True)


class TestWiring:

    def test_client_built_from_settings(self, settings):
        provider = NetBoxProvider(settings)

        assert isinstance(provider.client, NetBoxClient)
        assert provider.client.base_url == "https://netbox.example.com"
        assert isinstance(provider.state_store, InMemoryStateStore)
        assert provider.tag_resolver.auto_create is True

    def test_adapters_share_client_and_store(self, settings):
        store = InMemoryStateStore()
        provider = NetBoxProvider(settings, state_store=store)

        assert provider.ip_ranges.store is store
        assert provider.device_types.store is store
        assert provider.ip_ranges.tag_resolver is provider.tag_resolver
        for adapter in (provider.ip_ranges, provider.device_types, provider.vlan_groups):
            assert isinstance(adapter.api, NetBoxResourceAPI)
            assert adapter.api.client is provider.client

    def test_endpoints(self, settings):
        provider = NetBoxProvider(settings)

        assert provider.ip_ranges.api.endpoint == "/api/ipam/ip-ranges/"
        assert provider.device_types.api.endpoint == "/api/dcim/device-types/"
        assert provider.vlan_groups.api.endpoint == "/api/ipam/vlan-groups/"
        assert provider.device_types.kind.update_mode == UpdateMode.PARTIAL

    def test_kind_override(self, settings):
        kind = ip_range_kind(status_options=("active", "planned"), default_status="planned")

        provider = NetBoxProvider(settings, ip_range=kind)

        assert provider.ip_ranges.kind is kind


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_context_manager_delegates_to_client(self, settings):
        client = MagicMock(spec=NetBoxClient)
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=None)

        async with NetBoxProvider(settings, client=client) as provider:
            assert provider.client is client

        client.__aenter__.assert_awaited_once()
        client.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_goes_through_client(self, settings):
        client = MagicMock(spec=NetBoxClient)
        client.post = AsyncMock(return_value={"id": 5})
        client.get = AsyncMock(return_value={
            "id": 5,
            "start_address": "10.0.0.1/24",
            "end_address": "10.0.0.10/24",
            "status": {"value": "active", "label": "Active"},
            "tenant": None,
            "tags": [],
        })
        client.put = AsyncMock()
        provider = NetBoxProvider(settings, client=client)

        state = await provider.ip_ranges.create(
            "ip_range.lab",
            IPRangeRecord(start_address="10.0.0.1/24", end_address="10.0.0.10/24"),
        )

        client.put.assert_not_called()
        client.post.assert_called_once_with(
            "/api/ipam/ip-ranges/",
            json_body={
                "start_address": "10.0.0.1/24",
                "end_address": "10.0.0.10/24",
                "status": "active",
            },
        )
        client.get.assert_called_once_with("/api/ipam/ip-ranges/5/")
        assert state.id == 5
        assert state.record.status == "active"
