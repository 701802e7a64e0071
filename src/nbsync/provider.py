"""Composition root wiring settings, client, state store, and adapters.

Usage:
    settings = NetBoxSettings.from_env()
    async with NetBoxProvider(settings, InMemoryStateStore()) as netbox:
        state = await netbox.ip_ranges.create(
            "ip_range.lab",
            IPRangeRecord(start_address="10.0.0.1/24", end_address="10.0.0.10/24"),
        )
        group = await netbox.vlan_groups.find({"slug": "core"})
"""
import logging
from typing import Optional

from .api.client import NetBoxClient
from .config import NetBoxSettings
from .reconcile.adapters.netbox_api_adapter import NetBoxResourceAPI
from .reconcile.adapters.state_store import InMemoryStateStore
from .reconcile.adapters.tag_resolver import NetBoxTagResolver
from .reconcile.domain.ports import IStateStore
from .reconcile.kinds import (
    LookupKind,
    ResourceKind,
    device_type_kind,
    ip_range_kind,
    vlan_group_kind,
)
from .reconcile.use_cases.lookup_adapter import LookupAdapter
from .reconcile.use_cases.resource_adapter import ResourceAdapter

logger = logging.getLogger(__name__)


class NetBoxProvider:
    """All adapters of one NetBox instance sharing a client and a state store.

    Attributes:
        ip_ranges: ResourceAdapter for IP ranges
        device_types: ResourceAdapter for device types
        vlan_groups: LookupAdapter for VLAN groups
    """

    def __init__(
        self,
        settings: NetBoxSettings,
        state_store: Optional[IStateStore] = None,
        client: Optional[NetBoxClient] = None,
        ip_range: Optional[ResourceKind] = None,
        device_type: Optional[ResourceKind] = None,
        vlan_group: Optional[LookupKind] = None,
    ):
        """Wire the adapters.

        Args:
            settings: Connection settings
            state_store: Where tracked states live (in-memory by default)
            client: Client override (built from settings by default)
            ip_range: IP range kind override (custom status set, default)
            device_type: Device type kind override
            vlan_group: VLAN group lookup kind override
        """
        self.settings = settings
        self.client = client or NetBoxClient.from_settings(settings)
        self.state_store = state_store if state_store is not None else InMemoryStateStore()
        self.tag_resolver = NetBoxTagResolver(self.client, auto_create=settings.auto_create_tags)

        self.ip_ranges = self.resource_adapter(ip_range or ip_range_kind())
        self.device_types = self.resource_adapter(device_type or device_type_kind())
        self.vlan_groups = self.lookup_adapter(vlan_group or vlan_group_kind())

    def resource_adapter(self, kind: ResourceKind) -> ResourceAdapter:
        """Build a ResourceAdapter for any kind on this provider's client."""
        return ResourceAdapter(
            kind=kind,
            api=NetBoxResourceAPI(self.client, kind.endpoint, kind.name),
            state_store=self.state_store,
            tag_resolver=self.tag_resolver,
        )

    def lookup_adapter(self, kind: LookupKind) -> LookupAdapter:
        """Build a LookupAdapter for any kind on this provider's client."""
        return LookupAdapter(
            kind=kind,
            api=NetBoxResourceAPI(self.client, kind.endpoint, kind.name),
        )

    async def __aenter__(self) -> "NetBoxProvider":
        await self.client.__aenter__()
        logger.debug(f"Connected to NetBox at {self.settings.url}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.client.__aexit__(exc_type, exc_val, exc_tb)
