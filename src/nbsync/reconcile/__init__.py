"""Reconcile module - Clean Architecture implementation of the NetBox adapters.

Architecture:
    domain/     - Records, field schema, and port interfaces
    kinds       - Per-kind tables (endpoint, fields, update discipline)
    use_cases/  - Resource and lookup adapters
    adapters/   - Infrastructure implementations (codec, NetBox API, state stores)
"""

from .domain.entities import (
    UNSET,
    DeviceTypeRecord,
    IPRangeRecord,
    ResourceDiff,
    ResourceState,
    VlanGroupRecord,
)
from .kinds import (
    IP_RANGE_STATUS_OPTIONS,
    VLAN_GROUP_SCOPE_TYPES,
    LookupKind,
    ResourceKind,
    UpdateMode,
    device_type_kind,
    ip_range_kind,
    vlan_group_kind,
)
from .use_cases.lookup_adapter import LookupAdapter
from .use_cases.resource_adapter import ResourceAdapter

__all__ = [
    # Records
    "UNSET",
    "IPRangeRecord",
    "DeviceTypeRecord",
    "VlanGroupRecord",
    "ResourceState",
    "ResourceDiff",
    # Kinds
    "ResourceKind",
    "LookupKind",
    "UpdateMode",
    "ip_range_kind",
    "device_type_kind",
    "vlan_group_kind",
    "IP_RANGE_STATUS_OPTIONS",
    "VLAN_GROUP_SCOPE_TYPES",
    # Adapters
    "ResourceAdapter",
    "LookupAdapter",
]
