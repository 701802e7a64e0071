"""Resource kind tables.

Each managed NetBox resource kind is described by data, not code: an
endpoint, a field schema, and an update discipline. Adapters receive a kind
at construction; choice sets and defaults are arguments of the factory
functions below so that callers can tighten or extend them.

Update discipline per kind:
    ip range     REPLACE  (PUT with every writable field)
    device type  PARTIAL  (PATCH with the fields that are set or defaulted)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from ..api.exceptions import ConfigurationError
from .domain.entities import (
    DeviceTypeRecord,
    FieldKind,
    FieldSpec,
    IPRangeRecord,
    ResourceSchema,
    VlanGroupRecord,
)
from .domain.slug import SLUG_MAX_LENGTH, slugify


class UpdateMode(str, Enum):
    """How an update is sent to the service."""

    REPLACE = "replace"
    PARTIAL = "partial"


@dataclass(frozen=True)
class ResourceKind:
    """Configuration for a read/write resource adapter.

    Attributes:
        name: Human-readable kind name (used in logs and errors)
        endpoint: Collection path, e.g. "/api/ipam/ip-ranges/"
        schema: Field table
        update_mode: REPLACE or PARTIAL
    """

    name: str
    endpoint: str
    schema: ResourceSchema
    update_mode: UpdateMode = UpdateMode.REPLACE


@dataclass(frozen=True)
class LookupKind:
    """Configuration for a read-only lookup adapter.

    Attributes:
        name: Human-readable kind name
        endpoint: Collection path
        schema: Field table used to decode the matched entity
        filter_keys: Filter attributes accepted by the lookup
        identifying_keys: At least one of these must be present in a filter
        required_with: Filter key -> key it cannot be used without
        filter_choices: Filter key -> allowed values
        limit: Result cap for the list query (2 is enough to detect ambiguity)
    """

    name: str
    endpoint: str
    schema: ResourceSchema
    filter_keys: tuple[str, ...]
    identifying_keys: tuple[str, ...]
    required_with: Mapping[str, str] = field(default_factory=dict)
    filter_choices: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    limit: int = 2


# ============================================
# IP Ranges
# ============================================

IP_RANGE_STATUS_OPTIONS = ("active", "reserved", "deprecated")


def ip_range_kind(
    status_options: tuple[str, ...] = IP_RANGE_STATUS_OPTIONS,
    default_status: str = "active",
) -> ResourceKind:
    """Build the IP range kind.

    Args:
        status_options: Allowed status values
        default_status: Status sent when the record leaves it unset

    Raises:
        ConfigurationError: If default_status is not an allowed status
    """
    if default_status not in status_options:
        raise ConfigurationError(
            f"default status {default_status!r} is not one of {', '.join(status_options)}"
        )

    schema = ResourceSchema(
        record_type=IPRangeRecord,
        fields=(
            FieldSpec("start_address", required=True),
            FieldSpec("end_address", required=True),
            FieldSpec(
                "status",
                kind=FieldKind.CHOICE,
                choices=tuple(status_options),
                default=default_status,
            ),
            FieldSpec("tenant_id", kind=FieldKind.REFERENCE, api_name="tenant"),
            FieldSpec("role_id", kind=FieldKind.REFERENCE, api_name="role"),
            FieldSpec("vrf_id", kind=FieldKind.REFERENCE, api_name="vrf"),
            FieldSpec("description", trim_equal=True),
            FieldSpec("comments", trim_equal=True),
            FieldSpec("tags", kind=FieldKind.TAGS),
        ),
    )
    return ResourceKind(
        name="ip range",
        endpoint="/api/ipam/ip-ranges/",
        schema=schema,
        update_mode=UpdateMode.REPLACE,
    )


# ============================================
# Device Types
# ============================================


def _slug_from_model(record: DeviceTypeRecord) -> str:
    return slugify(record.model)


def device_type_kind(default_u_height: float = 1.0) -> ResourceKind:
    """Build the device type kind.

    The slug is generated from the model when the record leaves it unset.
    """
    schema = ResourceSchema(
        record_type=DeviceTypeRecord,
        fields=(
            FieldSpec("model", required=True),
            FieldSpec(
                "manufacturer_id",
                kind=FieldKind.REFERENCE,
                api_name="manufacturer",
                required=True,
            ),
            FieldSpec(
                "slug",
                min_length=1,
                max_length=SLUG_MAX_LENGTH,
                derive=_slug_from_model,
            ),
            FieldSpec("part_number"),
            FieldSpec("u_height", kind=FieldKind.FLOAT, default=float(default_u_height)),
            FieldSpec("is_full_depth", kind=FieldKind.BOOL),
            FieldSpec("tags", kind=FieldKind.TAGS),
        ),
    )
    return ResourceKind(
        name="device type",
        endpoint="/api/dcim/device-types/",
        schema=schema,
        update_mode=UpdateMode.PARTIAL,
    )


# ============================================
# VLAN Groups (lookup only)
# ============================================

VLAN_GROUP_SCOPE_TYPES = (
    "dcim.location",
    "dcim.site",
    "dcim.sitegroup",
    "dcim.region",
    "dcim.rack",
    "virtualization.cluster",
    "virtualization.clustergroup",
)


def vlan_group_kind(scope_types: tuple[str, ...] = VLAN_GROUP_SCOPE_TYPES) -> LookupKind:
    """Build the VLAN group lookup kind."""
    schema = ResourceSchema(
        record_type=VlanGroupRecord,
        fields=(
            FieldSpec("name"),
            FieldSpec("slug"),
            FieldSpec("scope_type", kind=FieldKind.CHOICE, choices=tuple(scope_types)),
            FieldSpec("scope_id", kind=FieldKind.INT),
            FieldSpec("min_vid", kind=FieldKind.INT, computed=True),
            FieldSpec("max_vid", kind=FieldKind.INT, computed=True),
            FieldSpec("vlan_count", kind=FieldKind.INT, computed=True),
            FieldSpec("description", computed=True),
        ),
    )
    return LookupKind(
        name="vlan group",
        endpoint="/api/ipam/vlan-groups/",
        schema=schema,
        filter_keys=("name", "slug", "scope_type", "scope_id"),
        identifying_keys=("name", "slug", "scope_type"),
        required_with={"scope_id": "scope_type"},
        filter_choices={"scope_type": tuple(scope_types)},
    )
