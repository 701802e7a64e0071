"""Domain layer - Pure domain entities and port interfaces.

This layer contains:
- Entities: Records, field schema, and tracked state
- Ports: Abstract interfaces defining contracts for adapters

No infrastructure dependencies allowed in this layer.
"""

from .entities import (
    UNSET,
    DeviceTypeRecord,
    FieldChange,
    FieldKind,
    FieldSpec,
    IPRangeRecord,
    ResourceDiff,
    ResourceSchema,
    ResourceState,
    VlanGroupRecord,
    is_empty,
    is_set,
)
from .ports import IFieldCodec, IInventoryAPI, IStateStore, ITagResolver
from .slug import slugify

__all__ = [
    # Sentinel
    "UNSET",
    "is_set",
    "is_empty",
    # Schema
    "FieldKind",
    "FieldSpec",
    "ResourceSchema",
    # Records
    "IPRangeRecord",
    "DeviceTypeRecord",
    "VlanGroupRecord",
    # State
    "ResourceState",
    "ResourceDiff",
    "FieldChange",
    # Ports
    "IInventoryAPI",
    "IStateStore",
    "ITagResolver",
    "IFieldCodec",
    # Helpers
    "slugify",
]
