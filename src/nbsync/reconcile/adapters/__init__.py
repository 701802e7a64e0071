"""Adapters layer - Infrastructure implementations for reconciliation.

This layer contains concrete implementations of the ports defined in the domain layer:
- FieldCodec: Schema-driven implementation of IFieldCodec
- NetBoxResourceAPI: NetBox REST implementation of IInventoryAPI
- NetBoxTagResolver: NetBox tags implementation of ITagResolver
- InMemoryStateStore / JsonFileStateStore: implementations of IStateStore
"""

from .field_codec import FieldCodec
from .netbox_api_adapter import NetBoxResourceAPI
from .state_store import InMemoryStateStore, JsonFileStateStore
from .tag_resolver import NetBoxTagResolver

__all__ = [
    "FieldCodec",
    "NetBoxResourceAPI",
    "NetBoxTagResolver",
    "InMemoryStateStore",
    "JsonFileStateStore",
]
