"""Lookup Adapter Use Case - resolve a filter to exactly one entity.

Lookups are read-only. The list query is capped at a small limit (2 by
default) which is enough to tell "one" from "more than one" without
fetching a large result set.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from ...api.exceptions import (
    AmbiguousFilterError,
    InvalidValueError,
    NotFoundError,
    ValidationError,
)
from ..adapters.field_codec import FieldCodec
from ..domain.entities import ResourceState
from ..domain.ports import IInventoryAPI
from ..kinds import LookupKind

logger = logging.getLogger(__name__)


class LookupAdapter:
    """Resolves a uniquely-identifying filter to one NetBox entity.

    Example:
        adapter = LookupAdapter(
            kind=vlan_group_kind(),
            api=NetBoxResourceAPI(client, "/api/ipam/vlan-groups/", "vlan group"),
        )
        state = await adapter.find({"slug": "core"})
        print(state.id, state.record.vlan_count)
    """

    def __init__(
        self,
        kind: LookupKind,
        api: IInventoryAPI,
        codec: Optional[FieldCodec] = None,
    ):
        self.kind = kind
        self.api = api
        self.codec = codec or FieldCodec(kind.schema, resource_type=kind.name)

    def validate_filter(self, filters: Mapping[str, Any]) -> dict[str, Any]:
        """Check a filter against the kind's lookup rules.

        Returns:
            The filter with empty values removed

        Raises:
            ValidationError: Unknown key, no identifying key, or a key used
                without the key it requires
            InvalidValueError: A value outside its allowed set
        """
        unknown = sorted(set(filters) - set(self.kind.filter_keys))
        if unknown:
            raise ValidationError(
                f"unsupported {self.kind.name} filter: {', '.join(unknown)}",
                field=unknown[0],
            )

        cleaned = {
            key: value
            for key, value in filters.items()
            if value is not None and value != ""
        }

        if not any(key in cleaned for key in self.kind.identifying_keys):
            raise ValidationError(
                f"one of {', '.join(self.kind.identifying_keys)} must be specified "
                f"to look up a {self.kind.name}",
            )

        for key, needed in self.kind.required_with.items():
            if key in cleaned and needed not in cleaned:
                raise ValidationError(f"{key} requires {needed}", field=key)

        for key, allowed in self.kind.filter_choices.items():
            if key in cleaned and cleaned[key] not in allowed:
                raise InvalidValueError(key, cleaned[key], allowed=list(allowed))

        return cleaned

    async def find(self, filters: Mapping[str, Any]) -> ResourceState:
        """Return the single entity matching the filter.

        Raises:
            ValidationError: Invalid filter (no network call is made)
            NotFoundError: No entity matches
            AmbiguousFilterError: More than one entity matches
            ServiceError: Transport or API failure
        """
        cleaned = self.validate_filter(filters)

        page = await self.api.list(cleaned, limit=self.kind.limit)
        results = page.get("results") or []
        count = page.get("count")
        if count is None:
            count = len(results)

        if count > 1:
            raise AmbiguousFilterError(
                f"more than one {self.kind.name} returned, specify a more narrow filter",
                filters=cleaned,
                count=count,
            )
        if count == 0 or not results:
            raise NotFoundError(
                self.kind.name,
                message=f"no {self.kind.name} found matching filter",
                details={"filters": cleaned},
            )

        result = results[0]
        state = ResourceState(id=int(result["id"]), record=self.codec.decode(result))
        logger.debug(f"Resolved {self.kind.name} {cleaned} to id={state.id}")
        return state
