"""Resource Adapter Use Case - CRUD reconciliation for one resource kind.

This use case keeps a tracked resource in the State Store in step with its
NetBox counterpart. It depends on ports (interfaces) for all external
operations, making it fully testable without infrastructure.

Lifecycle of a tracked key:
    absent -> create -> read-verified -> (update)* -> delete -> absent

Workflow for a write (create/update):
1. Validate the record (no network call on bad input)
2. Resolve tag names to ids (via ITagResolver)
3. Encode the payload (via FieldCodec)
4. Send it (via IInventoryAPI)
5. Store the state, then read back to pick up computed fields

Errors from the service are propagated unmodified and never retried. If the
follow-up read fails after a successful create, the identifier stays stored
and the caller may read again later.
"""

import logging
from typing import Any, Optional

from ...api.exceptions import NotFoundError, ValidationError
from ..adapters.field_codec import FieldCodec
from ..domain.entities import ResourceDiff, ResourceState
from ..domain.ports import IInventoryAPI, IStateStore, ITagResolver
from ..kinds import ResourceKind, UpdateMode

logger = logging.getLogger(__name__)


class ResourceAdapter:
    """Create/Read/Update/Delete for one NetBox resource kind.

    Example:
        adapter = ResourceAdapter(
            kind=ip_range_kind(),
            api=NetBoxResourceAPI(client, "/api/ipam/ip-ranges/", "ip range"),
            state_store=InMemoryStateStore(),
            tag_resolver=NetBoxTagResolver(client),
        )
        state = await adapter.create("ip_range.office", IPRangeRecord(...))
    """

    def __init__(
        self,
        kind: ResourceKind,
        api: IInventoryAPI,
        state_store: IStateStore,
        tag_resolver: Optional[ITagResolver] = None,
        codec: Optional[FieldCodec] = None,
    ):
        """Initialize the adapter with its dependencies.

        Args:
            kind: Endpoint, schema, and update discipline of the resource kind
            api: Port for the kind's NetBox endpoint
            state_store: Port holding the last-known state per key
            tag_resolver: Port for tag name resolution (required for records
                that carry tags)
            codec: Codec override; built from kind.schema when omitted
        """
        self.kind = kind
        self.api = api
        self.store = state_store
        self.tag_resolver = tag_resolver
        self.codec = codec or FieldCodec(kind.schema, resource_type=kind.name)

    # ----------------------------------------
    # Helpers
    # ----------------------------------------

    async def _encode(self, record: Any) -> dict[str, Any]:
        self.codec.validate(record)

        tag_ids: dict[str, int] = {}
        names = self.codec.tag_names(record)
        if names:
            if self.tag_resolver is None:
                raise ValidationError(
                    f"{self.kind.name} record has tags but no tag resolver is configured",
                    field="tags",
                )
            tag_ids = await self.tag_resolver.resolve(names)

        return self.codec.encode(record, tag_ids=tag_ids)

    def _owned_state(self, key: str) -> Optional[ResourceState]:
        # Adapters of different kinds may share one store; a key belongs to
        # the kind whose record it holds.
        state = self.store.get(key)
        if state is None or state.record is None:
            return state

        record_type = self.kind.schema.record_type
        if not isinstance(state.record, record_type):
            raise ValidationError(
                f"{key!r} is tracked as {type(state.record).__name__}, not {record_type.__name__}",
            )
        return state

    def _require_state(self, key: str) -> ResourceState:
        state = self._owned_state(key)
        if state is None or not state.exists:
            raise ValidationError(f"{self.kind.name} {key!r} is not tracked, create or import it first")
        return state

    # ----------------------------------------
    # Operations
    # ----------------------------------------

    async def create(self, key: str, record: Any) -> Optional[ResourceState]:
        """Create the remote entity and start tracking it under key.

        Args:
            key: State key for the new resource
            record: Desired record

        Returns:
            The read-verified state (None if the entity vanished before the
            follow-up read)

        Raises:
            ValidationError: Bad input, raised before any network call
            ServiceError: Transport or API failure
        """
        existing = self.store.get(key)
        if existing is not None and existing.exists:
            raise ValidationError(
                f"{self.kind.name} {key!r} is already tracked with id {existing.id}",
            )

        record = self.codec.normalize(record)
        payload = await self._encode(record)

        created = await self.api.create(payload)
        entity_id = int(created["id"])
        self.store.put(key, ResourceState(id=entity_id, record=record))
        logger.info(f"Created {self.kind.name} {key!r} (id={entity_id})")

        return await self.read(key)

    async def read(self, key: str) -> Optional[ResourceState]:
        """Refresh the tracked state of key from NetBox.

        A 404 is not an error: the state is dropped and None is returned so
        the caller stops tracking the resource.

        Returns:
            The refreshed state, or None when the key is not tracked or the
            entity no longer exists

        Raises:
            ValidationError: key is tracked by another resource kind
            ServiceError: Any failure other than not-found
        """
        state = self._owned_state(key)
        if state is None or not state.exists:
            return None

        try:
            payload = await self.api.read(state.id)
        except NotFoundError:
            logger.warning(
                f"{self.kind.name} {key!r} (id={state.id}) no longer exists, dropping it from state"
            )
            self.store.remove(key)
            return None

        remote = self.codec.decode(payload)
        record = self.codec.reconcile(state.record, remote)
        refreshed = ResourceState(id=state.id, record=record)
        self.store.put(key, refreshed)
        logger.debug(f"Read {self.kind.name} {key!r} (id={state.id})")
        return refreshed

    async def update(self, key: str, record: Any) -> Optional[ResourceState]:
        """Push the desired record for an already tracked key.

        REPLACE kinds send every writable field with PUT; PARTIAL kinds send
        only set (or defaulted) fields with PATCH. In both cases optional
        fields left UNSET are omitted, so the remote value is kept; only an
        explicit None or "" clears it.

        Returns:
            The read-verified state (None if the entity vanished)

        Raises:
            ValidationError: Bad input or untracked key
            ServiceError: Transport or API failure, including NotFoundError
                when the entity was deleted out of band
        """
        state = self._require_state(key)
        record = self.codec.normalize(record)
        payload = await self._encode(record)

        if self.kind.update_mode == UpdateMode.PARTIAL:
            await self.api.partial_update(state.id, payload)
        else:
            await self.api.update(state.id, payload)

        self.store.put(key, ResourceState(id=state.id, record=record))
        logger.info(f"Updated {self.kind.name} {key!r} (id={state.id})")

        return await self.read(key)

    async def delete(self, key: str) -> None:
        """Delete the remote entity and stop tracking key.

        Deleting is idempotent: an entity that is already gone, or a key that
        is not tracked, counts as deleted.

        Raises:
            ValidationError: key is tracked by another resource kind
            ServiceError: Any failure other than not-found
        """
        state = self._owned_state(key)
        if state is None or not state.exists:
            self.store.remove(key)
            return

        try:
            await self.api.delete(state.id)
            logger.info(f"Deleted {self.kind.name} {key!r} (id={state.id})")
        except NotFoundError:
            logger.info(f"{self.kind.name} {key!r} (id={state.id}) was already deleted")

        self.store.remove(key)

    async def import_state(self, key: str, entity_id: int) -> Optional[ResourceState]:
        """Start tracking an existing entity by its identifier.

        The state is seeded with the id alone and a read fills in the record.

        Returns:
            The imported state, or None if no entity has that id

        Raises:
            ValidationError: Invalid id, or key already tracked
        """
        if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id <= 0:
            raise ValidationError(f"invalid {self.kind.name} id: {entity_id!r}", field="id")

        existing = self.store.get(key)
        if existing is not None and existing.exists:
            raise ValidationError(
                f"{self.kind.name} {key!r} is already tracked with id {existing.id}",
            )

        self.store.put(key, ResourceState(id=entity_id, record=None))
        state = await self.read(key)
        if state is not None:
            logger.info(f"Imported {self.kind.name} {key!r} (id={entity_id})")
        return state

    def diff(self, key: str, record: Any) -> ResourceDiff:
        """Changes between the stored record for key and the desired record.

        Free-text fields that differ only by surrounding whitespace and tag
        sets that differ only in order are not reported.
        """
        state = self._owned_state(key)
        prior = state.record if state is not None else None
        changes = self.codec.diff(prior, self.codec.normalize(record))
        return ResourceDiff(key=key, changes=changes)
