"""Port interfaces for resource reconciliation.

Ports define the contracts between the use cases and the infrastructure.
These are abstract base classes that adapters must implement.

Following the Hexagonal Architecture (Ports and Adapters) pattern:
- Ports are interfaces defined in the domain layer
- Adapters implement these ports in the adapters layer
- Use cases depend only on ports, not concrete implementations
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .entities import ResourceState


class IInventoryAPI(ABC):
    """Port for CRUD operations on one NetBox resource kind.

    Implementations raise NotFoundError when the service answers 404 and
    another ServiceError for any other failure.
    """

    @abstractmethod
    async def list(
        self,
        filters: Mapping[str, Any],
        limit: Optional[int] = None,
    ) -> dict[str, Any]:
        """List entities matching a filter.

        Args:
            filters: Query parameters (attribute -> value)
            limit: Maximum number of results to return

        Returns:
            Page dictionary with "count" (total matches) and "results"
        """
        ...

    @abstractmethod
    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create an entity and return its representation (with "id")."""
        ...

    @abstractmethod
    async def read(self, entity_id: int) -> dict[str, Any]:
        """Fetch one entity by identifier."""
        ...

    @abstractmethod
    async def update(self, entity_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """Replace the writable fields of an entity."""
        ...

    @abstractmethod
    async def partial_update(self, entity_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """Update only the fields present in the payload."""
        ...

    @abstractmethod
    async def delete(self, entity_id: int) -> None:
        """Delete an entity."""
        ...


class IStateStore(ABC):
    """Port for the last-known state of managed resources.

    Keys are caller-chosen addresses (e.g., "ip_range.office"). Adapters read
    the prior record for diff suppression and write the new state after each
    successful operation.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[ResourceState]:
        """Return the stored state, or None when the key is not tracked."""
        ...

    @abstractmethod
    def put(self, key: str, state: ResourceState) -> None:
        """Store (or replace) the state for a key."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Stop tracking a key. Removing an unknown key is a no-op."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """All tracked keys."""
        ...


class ITagResolver(ABC):
    """Port for resolving tag names to NetBox tag identifiers."""

    @abstractmethod
    async def resolve(self, names: Iterable[str]) -> dict[str, int]:
        """Resolve tag names to identifiers.

        Args:
            names: Tag names to resolve

        Returns:
            Mapping of every given name to its tag id

        Raises:
            UnknownReferenceError: If a name cannot be resolved and the
                resolver is not allowed to create it.
        """
        ...


class IFieldCodec(ABC):
    """Port for translating between declarative records and API payloads."""

    @abstractmethod
    def validate(self, record: Any) -> None:
        """Check required fields, choices, and lengths before any network call."""
        ...

    @abstractmethod
    def encode(self, record: Any, tag_ids: Optional[Mapping[str, int]] = None) -> dict[str, Any]:
        """Transform a record to an API payload."""
        ...

    @abstractmethod
    def decode(self, payload: Mapping[str, Any]) -> Any:
        """Transform an API payload to a record."""
        ...
