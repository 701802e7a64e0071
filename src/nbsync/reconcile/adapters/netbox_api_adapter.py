"""NetBox API adapter for CRUD operations on one resource kind.

This adapter implements IInventoryAPI and wraps NetBoxClient to provide
endpoint-specific operations. One instance serves one endpoint, e.g.
``/api/ipam/ip-ranges/``.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from ...api.exceptions import NotFoundError
from ..domain.ports import IInventoryAPI

if TYPE_CHECKING:
    from ...api.client import NetBoxClient


class NetBoxResourceAPI(IInventoryAPI):
    """NetBox REST adapter for a single resource endpoint.

    Wraps NetBoxClient and tags 404 errors with the resource kind so that
    callers get "ip range '17' not found" rather than a bare URL.
    """

    def __init__(
        self,
        client: "NetBoxClient",
        endpoint: str,
        resource_type: str = "resource",
    ):
        """Initialize the API adapter.

        Args:
            client: Configured NetBoxClient instance
            endpoint: Collection path with trailing slash
            resource_type: Human-readable kind name used in errors
        """
        self.client = client
        self.endpoint = endpoint if endpoint.endswith("/") else f"{endpoint}/"
        self.resource_type = resource_type

    def _detail(self, entity_id: int) -> str:
        return f"{self.endpoint}{entity_id}/"

    def _not_found(self, entity_id: int, error: NotFoundError) -> NotFoundError:
        return NotFoundError(
            self.resource_type,
            resource_id=str(entity_id),
            endpoint=error.endpoint,
            method=error.method,
            response_body=error.response_body,
            cause=error,
        )

    async def list(
        self,
        filters: Mapping[str, Any],
        limit: Optional[int] = None,
    ) -> dict[str, Any]:
        """List entities matching a filter.

        Returns:
            NetBox page dictionary ("count", "next", "previous", "results")
        """
        params = {key: value for key, value in filters.items() if value is not None}
        if limit is not None:
            params["limit"] = limit
        return await self.client.get(self.endpoint, params=params)

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.client.post(self.endpoint, json_body=payload)

    async def read(self, entity_id: int) -> dict[str, Any]:
        try:
            return await self.client.get(self._detail(entity_id))
        except NotFoundError as e:
            raise self._not_found(entity_id, e)

    async def update(self, entity_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.client.put(self._detail(entity_id), json_body=payload)
        except NotFoundError as e:
            raise self._not_found(entity_id, e)

    async def partial_update(self, entity_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.client.patch(self._detail(entity_id), json_body=payload)
        except NotFoundError as e:
            raise self._not_found(entity_id, e)

    async def delete(self, entity_id: int) -> None:
        try:
            await self.client.delete(self._detail(entity_id))
        except NotFoundError as e:
            raise self._not_found(entity_id, e)
