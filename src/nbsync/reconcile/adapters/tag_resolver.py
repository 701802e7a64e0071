"""Tag resolver adapter backed by the NetBox tags endpoint.

This adapter implements ITagResolver. Names are looked up one at a time
with ``/api/extras/tags/?name=<name>`` and cached for the lifetime of the
resolver, so a reconciliation run resolves each tag at most once.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...api.exceptions import UnknownReferenceError
from ..domain.ports import ITagResolver
from ..domain.slug import slugify

if TYPE_CHECKING:
    from ...api.client import NetBoxClient

logger = logging.getLogger(__name__)


class NetBoxTagResolver(ITagResolver):
    """Resolves tag names to ids, optionally creating missing tags.

    Attributes:
        client: NetBoxClient used for lookups and creation
        auto_create: Create unknown tags instead of failing
    """

    ENDPOINT = "/api/extras/tags/"

    def __init__(self, client: "NetBoxClient", auto_create: bool = False):
        self.client = client
        self.auto_create = auto_create
        self._cache: dict[str, int] = {}

    async def resolve(self, names: Iterable[str]) -> dict[str, int]:
        """Resolve tag names to identifiers.

        Raises:
            UnknownReferenceError: If any name is unknown and auto_create is off
        """
        resolved: dict[str, int] = {}
        missing: list[str] = []

        for name in names:
            if name in resolved:
                continue
            if name in self._cache:
                resolved[name] = self._cache[name]
                continue

            tag_id = await self._lookup(name)
            if tag_id is None and self.auto_create:
                tag_id = await self._create(name)
            if tag_id is None:
                missing.append(name)
                continue

            self._cache[name] = tag_id
            resolved[name] = tag_id

        if missing:
            raise UnknownReferenceError("tag", missing)
        return resolved

    async def _lookup(self, name: str) -> int | None:
        data = await self.client.get(self.ENDPOINT, params={"name": name, "limit": 1})
        results = data.get("results") or []
        if not results:
            return None
        return results[0]["id"]

    async def _create(self, name: str) -> int:
        created = await self.client.post(
            self.ENDPOINT,
            json_body={"name": name, "slug": slugify(name)},
        )
        logger.info(f"Created tag {name!r} (id={created['id']})")
        return created["id"]
