"""Tests for NetBoxTagResolver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nbsync.api.client import NetBoxClient
from nbsync.api.exceptions import UnknownReferenceError
from nbsync.reconcile.adapters.tag_resolver import NetBoxTagResolver


def page(*tags):
    return {"count": len(tags), "results": [{"id": tag_id, "name": name} for name, tag_id in tags]}


@pytest.fixture
def mock_client():
    client = MagicMock(spec=NetBoxClient)
    client.get = AsyncMock()
    client.post = AsyncMock()
    return client


class TestResolve:
    """Tests for tag name resolution."""

    @pytest.mark.asyncio
    async def test_resolves_each_name(self, mock_client):
        mock_client.get.side_effect = [page(("prod", 11)), page(("edge", 12))]
        resolver = NetBoxTagResolver(mock_client)

        result = await resolver.resolve(["prod", "edge"])

        assert result == {"prod": 11, "edge": 12}
        mock_client.get.assert_any_call("/api/extras/tags/", params={"name": "prod", "limit": 1})
        mock_client.get.assert_any_call("/api/extras/tags/", params={"name": "edge", "limit": 1})

    @pytest.mark.asyncio
    async def test_cache(self, mock_client):
        mock_client.get.return_value = page(("prod", 11))
        resolver = NetBoxTagResolver(mock_client)

        await resolver.resolve(["prod"])
        await resolver.resolve(["prod", "prod"])

        assert mock_client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_names_reported_together(self, mock_client):
        mock_client.get.side_effect = [page(), page(("prod", 11)), page()]
        resolver = NetBoxTagResolver(mock_client)

        with pytest.raises(UnknownReferenceError) as exc_info:
            await resolver.resolve(["a", "prod", "b"])

        assert exc_info.value.names == ["a", "b"]
        assert "could not find tag: a, b" in str(exc_info.value)
        mock_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_auto_create(self, mock_client):
        mock_client.get.return_value = page()
        mock_client.post.return_value = {"id": 30, "name": "New Tag", "slug": "new-tag"}
        resolver = NetBoxTagResolver(mock_client, auto_create=True)

        result = await resolver.resolve(["New Tag"])

        assert result == {"New Tag": 30}
        mock_client.post.assert_called_once_with(
            "/api/extras/tags/",
            json_body={"name": "New Tag", "slug": "new-tag"},
        )

    @pytest.mark.asyncio
    async def test_empty(self, mock_client):
        resolver = NetBoxTagResolver(mock_client)

        assert await resolver.resolve([]) == {}
        mock_client.get.assert_not_called()
