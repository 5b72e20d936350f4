"""Services for glucose entries (sensor and meter readings)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nsc.core.errors import NotFoundError
from nsc.core.query.builder import QueryBuilder
from nsc.core.query.decoding import decode_items
from nsc.core.query.endpoints import ResourceKind, path_for
from nsc.domains.glucose.models.entries import MbgEntry, SgvEntry

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient


class SgvService:
    """CGM sensor glucose values."""

    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    def get(self) -> QueryBuilder[SgvEntry]:
        """Start a query for sensor readings.

        Example::

            entries = await (
                client.sgv().get()
                .from_date(now - timedelta(hours=24))
                .to_date(now - timedelta(hours=20))
                .limit(10)
                .send()
            )
        """
        return QueryBuilder(self.client, ResourceKind.SGV, SgvEntry, "GET")

    def delete(self) -> QueryBuilder[SgvEntry]:
        """Start a delete; scope it with ``id()`` or with bounds/limit/device."""
        return QueryBuilder(self.client, ResourceKind.SGV, SgvEntry, "DELETE")

    async def latest(self) -> SgvEntry:
        """Fetch the most recent sensor reading.

        Raises:
            NotFoundError: If the site has no readings.
        """
        payload = await self.client.fetch_json(path_for(ResourceKind.CURRENT))
        entries = decode_items(payload, SgvEntry)
        if not entries:
            raise NotFoundError("No data found")
        return entries[0]

    async def create(self, entries: list[SgvEntry]) -> list[SgvEntry]:
        """Upload readings and return them as stored by the server."""
        payload = await self.client.post_json(
            path_for(ResourceKind.ENTRIES), [entry.to_dict() for entry in entries]
        )
        return decode_items(payload, SgvEntry)


class MbgService:
    """Meter (fingerstick) glucose values."""

    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    def get(self) -> QueryBuilder[MbgEntry]:
        return QueryBuilder(self.client, ResourceKind.MBG, MbgEntry, "GET")

    def delete(self) -> QueryBuilder[MbgEntry]:
        return QueryBuilder(self.client, ResourceKind.MBG, MbgEntry, "DELETE")

    async def latest(self) -> MbgEntry:
        """Fetch the most recent meter reading.

        Raises:
            NotFoundError: If no meter readings exist.
        """
        entries = await self.get().limit(1).send()
        if not entries:
            raise NotFoundError("No data found")
        return entries[0]

    async def create(self, entries: list[MbgEntry]) -> list[MbgEntry]:
        payload = await self.client.post_json(
            path_for(ResourceKind.ENTRIES), [entry.to_dict() for entry in entries]
        )
        return decode_items(payload, MbgEntry)
