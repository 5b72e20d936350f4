"""Service for device status snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nsc.core.query.builder import QueryBuilder
from nsc.core.query.decoding import decode_items
from nsc.core.query.endpoints import ResourceKind, path_for
from nsc.domains.glucose.models.devicestatus import DeviceStatus

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient


class DeviceStatusService:
    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    def get(self) -> QueryBuilder[DeviceStatus]:
        return QueryBuilder(self.client, ResourceKind.DEVICE_STATUS, DeviceStatus, "GET")

    def delete(self) -> QueryBuilder[DeviceStatus]:
        return QueryBuilder(self.client, ResourceKind.DEVICE_STATUS, DeviceStatus, "DELETE")

    async def create(self, entries: list[DeviceStatus]) -> list[DeviceStatus]:
        payload = await self.client.post_json(
            path_for(ResourceKind.DEVICE_STATUS), [e.to_dict() for e in entries]
        )
        return decode_items(payload, DeviceStatus)
