"""Service for the server status document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nsc.core.query.decoding import decode_object
from nsc.core.query.endpoints import ResourceKind, path_for
from nsc.domains.glucose.models.status import Status

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient


class StatusService:
    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    async def get(self) -> Status:
        payload = await self.client.fetch_json(path_for(ResourceKind.STATUS))
        return decode_object(payload, Status)
