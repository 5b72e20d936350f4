"""Service for treatment profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nsc.core.query.decoding import decode_items
from nsc.core.query.endpoints import ResourceKind, path_for
from nsc.domains.glucose.models.profile import ProfileSet

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient


class ProfileService:
    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    async def get(self) -> list[ProfileSet]:
        """Fetch every stored profile set."""
        payload = await self.client.fetch_json(path_for(ResourceKind.PROFILE))
        return decode_items(payload, ProfileSet)
