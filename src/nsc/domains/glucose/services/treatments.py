"""Service for treatments (care events)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nsc.core.query.builder import QueryBuilder
from nsc.core.query.decoding import decode_items
from nsc.core.query.endpoints import ResourceKind, path_for
from nsc.domains.glucose.models.treatments import Treatment

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient


class TreatmentsService:
    """Boluses, carb entries, temp basals and other careportal events.

    Time bounds match ``created_at``. Device filters are sent as
    ``find[device]`` like every other collection; ``Auto`` detection reads
    the newest treatment's ``enteredBy`` and filters on that value.
    """

    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    def get(self) -> QueryBuilder[Treatment]:
        return QueryBuilder(self.client, ResourceKind.TREATMENTS, Treatment, "GET")

    def delete(self) -> QueryBuilder[Treatment]:
        return QueryBuilder(self.client, ResourceKind.TREATMENTS, Treatment, "DELETE")

    async def create(self, treatments: list[Treatment]) -> list[Treatment]:
        """Upload treatments and return them as stored by the server."""
        payload = await self.client.post_json(
            path_for(ResourceKind.TREATMENTS), [t.to_dict() for t in treatments]
        )
        return decode_items(payload, Treatment)
