"""Service and request builder for aggregated plugin properties."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from nsc.core.query.decoding import decode_object
from nsc.core.query.endpoints import ResourceKind, path_for
from nsc.core.query.spec import to_rfc3339
from nsc.domains.glucose.models.properties import Properties, PropertyType

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient


class PropertiesService:
    def __init__(self, client: NightscoutClient) -> None:
        self.client = client

    def get(self) -> PropertiesRequest:
        """Begin a properties request.

        Example::

            props = await client.properties().get().only(PropertyType.IOB, PropertyType.COB).send()
            if props.iob is not None:
                print(props.iob.iob)
        """
        return PropertiesRequest(self.client)


class PropertiesRequest:
    """Builds one properties request.

    Without ``only()`` the server returns every enabled plugin's property.
    """

    def __init__(self, client: NightscoutClient) -> None:
        self._client = client
        self._requested: list[str] = []
        self._at: datetime | None = None

    def only(self, *properties: PropertyType | str) -> PropertiesRequest:
        """Restrict the response to *properties*. Plain strings pass through for custom plugins."""
        for prop in properties:
            self._requested.append(prop.value if isinstance(prop, PropertyType) else prop)
        return self

    def at(self, moment: datetime) -> PropertiesRequest:
        """Request the system state as of *moment* instead of now."""
        self._at = moment
        return self

    @property
    def path(self) -> str:
        base = path_for(ResourceKind.PROPERTIES)
        if not self._requested:
            return f"{base}.json"
        return f"{base}/{','.join(self._requested)}"

    @property
    def params(self) -> list[tuple[str, str]]:
        return [("time", to_rfc3339(self._at))] if self._at is not None else []

    async def send(self) -> Properties:
        payload = await self._client.fetch_json(self.path, self.params)
        return decode_object(payload, Properties)
