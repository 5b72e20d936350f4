"""Endpoint registry: the only place that knows Nightscout wire paths."""

from __future__ import annotations

from enum import Enum
from urllib.parse import quote


class ResourceKind(str, Enum):
    """Collections exposed by the Nightscout REST API."""

    ENTRIES = "entries"
    CURRENT = "current"
    SGV = "sgv"
    MBG = "mbg"
    TREATMENTS = "treatments"
    DEVICE_STATUS = "devicestatus"
    PROFILE = "profile"
    STATUS = "status"
    PROPERTIES = "properties"


_PATHS: dict[ResourceKind, str] = {
    ResourceKind.ENTRIES: "api/v2/entries.json",
    ResourceKind.CURRENT: "api/v2/entries/current.json",
    ResourceKind.SGV: "api/v2/entries/sgv.json",
    ResourceKind.MBG: "api/v2/entries/mbg.json",
    ResourceKind.TREATMENTS: "api/v2/treatments.json",
    ResourceKind.DEVICE_STATUS: "api/v2/devicestatus.json",
    ResourceKind.PROFILE: "api/v2/profile.json",
    ResourceKind.STATUS: "api/v2/status.json",
    ResourceKind.PROPERTIES: "api/v2/properties",
}

# Server-side filter key for time-bounded queries. Entries are stamped with
# ``dateString``; care events and uploader snapshots with ``created_at``.
DEFAULT_DATE_FIELD = "dateString"

_DATE_FIELDS: dict[ResourceKind, str] = {
    ResourceKind.TREATMENTS: "created_at",
    ResourceKind.DEVICE_STATUS: "created_at",
}


def path_for(kind: ResourceKind) -> str:
    """Return the collection path for *kind* (relative to the site root)."""
    return _PATHS[kind]


def path_with_id(kind: ResourceKind, item_id: str) -> str:
    """Return the path addressing a single item of *kind*."""
    return f"{_PATHS[kind]}/{quote(item_id, safe='')}"


def date_field_for(kind: ResourceKind) -> str:
    """Return the date field a time-bounded query on *kind* filters against."""
    return _DATE_FIELDS.get(kind, DEFAULT_DATE_FIELD)
