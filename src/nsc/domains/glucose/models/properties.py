"""Aggregated plugin properties (``/api/v2/properties``).

Nightscout computes these server-side: current glucose and delta, insulin
and carbs on board, basal, uploader battery and so on. Only the plugins a
site has enabled appear in a response, so every section is optional.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from nsc.domains.glucose.models.treatments import Treatment
from nsc.domains.glucose.models.wire import extras, optional_float


class PropertyType(str, Enum):
    """Property names accepted by ``PropertiesRequest.only``."""

    IOB = "iob"
    COB = "cob"
    PUMP = "pump"
    BASAL = "basal"
    PROFILE = "profile"
    BAGE = "bage"
    CAGE = "cage"
    IAGE = "iage"
    SAGE = "sage"
    UPBAT = "upbat"
    RAWBG = "rawbg"
    DELTA = "delta"
    DIRECTION = "direction"
    AR2 = "ar2"
    DEVICESTATUS = "devicestatus"
    OPENAPS = "openaps"
    LOOP = "loop"
    BGNOW = "bgnow"
    BUCKETS = "buckets"
    DBSIZE = "dbsize"
    RUNTIMESTATE = "runtimestate"


@dataclass
class PropertySgv:
    """The compact SGV shape embedded in ``bgnow`` and ``buckets``."""

    mgdl: float
    mills: int
    id: str | None = None
    device: str | None = None
    direction: str | None = None
    type: str | None = None
    scaled: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PropertySgv:
        return cls(
            mgdl=float(data["mgdl"]),
            mills=int(data["mills"]),
            id=data.get("_id"),
            device=data.get("device"),
            direction=data.get("direction"),
            type=data.get("type"),
            scaled=optional_float(data.get("scaled")),
        )


def _sgvs(data: dict[str, Any]) -> list[PropertySgv]:
    return [PropertySgv.from_dict(item) for item in data.get("sgvs") or []]


@dataclass
class BgNow:
    mean: float
    last: float
    mills: int
    sgvs: list[PropertySgv] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BgNow:
        return cls(
            mean=float(data["mean"]),
            last=float(data["last"]),
            mills=int(data["mills"]),
            sgvs=_sgvs(data),
        )


@dataclass
class Bucket:
    """Readings grouped into a five-minute window."""

    mean: float
    last: float
    mills: int
    index: int
    from_mills: int
    to_mills: int
    sgvs: list[PropertySgv] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bucket:
        return cls(
            mean=float(data["mean"]),
            last=float(data["last"]),
            mills=int(data["mills"]),
            index=int(data["index"]),
            from_mills=int(data["fromMills"]),
            to_mills=int(data["toMills"]),
            sgvs=_sgvs(data),
        )


@dataclass
class Delta:
    absolute: float
    elapsed_mins: float
    interpolated: bool
    mean_5_mins_ago: float
    mgdl: float
    scaled: float
    display: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Delta:
        return cls(
            absolute=float(data["absolute"]),
            elapsed_mins=float(data["elapsedMins"]),
            interpolated=bool(data["interpolated"]),
            mean_5_mins_ago=float(data["mean5MinsAgo"]),
            mgdl=float(data["mgdl"]),
            scaled=float(data["scaled"]),
            display=data.get("display", ""),
        )


@dataclass
class Direction:
    value: str
    label: str
    entity: str
    display: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Direction:
        return cls(
            value=data["value"],
            label=data.get("label", ""),
            entity=data.get("entity", ""),
            display=data.get("display"),
        )


@dataclass
class IobProperty:
    """Insulin on board, in units."""

    iob: float
    activity: float | None = None
    source: str = ""
    display: str = ""
    display_line: str = ""
    last_bolus: Treatment | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IobProperty:
        last_bolus = data.get("lastBolus")
        return cls(
            iob=float(data["iob"]),
            activity=optional_float(data.get("activity")),
            source=data.get("source", ""),
            display=data.get("display", ""),
            display_line=data.get("displayLine", ""),
            last_bolus=Treatment.from_dict(last_bolus) if last_bolus else None,
        )


@dataclass
class Cob:
    """Carbs on board, in grams."""

    cob: float
    is_decaying: int | None = None
    decayed_by: str | None = None
    source: str = ""
    display: Any = None
    display_line: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Cob:
        return cls(
            cob=float(data["cob"]),
            is_decaying=data.get("isDecaying"),
            decayed_by=data.get("decayedBy"),
            source=data.get("source", ""),
            display=data.get("display"),
            display_line=data.get("displayLine", ""),
        )


@dataclass
class Basal:
    display: str
    current_basal: float | None = None
    temp_basal: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Basal:
        current = data.get("current") or {}
        return cls(
            display=data.get("display", ""),
            current_basal=optional_float(current.get("basal")),
            temp_basal=optional_float(current.get("tempbasal")),
        )


@dataclass
class Upbat:
    """Uploader battery. ``devices`` is a map on some sites and empty on others."""

    display: str
    devices: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Upbat:
        return cls(display=data.get("display", ""), devices=data.get("devices"))


@dataclass
class DbSize:
    display: str
    status: str
    total_data_size: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DbSize:
        return cls(
            display=data.get("display", ""),
            status=data.get("status", ""),
            total_data_size=float(data["totalDataSize"]),
        )


@dataclass
class RuntimeState:
    state: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuntimeState:
        return cls(state=data["state"])


_SECTIONS: dict[str, Any] = {
    "bgnow": BgNow,
    "delta": Delta,
    "direction": Direction,
    "iob": IobProperty,
    "cob": Cob,
    "basal": Basal,
    "upbat": Upbat,
    "dbsize": DbSize,
    "runtimestate": RuntimeState,
}


@dataclass
class Properties:
    """The properties response. Sections without a typed model stay in ``unknown``."""

    bgnow: BgNow | None = None
    buckets: list[Bucket] | None = None
    delta: Delta | None = None
    direction: Direction | None = None
    iob: IobProperty | None = None
    cob: Cob | None = None
    basal: Basal | None = None
    upbat: Upbat | None = None
    dbsize: DbSize | None = None
    runtimestate: RuntimeState | None = None
    unknown: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Properties:
        sections = {
            name: model.from_dict(data[name])
            for name, model in _SECTIONS.items()
            if data.get(name)
        }
        buckets = data.get("buckets")
        return cls(
            **sections,
            buckets=[Bucket.from_dict(b) for b in buckets] if buckets else None,
            unknown=extras(data, [*_SECTIONS, "buckets"]),
        )
