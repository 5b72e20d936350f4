"""Treatment profiles: basal rates, carb ratios, sensitivities and targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nsc.domains.glucose.models.wire import optional_float


@dataclass
class TimeSchedule:
    """A value that takes effect at a time of day (``HH:MM``)."""

    time: str
    value: float
    time_as_seconds: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeSchedule:
        seconds = data.get("timeAsSeconds")
        return cls(
            time=data["time"],
            value=float(data["value"]),
            time_as_seconds=None if seconds is None else int(seconds),
        )


def _schedules(data: dict[str, Any], key: str) -> list[TimeSchedule]:
    return [TimeSchedule.from_dict(item) for item in data.get(key) or []]


@dataclass
class ProfileConfig:
    """One named profile inside a profile set."""

    dia: float
    timezone: str
    units: str
    carbratio: list[TimeSchedule] = field(default_factory=list)
    sens: list[TimeSchedule] = field(default_factory=list)
    basal: list[TimeSchedule] = field(default_factory=list)
    target_low: list[TimeSchedule] = field(default_factory=list)
    target_high: list[TimeSchedule] = field(default_factory=list)
    carbs_hr: float | None = None
    delay: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfileConfig:
        return cls(
            dia=float(data["dia"]),
            timezone=data.get("timezone", "UTC"),
            units=data.get("units", ""),
            carbratio=_schedules(data, "carbratio"),
            sens=_schedules(data, "sens"),
            basal=_schedules(data, "basal"),
            target_low=_schedules(data, "target_low"),
            target_high=_schedules(data, "target_high"),
            carbs_hr=optional_float(data.get("carbs_hr")),
            delay=optional_float(data.get("delay")),
        )


@dataclass
class ProfileSet:
    """A stored set of profiles, one of which is the default."""

    id: str
    default_profile: str
    start_date: str
    store: dict[str, ProfileConfig] = field(default_factory=dict)
    mills: int | None = None
    units: str | None = None
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfileSet:
        mills = data.get("mills")
        return cls(
            id=data["_id"],
            default_profile=data["defaultProfile"],
            start_date=data["startDate"],
            store={name: ProfileConfig.from_dict(cfg) for name, cfg in data["store"].items()},
            mills=None if mills is None else int(mills),
            units=data.get("units"),
            created_at=data.get("created_at", ""),
        )

    @property
    def active(self) -> ProfileConfig | None:
        """The default profile's configuration, if present in the store."""
        return self.store.get(self.default_profile)
