"""Device status snapshots posted by uploaders, pumps and closed-loop systems."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nsc.domains.glucose.models.wire import compact, extras

_KNOWN_KEYS = ("_id", "device", "created_at", "pump", "openaps", "loop", "uploader")


@dataclass
class DeviceStatus:
    """One uploader snapshot.

    Pump, loop and uploader sections vary by system and are kept as raw
    JSON; unrecognised top-level keys land in ``extra``.
    """

    created_at: str
    id: str | None = None
    device: str | None = None
    pump: dict[str, Any] | None = None
    openaps: dict[str, Any] | None = None
    loop: dict[str, Any] | None = None
    uploader: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceStatus:
        return cls(
            created_at=data["created_at"],
            id=data.get("_id"),
            device=data.get("device"),
            pump=data.get("pump"),
            openaps=data.get("openaps"),
            loop=data.get("loop"),
            uploader=data.get("uploader"),
            extra=extras(data, _KNOWN_KEYS),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            **compact({
                "_id": self.id,
                "device": self.device,
                "created_at": self.created_at,
                "pump": self.pump,
                "openaps": self.openaps,
                "loop": self.loop,
                "uploader": self.uploader,
            }),
        }

    @property
    def attribution(self) -> str | None:
        return self.device
