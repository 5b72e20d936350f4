"""Glucose entries: CGM sensor readings (SGV) and meter readings (MBG)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from nsc.domains.glucose.models.trends import Trend
from nsc.domains.glucose.models.wire import compact, epoch_millis, utc_now

DEFAULT_DEVICE = "nsc"


@dataclass
class SgvEntry:
    """A sensor glucose value uploaded by a CGM, in mg/dL."""

    sgv: int
    date: int  # epoch milliseconds
    date_string: str
    direction: Trend = Trend.NONE
    type: str = "sgv"
    id: str | None = None
    device: str | None = None
    noise: int | None = None

    @classmethod
    def new(
        cls,
        sgv: int,
        direction: Trend,
        at: datetime | None = None,
        device: str = DEFAULT_DEVICE,
    ) -> SgvEntry:
        """Create a reading ready for upload, stamped at *at* (default: now)."""
        at = at or utc_now()
        return cls(
            sgv=sgv,
            date=epoch_millis(at),
            date_string=at.isoformat(),
            direction=direction,
            device=device,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SgvEntry:
        return cls(
            sgv=int(data["sgv"]),
            date=int(data["date"]),
            date_string=data["dateString"],
            direction=Trend(data.get("direction") or Trend.NONE.value),
            type=data.get("type", "sgv"),
            id=data.get("_id"),
            device=data.get("device"),
            noise=data.get("noise"),
        )

    def to_dict(self) -> dict[str, Any]:
        return compact({
            "_id": self.id,
            "sgv": self.sgv,
            "date": self.date,
            "dateString": self.date_string,
            "direction": self.direction.value,
            "type": self.type,
            "device": self.device,
            "noise": self.noise,
        })

    @property
    def attribution(self) -> str | None:
        return self.device


@dataclass
class MbgEntry:
    """A meter (fingerstick) blood glucose value entered by the user, in mg/dL."""

    mbg: float
    date: int
    date_string: str
    type: str = "mbg"
    id: str | None = None
    device: str | None = None

    @classmethod
    def new(
        cls,
        mbg: float,
        at: datetime | None = None,
        device: str = DEFAULT_DEVICE,
    ) -> MbgEntry:
        at = at or utc_now()
        return cls(mbg=mbg, date=epoch_millis(at), date_string=at.isoformat(), device=device)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MbgEntry:
        return cls(
            mbg=float(data["mbg"]),
            date=int(data["date"]),
            date_string=data["dateString"],
            type=data.get("type", "mbg"),
            id=data.get("_id"),
            device=data.get("device"),
        )

    def to_dict(self) -> dict[str, Any]:
        return compact({
            "_id": self.id,
            "mbg": self.mbg,
            "date": self.date,
            "dateString": self.date_string,
            "type": self.type,
            "device": self.device,
        })

    @property
    def attribution(self) -> str | None:
        return self.device
