"""Treatments: care events such as boluses, carb corrections and temp basals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nsc.domains.glucose.models.wire import compact, optional_float


@dataclass
class Treatment:
    """A single care event recorded in the Nightscout careportal."""

    event_type: str
    created_at: str
    id: str | None = None
    glucose: float | None = None
    glucose_type: str | None = None
    carbs: float | None = None
    insulin: float | None = None
    units: str | None = None
    notes: str | None = None
    entered_by: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Treatment:
        return cls(
            event_type=data["eventType"],
            created_at=data["created_at"],
            id=data.get("_id"),
            glucose=optional_float(data.get("glucose")),
            glucose_type=data.get("glucoseType"),
            carbs=optional_float(data.get("carbs")),
            insulin=optional_float(data.get("insulin")),
            units=data.get("units"),
            notes=data.get("notes"),
            entered_by=data.get("enteredBy"),
        )

    def to_dict(self) -> dict[str, Any]:
        return compact({
            "_id": self.id,
            "eventType": self.event_type,
            "created_at": self.created_at,
            "glucose": self.glucose,
            "glucoseType": self.glucose_type,
            "carbs": self.carbs,
            "insulin": self.insulin,
            "units": self.units,
            "notes": self.notes,
            "enteredBy": self.entered_by,
        })

    @property
    def attribution(self) -> str | None:
        return self.entered_by
