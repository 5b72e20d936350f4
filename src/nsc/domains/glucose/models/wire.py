"""Helpers shared by the payload models' JSON mapping."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable


def compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None (Nightscout treats absent and null alike)."""
    return {key: value for key, value in data.items() if value is not None}


def extras(data: dict[str, Any], known: Iterable[str]) -> dict[str, Any]:
    """Keys of *data* not mapped onto a dataclass field (plugin-specific fields)."""
    known_keys = set(known)
    return {key: value for key, value in data.items() if key not in known_keys}


def optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
