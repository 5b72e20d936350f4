"""Structural decoding of Nightscout JSON bodies into payload models."""

from __future__ import annotations

import json
from typing import Any, Protocol, TypeVar

from nsc.core.errors import DeserializationError

T = TypeVar("T", bound="Decodable")


class Decodable(Protocol):
    """A payload model that can be built from one decoded JSON object."""

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T: ...


def decode_json(content: bytes) -> Any:
    """Parse a response body, raising DeserializationError on invalid JSON."""
    try:
        return json.loads(content)
    except (ValueError, UnicodeDecodeError) as exc:
        raise DeserializationError(f"Failed to parse JSON response: {exc}") from exc


def decode_object(payload: Any, model: type[T]) -> T:
    """Build one *model* instance from a decoded JSON object."""
    if not isinstance(payload, dict):
        raise DeserializationError(
            f"Expected JSON object for {model.__name__}, got {type(payload).__name__}"
        )
    try:
        return model.from_dict(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise DeserializationError(f"Invalid {model.__name__} payload: {exc!r}") from exc


def decode_array(payload: Any) -> list[Any]:
    """Return *payload* if it is a JSON array, else raise DeserializationError."""
    if not isinstance(payload, list):
        raise DeserializationError(f"Expected JSON array, got {type(payload).__name__}")
    return payload


def decode_items(payload: Any, model: type[T]) -> list[T]:
    """Build a list of *model* instances from a decoded JSON array."""
    return [decode_object(item, model) for item in decode_array(payload)]
