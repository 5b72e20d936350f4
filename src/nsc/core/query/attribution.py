"""Device attribution: which uploader a query's results should come from.

Nightscout items carry a free-text source tag (the ``device`` of an entry,
the ``enteredBy`` of a treatment). A query filters on it in one of three
mutually exclusive modes:

* ``All``          no filter
* ``Named(name)``  exact match on *name*
* ``Auto``         probe the collection for its most recent item and filter
                   on whatever device produced it

Auto-detection is best effort. A failed or empty probe degrades to "no
filter" and never aborts the outer query; callers that care can observe the
degradation through a diagnostics callback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol, Sequence, Union

from nsc.core.errors import NightscoutError
from nsc.core.query.diagnostics import (
    PROBE_EMPTY,
    PROBE_FAILED,
    PROBE_NO_ATTRIBUTION,
    Diagnostics,
    emit,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class All:
    """Return items from every device."""


@dataclass(frozen=True)
class Named:
    """Return only items attributed to *name*."""

    name: str


@dataclass(frozen=True)
class Auto:
    """Detect the device from the newest item and filter on it."""


AttributionMode = Union[All, Named, Auto]

ALL = All()
AUTO = Auto()


class HasAttribution(Protocol):
    """Payload models usable with ``Auto`` attribution."""

    @property
    def attribution(self) -> str | None: ...


async def resolve_attribution(
    mode: AttributionMode,
    probe: Callable[[], Awaitable[Sequence[HasAttribution]]],
    diagnostics: Diagnostics | None = None,
) -> str | None:
    """Turn an attribution mode into a concrete ``find[device]`` value.

    Args:
        mode: The query's attribution mode.
        probe: Coroutine factory fetching at most one item with the query's
            time bounds and no attribution filter. Only awaited for ``Auto``.
        diagnostics: Optional observer for probe degradation.

    Returns:
        The device name to filter on, or None for no filter.
    """
    if isinstance(mode, All):
        return None
    if isinstance(mode, Named):
        return mode.name
    if not isinstance(mode, Auto):
        raise TypeError(f"Unknown attribution mode: {mode!r}")

    try:
        items = await probe()
    except NightscoutError as exc:
        logger.warning("Device auto-detection probe failed, querying all devices: %s", exc)
        emit(diagnostics, PROBE_FAILED, error=exc)
        return None

    if not items:
        logger.info("Device auto-detection found no items, querying all devices")
        emit(diagnostics, PROBE_EMPTY)
        return None

    device = items[0].attribution
    if not device:
        logger.info("Newest item carries no device, querying all devices")
        emit(diagnostics, PROBE_NO_ATTRIBUTION)
        return None

    logger.info("Auto-detected device %r", device)
    return device
