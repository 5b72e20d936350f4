"""Immutable description of one collection query."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from nsc.core.query.attribution import ALL, AttributionMode
from nsc.core.query.endpoints import DEFAULT_DATE_FIELD, ResourceKind

DEFAULT_LIMIT = 10


def as_utc(moment: datetime) -> datetime:
    """Normalize *moment* to UTC. Naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_rfc3339(moment: datetime) -> str:
    return as_utc(moment).isoformat()


@dataclass(frozen=True)
class QuerySpec:
    """Everything needed to turn a query into a request URL.

    When ``item_id`` is set the query addresses a single item and the range,
    limit and device fields are ignored.
    """

    kind: ResourceKind
    from_date: datetime | None = None
    to_date: datetime | None = None
    count: int = DEFAULT_LIMIT
    item_id: str | None = None
    device: AttributionMode = ALL
    date_field: str = DEFAULT_DATE_FIELD

    def list_params(self, device: str | None = None) -> list[tuple[str, str]]:
        """Query parameters for a list fetch, given the resolved device."""
        params = [("count", str(self.count))]
        if self.from_date is not None:
            params.append((f"find[{self.date_field}][$gte]", to_rfc3339(self.from_date)))
        if self.to_date is not None:
            params.append((f"find[{self.date_field}][$lte]", to_rfc3339(self.to_date)))
        if device is not None:
            params.append(("find[device]", device))
        return params

    def probe(self) -> QuerySpec:
        """The one-item, unfiltered variant used for device auto-detection."""
        return replace(self, count=1, device=ALL, item_id=None)

    def validate(self) -> None:
        """Reject specs that can never match anything sensible."""
        if self.count < 1:
            raise ValueError(f"limit must be positive, got {self.count}")
        if self.from_date is not None and self.to_date is not None:
            if as_utc(self.from_date) > as_utc(self.to_date):
                raise ValueError("from_date must not be later than to_date")
