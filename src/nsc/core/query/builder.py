"""Fluent query builder for Nightscout collections.

Usage::

    readings = await (
        client.sgv()
        .get()
        .from_date(datetime.now(timezone.utc) - timedelta(hours=3))
        .limit(36)
        .device(AUTO)
        .send()
    )

A builder is bound to one collection and one verb when a service hands it
out. Configuration calls refine an immutable ``QuerySpec``; ``send()``
consumes the builder exactly once.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Generic, TypeVar

from nsc.core.query.attribution import AttributionMode, Named
from nsc.core.query.diagnostics import Diagnostics
from nsc.core.query.endpoints import ResourceKind, date_field_for
from nsc.core.query.executor import execute
from nsc.core.query.spec import QuerySpec

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient

T = TypeVar("T")


class QueryBuilder(Generic[T]):
    """Builds and executes one GET or DELETE against a collection."""

    def __init__(
        self,
        client: NightscoutClient,
        kind: ResourceKind,
        model: type[T],
        method: str = "GET",
    ) -> None:
        self._client = client
        self._model = model
        self._method = method
        self._spec = QuerySpec(kind=kind, date_field=date_field_for(kind))
        self._diagnostics: Diagnostics | None = None
        self._consumed = False

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    @property
    def method(self) -> str:
        return self._method

    def from_date(self, moment: datetime) -> QueryBuilder[T]:
        """Only include items dated at or after *moment*."""
        self._spec = replace(self._spec, from_date=moment)
        return self

    def to_date(self, moment: datetime) -> QueryBuilder[T]:
        """Only include items dated at or before *moment*."""
        self._spec = replace(self._spec, to_date=moment)
        return self

    def limit(self, count: int) -> QueryBuilder[T]:
        """Return at most *count* items (default 10)."""
        if count < 1:
            raise ValueError(f"limit must be positive, got {count}")
        self._spec = replace(self._spec, count=count)
        return self

    def id(self, item_id: str) -> QueryBuilder[T]:
        """Address a single item; bounds, limit and device are then ignored."""
        self._spec = replace(self._spec, item_id=str(item_id))
        return self

    def device(self, mode: AttributionMode | str) -> QueryBuilder[T]:
        """Filter by uploader device. A plain string means ``Named(string)``."""
        if isinstance(mode, str):
            mode = Named(mode)
        self._spec = replace(self._spec, device=mode)
        return self

    def date_field(self, name: str) -> QueryBuilder[T]:
        """Override the field time bounds are matched against."""
        self._spec = replace(self._spec, date_field=name)
        return self

    def diagnostics(self, callback: Diagnostics) -> QueryBuilder[T]:
        """Observe locally recovered failures (probe degradation, failed deletes)."""
        self._diagnostics = callback
        return self

    async def send(self) -> list[T]:
        """Execute the query. A builder can only be sent once."""
        if self._consumed:
            raise RuntimeError("Query has already been executed; build a new one")
        self._consumed = True
        spec = self._spec
        if spec.item_id is None:
            spec.validate()
        return await execute(self._client, spec, self._method, self._model, self._diagnostics)

    def __await__(self):
        return self.send().__await__()

    def __repr__(self) -> str:
        return f"QueryBuilder({self._method} {self._spec!r})"
