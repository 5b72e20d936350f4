"""Shared test fixtures for the Nightscout connector tests."""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NIGHTSCOUT_URL", "")
    monkeypatch.setenv("NIGHTSCOUT_API_SECRET", "")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from nsc.core.client import NightscoutClient  # noqa: E402

BASE_URL = "https://ns.example.com"


# ---------------------------------------------------------------------------
# Recording fake transport
# ---------------------------------------------------------------------------

@dataclass
class RecordedCall:
    """One request seen by FakeTransport."""

    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None = None

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def params(self) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(urlsplit(self.url).query).items()}

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


@dataclass
class _Route:
    method: str
    path: str
    status: int
    body: bytes
    params: dict[str, str] = field(default_factory=dict)
    times: int | None = None
    error: Exception | None = None


class FakeTransport:
    """Transport double returning canned responses per (method, path).

    Routes are matched in registration order; ``params`` must be a subset of
    the request's query parameters and ``times`` caps how often a route
    answers. Unmatched requests get a 404. Every send yields to the event
    loop a few times so concurrent requests genuinely overlap, and the peak
    number of overlapping requests is kept in ``max_in_flight``.
    """

    def __init__(self, yields: int = 3) -> None:
        self.routes: list[_Route] = []
        self.calls: list[RecordedCall] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._yields = yields

    def add(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        status: int = 200,
        params: dict[str, str] | None = None,
        times: int | None = None,
        error: Exception | None = None,
    ) -> None:
        if isinstance(body, (bytes, str)):
            raw = body.encode() if isinstance(body, str) else body
        else:
            raw = b"" if body is None else json.dumps(body).encode()
        self.routes.append(_Route(method, path, status, raw, params or {}, times, error))

    def calls_for(self, method: str, path: str | None = None) -> list[RecordedCall]:
        return [
            c for c in self.calls
            if c.method == method and (path is None or c.path == path)
        ]

    async def send(self, method, url, body=None, headers=None):
        call = RecordedCall(method=method, url=url, headers=dict(headers or {}), body=body)
        self.calls.append(call)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            for _ in range(self._yields):
                await asyncio.sleep(0)
            route = self._match(call)
            if route is None:
                return 404, b"Not Found"
            if route.error is not None:
                raise route.error
            return route.status, route.body
        finally:
            self.in_flight -= 1

    def _match(self, call: RecordedCall) -> _Route | None:
        params = call.params
        for route in self.routes:
            if route.method != call.method or route.path != call.path:
                continue
            if any(params.get(k) != v for k, v in route.params.items()):
                continue
            if route.times is not None:
                if route.times <= 0:
                    continue
                route.times -= 1
            return route
        return None

    async def aclose(self) -> None:
        self.closed = True


def _sgv_payload(item_id: str = "1", sgv: int = 120, device: str | None = "xDrip", **extra: Any) -> dict:
    item = {
        "_id": item_id,
        "sgv": sgv,
        "date": 1698393600000,
        "dateString": "2023-10-27T10:00:00Z",
        "direction": "Flat",
        "type": "sgv",
    }
    if device is not None:
        item["device"] = device
    item.update(extra)
    return item


@pytest.fixture
def make_sgv():
    """Factory for SGV entry payloads as Nightscout returns them."""
    return _sgv_payload


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> NightscoutClient:
    """Client for BASE_URL backed by the fake transport, with a test secret."""
    return NightscoutClient(BASE_URL, "test-secret-123", transport=transport)
