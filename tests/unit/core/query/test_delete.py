"""Tests for single-item delete and bulk delete-by-query."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import pytest

from nsc.core.errors import ApiError, AuthenticationError
from nsc.core.query.attribution import AUTO
from nsc.core.query.diagnostics import DELETE_FAILED
from nsc.core.query.bulk_delete import MAX_CONCURRENT_DELETES, delete_matching
from nsc.core.query.endpoints import ResourceKind
from nsc.domains.glucose.models.entries import SgvEntry

SGV_PATH = "/api/v2/entries/sgv.json"
TREATMENTS_PATH = "/api/v2/treatments.json"


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class TestDeleteById:
    def test_returns_item_fetched_before_delete(self, client, transport, make_sgv):
        item = make_sgv(item_id="test-id-123", sgv=100)
        transport.add("GET", f"{SGV_PATH}/test-id-123", [item])
        transport.add("DELETE", f"{SGV_PATH}/test-id-123", status=200)

        result = _run(client.sgv().delete().id("test-id-123").send())

        assert [c.method for c in transport.calls] == ["GET", "DELETE"]
        assert transport.calls[0].url == transport.calls[1].url
        assert result[0].to_dict() == SgvEntry.from_dict(item).to_dict()

    def test_failed_fetch_skips_delete(self, client, transport):
        transport.add("GET", f"{SGV_PATH}/x", "server error", status=500)
        transport.add("DELETE", f"{SGV_PATH}/x", status=200)

        with pytest.raises(ApiError):
            _run(client.sgv().delete().id("x").send())

        assert transport.calls_for("DELETE") == []

    def test_failed_delete_propagates(self, client, transport, make_sgv):
        transport.add("GET", f"{SGV_PATH}/x", [make_sgv(item_id="x")])
        transport.add("DELETE", f"{SGV_PATH}/x", "nope", status=401)

        with pytest.raises(AuthenticationError):
            _run(client.sgv().delete().id("x").send())

    def test_id_is_path_escaped(self, client, transport):
        transport.add("GET", f"{SGV_PATH}/a%2Fb", [])
        transport.add("DELETE", f"{SGV_PATH}/a%2Fb")
        _run(client.sgv().delete().id("a/b").send())
        assert transport.calls[1].url.endswith("/sgv.json/a%2Fb")


class TestBulkDelete:
    def test_deletes_every_matched_item(self, client, transport, make_sgv):
        items = [make_sgv(item_id=f"id{i}", sgv=100 + i) for i in range(25)]
        transport.add("GET", SGV_PATH, items)
        for i in range(25):
            transport.add("DELETE", f"{SGV_PATH}/id{i}")

        result = _run(client.sgv().delete().limit(25).send())

        deletes = transport.calls_for("DELETE")
        assert len(deletes) == 25
        assert {c.path for c in deletes} == {f"{SGV_PATH}/id{i}" for i in range(25)}
        assert [r.sgv for r in result] == [100 + i for i in range(25)]
        assert [r.to_dict() for r in result] == [SgvEntry.from_dict(i).to_dict() for i in items]

    def test_concurrency_is_bounded(self, client, transport, make_sgv):
        transport.add("GET", SGV_PATH, [make_sgv(item_id=f"id{i}") for i in range(40)])
        for i in range(40):
            transport.add("DELETE", f"{SGV_PATH}/id{i}")

        _run(client.sgv().delete().limit(40).send())

        assert MAX_CONCURRENT_DELETES == 10
        assert 1 < transport.max_in_flight <= MAX_CONCURRENT_DELETES

    def test_fetch_precedes_deletes(self, client, transport, make_sgv):
        transport.add("GET", SGV_PATH, [make_sgv(item_id="a"), make_sgv(item_id="b")])
        transport.add("DELETE", f"{SGV_PATH}/a")
        transport.add("DELETE", f"{SGV_PATH}/b")

        _run(client.sgv().delete().send())

        assert transport.calls[0].method == "GET"
        assert transport.calls[0].params["count"] == "10"
        assert all(c.method == "DELETE" for c in transport.calls[1:])

    def test_items_without_id_are_skipped(self, client, transport, make_sgv):
        no_id = make_sgv()
        del no_id["_id"]
        transport.add("GET", SGV_PATH, [make_sgv(item_id="a"), no_id])
        transport.add("DELETE", f"{SGV_PATH}/a")

        result = _run(client.sgv().delete().send())

        assert len(transport.calls_for("DELETE")) == 1
        assert len(result) == 2

    def test_partial_failure_returns_full_snapshot(self, client, transport, make_sgv):
        transport.add("GET", SGV_PATH, [make_sgv(item_id=i) for i in ("a", "b", "c")])
        transport.add("DELETE", f"{SGV_PATH}/a")
        transport.add("DELETE", f"{SGV_PATH}/b", "server error", status=500)
        transport.add("DELETE", f"{SGV_PATH}/c")
        events = []

        result = _run(client.sgv().delete().diagnostics(events.append).send())

        assert [r.id for r in result] == ["a", "b", "c"]
        assert len(transport.calls_for("DELETE")) == 3
        assert [e.kind for e in events] == [DELETE_FAILED]
        assert events[0].detail["url"].endswith("/sgv.json/b")
        assert isinstance(events[0].detail["error"], ApiError)

    def test_failed_fetch_propagates(self, client, transport):
        transport.add("GET", SGV_PATH, "denied", status=401)
        with pytest.raises(AuthenticationError):
            _run(client.sgv().delete().send())
        assert transport.calls_for("DELETE") == []

    def test_range_and_device_scope_the_fetch(self, client, transport):
        lo = datetime(2023, 10, 27, 8, 0, tzinfo=timezone.utc)
        transport.add("GET", TREATMENTS_PATH, [])

        result = _run(client.treatments().delete().from_date(lo).device("Loop").send())

        assert result == []
        params = transport.calls[0].params
        assert params["find[created_at][$gte]"] == lo.isoformat()
        assert params["find[device]"] == "Loop"

    def test_auto_device_probes_before_fetch(self, client, transport, make_sgv):
        transport.add("GET", SGV_PATH, [make_sgv(item_id="p", device="Dex")], params={"count": "1"}, times=1)
        transport.add("GET", SGV_PATH, [make_sgv(item_id="a", device="Dex")], params={"find[device]": "Dex"})
        transport.add("DELETE", f"{SGV_PATH}/a")

        result = _run(client.sgv().delete().device(AUTO).send())

        assert [c.method for c in transport.calls] == ["GET", "GET", "DELETE"]
        assert [r.id for r in result] == ["a"]

    def test_unexpected_errors_are_not_swallowed(self, client, make_sgv):
        class _Exploding:
            async def send(self, method, url, body=None, headers=None):
                if method == "GET":
                    return 200, json.dumps([make_sgv(item_id="a")]).encode()
                raise ZeroDivisionError

            async def aclose(self):
                pass

        client.transport = _Exploding()
        url = client.url_for("api/v2/entries/sgv.json", [("count", "10")])
        with pytest.raises(ZeroDivisionError):
            _run(delete_matching(client, ResourceKind.SGV, url, SgvEntry))
