"""Tests for NightscoutClient request plumbing and error mapping."""

from __future__ import annotations

import asyncio
import hashlib

import pytest

from nsc.core.client import NightscoutClient
from nsc.core.config.settings import Settings
from nsc.core.errors import (
    ApiError,
    AuthenticationError,
    InvalidUrlError,
    NightscoutError,
    TransportError,
)
from nsc.core.http.auth import API_SECRET_HEADER

SGV_PATH = "/api/v2/entries/sgv.json"


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class TestConstruction:
    @pytest.mark.parametrize("url", ["", "not a url", "ftp://ns.example.com", "https://"])
    def test_rejects_malformed_base_url(self, url, transport):
        with pytest.raises(InvalidUrlError):
            NightscoutClient(url, transport=transport)

    def test_base_url_gets_trailing_slash(self, transport):
        ns = NightscoutClient("https://ns.example.com/site", transport=transport)
        assert ns.url_for("api/v2/status.json") == "https://ns.example.com/site/api/v2/status.json"

    def test_url_for_encodes_params(self, client):
        url = client.url_for("api/v2/entries/sgv.json", [("count", "5"), ("find[device]", "x y")])
        assert url.startswith("https://ns.example.com/api/v2/entries/sgv.json?count=5&")
        assert "find%5Bdevice%5D=x+y" in url

    def test_from_settings(self):
        settings = Settings(
            nightscout_url="https://ns.example.com",
            nightscout_api_secret="abc",
            nightscout_timeout=5.0,
        )
        ns = NightscoutClient.from_settings(settings)
        assert ns.base_url == "https://ns.example.com/"
        assert ns.auth.enabled
        assert ns.timeout == 5.0

    def test_with_secret_shares_transport(self, transport):
        anon = NightscoutClient("https://ns.example.com", transport=transport)
        authed = anon.with_secret("s3cret")
        assert not anon.auth.enabled
        assert authed.auth.enabled
        assert authed.transport is transport


class TestAuthentication:
    def test_hashed_secret_header(self, client, transport):
        transport.add("GET", SGV_PATH, [])
        _run(client.sgv().get().send())
        expected = hashlib.sha1(b"test-secret-123").hexdigest()
        assert transport.calls[0].headers[API_SECRET_HEADER] == expected

    def test_no_secret_no_header(self, transport):
        ns = NightscoutClient("https://ns.example.com", transport=transport)
        transport.add("GET", SGV_PATH, [])
        _run(ns.sgv().get().send())
        assert API_SECRET_HEADER not in transport.calls[0].headers

    def test_secret_applied_to_every_request(self, client, transport, make_sgv):
        transport.add("GET", SGV_PATH, [make_sgv(item_id="a"), make_sgv(item_id="b")])
        transport.add("DELETE", f"{SGV_PATH}/a")
        transport.add("DELETE", f"{SGV_PATH}/b")
        _run(client.sgv().delete().send())
        assert all(API_SECRET_HEADER in c.headers for c in transport.calls)


class TestErrorMapping:
    def test_server_error_carries_status_and_body(self, client, transport):
        transport.add("GET", SGV_PATH, "server error", status=500)
        with pytest.raises(ApiError) as info:
            _run(client.sgv().get().send())
        assert info.value.status == 500
        assert info.value.message == "server error"

    @pytest.mark.parametrize("body", ["", "Unauthorized", '{"status": 401}'])
    def test_unauthorized_is_authentication_error(self, client, transport, body):
        transport.add("GET", SGV_PATH, body, status=401)
        with pytest.raises(AuthenticationError):
            _run(client.sgv().get().send())

    def test_not_found_status_is_api_error(self, client, transport):
        with pytest.raises(ApiError) as info:
            _run(client.status().get())
        assert info.value.status == 404

    def test_transport_errors_propagate(self, client, transport):
        transport.add("GET", SGV_PATH, error=TransportError("timed out"))
        with pytest.raises(TransportError):
            _run(client.sgv().get().send())

    def test_all_errors_are_nightscout_errors(self, client, transport):
        transport.add("GET", SGV_PATH, "nope", status=403)
        with pytest.raises(NightscoutError):
            _run(client.sgv().get().send())


class TestLifecycle:
    def test_context_manager_closes_transport(self, client, transport):
        async def _use():
            async with client as ns:
                assert ns is client

        _run(_use())
        assert transport.closed
