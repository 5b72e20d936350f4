"""Tests for the server entry point's bind guard."""

from __future__ import annotations

import pytest

from nsc.core.config.settings import Settings
from nsc.core.server import main


@pytest.mark.parametrize("host", ["127.0.0.1", "localhost", "LOCALHOST", "::1", "[::1]", "127.0.0.2"])
def test_loopback_hosts(host):
    assert main.is_loopback(host)


@pytest.mark.parametrize("host", ["0.0.0.0", "192.168.1.10", "ns.example.com", ""])
def test_non_loopback_hosts(host):
    assert not main.is_loopback(host)


def test_loopback_bind_is_allowed():
    main.ensure_safe_bind(Settings(nsc_host="127.0.0.1"))


def test_public_bind_is_refused_by_default():
    with pytest.raises(RuntimeError, match="NSC_ALLOW_INSECURE_BIND"):
        main.ensure_safe_bind(Settings(nsc_host="0.0.0.0"))


def test_public_bind_allowed_with_override():
    main.ensure_safe_bind(Settings(nsc_host="0.0.0.0", nsc_allow_insecure_bind=True))


def test_run_refuses_before_building_the_app(monkeypatch):
    monkeypatch.setenv("NSC_HOST", "0.0.0.0")
    monkeypatch.delenv("NSC_ALLOW_INSECURE_BIND", raising=False)

    def _fail():
        raise AssertionError("create_app should not be called")

    monkeypatch.setattr(main, "create_app", _fail)
    with pytest.raises(RuntimeError):
        main.run()
