"""Application factory for the Nightscout MCP server.

This module provides:
- create_app() for testability (integration tests inject a client with a fake transport)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from nsc.core.client import NightscoutClient
from nsc.core.config.settings import get_settings
from nsc.core.errors import InvalidUrlError
from nsc.domains.glucose.tools.glucose_tools import register_glucose_tools

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(*, client_override: NightscoutClient | None = None) -> FastMCP:
    """Create and configure the Nightscout MCP server.

    Glucose tools are only registered when a Nightscout site is configured
    (``NIGHTSCOUT_URL``) or a client is injected.
    """
    settings = get_settings()

    server = FastMCP(
        "Nightscout Connector",
        instructions=(
            "Read CGM glucose readings, treatments, insulin/carbs on board and "
            "server status from a Nightscout site, and log or delete care events."
        ),
    )

    client: NightscoutClient | None = None
    if client_override is not None:
        client = client_override
    elif settings.nightscout_url:
        try:
            client = NightscoutClient.from_settings(settings)
            logger.info("Nightscout client configured for %s", client.base_url)
        except InvalidUrlError as exc:
            logger.error("Invalid NIGHTSCOUT_URL: %s", exc)
    else:
        logger.warning("No NIGHTSCOUT_URL configured; glucose tools are disabled")

    @server.tool
    def health_check() -> dict:
        """Check server health and report the configured Nightscout site."""
        return {
            "status": "ok",
            "server": "Nightscout Connector",
            "version": VERSION,
            "nightscout_url": client.base_url if client is not None else None,
            "authenticated": client.auth.enabled if client is not None else False,
        }

    if client is not None:
        register_glucose_tools(server, client)
        logger.info("Glucose tools registered")

    return server


# Lazy: only created when this attribute is requested (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
