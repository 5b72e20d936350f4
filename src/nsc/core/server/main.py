"""Server entry point: ``python -m nsc.core.server.main`` or ``nsc-server``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from nsc.core.config.settings import Settings, get_settings
from nsc.core.server.app import create_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def is_loopback(host: str) -> bool:
    """True for ``localhost`` and any loopback IP literal (v4 or v6)."""
    if host.lower() == "localhost":
        return True
    try:
        return ip_address(host.strip("[]")).is_loopback
    except ValueError:
        return False


def ensure_safe_bind(settings: Settings) -> None:
    """Refuse to expose the server beyond this machine unless explicitly allowed.

    The MCP tools can create and delete treatments on the configured site
    with its API secret, and the HTTP endpoint has no auth of its own.

    Raises:
        RuntimeError: If ``nsc_host`` is not loopback and
            ``nsc_allow_insecure_bind`` is off.
    """
    if is_loopback(settings.nsc_host):
        return
    if not settings.nsc_allow_insecure_bind:
        raise RuntimeError(
            f"Refusing to bind to {settings.nsc_host!r}: the server can write to your "
            "Nightscout site. Set NSC_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    logger.warning("Binding to non-loopback host %s without authentication", settings.nsc_host)


def run() -> None:
    """Start the Nightscout MCP server over Streamable HTTP."""
    settings = get_settings()
    level = getattr(logging, settings.nsc_log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    ensure_safe_bind(settings)
    if not settings.nightscout_url:
        logger.warning("NIGHTSCOUT_URL is not set; only health_check will be available")

    logger.info("Starting Nightscout Connector on %s:%d", settings.nsc_host, settings.nsc_port)
    create_app().run(
        transport="streamable-http",
        host=settings.nsc_host,
        port=settings.nsc_port,
    )


if __name__ == "__main__":
    run()
