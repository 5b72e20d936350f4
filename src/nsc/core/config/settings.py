"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Nightscout connector configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Nightscout site
    nightscout_url: str = ""
    # Plain-text API secret; only its SHA-1 digest ever goes over the wire.
    nightscout_api_secret: str = ""
    nightscout_timeout: float = 30.0

    # MCP server
    # Loopback by default: the server proxies write access to your Nightscout site.
    nsc_host: str = "127.0.0.1"
    nsc_port: int = 8003
    nsc_log_level: str = "info"
    nsc_allow_insecure_bind: bool = False


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
