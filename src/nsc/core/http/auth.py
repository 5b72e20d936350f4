"""API-secret authentication for Nightscout requests."""

from __future__ import annotations

import hashlib

API_SECRET_HEADER = "api-secret"


def hash_secret(secret: str) -> str:
    """Lowercase hex SHA-1 digest of the plain-text API secret."""
    return hashlib.sha1(secret.encode("utf-8")).hexdigest()


class ApiSecretAuth:
    """Attaches the hashed API secret to outgoing request headers.

    The digest is computed once at construction. Without a secret the
    headers pass through unchanged, which is enough for read-only sites.
    """

    def __init__(self, secret: str | None = None) -> None:
        self._secret = secret or None
        self._digest = hash_secret(secret) if secret else None

    @property
    def secret(self) -> str | None:
        return self._secret

    @property
    def enabled(self) -> bool:
        return self._digest is not None

    def apply(self, headers: dict[str, str]) -> dict[str, str]:
        if self._digest is None:
            return headers
        return {**headers, API_SECRET_HEADER: self._digest}
