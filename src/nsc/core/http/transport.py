"""HTTP transport used by the Nightscout client.

The client only needs ``send(method, url, body, headers) -> (status, body)``.
``HttpxTransport`` provides that on top of ``httpx.AsyncClient``; tests
substitute any object with the same coroutine.
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol, runtime_checkable

import httpx

from nsc.core.errors import InvalidUrlError, TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Abstract interface for dispatching one HTTP request."""

    async def send(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[int, bytes]: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """Transport backed by a shared ``httpx.AsyncClient``.

    Timeouts are enforced here; the query layer imposes none of its own.
    The client is safe to share across concurrently dispatched requests.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[int, bytes]:
        try:
            response = await self._client.request(
                method,
                url,
                content=body,
                headers=dict(headers or {}),
            )
        except httpx.InvalidURL as exc:
            raise InvalidUrlError(f"Invalid request URL {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return response.status_code, response.content

    async def aclose(self) -> None:
        await self._client.aclose()
