"""Nightscout REST client.

Usage::

    async with NightscoutClient("https://my-cgm.example.com", "my-secret") as ns:
        readings = await ns.sgv().get().limit(5).send()
        status = await ns.status().get()

Collections that support filtering hand out a ``QueryBuilder`` from
``get()`` / ``delete()``; single-document endpoints (status, profiles) are
fetched directly.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Iterable
from urllib.parse import urlencode, urljoin, urlsplit

from nsc.core.errors import ApiError, AuthenticationError, InvalidUrlError
from nsc.core.http.auth import ApiSecretAuth
from nsc.core.http.transport import HttpxTransport, Transport
from nsc.core.query.decoding import decode_json
from nsc.domains.glucose.services.devicestatus import DeviceStatusService
from nsc.domains.glucose.services.entries import MbgService, SgvService
from nsc.domains.glucose.services.profile import ProfileService
from nsc.domains.glucose.services.properties import PropertiesService
from nsc.domains.glucose.services.status import StatusService
from nsc.domains.glucose.services.treatments import TreatmentsService

if TYPE_CHECKING:
    from nsc.core.config.settings import Settings

logger = logging.getLogger(__name__)


def _normalize_base_url(base_url: str) -> str:
    try:
        parts = urlsplit(base_url.strip())
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL format: {base_url!r}") from exc
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidUrlError(f"Invalid URL format: {base_url!r}")
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return f"{parts.scheme}://{parts.netloc}{path}"


class NightscoutClient:
    """Entry point to a Nightscout site.

    The client holds read-only configuration (base URL, hashed secret) and a
    transport handle, so it is safe to share across concurrent requests.
    """

    def __init__(
        self,
        base_url: str,
        api_secret: str | None = None,
        *,
        transport: Transport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = _normalize_base_url(base_url)
        self.auth = ApiSecretAuth(api_secret)
        self.timeout = timeout
        self.transport: Transport = transport or HttpxTransport(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> NightscoutClient:
        """Build a client from ``NIGHTSCOUT_*`` settings."""
        return cls(
            settings.nightscout_url,
            settings.nightscout_api_secret or None,
            timeout=settings.nightscout_timeout,
        )

    def with_secret(self, secret: str) -> NightscoutClient:
        """Return a client for the same site and transport, authenticated with *secret*."""
        return NightscoutClient(
            self.base_url, secret, transport=self.transport, timeout=self.timeout
        )

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def sgv(self) -> SgvService:
        return SgvService(self)

    def mbg(self) -> MbgService:
        return MbgService(self)

    def treatments(self) -> TreatmentsService:
        return TreatmentsService(self)

    def devicestatus(self) -> DeviceStatusService:
        return DeviceStatusService(self)

    def profiles(self) -> ProfileService:
        return ProfileService(self)

    def status(self) -> StatusService:
        return StatusService(self)

    def properties(self) -> PropertiesService:
        return PropertiesService(self)

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def url_for(self, path: str, params: Iterable[tuple[str, str]] = ()) -> str:
        """Join *path* onto the base URL and append *params* as a query string."""
        url = urljoin(self.base_url, path.lstrip("/"))
        query = urlencode(list(params))
        return f"{url}?{query}" if query else url

    async def send_checked(self, method: str, url: str, body: bytes | None = None) -> bytes:
        """Dispatch one request and return the body of a 2xx response.

        Raises:
            AuthenticationError: On 401, whatever the body says.
            ApiError: On any other non-2xx status, with the body text verbatim.
            TransportError: If no response was received.
        """
        headers = self.auth.apply({"Accept": "application/json"})
        if body is not None:
            headers["Content-Type"] = "application/json"

        logger.debug("%s %s", method, url)
        status, content = await self.transport.send(method, url, body, headers)

        if 200 <= status < 300:
            return content
        if status == 401:
            raise AuthenticationError()
        raise ApiError(status, content.decode("utf-8", errors="replace"))

    async def fetch_json(self, path: str, params: Iterable[tuple[str, str]] = ()) -> Any:
        """GET *path* and return the decoded JSON body."""
        content = await self.send_checked("GET", self.url_for(path, params))
        return decode_json(content)

    async def post_json(self, path: str, payload: Any) -> Any:
        """POST *payload* as JSON to *path* and return the decoded JSON body."""
        body = json.dumps(payload).encode("utf-8")
        content = await self.send_checked("POST", self.url_for(path), body)
        return decode_json(content)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> NightscoutClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
