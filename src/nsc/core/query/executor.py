"""Turns a finalized QuerySpec and an HTTP verb into requests.

Four shapes, picked by verb and whether an item id is set:

* GET, no id      list fetch with count / date bounds / device filter
* GET, id         single item fetch (Nightscout still answers with an array)
* DELETE, id      fetch the item, then delete it, returning what was fetched
* DELETE, no id   bulk delete-by-query, see ``bulk_delete``
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from nsc.core.errors import UnsupportedOperationError
from nsc.core.query.attribution import resolve_attribution
from nsc.core.query.diagnostics import Diagnostics
from nsc.core.query.bulk_delete import delete_matching
from nsc.core.query.decoding import decode_items, decode_json
from nsc.core.query.endpoints import path_for, path_with_id
from nsc.core.query.spec import QuerySpec

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def execute(
    client: NightscoutClient,
    spec: QuerySpec,
    method: str,
    model: type[T],
    diagnostics: Diagnostics | None = None,
) -> list[T]:
    """Run *spec* as *method* and return the typed items."""
    verb = method.upper()
    if verb == "GET":
        if spec.item_id is not None:
            return await fetch_item(client, spec, model)
        url = await resolve_list_url(client, spec, model, diagnostics)
        return await fetch_items(client, url, model)
    if verb == "DELETE":
        if spec.item_id is not None:
            return await delete_item(client, spec, model)
        url = await resolve_list_url(client, spec, model, diagnostics)
        return await delete_matching(client, spec.kind, url, model, diagnostics)
    raise UnsupportedOperationError(f"Queries support GET and DELETE, not {method!r}")


async def resolve_list_url(
    client: NightscoutClient,
    spec: QuerySpec,
    model: type[Any],
    diagnostics: Diagnostics | None = None,
) -> str:
    """Build the list URL, probing for the device first if the spec asks for it."""
    path = path_for(spec.kind)

    async def _probe() -> list[Any]:
        probe_url = client.url_for(path, spec.probe().list_params())
        return await fetch_items(client, probe_url, model)

    device = await resolve_attribution(spec.device, _probe, diagnostics)
    return client.url_for(path, spec.list_params(device))


async def fetch_items(client: NightscoutClient, url: str, model: type[T]) -> list[T]:
    content = await client.send_checked("GET", url)
    return decode_items(decode_json(content), model)


async def fetch_item(client: NightscoutClient, spec: QuerySpec, model: type[T]) -> list[T]:
    url = client.url_for(path_with_id(spec.kind, spec.item_id))
    return await fetch_items(client, url, model)


async def delete_item(client: NightscoutClient, spec: QuerySpec, model: type[T]) -> list[T]:
    """Delete one item, returning its representation from just before deletion.

    DELETE responses carry no body, so the item is fetched first. A failed
    fetch aborts before anything is deleted.
    """
    url = client.url_for(path_with_id(spec.kind, spec.item_id))
    items = await fetch_items(client, url, model)
    await client.send_checked("DELETE", url)
    logger.info("Deleted %s item %s", spec.kind.value, spec.item_id)
    return items
