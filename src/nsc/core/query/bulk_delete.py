"""Bulk delete-by-query.

Nightscout deletes by id, not by filter, so a ranged or device-scoped
delete first resolves the filter to a concrete id set and then deletes each
item, at most ``MAX_CONCURRENT_DELETES`` requests in flight at a time.

The result is what matched the query when it was fetched. Individual delete
failures do not change it; they are logged and reported to the query's
diagnostics callback as ``delete_failed`` events.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Iterator, TypeVar

from nsc.core.errors import NightscoutError
from nsc.core.query.diagnostics import DELETE_FAILED, Diagnostics, emit
from nsc.core.query.decoding import decode_array, decode_items, decode_json
from nsc.core.query.endpoints import ResourceKind, path_with_id

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_CONCURRENT_DELETES = 10


def _item_ids(items: list[Any]) -> Iterator[str]:
    for item in items:
        item_id = item.get("_id") if isinstance(item, dict) else None
        if isinstance(item_id, str) and item_id:
            yield item_id
        else:
            logger.debug("Skipping item without an _id: %r", item)


async def delete_matching(
    client: NightscoutClient,
    kind: ResourceKind,
    list_url: str,
    model: type[T],
    diagnostics: Diagnostics | None = None,
    *,
    max_concurrency: int = MAX_CONCURRENT_DELETES,
) -> list[T]:
    """Delete every item returned by *list_url*.

    Args:
        client: Client used for the fetch and every per-item delete.
        kind: Collection the items belong to (for item URLs).
        list_url: Fully resolved list URL (device already resolved).
        model: Payload model the fetched snapshot is decoded into.
        diagnostics: Optional observer for failed per-item deletes.
        max_concurrency: Admission window for in-flight deletes.

    Returns:
        The items that matched at fetch time, in server order.
    """
    content = await client.send_checked("GET", list_url)
    raw_items = decode_array(decode_json(content))

    urls = [client.url_for(path_with_id(kind, item_id)) for item_id in _item_ids(raw_items)]
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _delete(url: str) -> None:
        async with semaphore:
            await client.send_checked("DELETE", url)

    results = await asyncio.gather(*(_delete(url) for url in urls), return_exceptions=True)

    failed = 0
    for url, result in zip(urls, results):
        if not isinstance(result, BaseException):
            continue
        if not isinstance(result, NightscoutError):
            raise result
        failed += 1
        logger.warning("Failed to delete %s: %s", url, result)
        emit(diagnostics, DELETE_FAILED, url=url, error=result)

    logger.info(
        "Bulk delete on %s: %d matched, %d deleted, %d failed",
        kind.value,
        len(raw_items),
        len(urls) - failed,
        failed,
    )
    return decode_items(raw_items, model)
