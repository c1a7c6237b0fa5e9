"""
Snapshot aggregator: fetch and parse every product into one ``Snapshot``.

Flow
----
1. Capture ``retrieval_datetime`` (UTC) once, before any request.
2. Start one task per product: fetch its versions, then parse them.
3. Each task writes into the slot at its registry index, so the snapshot
   lists products in registry order whatever order the requests finish in.
4. Fail fast: the first failure cancels the outstanding tasks and is raised
   as a single ``AggregationError``.  No partial snapshot is produced.

Entry points:
  ``fetch_snapshot()``   synchronous; owns the client and event loop.
  ``gather_snapshot()``  async; for callers that already hold a client.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional

import httpx

from wownow.models.version import ProductVersions, Snapshot
from wownow.tact.client import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    SUMMARY_PRODUCT,
    TactClient,
)
from wownow.tact.errors import AggregationError, FetchError, ResponseParseError
from wownow.tact.parser import parse_summary, parse_versions
from wownow.tact.registry import products_from_summary, resolve_products
from wownow.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


async def _collect_product(
    client: TactClient,
    index: int,
    product: str,
    slots: list[Optional[ProductVersions]],
) -> None:
    """Fetch + parse one product into ``slots[index]``."""
    try:
        text = await client.fetch_versions(product)
        versions = parse_versions(text, product)
    except (FetchError, ResponseParseError) as exc:
        raise AggregationError(product, exc) from exc
    slots[index] = ProductVersions(name=product, versions=versions)
    logger.debug(
        "%s: %d region(s)", product, len(versions), extra={"product": product}
    )


async def _cancel_outstanding(tasks: Sequence[asyncio.Task]) -> None:
    pending = [t for t in tasks if not t.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        logger.debug("Cancelled %d outstanding fetch(es)", len(pending))


async def gather_snapshot(
    client: TactClient,
    products: Iterable[str],
    retrieval_datetime: Optional[datetime] = None,
) -> Snapshot:
    """Fetch and parse ``products`` concurrently into one ``Snapshot``.

    Args:
        client: An entered ``TactClient``.
        products: Product ids in registry order.
        retrieval_datetime: As-of timestamp; captured now when omitted.

    Returns:
        ``Snapshot`` with products in the order given.

    Raises:
        ValueError: If ``products`` is empty.
        AggregationError: For the first product that failed.  When several
            have failed by the time the failure is observed, the earliest in
            registry order is reported.
    """
    products = tuple(products)
    if not products:
        raise ValueError("At least one product is required.")
    if retrieval_datetime is None:
        retrieval_datetime = utcnow()

    slots: list[Optional[ProductVersions]] = [None] * len(products)
    tasks = [
        asyncio.create_task(
            _collect_product(client, idx, product, slots),
            name=f"tact:{product}",
        )
        for idx, product in enumerate(products)
    ]

    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        await _cancel_outstanding(tasks)

    for task in tasks:
        if task in done and task.exception() is not None:
            exc = task.exception()
            logger.warning(
                "Snapshot aborted: %s",
                exc,
                extra={"product": getattr(exc, "product", None)},
            )
            raise exc

    snapshot = Snapshot(retrieval_datetime=retrieval_datetime, products=tuple(slots))
    logger.info("Snapshot complete: %s", ", ".join(snapshot.product_names()))
    return snapshot


async def discover_products(client: TactClient, live_only: bool = True) -> tuple[str, ...]:
    """Read product ids from the summary listing.

    Raises:
        AggregationError: Tagged ``"summary"`` if the listing cannot be
            fetched or parsed.
    """
    try:
        text = await client.fetch_summary()
        records = parse_summary(text, SUMMARY_PRODUCT)
    except (FetchError, ResponseParseError) as exc:
        raise AggregationError(SUMMARY_PRODUCT, exc) from exc

    products = products_from_summary(records, live_only=live_only)
    logger.info("Summary lists %d matching product(s)", len(products))
    return products


async def _run(
    products: Optional[Sequence[str]],
    live_only: bool,
    base_url: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
) -> Snapshot:
    retrieval_datetime = utcnow()
    async with TactClient(base_url=base_url, timeout=timeout, transport=transport) as client:
        if products is None and not live_only:
            targets = await discover_products(client, live_only=False)
        else:
            targets = resolve_products(products)
        return await gather_snapshot(client, targets, retrieval_datetime)


def fetch_snapshot(
    products: Optional[Sequence[str]] = None,
    live_only: bool = True,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Snapshot:
    """Build a snapshot synchronously.

    Args:
        products: Explicit product ids.  ``None`` selects ``LIVE_PRODUCTS``,
            or, when ``live_only`` is ``False``, every unflagged product in
            the summary listing.
        live_only: See ``products``.  Ignored when ``products`` is given.
        base_url: Version service root.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests).

    Raises:
        AggregationError: If any product fails to fetch or parse.
        ValueError: If the product selection is empty or invalid.
    """
    return asyncio.run(_run(products, live_only, base_url, timeout, transport))
