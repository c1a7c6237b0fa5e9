"""
Product registry.

``LIVE_PRODUCTS`` are the products traditionally considered live, playable
by most users.  Registry order is the order products appear in a snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from wownow.models.version import SummaryRecord

LIVE_PRODUCTS: tuple[str, ...] = ("wow", "wow_classic", "wow_classic_era")


def resolve_products(requested: Optional[Iterable[str]] = None) -> tuple[str, ...]:
    """Return the ordered product ids to query.

    Args:
        requested: Explicit product ids, or ``None`` for ``LIVE_PRODUCTS``.

    Returns:
        Product ids in first-seen order with duplicates dropped.

    Raises:
        ValueError: If any requested id is empty or blank.
    """
    if requested is None:
        return LIVE_PRODUCTS

    result: list[str] = []
    for product in requested:
        product = product.strip()
        if not product:
            raise ValueError("Product ids must be non-empty.")
        if product not in result:
            result.append(product)
    return tuple(result)


def products_from_summary(
    records: Iterable[SummaryRecord],
    live_only: bool = True,
) -> tuple[str, ...]:
    """Pick product ids out of a summary listing.

    Only rows with empty ``flags`` are kept: flagged rows describe CDN or
    background-download listings, not the main versions endpoint.

    Args:
        records: Parsed summary rows, in listing order.
        live_only: Keep only products in ``LIVE_PRODUCTS``.

    Returns:
        Product ids in listing order, duplicates dropped.
    """
    result: list[str] = []
    for record in records:
        if record.flags:
            continue
        if live_only and record.product not in LIVE_PRODUCTS:
            continue
        if record.product not in result:
            result.append(record.product)
    return tuple(result)
