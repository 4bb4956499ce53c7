"""Eligibility and ranking of financing products.

Selection is a pure function of (catalog, category, amount to finance,
failed product ids). Callers recompute it whenever one of those changes.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence
from decimal import Decimal

from carsalon.domain.financing import FinancingCategory, FinancingProduct

logger = logging.getLogger(__name__)


def products_in_category(
    catalog: Iterable[FinancingProduct], category: FinancingCategory
) -> list[FinancingProduct]:
    """Projection of the catalog onto a single category, catalog order kept."""
    return [product for product in catalog if product.category == category]


def available_categories(catalog: Iterable[FinancingProduct]) -> list[FinancingCategory]:
    """Distinct categories present in the catalog, sorted by value."""
    return sorted({product.category for product in catalog}, key=lambda c: c.value)


def eligible_products(
    catalog: Iterable[FinancingProduct],
    category: FinancingCategory,
    amount_to_finance: Decimal,
    failed_ids: Collection[str],
) -> list[FinancingProduct]:
    return [
        product
        for product in catalog
        if product.category == category
        and product.id not in failed_ids
        and product.accepts_amount(amount_to_finance)
    ]


def _rank_key(product: FinancingProduct) -> tuple[int, bool, bool]:
    # Sorted descending: higher priority, then default, then non-OWN first.
    return (product.priority, product.is_default, not product.is_own)


def rank_products(products: Sequence[FinancingProduct]) -> list[FinancingProduct]:
    """
    Order products best-first.

    sorted() is stable, so products that tie on every criterion keep their
    catalog order. This keeps selection deterministic for a fixed catalog.
    """
    return sorted(products, key=_rank_key, reverse=True) if products else []


def own_fallback(
    catalog: Iterable[FinancingProduct], category: FinancingCategory
) -> FinancingProduct | None:
    """
    In-house product of the category, ignoring amount bounds.

    Prefers the default OWN product; otherwise the first OWN product in
    catalog order.
    """
    own_products = [p for p in products_in_category(catalog, category) if p.is_own]
    for product in own_products:
        if product.is_default:
            return product
    return own_products[0] if own_products else None


def select_product(
    catalog: Sequence[FinancingProduct],
    category: FinancingCategory,
    amount_to_finance: Decimal,
    failed_ids: Collection[str] = frozenset(),
) -> FinancingProduct | None:
    """
    Select the single best financing product for the requested amount.

    1. Keep products of the category that did not fail remotely and whose
       amount bounds (inclusive, unset = unbounded) accept the amount.
    2. Rank by priority, default flag, then non-OWN before OWN.
    3. If nothing matched, fall back to an OWN product of the category
       regardless of its amount bounds. The displayed offer may then be for
       an amount the product does not formally support.

    Returns:
        The winning product, or None when the category has no eligible
        product and no OWN product (financing unavailable).
    """
    ranked = rank_products(eligible_products(catalog, category, amount_to_finance, failed_ids))
    if ranked:
        return ranked[0]

    fallback = own_fallback(catalog, category)
    if fallback is not None:
        logger.info(
            "No eligible financing product, using in-house fallback",
            extra={
                "category": category.value,
                "amount_to_finance": str(amount_to_finance),
                "product_id": fallback.id,
            },
        )
    return fallback
