"""
Contract tests for the in-memory repositories.

These implementations back the use case and HTTP tests, so their ordering
and lookup rules mirror the PostgreSQL adapters.
"""

from __future__ import annotations

from collections.abc import Callable

from carsalon.adapters.in_memory_financing_product_repository import (
    InMemoryFinancingProductRepository,
)
from carsalon.adapters.in_memory_provider_connection_repository import (
    InMemoryProviderConnectionRepository,
)
from carsalon.domain.financing import FinancingCategory, FinancingProduct, ProviderConnection

Factory = Callable[..., FinancingProduct]


def make_connection(id: str, provider: str = "INBANK", is_active: bool = True) -> ProviderConnection:
    return ProviderConnection(
        id=id,
        provider=provider,
        name=f"{provider} {id}",
        api_base_url="https://provider.example",
        api_key="key",
        is_active=is_active,
    )


# ==============================================================================
# Financing products
# ==============================================================================


def test_list_products_orders_by_category_then_rank(make_product: Factory) -> None:
    rent = make_product(id="rent", category=FinancingCategory.RENT, priority=99)
    credit_low = make_product(id="credit-low")
    credit_default = make_product(id="credit-default", is_default=True)
    credit_high = make_product(id="credit-high", priority=5)
    leasing = make_product(id="leasing", category=FinancingCategory.LEASING)

    repository = InMemoryFinancingProductRepository(
        [rent, credit_low, credit_default, leasing, credit_high]
    )

    assert [p.id for p in repository.list_products()] == [
        "credit-high",
        "credit-default",
        "credit-low",
        "leasing",
        "rent",
    ]


def test_list_products_keeps_insertion_order_on_ties(make_product: Factory) -> None:
    first = make_product(id="first")
    second = make_product(id="second")

    repository = InMemoryFinancingProductRepository([first, second])

    assert repository.list_products() == [first, second]


def test_get_by_id(make_product: Factory) -> None:
    product = make_product(id="own-credit")
    repository = InMemoryFinancingProductRepository([product])

    assert repository.get_by_id("own-credit") == product
    assert repository.get_by_id("missing") is None


# ==============================================================================
# Provider connections
# ==============================================================================


def test_get_active_returns_first_active_connection_of_provider() -> None:
    repository = InMemoryProviderConnectionRepository(
        [
            make_connection("vehis", provider="VEHIS"),
            make_connection("old", is_active=False),
            make_connection("current"),
            make_connection("later"),
        ]
    )

    connection = repository.get_active("INBANK")

    assert connection is not None
    assert connection.id == "current"


def test_get_active_without_active_connection() -> None:
    repository = InMemoryProviderConnectionRepository([make_connection("old", is_active=False)])

    assert repository.get_active("INBANK") is None
    assert repository.get_active("VEHIS") is None
