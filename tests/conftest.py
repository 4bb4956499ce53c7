from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from carsalon.domain.financing import FinancingCategory, FinancingProduct

ProductFactory = Callable[..., FinancingProduct]


@pytest.fixture
def make_product() -> ProductFactory:
    """
    Factory for financing products.

    Defaults describe a plain in-house CREDIT product: 5% + 2% margin,
    12-84 months, up to 50% down payment, no balloon, no amount bounds.
    """

    def factory(**overrides: Any) -> FinancingProduct:
        fields: dict[str, Any] = {
            "id": "own-credit",
            "category": FinancingCategory.CREDIT,
            "provider": "OWN",
            "currency": "PLN",
            "reference_rate": Decimal("5"),
            "margin": Decimal("2"),
            "commission": Decimal("0"),
            "min_installments": 12,
            "max_installments": 84,
            "max_initial_payment": Decimal("50"),
            "max_final_payment": Decimal("0"),
            "has_balloon_payment": False,
        }
        fields.update(overrides)
        return FinancingProduct(**fields)

    return factory
