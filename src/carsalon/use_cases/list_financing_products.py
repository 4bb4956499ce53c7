from __future__ import annotations

from dataclasses import dataclass

from carsalon.domain.financing import FinancingProduct
from carsalon.ports.financing_product_repository import FinancingProductRepository


@dataclass(frozen=True, slots=True)
class ListFinancingProductsResponse:
    products: list[FinancingProduct]


class ListFinancingProducts:
    """
    Public catalog read for the financing calculator.

    Returns every product so the calculator can switch category tabs
    client-side; the result does not depend on any filter and can be
    cached by callers.
    """

    def __init__(self, product_repository: FinancingProductRepository) -> None:
        self._repository = product_repository

    def execute(self) -> ListFinancingProductsResponse:
        return ListFinancingProductsResponse(products=self._repository.list_products())
