from __future__ import annotations

from carsalon.domain.financing import FinancingProduct
from carsalon.ports.financing_product_repository import FinancingProductRepository


class InMemoryFinancingProductRepository(FinancingProductRepository):
    """
    Canonical contract implementation for tests.

    - Stores products in insertion order
    - list_products() applies the catalog ordering (category asc,
      priority desc, default first); remaining ties keep insertion order
    """

    def __init__(self, products: list[FinancingProduct]) -> None:
        self._products = products

    def list_products(self) -> list[FinancingProduct]:
        by_rank = sorted(self._products, key=lambda p: (p.priority, p.is_default), reverse=True)
        return sorted(by_rank, key=lambda p: p.category.value)

    def get_by_id(self, product_id: str) -> FinancingProduct | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None
