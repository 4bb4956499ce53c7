from __future__ import annotations

from abc import ABC, abstractmethod

from carsalon.domain.financing import FinancingProduct


class FinancingProductRepository(ABC):
    """
    Port for read access to the financing product catalog.

    The catalog is owned by the back office; the financing core never
    writes to it.
    """

    @abstractmethod
    def list_products(self) -> list[FinancingProduct]:
        """
        Return the whole catalog.

        Ordering: category ascending, priority descending, default first.
        Callers segment by category themselves.
        """
        ...

    @abstractmethod
    def get_by_id(self, product_id: str) -> FinancingProduct | None: ...
