from __future__ import annotations

from abc import ABC, abstractmethod

from carsalon.domain.financing import RemoteCalculationRequest, RemoteCalculationResult


class RemoteCalculationError(Exception):
    """
    A remote installment calculation failed.

    Covers network errors, timeouts, non-2xx responses and malformed
    bodies. The financing session absorbs it by excluding the product.
    """

    def __init__(self, product_id: str, reason: str) -> None:
        self.product_id = product_id
        self.reason = reason
        super().__init__(f"Remote calculation failed for product '{product_id}': {reason}")


class RemoteInstallmentCalculator(ABC):
    """Port used by the financing session for non-OWN products."""

    @abstractmethod
    def calculate(self, request: RemoteCalculationRequest) -> RemoteCalculationResult:
        """
        Fetch the monthly installment for an external provider product.

        Raises:
            RemoteCalculationError: On any failure of the remote call
        """
        ...
