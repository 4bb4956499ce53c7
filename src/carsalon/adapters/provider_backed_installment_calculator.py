from __future__ import annotations

from carsalon.domain.errors import DomainError
from carsalon.domain.financing import RemoteCalculationRequest, RemoteCalculationResult
from carsalon.ports.remote_installment_calculator import (
    RemoteCalculationError,
    RemoteInstallmentCalculator,
)
from carsalon.use_cases.calculate_provider_installment import CalculateProviderInstallment


class ProviderBackedInstallmentCalculator(RemoteInstallmentCalculator):
    """
    In-process remote calculator used when the session runs server-side.

    Any domain failure of the provider calculation (missing connection,
    provider error, ...) is turned into a RemoteCalculationError so the
    session excludes the product instead of failing the request.
    """

    def __init__(self, use_case: CalculateProviderInstallment) -> None:
        self._use_case = use_case

    def calculate(self, request: RemoteCalculationRequest) -> RemoteCalculationResult:
        try:
            return self._use_case.execute(request)
        except DomainError as exc:
            raise RemoteCalculationError(request.product_id, exc.message) from exc
