from __future__ import annotations

from abc import ABC, abstractmethod

from carsalon.domain.financing import (
    FinancingProduct,
    ProviderConnection,
    RemoteCalculationRequest,
    RemoteCalculationResult,
)


class FinancingProviderGateway(ABC):
    """
    Port for one external financing provider's calculation API.

    Contract (Preconditions):
        - product.provider matches the gateway's provider
        - connection is the active connection for that provider
    """

    provider: str

    @abstractmethod
    def calculate(
        self,
        product: FinancingProduct,
        connection: ProviderConnection,
        request: RemoteCalculationRequest,
    ) -> RemoteCalculationResult:
        """
        Calculate the monthly installment with the provider.

        Raises:
            ValidationError: If product or request lack provider-required data
            ProviderError: If the provider fails or answers with an unusable body
        """
        ...
