"""Calculate an installment with an external financing provider."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from carsalon.domain.errors import (
    ConflictError,
    NotFoundError,
    UnsupportedProviderError,
    ValidationError,
)
from carsalon.domain.financing import RemoteCalculationRequest, RemoteCalculationResult
from carsalon.ports.financing_product_repository import FinancingProductRepository
from carsalon.ports.financing_provider_gateway import FinancingProviderGateway
from carsalon.ports.provider_connection_repository import ProviderConnectionRepository

logger = logging.getLogger(__name__)


class CalculateProviderInstallment:
    """
    Use case behind the remote calculation endpoint.

    Responsibilities:
    - Validate the request
    - Resolve the product and the active connection of its provider
    - Delegate to the provider gateway

    Raises:
        ValidationError: Invalid request or missing provider configuration
        NotFoundError: Unknown product id
        UnsupportedProviderError: Product provider has no gateway (e.g. OWN)
        ConflictError: No active connection configured for the provider
        ProviderError: The provider failed or returned an unusable body
    """

    def __init__(
        self,
        product_repository: FinancingProductRepository,
        connection_repository: ProviderConnectionRepository,
        gateways: Iterable[FinancingProviderGateway],
    ) -> None:
        self._products = product_repository
        self._connections = connection_repository
        self._gateways = {gateway.provider: gateway for gateway in gateways}

    def execute(self, request: RemoteCalculationRequest) -> RemoteCalculationResult:
        self._validate(request)

        product = self._products.get_by_id(request.product_id)
        if product is None:
            raise NotFoundError(resource="FinancingProduct", identifier=request.product_id)

        gateway = self._gateways.get(product.provider)
        if gateway is None:
            raise UnsupportedProviderError(product.provider, product_id=product.id)

        connection = self._connections.get_active(product.provider)
        if connection is None:
            raise ConflictError("Connection not configured", provider=product.provider)

        result = gateway.calculate(product, connection, request)

        logger.info(
            "Provider installment calculated",
            extra={
                "product_id": product.id,
                "provider": product.provider,
                "period": request.period,
                "monthly_installment": str(result.monthly_installment),
            },
        )
        return result

    @staticmethod
    def _validate(request: RemoteCalculationRequest) -> None:
        errors = []
        if request.price <= 0:
            errors.append({"field": "price", "message": "Must be > 0", "code": "INVALID_VALUE"})
        if request.down_payment_amount < 0:
            errors.append(
                {"field": "downPaymentAmount", "message": "Must be >= 0", "code": "INVALID_VALUE"}
            )
        if request.period < 1:
            errors.append({"field": "period", "message": "Must be >= 1", "code": "INVALID_VALUE"})
        if errors:
            raise ValidationError(errors=errors)
