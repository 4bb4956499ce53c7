"""INBANK partner API gateway."""

from __future__ import annotations

import logging
import re

import httpx

from carsalon.adapters.provider_http import error_detail, json_number, parse_installment, read_json
from carsalon.domain.errors import ProviderError, ValidationError
from carsalon.domain.financing import (
    INBANK_PROVIDER,
    FinancingProduct,
    ProviderConnection,
    RemoteCalculationRequest,
    RemoteCalculationResult,
)
from carsalon.ports.financing_provider_gateway import FinancingProviderGateway

logger = logging.getLogger(__name__)

# INBANK has used several names for the monthly amount across API versions.
INSTALLMENT_KEYS = (
    "payment_amount_monthly",
    "paymentAmountMonthly",
    "installment_amount",
    "installmentAmount",
    "monthly_payment",
    "monthlyPayment",
)

_PARTNER_SUFFIX = re.compile(r"/partner(/v2)?$")


class InbankProviderGateway(FinancingProviderGateway):
    """
    Calculates installments with INBANK's partner calculations endpoint.

    POST {base}/partner/v2/shops/{shop_uuid}/calculations with the minimal
    payload INBANK accepts: product code, financed amount, period and
    payment day. The bearer key and shop uuid may be overridden per product
    through provider_config.
    """

    provider = INBANK_PROVIDER

    def __init__(self, client: httpx.Client, base_url_override: str | None = None) -> None:
        self._client = client
        self._base_url_override = base_url_override

    def calculate(
        self,
        product: FinancingProduct,
        connection: ProviderConnection,
        request: RemoteCalculationRequest,
    ) -> RemoteCalculationResult:
        config = product.provider_config
        product_code = config.get("productCode")
        payment_day = config.get("paymentDay")
        shop_uuid = config.get("shopUuid") or connection.shop_uuid

        if not product_code or not payment_day or not shop_uuid:
            raise ValidationError(
                "Missing provider configuration",
                product_id=product.id,
                provider=self.provider,
            )

        payload = {
            "product_code": product_code,
            "amount": json_number(request.price - request.down_payment_amount),
            "period": request.period,
            "payment_day": payment_day,
        }
        url = f"{self._base_url(connection)}/partner/v2/shops/{shop_uuid}/calculations"
        api_key = config.get("apiKey") or connection.api_key

        logger.debug("INBANK calculation request", extra={"url": url, "payload": payload})

        try:
            response = self._client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.HTTPError as exc:
            raise ProviderError(
                "Provider request failed", provider=self.provider, details=str(exc)
            ) from exc

        body = read_json(response)
        logger.debug(
            "INBANK calculation response",
            extra={"status": response.status_code, "body": body},
        )

        if not response.is_success:
            raise ProviderError(
                "Provider request failed",
                provider=self.provider,
                details=error_detail(body),
            )

        raw = next((body[key] for key in INSTALLMENT_KEYS if body.get(key) is not None), None)
        installment = parse_installment(raw)
        if installment is None:
            raise ProviderError("Invalid provider response", provider=self.provider)

        return RemoteCalculationResult(monthly_installment=installment, provider=self.provider)

    def _base_url(self, connection: ProviderConnection) -> str:
        raw = (self._base_url_override or connection.api_base_url).rstrip("/")
        return _PARTNER_SUFFIX.sub("", raw)
