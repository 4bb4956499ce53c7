"""Remote installment calculator talking to the storefront financing API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from carsalon.adapters.provider_http import json_number, parse_installment, read_json
from carsalon.domain.financing import RemoteCalculationRequest, RemoteCalculationResult
from carsalon.ports.remote_installment_calculator import (
    RemoteCalculationError,
    RemoteInstallmentCalculator,
)

logger = logging.getLogger(__name__)

CALCULATE_PATH = "/v1/financing/calculate"


class HttpRemoteInstallmentCalculator(RemoteInstallmentCalculator):
    """
    POSTs the calculation to the financing API and reads monthlyInstallment.

    Network errors, timeouts, non-2xx statuses and bodies without a finite
    monthlyInstallment are all reported as RemoteCalculationError.
    """

    def __init__(self, client: httpx.Client, base_url: str) -> None:
        self._client = client
        self._url = f"{base_url.rstrip('/')}{CALCULATE_PATH}"

    def calculate(self, request: RemoteCalculationRequest) -> RemoteCalculationResult:
        try:
            response = self._client.post(self._url, json=self._payload(request))
        except httpx.HTTPError as exc:
            raise RemoteCalculationError(request.product_id, str(exc)) from exc

        if not response.is_success:
            raise RemoteCalculationError(request.product_id, f"HTTP {response.status_code}")

        body = read_json(response)
        installment = parse_installment(body.get("monthlyInstallment"))
        if installment is None:
            raise RemoteCalculationError(request.product_id, "Malformed calculation response")

        return RemoteCalculationResult(
            monthly_installment=installment,
            provider=str(body.get("provider") or ""),
            details=body.get("details") or {},
        )

    @staticmethod
    def _payload(request: RemoteCalculationRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "productId": request.product_id,
            "price": json_number(request.price),
            "downPaymentAmount": json_number(request.down_payment_amount),
            "period": request.period,
        }
        if request.initial_fee_percent is not None:
            payload["initialFeePercent"] = json_number(request.initial_fee_percent)
        if request.final_payment_percent is not None:
            payload["finalPaymentPercent"] = json_number(request.final_payment_percent)
        if request.manufacturing_year is not None:
            payload["manufacturingYear"] = request.manufacturing_year
        if request.mileage_km is not None:
            payload["mileageKm"] = request.mileage_km
        return payload
