"""VEHIS broker API gateway."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx

from carsalon.adapters.provider_http import error_detail, json_number, parse_installment, read_json
from carsalon.domain.errors import ProviderError, ValidationError
from carsalon.domain.financing import (
    VEHIS_PROVIDER,
    FinancingProduct,
    ProviderConnection,
    RemoteCalculationRequest,
    RemoteCalculationResult,
)
from carsalon.domain.installment import HUNDRED, round_amount
from carsalon.domain.parameters import clamp
from carsalon.ports.financing_provider_gateway import FinancingProviderGateway

logger = logging.getLogger(__name__)

# VEHIS expects net prices; the storefront shows gross (23% VAT).
VAT_MULTIPLIER = Decimal("1.23")
MIN_INITIAL_FEE, MAX_INITIAL_FEE = Decimal("1"), Decimal("50")
MIN_REPURCHASE, MAX_REPURCHASE = Decimal("1"), Decimal("35")
# Mileage above this marks the car as used.
NEW_CAR_MAX_MILEAGE_KM = 10


@dataclass(frozen=True, slots=True)
class _CachedToken:
    token: str
    expires_at: float


class VehisProviderGateway(FinancingProviderGateway):
    """
    Calculates leasing installments with VEHIS.

    Authenticates with POST {base}/login (form-encoded email/password) and
    caches the bearer token per (base url, login) until the TTL expires.
    The calculation itself is POST {base}/broker/calculate.
    """

    provider = VEHIS_PROVIDER

    def __init__(
        self,
        client: httpx.Client,
        token_ttl_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._token_ttl_seconds = token_ttl_seconds
        self._clock = clock
        self._tokens: dict[tuple[str, str], _CachedToken] = {}

    def calculate(
        self,
        product: FinancingProduct,
        connection: ProviderConnection,
        request: RemoteCalculationRequest,
    ) -> RemoteCalculationResult:
        if not request.manufacturing_year:
            raise ValidationError(
                "Missing vehicle year", product_id=product.id, provider=self.provider
            )

        base_url = connection.api_base_url.rstrip("/")
        payload = self._build_payload(product, request)
        token = self._get_token(base_url, connection)

        url = f"{base_url}/broker/calculate"
        logger.debug("VEHIS calculation request", extra={"url": url, "payload": payload})

        try:
            response = self._client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise ProviderError(
                "Provider request failed", provider=self.provider, details=str(exc)
            ) from exc

        body = read_json(response)
        logger.debug(
            "VEHIS calculation response",
            extra={"status": response.status_code, "body": body},
        )

        if not response.is_success:
            raise ProviderError(
                "Provider request failed",
                provider=self.provider,
                details=error_detail(body),
            )

        cars = body.get("cars") or []
        first_car = cars[0] if isinstance(cars, list) and cars and isinstance(cars[0], dict) else {}
        installment = parse_installment(first_car.get("installment"))
        if installment is None:
            raise ProviderError("Invalid provider response", provider=self.provider)

        return RemoteCalculationResult(
            monthly_installment=installment,
            provider=self.provider,
            details=self._preview(body),
        )

    def _build_payload(
        self, product: FinancingProduct, request: RemoteCalculationRequest
    ) -> dict[str, Any]:
        client_type = (
            "consumer" if product.provider_config.get("clientType") == "consumer" else "entrepreneur"
        )
        initial_fee_pct = request.initial_fee_percent
        if initial_fee_pct is None:
            initial_fee_pct = request.down_payment_amount / request.price * HUNDRED
        final_pct = request.final_payment_percent or Decimal("0")
        is_used = request.mileage_km is not None and request.mileage_km > NEW_CAR_MAX_MILEAGE_KM

        return {
            "client": client_type,
            "initialFee": int(clamp(round_amount(initial_fee_pct), MIN_INITIAL_FEE, MAX_INITIAL_FEE)),
            "repurchase": int(clamp(round_amount(final_pct), MIN_REPURCHASE, MAX_REPURCHASE)),
            "duration": request.period,
            "cars": [
                {
                    "state": 1 if is_used else 0,
                    "manufacturing_year": request.manufacturing_year,
                    "price": json_number(round_amount(request.price / VAT_MULTIPLIER)),
                }
            ],
        }

    def _get_token(self, base_url: str, connection: ProviderConnection) -> str:
        cache_key = (base_url, connection.api_key)
        cached = self._tokens.get(cache_key)
        if cached is not None and cached.expires_at > self._clock():
            return cached.token

        if not connection.api_key or not connection.api_secret:
            raise ProviderError("Missing Vehis credentials", provider=self.provider)

        try:
            response = self._client.post(
                f"{base_url}/login",
                data={"email": connection.api_key, "password": connection.api_secret},
            )
        except httpx.HTTPError as exc:
            raise ProviderError(
                "Vehis authentication failed", provider=self.provider, details=str(exc)
            ) from exc

        body = read_json(response)
        token = body.get("token")
        if not response.is_success or not token:
            raise ProviderError(
                "Vehis authentication failed",
                provider=self.provider,
                details=body.get("message") or f"HTTP {response.status_code}",
            )

        self._tokens[cache_key] = _CachedToken(
            token=token, expires_at=self._clock() + self._token_ttl_seconds
        )
        return token

    @staticmethod
    def _preview(body: dict[str, Any]) -> dict[str, Any]:
        car_fields = (
            "state",
            "manufacturing_year",
            "price",
            "installment",
            "initialFee",
            "repurchase",
            "wibor",
        )
        return {
            "client": body.get("client"),
            "initialFee": body.get("initialFee"),
            "repurchase": body.get("repurchase"),
            "duration": body.get("duration"),
            "cars": [
                {name: car.get(name) for name in car_fields}
                for car in body.get("cars") or []
                if isinstance(car, dict)
            ],
        }
