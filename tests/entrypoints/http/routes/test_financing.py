"""
Test suite for the /v1/financing routes.

Routes are exercised end to end over HTTP with real use cases wired to
in-memory repositories and a fake provider gateway through
app.dependency_overrides. Verifies:
- camelCase request parsing and response rendering
- Status codes of every calculation failure mode
- Offer quotes, including the cascade past a failing provider
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from carsalon.adapters.in_memory_financing_product_repository import (
    InMemoryFinancingProductRepository,
)
from carsalon.adapters.in_memory_provider_connection_repository import (
    InMemoryProviderConnectionRepository,
)
from carsalon.adapters.provider_backed_installment_calculator import (
    ProviderBackedInstallmentCalculator,
)
from carsalon.domain.errors import ProviderError
from carsalon.domain.financing import (
    FinancingCategory,
    FinancingProduct,
    ProviderConnection,
    RemoteCalculationRequest,
    RemoteCalculationResult,
)
from carsalon.entrypoints.http.dependencies import (
    get_calculate_provider_installment_use_case,
    get_list_financing_products_use_case,
    get_quote_financing_offer_use_case,
)
from carsalon.entrypoints.http.exception_handlers import register_exception_handlers
from carsalon.entrypoints.http.routes.financing import router
from carsalon.ports.financing_provider_gateway import FinancingProviderGateway
from carsalon.use_cases.calculate_provider_installment import CalculateProviderInstallment
from carsalon.use_cases.list_financing_products import ListFinancingProducts
from carsalon.use_cases.quote_financing_offer import QuoteFinancingOffer

Factory = Callable[..., FinancingProduct]


class FakeInbankGateway(FinancingProviderGateway):
    provider = "INBANK"

    def __init__(self) -> None:
        self.installment: Decimal | None = Decimal("2650.17")
        self.calls: list[RemoteCalculationRequest] = []

    def calculate(
        self,
        product: FinancingProduct,
        connection: ProviderConnection,
        request: RemoteCalculationRequest,
    ) -> RemoteCalculationResult:
        self.calls.append(request)
        if self.installment is None:
            raise ProviderError(
                "Provider request failed", provider=self.provider, details="Shop disabled"
            )
        return RemoteCalculationResult(
            monthly_installment=self.installment,
            provider=self.provider,
            details={"productCode": product.provider_config.get("productCode")},
        )


@pytest.fixture
def catalog(make_product: Factory) -> list[FinancingProduct]:
    return [
        make_product(id="own-credit", name="Salon credit", is_default=True),
        make_product(
            id="inbank-credit",
            provider="INBANK",
            priority=10,
            max_amount=Decimal("150000"),
            provider_config={"productCode": "CL_CREDIT", "paymentDay": 5},
        ),
        make_product(
            id="own-leasing",
            category=FinancingCategory.LEASING,
            has_balloon_payment=True,
            max_final_payment=Decimal("40"),
            commission=Decimal("1"),
            is_default=True,
        ),
        make_product(id="vehis-leasing", category=FinancingCategory.LEASING, provider="VEHIS"),
    ]


@pytest.fixture
def gateway() -> FakeInbankGateway:
    return FakeInbankGateway()


@pytest.fixture
def connections() -> list[ProviderConnection]:
    return [
        ProviderConnection(
            id="conn-1",
            provider="INBANK",
            name="Inbank",
            api_base_url="https://inbank.example",
            api_key="key",
            shop_uuid="shop-1",
        )
    ]


@pytest.fixture
def app(
    catalog: list[FinancingProduct],
    connections: list[ProviderConnection],
    gateway: FakeInbankGateway,
) -> FastAPI:
    """Financing router with exception handlers and in-memory wiring."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")

    products = InMemoryFinancingProductRepository(catalog)
    calculate = CalculateProviderInstallment(
        product_repository=products,
        connection_repository=InMemoryProviderConnectionRepository(connections),
        gateways=[gateway],
    )

    test_app.dependency_overrides[get_list_financing_products_use_case] = lambda: (
        ListFinancingProducts(products)
    )
    test_app.dependency_overrides[get_calculate_provider_installment_use_case] = lambda: calculate
    test_app.dependency_overrides[get_quote_financing_offer_use_case] = lambda: (
        QuoteFinancingOffer(products, ProviderBackedInstallmentCalculator(calculate))
    )
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def calculate_body(**overrides) -> dict:
    body = {"productId": "inbank-credit", "price": 100000, "downPaymentAmount": 10000, "period": 36}
    body.update(overrides)
    return body


# ==============================================================================
# GET /v1/financing/calculator
# ==============================================================================


def test_catalog_lists_every_product_in_catalog_order(client: TestClient) -> None:
    response = client.get("/v1/financing/calculator")

    assert response.status_code == 200
    products = response.json()["products"]
    assert [p["id"] for p in products] == [
        "inbank-credit",
        "own-credit",
        "own-leasing",
        "vehis-leasing",
    ]


def test_catalog_renders_camel_case_and_string_numbers(client: TestClient) -> None:
    product = client.get("/v1/financing/calculator").json()["products"][0]

    assert product["category"] == "CREDIT"
    assert product["provider"] == "INBANK"
    assert product["maxAmount"] == "150000"
    assert product["minAmount"] is None
    assert product["referenceRate"] == "5"
    assert product["minInstallments"] == 12
    assert product["hasBalloonPayment"] is False
    assert "provider_config" not in product
    assert "providerConfig" not in product


# ==============================================================================
# POST /v1/financing/calculate
# ==============================================================================


def test_calculate_returns_provider_installment(
    client: TestClient, gateway: FakeInbankGateway
) -> None:
    response = client.post("/v1/financing/calculate", json=calculate_body(mileageKm=42000))

    assert response.status_code == 200
    assert response.json() == {
        "monthlyInstallment": 2650.17,
        "provider": "INBANK",
        "details": {"productCode": "CL_CREDIT"},
    }
    [request] = gateway.calls
    assert request.price == Decimal("100000")
    assert request.down_payment_amount == Decimal("10000")
    assert request.mileage_km == 42000


def test_calculate_unknown_product_returns_404(client: TestClient) -> None:
    response = client.post("/v1/financing/calculate", json=calculate_body(productId="missing"))

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_calculate_own_product_returns_400(client: TestClient) -> None:
    response = client.post("/v1/financing/calculate", json=calculate_body(productId="own-credit"))

    assert response.status_code == 400
    assert response.json()["code"] == "UNSUPPORTED_PROVIDER"


def test_calculate_provider_without_gateway_returns_400(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/calculate", json=calculate_body(productId="vehis-leasing")
    )

    assert response.status_code == 400


def test_calculate_without_connection_returns_409(
    client: TestClient, connections: list[ProviderConnection]
) -> None:
    connections.clear()

    response = client.post("/v1/financing/calculate", json=calculate_body())

    assert response.status_code == 409
    assert response.json() == {"detail": "Connection not configured", "code": "CONFLICT"}


def test_calculate_provider_failure_returns_502(
    client: TestClient, gateway: FakeInbankGateway
) -> None:
    gateway.installment = None

    response = client.post("/v1/financing/calculate", json=calculate_body())

    assert response.status_code == 502
    assert response.json() == {
        "detail": "Provider request failed",
        "code": "PROVIDER_ERROR",
        "details": "Shop disabled",
    }


@pytest.mark.parametrize(
    "overrides, field",
    [({"price": 0}, "price"), ({"downPaymentAmount": -1}, "downPaymentAmount"), ({"period": 0}, "period")],
)
def test_calculate_invalid_values_return_422(
    client: TestClient, gateway: FakeInbankGateway, overrides: dict, field: str
) -> None:
    response = client.post("/v1/financing/calculate", json=calculate_body(**overrides))

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert [error["field"] for error in data["errors"]] == [field]
    assert gateway.calls == []


def test_calculate_malformed_payload_returns_422(client: TestClient) -> None:
    response = client.post("/v1/financing/calculate", json={"price": "abc", "period": 36})

    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"productId", "price", "downPaymentAmount"} <= fields


# ==============================================================================
# POST /v1/financing/offer
# ==============================================================================


def test_offer_selects_external_product(client: TestClient) -> None:
    response = client.post("/v1/financing/offer", json={"price": 100000})

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is True
    assert data["categories"] == ["CREDIT", "LEASING"]
    assert data["activeCategory"] == "CREDIT"
    assert data["product"]["id"] == "inbank-credit"
    assert data["monthlyInstallment"] == "2650.17"
    assert data["isEstimate"] is False
    assert data["commissionAmount"] is None
    assert data["annualRate"] is None
    assert data["parameters"] == {
        "months": 36,
        "initialPaymentPct": "10",
        "finalPaymentPct": "0",
        "initialPaymentAmount": "10000",
        "finalPaymentAmount": "0",
    }


def test_offer_falls_back_to_own_product_when_provider_fails(
    client: TestClient, gateway: FakeInbankGateway
) -> None:
    gateway.installment = None

    response = client.post("/v1/financing/offer", json={"price": 100000})

    assert response.status_code == 200
    data = response.json()
    assert data["product"]["id"] == "own-credit"
    assert data["isEstimate"] is False
    assert data["annualRate"] == "7"
    assert len(gateway.calls) == 1


def test_offer_above_provider_limit_uses_own_product(
    client: TestClient, gateway: FakeInbankGateway
) -> None:
    response = client.post("/v1/financing/offer", json={"price": 200000})

    assert response.json()["product"]["id"] == "own-credit"
    assert gateway.calls == []


def test_offer_with_category_and_parameters(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/offer",
        json={
            "price": 100000,
            "category": "LEASING",
            "months": 48,
            "initialPaymentPct": 20,
            "finalPaymentPct": 30,
        },
    )

    data = response.json()
    assert data["product"]["id"] == "own-leasing"
    assert data["parameters"]["months"] == 48
    assert data["parameters"]["finalPaymentAmount"] == "30000"
    assert data["bounds"] == {
        "minMonths": 12,
        "maxMonths": 84,
        "maxInitialPaymentPct": "50",
        "minFinalPaymentPct": "0",
        "maxFinalPaymentPct": "40",
    }
    assert data["commissionAmount"] == "800.00"


def test_offer_for_category_without_products(client: TestClient) -> None:
    response = client.post("/v1/financing/offer", json={"price": 100000, "category": "RENT"})

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    assert data["product"] is None
    assert data["monthlyInstallment"] is None
    assert data["isEstimate"] is True


@pytest.mark.parametrize(
    "body",
    [{}, {"price": 0}, {"price": 100000, "category": "MORTGAGE"}, {"price": 100000, "initialPaymentPct": 120}],
)
def test_offer_invalid_payload_returns_422(client: TestClient, body: dict) -> None:
    response = client.post("/v1/financing/offer", json=body)

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
