from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from carsalon.domain.financing import FinancingCategory


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FinancingProductDTO(CamelModel):
    id: str
    category: FinancingCategory
    name: str | None = None
    currency: str
    provider: str
    priority: int
    min_amount: str | None = None
    max_amount: str | None = None
    reference_rate: str
    margin: str
    commission: str
    max_initial_payment: str
    max_final_payment: str
    min_installments: int
    max_installments: int
    has_balloon_payment: bool
    is_default: bool


class FinancingCatalogResponseDTO(CamelModel):
    products: list[FinancingProductDTO]


class CalculateInstallmentRequestDTO(CamelModel):
    """Request payload of a remote (provider) installment calculation."""

    product_id: str = Field(description="Financing product id", examples=["a3b1..."])
    price: Decimal = Field(description="Vehicle price (gross)", examples=[100000])
    down_payment_amount: Decimal = Field(description="Down payment amount", examples=[10000])
    period: int = Field(description="Term in months", examples=[36])
    initial_fee_percent: Decimal | None = Field(default=None, ge=0, le=100)
    final_payment_percent: Decimal | None = Field(default=None, ge=0, le=100)
    manufacturing_year: int | None = Field(default=None, ge=1900)
    mileage_km: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "productId": "5f0c3c1e-8c1e-4f43-9b8e-6a1f1b1b2c3d",
                "price": 100000,
                "downPaymentAmount": 10000,
                "period": 36,
                "initialFeePercent": 10,
                "finalPaymentPercent": 20,
                "manufacturingYear": 2022,
                "mileageKm": 35000,
            }
        }
    )


class CalculateInstallmentResponseDTO(CamelModel):
    monthly_installment: float = Field(description="Monthly installment returned by the provider")
    provider: str
    details: dict[str, Any] | None = None


class FinancingOfferRequestDTO(CamelModel):
    """Request payload for a complete financing offer quote."""

    price: Decimal = Field(gt=0, description="Vehicle price basis", examples=[100000])
    category: FinancingCategory | None = Field(
        default=None, description="Category tab; defaults to the first available"
    )
    months: int | None = Field(default=None, ge=1)
    initial_payment_pct: Decimal | None = Field(default=None, ge=0, le=100)
    final_payment_pct: Decimal | None = Field(default=None, ge=0, le=100)
    special_offer_discount: Decimal | None = Field(
        default=None, ge=0, description="Already applied special-offer discount amount"
    )
    offer_initial_payment: Decimal | None = Field(default=None, ge=0)
    manufacturing_year: int | None = Field(default=None, ge=1900)
    mileage_km: int | None = Field(default=None, ge=0)


class FinancingParametersDTO(CamelModel):
    months: int
    initial_payment_pct: str
    final_payment_pct: str
    initial_payment_amount: str
    final_payment_amount: str


class ParameterBoundsDTO(CamelModel):
    min_months: int
    max_months: int
    max_initial_payment_pct: str
    min_final_payment_pct: str
    max_final_payment_pct: str


class FinancingOfferResponseDTO(CamelModel):
    available: bool
    categories: list[FinancingCategory]
    active_category: FinancingCategory | None = None
    product: FinancingProductDTO | None = None
    parameters: FinancingParametersDTO | None = None
    bounds: ParameterBoundsDTO | None = None
    monthly_installment: str | None = Field(
        default=None, description="Installment rounded to cents; null while only an estimate"
    )
    is_estimate: bool
    commission_amount: str | None = None
    annual_rate: str | None = None
