from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class FinancingCategory(str, Enum):
    CREDIT = "CREDIT"
    LEASING = "LEASING"
    RENT = "RENT"


# In-house products are computed locally; every other provider is remote.
OWN_PROVIDER = "OWN"
INBANK_PROVIDER = "INBANK"
VEHIS_PROVIDER = "VEHIS"

REMOTE_PROVIDERS = frozenset({INBANK_PROVIDER, VEHIS_PROVIDER})


@dataclass(frozen=True, slots=True)
class FinancingProduct:
    """
    Catalog entry describing one financing offer.

    Percent fields (rates, commission, payment caps) are expressed in
    percent, e.g. Decimal("5.5") means 5.5%. Amount bounds are inclusive and
    None means unbounded on that side.
    """

    id: str
    category: FinancingCategory
    provider: str
    currency: str
    reference_rate: Decimal
    margin: Decimal
    commission: Decimal
    min_installments: int
    max_installments: int
    max_initial_payment: Decimal
    max_final_payment: Decimal
    has_balloon_payment: bool = True
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    priority: int = 0
    is_default: bool = False
    name: str | None = None
    provider_config: dict[str, Any] = field(default_factory=dict)

    @property
    def annual_rate(self) -> Decimal:
        return self.reference_rate + self.margin

    @property
    def is_own(self) -> bool:
        return self.provider == OWN_PROVIDER

    def accepts_amount(self, amount: Decimal) -> bool:
        if self.min_amount is not None and amount < self.min_amount:
            return False
        if self.max_amount is not None and amount > self.max_amount:
            return False
        return True


@dataclass(frozen=True, slots=True)
class CalculationRequest:
    """Inputs of one installment calculation, re-derived on every change."""

    price: Decimal
    months: int
    initial_payment_pct: Decimal
    final_payment_pct: Decimal
    manufacturing_year: int | None = None
    mileage_km: int | None = None


@dataclass(frozen=True, slots=True)
class OwnInstallment:
    """Locally computed installment for an in-house product."""

    initial_payment_amount: Decimal
    final_payment_amount: Decimal
    amount_to_finance: Decimal
    annual_rate: Decimal
    monthly_rate: Decimal
    monthly_installment: Decimal
    commission_amount: Decimal  # Informational, never added to the installment


@dataclass(frozen=True, slots=True)
class RemoteCalculationRequest:
    """Payload of a remote installment calculation for an external provider."""

    product_id: str
    price: Decimal
    down_payment_amount: Decimal
    period: int
    initial_fee_percent: Decimal | None = None
    final_payment_percent: Decimal | None = None
    manufacturing_year: int | None = None
    mileage_km: int | None = None


@dataclass(frozen=True, slots=True)
class RemoteCalculationResult:
    monthly_installment: Decimal
    provider: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderConnection:
    """Credentials and endpoint of an external financing provider."""

    id: str
    provider: str
    name: str
    api_base_url: str
    api_key: str
    api_secret: str | None = None
    shop_uuid: str | None = None
    is_active: bool = True
