from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TypeVar

from carsalon.domain.financing import VEHIS_PROVIDER, FinancingProduct
from carsalon.domain.installment import HUNDRED, round_amount

DEFAULT_MONTHS = 36
DEFAULT_INITIAL_PAYMENT_PCT = Decimal("10")
DEFAULT_FINAL_PAYMENT_PCT = Decimal("20")

# VEHIS rejects a zero repurchase value.
VEHIS_MIN_FINAL_PAYMENT_PCT = Decimal("1")

N = TypeVar("N", int, Decimal)


@dataclass(frozen=True, slots=True)
class FinancingParameters:
    """User-adjustable calculator parameters."""

    months: int
    initial_payment_pct: Decimal
    final_payment_pct: Decimal


@dataclass(frozen=True, slots=True)
class ParameterBounds:
    min_months: int
    max_months: int
    max_initial_payment_pct: Decimal
    min_final_payment_pct: Decimal
    max_final_payment_pct: Decimal


def clamp(value: N, lower: N, upper: N) -> N:
    return max(lower, min(upper, value))


def final_payment_floor(product: FinancingProduct) -> Decimal:
    if product.provider == VEHIS_PROVIDER and product.max_final_payment >= VEHIS_MIN_FINAL_PAYMENT_PCT:
        return VEHIS_MIN_FINAL_PAYMENT_PCT
    return Decimal("0")


def parameter_bounds(product: FinancingProduct) -> ParameterBounds:
    if not product.has_balloon_payment:
        return ParameterBounds(
            min_months=product.min_installments,
            max_months=product.max_installments,
            max_initial_payment_pct=product.max_initial_payment,
            min_final_payment_pct=Decimal("0"),
            max_final_payment_pct=Decimal("0"),
        )
    return ParameterBounds(
        min_months=product.min_installments,
        max_months=product.max_installments,
        max_initial_payment_pct=product.max_initial_payment,
        min_final_payment_pct=final_payment_floor(product),
        max_final_payment_pct=product.max_final_payment,
    )


def special_offer_pct(price: Decimal, discount: Decimal | None) -> Decimal | None:
    """Express a special-offer discount as a whole percent of the price."""
    if discount is None or discount <= 0 or price <= 0:
        return None
    return round_amount(discount / price * HUNDRED)


def default_parameters(
    product: FinancingProduct,
    price: Decimal,
    special_offer_discount: Decimal | None = None,
    offer_initial_payment: Decimal | None = None,
) -> FinancingParameters:
    """
    Parameters applied when a product becomes the selected one.

    - months: 36 clamped into the product's installment range
    - initial payment: 0 when an offer initial payment is supplied (the
      discount is already applied to the price), else the special-offer
      percentage, else 10%; clamped into [0, max_initial_payment]
    - final payment: 0 without balloon, else 20% clamped into
      [floor, max_final_payment]
    """
    bounds = parameter_bounds(product)

    months = clamp(DEFAULT_MONTHS, bounds.min_months, bounds.max_months)

    if offer_initial_payment is not None and offer_initial_payment > 0:
        initial_pct = Decimal("0")
    else:
        offer_pct = special_offer_pct(price, special_offer_discount)
        initial_pct = clamp(
            offer_pct if offer_pct is not None else DEFAULT_INITIAL_PAYMENT_PCT,
            Decimal("0"),
            bounds.max_initial_payment_pct,
        )

    if product.has_balloon_payment:
        final_pct = clamp(
            DEFAULT_FINAL_PAYMENT_PCT,
            bounds.min_final_payment_pct,
            bounds.max_final_payment_pct,
        )
    else:
        final_pct = Decimal("0")

    return FinancingParameters(
        months=months,
        initial_payment_pct=initial_pct,
        final_payment_pct=final_pct,
    )


def clamp_parameters(params: FinancingParameters, bounds: ParameterBounds) -> FinancingParameters:
    """Clamp user-chosen values into the selected product's ranges."""
    return FinancingParameters(
        months=clamp(params.months, bounds.min_months, bounds.max_months),
        initial_payment_pct=clamp(
            params.initial_payment_pct, Decimal("0"), bounds.max_initial_payment_pct
        ),
        final_payment_pct=clamp(
            params.final_payment_pct,
            bounds.min_final_payment_pct,
            bounds.max_final_payment_pct,
        ),
    )
