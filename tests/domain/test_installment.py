"""
Test suite for the installment calculator.

Covers the in-house annuity formula with balloon payment, rounding of
derived amounts, and delegation of external products to a remote
calculation request.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest

from carsalon.domain.financing import (
    CalculationRequest,
    FinancingProduct,
    OwnInstallment,
    RemoteCalculationRequest,
)
from carsalon.domain.installment import (
    compute_installment,
    compute_own_installment,
    percent_of,
    round_amount,
)

Factory = Callable[..., FinancingProduct]

PRICE = Decimal("100000")


# ==============================================================================
# Rounding helpers
# ==============================================================================


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("2.5"), Decimal("3")),
        (Decimal("2.49"), Decimal("2")),
        (Decimal("1234.5"), Decimal("1235")),
        (Decimal("-0.4"), Decimal("0")),
    ],
)
def test_round_amount_rounds_half_up_to_whole_units(value: Decimal, expected: Decimal) -> None:
    assert round_amount(value) == expected


def test_percent_of_rounds_to_whole_units() -> None:
    assert percent_of(Decimal("12345"), Decimal("10")) == Decimal("1235")
    assert percent_of(PRICE, Decimal("20")) == Decimal("20000")


# ==============================================================================
# In-house annuity
# ==============================================================================


def test_standard_annuity_without_balloon(make_product: Factory) -> None:
    """7% yearly, 36 months, 10% down on 100 000 gives roughly 2779 per month."""
    product = make_product()

    result = compute_own_installment(product, PRICE, 36, Decimal("10"), Decimal("0"))

    assert result.initial_payment_amount == Decimal("10000")
    assert result.final_payment_amount == Decimal("0")
    assert result.amount_to_finance == Decimal("90000")
    assert result.annual_rate == Decimal("7")
    assert Decimal("2775") < result.monthly_installment < Decimal("2783")


def test_annuity_matches_present_value_identity(make_product: Factory) -> None:
    """Discounting every installment at the monthly rate recovers the principal."""
    product = make_product(reference_rate=Decimal("6.5"), margin=Decimal("1.25"))

    result = compute_own_installment(product, PRICE, 48, Decimal("15"), Decimal("0"))

    rate = result.monthly_rate
    present_value = sum(
        result.monthly_installment / (1 + rate) ** month for month in range(1, 49)
    )
    assert abs(present_value - result.amount_to_finance) < Decimal("0.0001")


def test_zero_rate_splits_principal_minus_balloon_evenly(make_product: Factory) -> None:
    product = make_product(
        reference_rate=Decimal("0"),
        margin=Decimal("0"),
        has_balloon_payment=True,
        max_final_payment=Decimal("40"),
    )

    result = compute_own_installment(product, PRICE, 36, Decimal("10"), Decimal("20"))

    assert result.monthly_rate == Decimal("0")
    assert result.monthly_installment == Decimal("70000") / Decimal("36")


def test_zero_rate_without_balloon(make_product: Factory) -> None:
    product = make_product(reference_rate=Decimal("0"), margin=Decimal("0"))

    result = compute_own_installment(product, Decimal("48000"), 24, Decimal("0"), Decimal("0"))

    assert result.monthly_installment == Decimal("2000")


def test_larger_balloon_lowers_installment(make_product: Factory) -> None:
    product = make_product(has_balloon_payment=True, max_final_payment=Decimal("50"))

    installments = [
        compute_own_installment(product, PRICE, 36, Decimal("10"), Decimal(final)).monthly_installment
        for final in (0, 10, 20, 30, 40)
    ]

    assert all(a > b for a, b in zip(installments, installments[1:]))


def test_commission_is_informational(make_product: Factory) -> None:
    plain = make_product()
    with_commission = make_product(commission=Decimal("2"))

    base = compute_own_installment(plain, PRICE, 36, Decimal("10"), Decimal("0"))
    charged = compute_own_installment(with_commission, PRICE, 36, Decimal("10"), Decimal("0"))

    assert charged.monthly_installment == base.monthly_installment
    assert charged.commission_amount == Decimal("1800")
    assert base.commission_amount == Decimal("0")


# ==============================================================================
# Dispatch
# ==============================================================================


def test_compute_installment_is_local_for_own_products(make_product: Factory) -> None:
    request = CalculationRequest(
        price=PRICE, months=36, initial_payment_pct=Decimal("10"), final_payment_pct=Decimal("0")
    )

    result = compute_installment(make_product(), request)

    assert isinstance(result, OwnInstallment)


def test_compute_installment_builds_remote_request_for_external_products(
    make_product: Factory,
) -> None:
    product = make_product(id="vehis-leasing", provider="VEHIS", has_balloon_payment=True)
    request = CalculationRequest(
        price=Decimal("123456"),
        months=48,
        initial_payment_pct=Decimal("15"),
        final_payment_pct=Decimal("20"),
        manufacturing_year=2022,
        mileage_km=15000,
    )

    result = compute_installment(product, request)

    assert result == RemoteCalculationRequest(
        product_id="vehis-leasing",
        price=Decimal("123456"),
        down_payment_amount=Decimal("18518"),
        period=48,
        initial_fee_percent=Decimal("15"),
        final_payment_percent=Decimal("20"),
        manufacturing_year=2022,
        mileage_km=15000,
    )
