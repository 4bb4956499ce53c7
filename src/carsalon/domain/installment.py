from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from carsalon.domain.financing import (
    CalculationRequest,
    FinancingProduct,
    OwnInstallment,
    RemoteCalculationRequest,
)

HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")


def round_amount(value: Decimal) -> Decimal:
    """Round a monetary amount to whole currency units (half up)."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def percent_of(price: Decimal, pct: Decimal) -> Decimal:
    return round_amount(price * pct / HUNDRED)


def compute_own_installment(
    product: FinancingProduct,
    price: Decimal,
    months: int,
    initial_pct: Decimal,
    final_pct: Decimal,
) -> OwnInstallment:
    """
    Annuity installment with an optional balloon (final) payment.

    The balloon is discounted back over the term and netted out of the
    financed principal:

        installment = (A*r - F*r/(1+r)^n) / (1 - 1/(1+r)^n)

    With a zero rate the installment degenerates to (A - F) / n. The term
    is not guarded against zero; callers keep it within the product bounds.
    """
    initial_payment_amount = percent_of(price, initial_pct)
    final_payment_amount = percent_of(price, final_pct)
    amount_to_finance = price - initial_payment_amount
    annual_rate = product.annual_rate
    monthly_rate = annual_rate / HUNDRED / MONTHS_PER_YEAR

    if monthly_rate == 0:
        installment = (amount_to_finance - final_payment_amount) / Decimal(months)
    else:
        one = Decimal("1")
        factor = (one + monthly_rate) ** months
        installment = (
            amount_to_finance * monthly_rate - final_payment_amount * monthly_rate / factor
        ) / (one - one / factor)

    return OwnInstallment(
        initial_payment_amount=initial_payment_amount,
        final_payment_amount=final_payment_amount,
        amount_to_finance=amount_to_finance,
        annual_rate=annual_rate,
        monthly_rate=monthly_rate,
        monthly_installment=installment,
        commission_amount=amount_to_finance * product.commission / HUNDRED,
    )


def build_remote_request(
    product: FinancingProduct, request: CalculationRequest
) -> RemoteCalculationRequest:
    return RemoteCalculationRequest(
        product_id=product.id,
        price=request.price,
        down_payment_amount=percent_of(request.price, request.initial_payment_pct),
        period=request.months,
        initial_fee_percent=request.initial_payment_pct,
        final_payment_percent=request.final_payment_pct,
        manufacturing_year=request.manufacturing_year,
        mileage_km=request.mileage_km,
    )


def compute_installment(
    product: FinancingProduct, request: CalculationRequest
) -> OwnInstallment | RemoteCalculationRequest:
    """
    Compute the installment locally for OWN products.

    For any other provider nothing is computed here: the returned
    RemoteCalculationRequest must be sent to a remote calculator.
    """
    if product.is_own:
        return compute_own_installment(
            product,
            price=request.price,
            months=request.months,
            initial_pct=request.initial_payment_pct,
            final_pct=request.final_payment_pct,
        )
    return build_remote_request(product, request)
