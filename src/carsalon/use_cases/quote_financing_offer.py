from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from carsalon.domain.financing import FinancingCategory
from carsalon.ports.financing_product_repository import FinancingProductRepository
from carsalon.ports.remote_installment_calculator import RemoteInstallmentCalculator
from carsalon.use_cases.financing_session import FinancingSession, FinancingView


@dataclass(frozen=True, slots=True)
class QuoteFinancingOfferRequest:
    price: Decimal
    category: FinancingCategory | None = None
    months: int | None = None
    initial_payment_pct: Decimal | None = None
    final_payment_pct: Decimal | None = None
    special_offer_discount: Decimal | None = None
    offer_initial_payment: Decimal | None = None
    manufacturing_year: int | None = None
    mileage_km: int | None = None


class QuoteFinancingOffer:
    """
    One-shot financing offer for a vehicle price.

    Runs a fresh FinancingSession: selects the product for the category,
    applies the requested parameters on top of its defaults and resolves
    the installment, cascading past providers whose remote calculation
    fails. The result is None-safe: an unavailable offer is reported in
    the view, never raised.
    """

    def __init__(
        self,
        product_repository: FinancingProductRepository,
        remote_calculator: RemoteInstallmentCalculator,
    ) -> None:
        self._repository = product_repository
        self._remote_calculator = remote_calculator

    def execute(self, request: QuoteFinancingOfferRequest) -> FinancingView:
        session = FinancingSession(
            catalog_loader=self._repository.list_products,
            remote_calculator=self._remote_calculator,
            price=request.price,
            manufacturing_year=request.manufacturing_year,
            mileage_km=request.mileage_km,
            special_offer_discount=request.special_offer_discount,
            offer_initial_payment=request.offer_initial_payment,
        )
        session.load_catalog()

        if request.category is not None:
            session.set_category(request.category)

        if any(
            value is not None
            for value in (request.months, request.initial_payment_pct, request.final_payment_pct)
        ):
            session.adjust(
                months=request.months,
                initial_payment_pct=request.initial_payment_pct,
                final_payment_pct=request.final_payment_pct,
            )

        return session.recalculate()
