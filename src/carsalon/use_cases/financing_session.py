"""Stateful financing calculator session.

Owns the selection state of one financing widget: the active category,
the products that failed remotely, the selected product and the
user-adjustable parameters. Selection is recomputed from its inputs on
every change; parameters are reset only when the selected product id
changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from carsalon.domain.financing import (
    CalculationRequest,
    FinancingCategory,
    FinancingProduct,
    OwnInstallment,
    RemoteCalculationRequest,
    RemoteCalculationResult,
)
from carsalon.domain.installment import (
    build_remote_request,
    compute_own_installment,
    percent_of,
)
from carsalon.domain.parameters import (
    DEFAULT_FINAL_PAYMENT_PCT,
    DEFAULT_INITIAL_PAYMENT_PCT,
    DEFAULT_MONTHS,
    FinancingParameters,
    ParameterBounds,
    clamp_parameters,
    default_parameters,
    parameter_bounds,
)
from carsalon.domain.product_selection import (
    available_categories,
    own_fallback,
    products_in_category,
    rank_products,
    select_product,
)
from carsalon.ports.remote_installment_calculator import (
    RemoteCalculationError,
    RemoteInstallmentCalculator,
)

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[], Sequence[FinancingProduct]]


class CalculatorState(str, Enum):
    IDLE = "IDLE"
    PRODUCT_SELECTED = "PRODUCT_SELECTED"
    PARAMETERS_INITIALIZED = "PARAMETERS_INITIALIZED"
    USER_ADJUSTING = "USER_ADJUSTING"
    RECALCULATING = "RECALCULATING"


@dataclass(frozen=True, slots=True)
class PendingCalculation:
    """
    Ticket for an in-flight remote calculation.

    A result is applied only while the session generation still matches;
    any change of product or parameters makes older tickets stale.
    """

    generation: int
    product_id: str
    parameters: FinancingParameters
    request: RemoteCalculationRequest


@dataclass(frozen=True, slots=True)
class FinancingView:
    """What the presentation layer needs to render the financing widget."""

    categories: list[FinancingCategory]
    active_category: FinancingCategory | None
    selected_product: FinancingProduct | None
    parameters: FinancingParameters | None
    bounds: ParameterBounds | None
    display_installment: Decimal | None  # None = estimate pending/unavailable
    commission_amount: Decimal | None  # OWN products only
    annual_rate: Decimal | None  # OWN products only
    state: CalculatorState

    @property
    def is_available(self) -> bool:
        return self.selected_product is not None

    @property
    def is_estimate(self) -> bool:
        return self.display_installment is None


class FinancingSession:
    def __init__(
        self,
        catalog_loader: CatalogLoader,
        remote_calculator: RemoteInstallmentCalculator,
        price: Decimal,
        manufacturing_year: int | None = None,
        mileage_km: int | None = None,
        special_offer_discount: Decimal | None = None,
        offer_initial_payment: Decimal | None = None,
    ) -> None:
        self._catalog_loader = catalog_loader
        self._remote_calculator = remote_calculator
        self._price = price
        self._manufacturing_year = manufacturing_year
        self._mileage_km = mileage_km
        self._special_offer_discount = special_offer_discount
        self._offer_initial_payment = offer_initial_payment

        self._catalog: list[FinancingProduct] | None = None
        self._active_category: FinancingCategory | None = None
        self._failed_product_ids: set[str] = set()
        self._selected: FinancingProduct | None = None
        self._parameters = FinancingParameters(
            months=DEFAULT_MONTHS,
            initial_payment_pct=DEFAULT_INITIAL_PAYMENT_PCT,
            final_payment_pct=DEFAULT_FINAL_PAYMENT_PCT,
        )
        self._own_installment: OwnInstallment | None = None
        self._remote_installment: Decimal | None = None
        self._generation = 0
        self._user_adjusted = False
        self._state = CalculatorState.IDLE

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> list[FinancingProduct]:
        self._ensure_catalog()
        return self._catalog if self._catalog is not None else []

    def load_catalog(self) -> None:
        """(Re)load the catalog. Forgets which products failed remotely."""
        self._catalog = list(self._catalog_loader())
        self._failed_product_ids = set()

        categories = available_categories(self._catalog)
        if self._active_category not in categories:
            self._active_category = categories[0] if categories else None

        self._update()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def failed_product_ids(self) -> frozenset[str]:
        return frozenset(self._failed_product_ids)

    @property
    def amount_to_finance(self) -> Decimal:
        return self._amount_for(self._parameters)

    def set_category(self, category: FinancingCategory) -> None:
        self._ensure_catalog()
        self._active_category = category
        self._update()

    def set_price(self, price: Decimal) -> None:
        self._ensure_catalog()
        self._price = price
        self._update()

    def set_vehicle(self, manufacturing_year: int | None, mileage_km: int | None) -> None:
        self._ensure_catalog()
        self._manufacturing_year = manufacturing_year
        self._mileage_km = mileage_km
        self._update()

    def set_special_offer(
        self,
        discount: Decimal | None = None,
        offer_initial_payment: Decimal | None = None,
    ) -> None:
        """Only influences defaulting of the next newly selected product."""
        self._special_offer_discount = discount
        self._offer_initial_payment = offer_initial_payment

    def adjust(
        self,
        months: int | None = None,
        initial_payment_pct: Decimal | None = None,
        final_payment_pct: Decimal | None = None,
    ) -> None:
        """Apply slider changes, clamped into the selected product's bounds."""
        self._ensure_catalog()
        if self._selected is None:
            return

        requested = FinancingParameters(
            months=months if months is not None else self._parameters.months,
            initial_payment_pct=(
                initial_payment_pct
                if initial_payment_pct is not None
                else self._parameters.initial_payment_pct
            ),
            final_payment_pct=(
                final_payment_pct
                if final_payment_pct is not None
                else self._parameters.final_payment_pct
            ),
        )
        self._parameters = clamp_parameters(requested, parameter_bounds(self._selected))
        self._user_adjusted = True
        self._transition(CalculatorState.USER_ADJUSTING)
        self._update()

    # ------------------------------------------------------------------
    # Remote calculation
    # ------------------------------------------------------------------

    def begin_remote_calculation(self) -> PendingCalculation | None:
        """
        Issue a ticket for the remote calculation the current state needs.

        Returns None when nothing has to be fetched: no product, an OWN
        product (computed locally) or an installment already resolved.
        """
        self._ensure_catalog()
        product = self._selected
        if product is None or product.is_own or self._remote_installment is not None:
            return None

        self._transition(CalculatorState.RECALCULATING)
        return PendingCalculation(
            generation=self._generation,
            product_id=product.id,
            parameters=self._parameters,
            request=self._remote_request(product),
        )

    def resolve(self, pending: PendingCalculation, result: RemoteCalculationResult) -> bool:
        """Apply a remote result. Returns False if the ticket was stale and ignored."""
        if not self._is_current(pending):
            logger.debug(
                "Discarding stale remote calculation result",
                extra={"product_id": pending.product_id, "generation": pending.generation},
            )
            return False

        self._remote_installment = result.monthly_installment
        self._transition(self._settled_state())
        return True

    def fail(self, pending: PendingCalculation, reason: str = "") -> bool:
        """
        Record a failed remote calculation.

        The product is excluded for the rest of the session and selection
        runs again, which eventually settles on an OWN product or on no
        product at all.
        """
        if not self._is_current(pending):
            logger.debug(
                "Discarding stale remote calculation failure",
                extra={"product_id": pending.product_id, "generation": pending.generation},
            )
            return False

        logger.warning(
            "Remote financing calculation failed, excluding product",
            extra={
                "product_id": pending.product_id,
                "provider": self._selected.provider if self._selected else None,
                "reason": reason,
            },
        )
        self._failed_product_ids.add(pending.product_id)
        self._remote_installment = None
        self._transition(self._settled_state())
        self._update()
        return True

    def recalculate(self) -> FinancingView:
        """
        Resolve the displayed installment, cascading through failed providers.

        Every failure excludes one product of the active category, so the
        number of remote calls is bounded by the size of that category.
        """
        self._ensure_catalog()
        max_attempts = len(self._category_products())

        for _ in range(max_attempts):
            pending = self.begin_remote_calculation()
            if pending is None:
                break
            try:
                result = self._remote_calculator.calculate(pending.request)
            except RemoteCalculationError as exc:
                self.fail(pending, exc.reason)
            else:
                self.resolve(pending, result)

        return self.view()

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def selected_product(self) -> FinancingProduct | None:
        self._ensure_catalog()
        return self._selected

    def view(self) -> FinancingView:
        self._ensure_catalog()
        product = self._selected
        own = self._own_installment if product is not None and product.is_own else None

        if own is not None:
            display = own.monthly_installment
        elif product is not None:
            display = self._remote_installment
        else:
            display = None

        return FinancingView(
            categories=available_categories(self.catalog),
            active_category=self._active_category,
            selected_product=product,
            parameters=self._parameters if product is not None else None,
            bounds=parameter_bounds(product) if product is not None else None,
            display_installment=display,
            commission_amount=own.commission_amount if own is not None else None,
            annual_rate=own.annual_rate if own is not None else None,
            state=self._state,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_catalog(self) -> None:
        if self._catalog is None:
            self.load_catalog()

    def _category_products(self) -> list[FinancingProduct]:
        if self._active_category is None:
            return []
        return products_in_category(self.catalog, self._active_category)

    def _update(self) -> None:
        """Re-run selection and recompute the installment after any input change."""
        self._generation += 1
        self._remote_installment = None
        self._reselect()
        self._refresh_installment()

    def _reselect(self) -> None:
        # Defaulting changes the initial payment, hence the amount to
        # finance, which can change the selection again. Stop as soon as
        # selection is stable; on a cycle settle via _settle_cycle.
        entry = (self._selected, self._parameters, self._user_adjusted, self._state)
        visited: list[FinancingProduct] = []
        while True:
            if self._active_category is None or self._catalog is None:
                product = None
            else:
                product = select_product(
                    self._catalog,
                    self._active_category,
                    self.amount_to_finance,
                    self._failed_product_ids,
                )

            current_id = self._selected.id if self._selected is not None else None
            new_id = product.id if product is not None else None
            if new_id == current_id:
                # Same identity: keep parameters, pick up a reloaded catalog entry.
                self._selected = product
                return

            if product is None:
                self._selected = None
                self._transition(CalculatorState.IDLE)
                return

            if any(seen.id == product.id for seen in visited):
                settled = self._settle_cycle(visited)
                entry_product, entry_parameters, entry_adjusted, entry_state = entry
                if (
                    settled is not None
                    and entry_product is not None
                    and settled.id == entry_product.id
                ):
                    # Back where we started: keep the parameters already chosen.
                    self._selected = settled
                    self._parameters = entry_parameters
                    self._user_adjusted = entry_adjusted
                    self._transition(entry_state)
                else:
                    self._apply_defaults(settled)
                return

            visited.append(product)
            self._apply_defaults(product)

    def _settle_cycle(self, visited: Sequence[FinancingProduct]) -> FinancingProduct | None:
        """
        Pick a product for a selection cycle.

        The best ranked visited product that accepts the amount produced by
        its own defaults wins; otherwise the in-house fallback of the
        category.
        """
        for product in rank_products(visited):
            if product.accepts_amount(self._amount_for(self._defaults_for(product))):
                return product

        category = self._active_category
        fallback = own_fallback(self.catalog, category) if category is not None else None
        logger.info(
            "Financing selection cycle, settling on in-house fallback",
            extra={
                "visited": [product.id for product in visited],
                "product_id": fallback.id if fallback is not None else None,
            },
        )
        return fallback

    def _apply_defaults(self, product: FinancingProduct | None) -> None:
        self._selected = product
        if product is None:
            self._transition(CalculatorState.IDLE)
            return

        self._transition(CalculatorState.PRODUCT_SELECTED)
        self._parameters = self._defaults_for(product)
        self._user_adjusted = False
        self._transition(CalculatorState.PARAMETERS_INITIALIZED)

    def _defaults_for(self, product: FinancingProduct) -> FinancingParameters:
        return default_parameters(
            product,
            self._price,
            special_offer_discount=self._special_offer_discount,
            offer_initial_payment=self._offer_initial_payment,
        )

    def _amount_for(self, parameters: FinancingParameters) -> Decimal:
        return self._price - percent_of(self._price, parameters.initial_payment_pct)

    def _refresh_installment(self) -> None:
        product = self._selected
        if product is None or not product.is_own:
            self._own_installment = None
            return

        self._own_installment = compute_own_installment(
            product,
            price=self._price,
            months=self._parameters.months,
            initial_pct=self._parameters.initial_payment_pct,
            final_pct=self._parameters.final_payment_pct,
        )

    def _calculation_request(self) -> CalculationRequest:
        return CalculationRequest(
            price=self._price,
            months=self._parameters.months,
            initial_payment_pct=self._parameters.initial_payment_pct,
            final_payment_pct=self._parameters.final_payment_pct,
            manufacturing_year=self._manufacturing_year,
            mileage_km=self._mileage_km,
        )

    def _remote_request(self, product: FinancingProduct) -> RemoteCalculationRequest:
        return build_remote_request(product, self._calculation_request())

    def _is_current(self, pending: PendingCalculation) -> bool:
        return (
            pending.generation == self._generation
            and self._selected is not None
            and pending.product_id == self._selected.id
            and pending.parameters == self._parameters
        )

    def _settled_state(self) -> CalculatorState:
        if self._user_adjusted:
            return CalculatorState.USER_ADJUSTING
        return CalculatorState.PARAMETERS_INITIALIZED

    def _transition(self, state: CalculatorState) -> None:
        if state != self._state:
            logger.debug(
                "Financing calculator state change",
                extra={"from_state": self._state.value, "to_state": state.value},
            )
        self._state = state
