from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from carsalon.domain.financing import (
    FinancingProduct,
    RemoteCalculationRequest,
    RemoteCalculationResult,
)
from carsalon.domain.installment import percent_of
from carsalon.entrypoints.http.dtos.financing import (
    CalculateInstallmentRequestDTO,
    CalculateInstallmentResponseDTO,
    FinancingCatalogResponseDTO,
    FinancingOfferRequestDTO,
    FinancingOfferResponseDTO,
    FinancingParametersDTO,
    FinancingProductDTO,
    ParameterBoundsDTO,
)
from carsalon.use_cases.financing_session import FinancingView
from carsalon.use_cases.quote_financing_offer import QuoteFinancingOfferRequest

CENTS = Decimal("0.01")


def _money(value: Decimal) -> str:
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def _optional_str(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


class FinancingMapper:
    """Maps between REST DTOs and domain models for financing."""

    @staticmethod
    def to_product_dto(product: FinancingProduct) -> FinancingProductDTO:
        """Decimal → str at the boundary."""
        return FinancingProductDTO(
            id=product.id,
            category=product.category,
            name=product.name,
            currency=product.currency,
            provider=product.provider,
            priority=product.priority,
            min_amount=_optional_str(product.min_amount),
            max_amount=_optional_str(product.max_amount),
            reference_rate=str(product.reference_rate),
            margin=str(product.margin),
            commission=str(product.commission),
            max_initial_payment=str(product.max_initial_payment),
            max_final_payment=str(product.max_final_payment),
            min_installments=product.min_installments,
            max_installments=product.max_installments,
            has_balloon_payment=product.has_balloon_payment,
            is_default=product.is_default,
        )

    @staticmethod
    def to_catalog_response(products: list[FinancingProduct]) -> FinancingCatalogResponseDTO:
        return FinancingCatalogResponseDTO(
            products=[FinancingMapper.to_product_dto(product) for product in products]
        )

    @staticmethod
    def to_remote_request(dto: CalculateInstallmentRequestDTO) -> RemoteCalculationRequest:
        return RemoteCalculationRequest(
            product_id=dto.product_id,
            price=dto.price,
            down_payment_amount=dto.down_payment_amount,
            period=dto.period,
            initial_fee_percent=dto.initial_fee_percent,
            final_payment_percent=dto.final_payment_percent,
            manufacturing_year=dto.manufacturing_year,
            mileage_km=dto.mileage_km,
        )

    @staticmethod
    def to_calculate_response(result: RemoteCalculationResult) -> CalculateInstallmentResponseDTO:
        """The wire contract carries the installment as a JSON number."""
        return CalculateInstallmentResponseDTO(
            monthly_installment=float(result.monthly_installment),
            provider=result.provider,
            details=result.details or None,
        )

    @staticmethod
    def to_offer_request(dto: FinancingOfferRequestDTO) -> QuoteFinancingOfferRequest:
        return QuoteFinancingOfferRequest(
            price=dto.price,
            category=dto.category,
            months=dto.months,
            initial_payment_pct=dto.initial_payment_pct,
            final_payment_pct=dto.final_payment_pct,
            special_offer_discount=dto.special_offer_discount,
            offer_initial_payment=dto.offer_initial_payment,
            manufacturing_year=dto.manufacturing_year,
            mileage_km=dto.mileage_km,
        )

    @staticmethod
    def to_offer_response(view: FinancingView, price: Decimal) -> FinancingOfferResponseDTO:
        """
        Converts the session view to the offer response.

        Args:
            view: Financing view after recalculation
            price: Price basis (echoed to derive payment amounts)
        """
        parameters = None
        if view.parameters is not None:
            parameters = FinancingParametersDTO(
                months=view.parameters.months,
                initial_payment_pct=str(view.parameters.initial_payment_pct),
                final_payment_pct=str(view.parameters.final_payment_pct),
                initial_payment_amount=str(percent_of(price, view.parameters.initial_payment_pct)),
                final_payment_amount=str(percent_of(price, view.parameters.final_payment_pct)),
            )

        bounds = None
        if view.bounds is not None:
            bounds = ParameterBoundsDTO(
                min_months=view.bounds.min_months,
                max_months=view.bounds.max_months,
                max_initial_payment_pct=str(view.bounds.max_initial_payment_pct),
                min_final_payment_pct=str(view.bounds.min_final_payment_pct),
                max_final_payment_pct=str(view.bounds.max_final_payment_pct),
            )

        return FinancingOfferResponseDTO(
            available=view.is_available,
            categories=view.categories,
            active_category=view.active_category,
            product=(
                FinancingMapper.to_product_dto(view.selected_product)
                if view.selected_product is not None
                else None
            ),
            parameters=parameters,
            bounds=bounds,
            monthly_installment=(
                _money(view.display_installment) if view.display_installment is not None else None
            ),
            is_estimate=view.is_estimate,
            commission_amount=(
                _money(view.commission_amount) if view.commission_amount is not None else None
            ),
            annual_rate=_optional_str(view.annual_rate),
        )
