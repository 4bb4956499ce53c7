from fastapi import APIRouter, Depends

from carsalon.entrypoints.http.dependencies import (
    get_calculate_provider_installment_use_case,
    get_list_financing_products_use_case,
    get_quote_financing_offer_use_case,
)
from carsalon.entrypoints.http.dtos.financing import (
    CalculateInstallmentRequestDTO,
    CalculateInstallmentResponseDTO,
    FinancingCatalogResponseDTO,
    FinancingOfferRequestDTO,
    FinancingOfferResponseDTO,
)
from carsalon.entrypoints.http.error_responses import ErrorResponse
from carsalon.entrypoints.http.mappers.financing_mapper import FinancingMapper
from carsalon.use_cases.calculate_provider_installment import CalculateProviderInstallment
from carsalon.use_cases.list_financing_products import ListFinancingProducts
from carsalon.use_cases.quote_financing_offer import QuoteFinancingOffer


router = APIRouter(tags=["Financing"])


@router.get(
    "/financing/calculator",
    response_model=FinancingCatalogResponseDTO,
    summary="Financing product catalog",
    description="""
    All financing products for the public calculator.

    The response does not depend on any filter; clients cache it and split
    products by category themselves. Ordering: category, priority (desc),
    default product first.
    """,
)
def get_financing_catalog(
    use_case: ListFinancingProducts = Depends(get_list_financing_products_use_case),
) -> FinancingCatalogResponseDTO:
    result = use_case.execute()
    return FinancingMapper.to_catalog_response(result.products)


@router.post(
    "/financing/calculate",
    response_model=CalculateInstallmentResponseDTO,
    summary="Calculate installment with an external provider",
    description="""
    Calculate the monthly installment of an external provider product
    (INBANK, VEHIS). In-house (OWN) products are calculated by the client
    and are rejected here.

    ## Example
    ```
    POST /v1/financing/calculate
    {
        "productId": "5f0c3c1e-8c1e-4f43-9b8e-6a1f1b1b2c3d",
        "price": 100000,
        "downPaymentAmount": 10000,
        "period": 36
    }
    ```
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported provider"},
        404: {"model": ErrorResponse, "description": "Product not found"},
        409: {"model": ErrorResponse, "description": "Provider connection not configured"},
        422: {"model": ErrorResponse, "description": "Validation error"},
        502: {"model": ErrorResponse, "description": "Provider request failed"},
    },
)
def calculate_installment(
    payload: CalculateInstallmentRequestDTO,
    use_case: CalculateProviderInstallment = Depends(get_calculate_provider_installment_use_case),
) -> CalculateInstallmentResponseDTO:
    """Parse → execute → map → return."""
    request = FinancingMapper.to_remote_request(payload)
    result = use_case.execute(request)
    return FinancingMapper.to_calculate_response(result)


@router.post(
    "/financing/offer",
    response_model=FinancingOfferResponseDTO,
    summary="Quote the best financing offer for a price",
    description="""
    Select the best matching financing product for the price and category
    and compute its monthly installment.

    - Products are filtered by category and amount to finance, then ranked
      by priority, default flag and provider (external before in-house).
    - If no product accepts the amount, the in-house product of the
      category is used regardless of its amount bounds.
    - External providers whose calculation fails are skipped and the next
      best product is tried.
    - `available=false` means no financing is offered for the category.
    - `isEstimate=true` with a null installment means no number could be
      obtained.
    """,
    responses={422: {"model": ErrorResponse, "description": "Validation error"}},
)
def quote_financing_offer(
    payload: FinancingOfferRequestDTO,
    use_case: QuoteFinancingOffer = Depends(get_quote_financing_offer_use_case),
) -> FinancingOfferResponseDTO:
    request = FinancingMapper.to_offer_request(payload)
    view = use_case.execute(request)
    return FinancingMapper.to_offer_response(view, price=request.price)
