"""
Dependency injection for FastAPI routes.

Database sessions are per-request. Only long-lived, request-independent
objects are cached with lru_cache: the outbound HTTP client (connection
pool) and the provider gateways (VEHIS keeps its auth token cache).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

from carsalon.adapters.inbank_provider_gateway import InbankProviderGateway
from carsalon.adapters.postgres_financing_product_repository import (
    PostgresFinancingProductRepository,
)
from carsalon.adapters.postgres_provider_connection_repository import (
    PostgresProviderConnectionRepository,
)
from carsalon.adapters.provider_backed_installment_calculator import (
    ProviderBackedInstallmentCalculator,
)
from carsalon.adapters.vehis_provider_gateway import VehisProviderGateway
from carsalon.infra.config import inbank_base_url, provider_timeout_seconds, vehis_token_ttl_seconds
from carsalon.infra.db.session import get_session
from carsalon.ports.financing_provider_gateway import FinancingProviderGateway
from carsalon.use_cases.calculate_provider_installment import CalculateProviderInstallment
from carsalon.use_cases.list_financing_products import ListFinancingProducts
from carsalon.use_cases.quote_financing_offer import QuoteFinancingOffer


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    The underlying get_session() commits on success, rolls back on
    exception and always closes the session.
    """
    with get_session() as session:
        yield session


@lru_cache
def get_provider_http_client() -> httpx.Client:
    return httpx.Client(timeout=provider_timeout_seconds())


@lru_cache
def get_provider_gateways() -> tuple[FinancingProviderGateway, ...]:
    client = get_provider_http_client()
    return (
        InbankProviderGateway(client, base_url_override=inbank_base_url()),
        VehisProviderGateway(client, token_ttl_seconds=vehis_token_ttl_seconds()),
    )


def get_list_financing_products_use_case(db: Session = Depends(get_db)) -> ListFinancingProducts:
    return ListFinancingProducts(product_repository=PostgresFinancingProductRepository(session=db))


def get_calculate_provider_installment_use_case(
    db: Session = Depends(get_db),
) -> CalculateProviderInstallment:
    """
    Factory for the provider calculation use case.

    Repositories are fresh per request; gateways are shared.
    """
    return CalculateProviderInstallment(
        product_repository=PostgresFinancingProductRepository(session=db),
        connection_repository=PostgresProviderConnectionRepository(session=db),
        gateways=get_provider_gateways(),
    )


def get_quote_financing_offer_use_case(
    calculate_use_case: CalculateProviderInstallment = Depends(
        get_calculate_provider_installment_use_case
    ),
    db: Session = Depends(get_db),
) -> QuoteFinancingOffer:
    return QuoteFinancingOffer(
        product_repository=PostgresFinancingProductRepository(session=db),
        remote_calculator=ProviderBackedInstallmentCalculator(calculate_use_case),
    )
