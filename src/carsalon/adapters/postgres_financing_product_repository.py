"""PostgreSQL implementation of FinancingProductRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from carsalon.domain.financing import FinancingCategory, FinancingProduct
from carsalon.infra.db.models.financing_product import FinancingProductRow
from carsalon.ports.financing_product_repository import FinancingProductRepository


class PostgresFinancingProductRepository(FinancingProductRepository):
    """
    PostgreSQL implementation of FinancingProductRepository.

    - Uses SQLAlchemy ORM for database access
    - Orders the catalog in SQL (category, priority desc, default first)
    - Converts FinancingProductRow (infrastructure) to FinancingProduct (domain)
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_products(self) -> list[FinancingProduct]:
        query = select(FinancingProductRow).order_by(
            FinancingProductRow.category.asc(),
            FinancingProductRow.priority.desc(),
            FinancingProductRow.is_default.desc(),
        )
        rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, product_id: str) -> FinancingProduct | None:
        """
        Get product by ID.

        Args:
            product_id: Product ID (expected to be a valid UUID string)

        Returns:
            FinancingProduct if found, None otherwise (including malformed ids)
        """
        try:
            query = select(FinancingProductRow).where(FinancingProductRow.id == UUID(product_id))
        except ValueError:  # Invalid UUID format
            return None

        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def _to_domain(self, row: FinancingProductRow) -> FinancingProduct:
        return FinancingProduct(
            id=str(row.id),
            category=FinancingCategory(row.category),
            provider=row.provider,
            currency=row.currency,
            reference_rate=row.reference_rate,  # Already Decimal from NUMERIC column
            margin=row.margin,
            commission=row.commission,
            min_installments=row.min_installments,
            max_installments=row.max_installments,
            max_initial_payment=row.max_initial_payment,
            max_final_payment=row.max_final_payment,
            has_balloon_payment=row.has_balloon_payment,
            min_amount=row.min_amount,
            max_amount=row.max_amount,
            priority=row.priority,
            is_default=row.is_default,
            name=row.name,
            provider_config=dict(row.provider_config or {}),
        )
