from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from carsalon.domain.financing import ProviderConnection
from carsalon.infra.db.models.provider_connection import ProviderConnectionRow
from carsalon.ports.provider_connection_repository import ProviderConnectionRepository


class PostgresProviderConnectionRepository(ProviderConnectionRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_active(self, provider: str) -> ProviderConnection | None:
        query = (
            select(ProviderConnectionRow)
            .where(ProviderConnectionRow.provider == provider)
            .where(ProviderConnectionRow.is_active.is_(True))
            .order_by(ProviderConnectionRow.created_at.desc())
            .limit(1)
        )
        row = self._session.execute(query).scalars().first()
        return self._to_domain(row) if row else None

    def _to_domain(self, row: ProviderConnectionRow) -> ProviderConnection:
        return ProviderConnection(
            id=str(row.id),
            provider=row.provider,
            name=row.name,
            api_base_url=row.api_base_url,
            api_key=row.api_key,
            api_secret=row.api_secret,
            shop_uuid=row.shop_uuid,
            is_active=row.is_active,
        )
