from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from carsalon.infra.db.models.base import Base


class FinancingProductRow(Base):
    __tablename__ = "financing_products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="PLN")
    provider: Mapped[str] = mapped_column(String(20), nullable=False, default="OWN")
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    min_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    max_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    provider_config: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)

    # Percent values, e.g. 5.75 = 5.75%
    reference_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    margin: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    commission: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    max_initial_payment: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    max_final_payment: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    min_installments: Mapped[int] = mapped_column(Integer, nullable=False)
    max_installments: Mapped[int] = mapped_column(Integer, nullable=False)
    has_balloon_payment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
