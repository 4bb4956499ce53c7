"""Create financing tables

Revision ID: 3c9e1f6a2b7d
Revises:
Create Date: 2026-10-19 10:12:40.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c9e1f6a2b7d"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "financing_products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("provider", sa.String(length=20), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("min_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("max_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("provider_config", postgresql.JSONB(), nullable=True),
        sa.Column("reference_rate", sa.Numeric(6, 3), nullable=False),
        sa.Column("margin", sa.Numeric(6, 3), nullable=False),
        sa.Column("commission", sa.Numeric(6, 3), nullable=False),
        sa.Column("max_initial_payment", sa.Numeric(5, 2), nullable=False),
        sa.Column("max_final_payment", sa.Numeric(5, 2), nullable=False),
        sa.Column("min_installments", sa.Integer(), nullable=False),
        sa.Column("max_installments", sa.Integer(), nullable=False),
        sa.Column("has_balloon_payment", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("min_installments <= max_installments", name="ck_installments_range"),
    )
    op.create_index(
        "ix_financing_products_category_priority",
        "financing_products",
        ["category", "priority"],
    )

    op.create_table(
        "financing_provider_connections",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("provider", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("api_base_url", sa.Text(), nullable=False),
        sa.Column("api_key", sa.Text(), nullable=False),
        sa.Column("api_secret", sa.Text(), nullable=True),
        sa.Column("shop_uuid", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("financing_provider_connections")
    op.drop_index("ix_financing_products_category_priority", table_name="financing_products")
    op.drop_table("financing_products")
