#!/usr/bin/env python3
"""
Seed the financing catalog with a small, realistic product set.

Features:
- Idempotent: safe to run multiple times (clears before seeding)
- One default in-house (OWN) product per category, so every category
  always has a fallback offer
- Optional external provider products (INBANK credit, VEHIS leasing)

Usage:
    python scripts/seed_financing_products.py
"""

from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from carsalon.infra.db.models import FinancingProductRow
from carsalon.infra.db.session import get_session


PRODUCTS = [
    {
        "category": "CREDIT",
        "name": "Kredyt salonowy",
        "provider": "OWN",
        "priority": 0,
        "reference_rate": Decimal("5.75"),
        "margin": Decimal("2.00"),
        "commission": Decimal("3.00"),
        "min_amount": None,
        "max_amount": None,
        "max_initial_payment": Decimal("50"),
        "max_final_payment": Decimal("0"),
        "min_installments": 12,
        "max_installments": 96,
        "has_balloon_payment": False,
        "is_default": True,
        "provider_config": None,
    },
    {
        "category": "CREDIT",
        "name": "Inbank kredyt ratalny",
        "provider": "INBANK",
        "priority": 10,
        "reference_rate": Decimal("5.75"),
        "margin": Decimal("4.25"),
        "commission": Decimal("0"),
        "min_amount": Decimal("5000"),
        "max_amount": Decimal("150000"),
        "max_initial_payment": Decimal("50"),
        "max_final_payment": Decimal("0"),
        "min_installments": 6,
        "max_installments": 84,
        "has_balloon_payment": False,
        "is_default": False,
        "provider_config": {"productCode": "car_loan", "paymentDay": 15},
    },
    {
        "category": "LEASING",
        "name": "Leasing salonowy",
        "provider": "OWN",
        "priority": 0,
        "reference_rate": Decimal("5.75"),
        "margin": Decimal("1.50"),
        "commission": Decimal("1.00"),
        "min_amount": None,
        "max_amount": None,
        "max_initial_payment": Decimal("45"),
        "max_final_payment": Decimal("50"),
        "min_installments": 24,
        "max_installments": 60,
        "has_balloon_payment": True,
        "is_default": True,
        "provider_config": None,
    },
    {
        "category": "LEASING",
        "name": "VEHIS leasing",
        "provider": "VEHIS",
        "priority": 10,
        "reference_rate": Decimal("5.75"),
        "margin": Decimal("1.20"),
        "commission": Decimal("0"),
        "min_amount": Decimal("20000"),
        "max_amount": None,
        "max_initial_payment": Decimal("45"),
        "max_final_payment": Decimal("35"),
        "min_installments": 24,
        "max_installments": 60,
        "has_balloon_payment": True,
        "is_default": False,
        "provider_config": {"clientType": "entrepreneur"},
    },
    {
        "category": "RENT",
        "name": "Wynajem długoterminowy",
        "provider": "OWN",
        "priority": 0,
        "reference_rate": Decimal("0"),
        "margin": Decimal("6.00"),
        "commission": Decimal("0"),
        "min_amount": None,
        "max_amount": None,
        "max_initial_payment": Decimal("20"),
        "max_final_payment": Decimal("60"),
        "min_installments": 12,
        "max_installments": 48,
        "has_balloon_payment": True,
        "is_default": True,
        "provider_config": None,
    },
]


def seed_financing_products() -> None:
    print(f"🌱 Seeding financing catalog with {len(PRODUCTS)} products...")

    with get_session() as session:
        deleted_count = session.query(FinancingProductRow).delete()
        print(f"🗑️  Deleted {deleted_count} existing products")

        rows = [FinancingProductRow(currency="PLN", **product) for product in PRODUCTS]
        session.add_all(rows)
        session.flush()

        for row in rows:
            print(f"   {row.category:<8} {row.provider:<7} {row.name}")

    print("✅ Financing catalog seeded")


if __name__ == "__main__":
    try:
        seed_financing_products()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
