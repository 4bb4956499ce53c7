#!/usr/bin/env python3
"""
Quote a financing offer the way the storefront calculator does.

Features:
- Catalog read from the database, as served by GET /v1/financing/calculator
- External providers calculated through the running API
  (POST {FINANCING_API_URL}/v1/financing/calculate)
- Failed providers are skipped until an in-house offer is reached

Usage:
    python scripts/quote_financing.py 100000
    python scripts/quote_financing.py 123000 --category LEASING --months 48 --year 2021 --mileage 35000
"""

from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import httpx

from carsalon.adapters.http_remote_installment_calculator import HttpRemoteInstallmentCalculator
from carsalon.adapters.postgres_financing_product_repository import (
    PostgresFinancingProductRepository,
)
from carsalon.domain.financing import FinancingCategory
from carsalon.infra.config import financing_api_url, provider_timeout_seconds
from carsalon.infra.db.session import get_session
from carsalon.use_cases.financing_session import FinancingSession


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Quote a financing offer for a vehicle price")
    parser.add_argument("price", type=Decimal)
    parser.add_argument("--category", type=FinancingCategory, choices=list(FinancingCategory))
    parser.add_argument("--months", type=int)
    parser.add_argument("--initial", type=Decimal, help="Initial payment percent")
    parser.add_argument("--final", type=Decimal, help="Final (balloon) payment percent")
    parser.add_argument("--year", type=int, help="Manufacturing year")
    parser.add_argument("--mileage", type=int, help="Mileage in km")
    return parser.parse_args(argv)


def quote_financing(args: argparse.Namespace) -> None:
    print(f"🔎 Quoting financing for {args.price} via {financing_api_url()}")

    with get_session() as session, httpx.Client(timeout=provider_timeout_seconds()) as client:
        financing = FinancingSession(
            catalog_loader=PostgresFinancingProductRepository(session).list_products,
            remote_calculator=HttpRemoteInstallmentCalculator(client, financing_api_url()),
            price=args.price,
            manufacturing_year=args.year,
            mileage_km=args.mileage,
        )
        if args.category is not None:
            financing.set_category(args.category)
        if args.months or args.initial is not None or args.final is not None:
            financing.adjust(
                months=args.months,
                initial_payment_pct=args.initial,
                final_payment_pct=args.final,
            )
        view = financing.recalculate()

    product = view.selected_product
    if product is None or view.parameters is None:
        print("🚫 No financing available for this category")
        return

    print(f"   Product:   {product.name or product.id} ({product.provider}, {product.category.value})")
    print(
        f"   Terms:     {view.parameters.months} months, "
        f"{view.parameters.initial_payment_pct}% down, {view.parameters.final_payment_pct}% final"
    )
    if view.is_estimate:
        print("   Installment: estimate unavailable")
    else:
        print(f"   Installment: {view.display_installment:.2f} {product.currency}")
    if financing.failed_product_ids:
        print(f"⚠️  Skipped failing products: {', '.join(sorted(financing.failed_product_ids))}")


if __name__ == "__main__":
    try:
        quote_financing(parse_args())
    except Exception as e:
        print(f"❌ Error quoting financing: {e}", file=sys.stderr)
        sys.exit(1)
