"""Helpers shared by the external provider gateways."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

import httpx


def json_number(value: Decimal) -> int | float:
    """Render a Decimal as a JSON number (integers stay integers)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def read_json(response: httpx.Response) -> dict[str, Any]:
    """Response body as a dict; anything unparsable becomes an empty dict."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def error_detail(body: dict[str, Any]) -> str:
    detail = body.get("message") or body.get("error")
    if isinstance(detail, list):
        return ", ".join(str(item) for item in detail)
    return str(detail) if detail else "Unknown provider error"


def parse_installment(value: Any) -> Decimal | None:
    """Parse a provider installment value, returning None unless it is a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        installment = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return installment if installment.is_finite() else None
