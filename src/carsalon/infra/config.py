"""Environment-driven settings."""

from __future__ import annotations

import os

DEFAULT_FINANCING_API_URL = "http://localhost:8000"
DEFAULT_PROVIDER_TIMEOUT_SECONDS = 15.0
DEFAULT_VEHIS_TOKEN_TTL_SECONDS = 50 * 60


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


def financing_api_url() -> str:
    """Base URL of the storefront financing API used by remote calculation clients."""
    return os.getenv("FINANCING_API_URL", DEFAULT_FINANCING_API_URL).rstrip("/")


def provider_timeout_seconds() -> float:
    raw = os.getenv("FINANCING_PROVIDER_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_PROVIDER_TIMEOUT_SECONDS

    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(
            f"FINANCING_PROVIDER_TIMEOUT_SECONDS must be a number, got {raw!r}"
        ) from None


def inbank_base_url() -> str | None:
    """Optional override of the INBANK connection base URL."""
    return os.getenv("INBANK_BASE_URL") or None


def vehis_token_ttl_seconds() -> int:
    raw = os.getenv("VEHIS_TOKEN_TTL_SECONDS")
    if not raw:
        return DEFAULT_VEHIS_TOKEN_TTL_SECONDS

    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"VEHIS_TOKEN_TTL_SECONDS must be an integer, got {raw!r}") from None
