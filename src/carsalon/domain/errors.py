"""Domain error classes.

Protocol-agnostic errors raised by the financing core and its use cases.
The HTTP entrypoint translates them to status codes and JSON bodies.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Carries a human-readable message, a stable error code and free-form
    context (product id, provider, ...) used when rendering the error.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Examples:
        - INBANK product without productCode/paymentDay configured
        - VEHIS calculation requested without a manufacturing year
        - Monetary string that is not a valid decimal

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "price", "message": "Must be a valid decimal"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class NotFoundError(DomainError):
    """Resource not found (e.g. financing product id unknown).

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class ConflictError(DomainError):
    """Business constraint conflict.

    Raised when a provider product exists but no active connection is
    configured for its provider.

    Protocol mappings:
        - REST: 409 Conflict
    """

    error_code: str = "CONFLICT"


class UnsupportedProviderError(DomainError):
    """The product's provider cannot be calculated remotely.

    Protocol mappings:
        - REST: 400 Bad Request
    """

    error_code: str = "UNSUPPORTED_PROVIDER"

    def __init__(self, provider: str, **context: Any) -> None:
        super().__init__(f"Unsupported provider '{provider}'", provider=provider, **context)


class ProviderError(DomainError):
    """An external financing provider failed or answered with an unusable body.

    Protocol mappings:
        - REST: 502 Bad Gateway
    """

    error_code: str = "PROVIDER_ERROR"
