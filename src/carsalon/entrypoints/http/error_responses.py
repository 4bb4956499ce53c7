"""REST API error response models.

Documents the error body produced by the exception handlers in OpenAPI.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Field-level error inside a validation error."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "period",
                "message": "Must be >= 1",
                "code": "INVALID_VALUE",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Provider failure:
            {
                "detail": "Provider request failed",
                "code": "PROVIDER_ERROR",
                "details": "Invalid product code"
            }

        Validation error with fields:
            {
                "detail": "Validation failed",
                "code": "VALIDATION_ERROR",
                "errors": [
                    {"field": "price", "message": "Must be > 0", "code": "INVALID_VALUE"}
                ]
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None
    details: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Connection not configured", "code": "CONFLICT"},
                {
                    "detail": "Provider request failed",
                    "code": "PROVIDER_ERROR",
                    "details": "Invalid product code",
                },
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "price",
                            "message": "Must be > 0",
                            "code": "INVALID_VALUE",
                        },
                    ],
                },
            ]
        }
    )
