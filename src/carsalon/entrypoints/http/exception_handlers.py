"""FastAPI exception handlers for the financing API.

Every failure leaves the API as {detail, code, errors?, details?}:
field problems carry `errors`, provider failures carry the upstream
message in `details`.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from carsalon.domain.errors import DomainError

logger = logging.getLogger(__name__)

# Anything not listed (e.g. UNSUPPORTED_PROVIDER) is the caller's fault.
STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 422,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "PROVIDER_ERROR": status.HTTP_502_BAD_GATEWAY,
}


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Map a domain error to its status code.

    A failing provider (502) is logged as an error with its context, since
    the calculator cascades past it; everything else is a client error.
    """
    status_code = STATUS_BY_ERROR_CODE.get(exc.error_code, status.HTTP_400_BAD_REQUEST)
    log_extra = {
        "error_code": exc.error_code,
        "error_message": exc.message,
        "path": request.url.path,
        "method": request.method,
    }

    if status_code >= 500:
        logger.error("Financing provider failure", extra={**log_extra, "context": exc.context})
    else:
        logger.info("Financing request rejected", extra=log_extra)

    error_dict = exc.to_dict()
    content: dict[str, Any] = {"detail": error_dict["message"], "code": error_dict["code"]}
    for key in ("errors", "details"):
        if key in error_dict:
            content[key] = error_dict[key]

    return JSONResponse(status_code=status_code, content=content)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic rejections of a calculate/offer body, e.g. a non-numeric price."""
    errors = [
        {
            # Drop the body/query prefix: "body.productId" -> "productId"
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query")),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info(
        "Invalid financing request",
        extra={"errors": errors, "path": request.url.path, "method": request.method},
    )

    return JSONResponse(
        status_code=422,
        content={"detail": "Invalid request parameters", "code": "VALIDATION_ERROR", "errors": errors},
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    # Decimal and category parsing in the mapper.
    logger.info(
        "Invalid financing value",
        extra={"error_message": str(exc), "path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=422, content={"detail": str(exc), "code": "INVALID_VALUE"})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error in financing API",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred", "code": "INTERNAL_ERROR"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
