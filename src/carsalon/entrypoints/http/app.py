import logging

from fastapi import FastAPI

from carsalon.entrypoints.http.exception_handlers import register_exception_handlers
from carsalon.entrypoints.http.routes.financing import router as financing_router
from carsalon.entrypoints.http.routes.health import router as health_router

logger = logging.getLogger(__name__)


def build_app() -> FastAPI:
    app = FastAPI(
        title="Carsalon Financing API",
        description="""
        Financing offers for the car marketplace storefront.

        ## Features
        - Financing product catalog for the calculator
        - Best-offer selection with installment calculation
        - Installment calculation with external providers (INBANK, VEHIS)

        ## Error Handling
        All errors return structured JSON responses with error codes.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        license_info={
            "name": "Proprietary",
        },
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(financing_router, prefix="/v1")

    logger.info("Financing API configured")
    return app


app = build_app()
