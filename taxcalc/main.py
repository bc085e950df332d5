"""FastAPI application entry point with lifespan management."""

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taxcalc import __version__
from taxcalc.api.health import router as health_router
from taxcalc.api.middleware import RequestContextMiddleware
from taxcalc.api.tax import router as tax_router
from taxcalc.core.config import settings
from taxcalc.core.logging import configure_logging, get_logger
from taxcalc.core.sentry import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Startup:
        - Configure structured logging
        - Initialize Sentry error tracking
    """
    configure_logging()
    logger.info(
        "Starting application",
        environment=settings.environment,
        default_tax_year=settings.default_tax_year,
    )

    if init_sentry():
        logger.info("Sentry initialized")

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title="Tax Estimator",
    description="Federal income tax estimates for ordinary and qualified income",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware for the browser front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request context middleware
app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health_router)
app.include_router(tax_router)
