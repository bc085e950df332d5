"""Health check endpoint for infrastructure verification."""

from fastapi import APIRouter
from pydantic import BaseModel

from taxcalc.core.config import settings
from taxcalc.tax.year_config import TAX_YEAR_CONFIGS

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    default_tax_year: int
    available_tax_years: list[int]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report service status and the tax years that can be computed.

    Returns:
        HealthResponse with the configured default year.
    """
    return HealthResponse(
        status="ok",
        default_tax_year=settings.default_tax_year,
        available_tax_years=sorted(TAX_YEAR_CONFIGS.keys()),
    )
