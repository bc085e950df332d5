"""API module exports."""

from taxcalc.api.deps import resolve_tax_year
from taxcalc.api.health import router as health_router
from taxcalc.api.tax import router as tax_router

__all__ = [
    "health_router",
    "resolve_tax_year",
    "tax_router",
]
