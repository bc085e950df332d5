"""FastAPI dependencies for resolving tax year tables."""

from fastapi import HTTPException, status

from taxcalc.core.config import settings
from taxcalc.tax.year_config import TaxYearConfig, get_tax_year_config


def resolve_tax_year(tax_year: int | None = None) -> TaxYearConfig:
    """Look up tables for a requested year, falling back to the default year.

    Args:
        tax_year: Requested year, or None for settings.default_tax_year.

    Returns:
        TaxYearConfig for the year.

    Raises:
        HTTPException: 404 if no tables exist for the year.
    """
    year = settings.default_tax_year if tax_year is None else tax_year
    try:
        return get_tax_year_config(year)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
