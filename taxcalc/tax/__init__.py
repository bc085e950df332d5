"""Tax reference data and year-specific configurations."""

from taxcalc.tax.models import BracketTable, FilingStatus, TaxBracket, validate_brackets
from taxcalc.tax.year_config import (
    DEFAULT_TAX_YEAR,
    ORDINARY_BRACKETS_2024,
    QUALIFIED_BRACKETS_2024,
    STANDARD_DEDUCTIONS_2024,
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_CONFIGS,
    TaxYearConfig,
    get_tax_year_config,
)

__all__ = [
    "BracketTable",
    "FilingStatus",
    "TaxBracket",
    "validate_brackets",
    "TaxYearConfig",
    "DEFAULT_TAX_YEAR",
    "ORDINARY_BRACKETS_2024",
    "QUALIFIED_BRACKETS_2024",
    "STANDARD_DEDUCTIONS_2024",
    "TAX_YEAR_2024",
    "TAX_YEAR_2025",
    "TAX_YEAR_CONFIGS",
    "get_tax_year_config",
]
