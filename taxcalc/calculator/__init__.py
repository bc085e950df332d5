"""Tax estimate calculator.

Pure functions turning raw income fields, a filing status and a deduction
choice into ordinary tax, stacked qualified tax, and summary figures.
"""

from taxcalc.calculator.engine import (
    aggregate_income,
    allocate_deduction,
    calculate_ordinary_tax,
    calculate_qualified_tax,
    compute_tax,
    summarize,
)
from taxcalc.calculator.models import (
    BracketSlice,
    DeductionAllocation,
    DeductionChoice,
    IncomeInputs,
    IncomeTotals,
    TaxResults,
    TaxSummary,
    coerce_amount,
)
from taxcalc.calculator.output import (
    build_estimate_workbook,
    filing_status_label,
    format_currency,
    format_rate,
    generate_estimate_workbook,
    summary_to_display,
)

__all__ = [
    # Models
    "BracketSlice",
    "DeductionAllocation",
    "DeductionChoice",
    "IncomeInputs",
    "IncomeTotals",
    "TaxResults",
    "TaxSummary",
    "coerce_amount",
    # Calculation
    "aggregate_income",
    "allocate_deduction",
    "calculate_ordinary_tax",
    "calculate_qualified_tax",
    "compute_tax",
    "summarize",
    # Output
    "build_estimate_workbook",
    "filing_status_label",
    "format_currency",
    "format_rate",
    "generate_estimate_workbook",
    "summary_to_display",
]
