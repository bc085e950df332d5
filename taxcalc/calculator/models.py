"""Input and result models for the tax calculator.

IncomeInputs is the typed value object for the seven free-text income fields.
Every field passes through coerce_amount, so callers can hand over raw form
strings without parsing them first. The result records are frozen dataclasses
produced fresh by each computation.

All monetary values use Decimal for precision.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

ZERO = Decimal("0")

# Leading numeric text of a field; trailing characters are ignored
_NUMERIC_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Decimal exponent limit of a double; larger magnitudes count as infinite
MAX_AMOUNT_EXPONENT = 308


def _bounded(amount: Decimal) -> Decimal:
    if not amount.is_finite() or abs(amount.adjusted()) > MAX_AMOUNT_EXPONENT:
        return ZERO
    return amount


def coerce_amount(value: object) -> Decimal:
    """Convert a raw amount to Decimal, treating anything unparsable as zero.

    Coercion rule:
        - None, empty or whitespace-only strings -> 0
        - strings parse their leading number and ignore the rest
          ("12abc" -> 12, "1,000" -> 1, "$100" -> 0)
        - int, float and Decimal values convert directly
        - NaN, infinities and magnitudes beyond 1e308 -> 0
        - anything else (including bool) -> 0

    Negative amounts are kept as entered. This function never raises.

    Args:
        value: Raw field value from a form, JSON body, or caller.

    Returns:
        Finite Decimal amount safe for arithmetic.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return _bounded(value)
    if isinstance(value, int):
        return _bounded(Decimal(value))
    if isinstance(value, float):
        text = str(value)
    elif isinstance(value, str):
        text = value
    else:
        return ZERO

    match = _NUMERIC_PREFIX.match(text)
    if match is None:
        return ZERO
    try:
        amount = Decimal(match.group(1))
    except ArithmeticError:
        return ZERO
    return _bounded(amount)


class IncomeInputs(BaseModel):
    """Itemized income for one computation.

    Each field is coerced independently; there are no cross-field rules.
    """

    model_config = ConfigDict(frozen=True)

    wages: Decimal = ZERO
    interest: Decimal = ZERO
    non_qualified_dividends: Decimal = ZERO
    qualified_dividends: Decimal = ZERO
    short_term_gains: Decimal = ZERO
    long_term_gains: Decimal = ZERO
    other_income: Decimal = ZERO

    @field_validator("*", mode="before")
    @classmethod
    def coerce_field(cls, v: object) -> Decimal:
        """Apply the permissive parse-or-zero rule to every field."""
        return coerce_amount(v)


@dataclass(frozen=True)
class DeductionChoice:
    """Standard versus itemized deduction selection.

    Attributes:
        itemized: True to use itemized_amount_raw instead of the standard amount.
        itemized_amount_raw: User-entered itemized total, coerced like income fields.
        standard_amount: Standard deduction override. None means look it up
            from the tax year configuration for the filing status.
    """

    itemized: bool = False
    itemized_amount_raw: str = ""
    standard_amount: Decimal | None = None


@dataclass(frozen=True)
class IncomeTotals:
    """Income split into the ordinary and qualified streams."""

    ordinary_income: Decimal
    qualified_income: Decimal
    total_income: Decimal


@dataclass(frozen=True)
class DeductionAllocation:
    """Result of spreading the deduction across both income streams.

    Attributes:
        method: Either "standard" or "itemized".
        amount: The deduction amount applied.
        ratio: Deduction as a share of total income (0 when income is 0).
            May exceed 1 when the deduction is larger than total income.
        taxable_ordinary_income: Ordinary income after its share, floored at 0.
        taxable_qualified_income: Qualified income after its share, floored at 0.
    """

    method: str
    amount: Decimal
    ratio: Decimal
    taxable_ordinary_income: Decimal
    taxable_qualified_income: Decimal


@dataclass(frozen=True)
class BracketSlice:
    """Portion of income taxed inside one bracket.

    Attributes:
        rate: Marginal rate of the bracket.
        floor: Income level where this slice starts.
        ceiling: Bracket ceiling, None for the unbounded top bracket.
        amount: Income taxed in this bracket.
        tax: amount * rate.
    """

    rate: Decimal
    floor: Decimal
    ceiling: Decimal | None
    amount: Decimal
    tax: Decimal


@dataclass(frozen=True)
class TaxResults:
    """Output of one compute_tax pass."""

    ordinary_tax: Decimal
    qualified_tax: Decimal
    total_tax: Decimal
    taxable_ordinary_income: Decimal
    taxable_qualified_income: Decimal
    ordinary_breakdown: tuple[BracketSlice, ...] = field(default_factory=tuple)
    qualified_breakdown: tuple[BracketSlice, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TaxSummary:
    """Figures shown in the tax summary panel.

    Attributes:
        tax_year: Year whose tables were used.
        filing_status: Filing status value.
        totals: Aggregated income streams.
        deduction: Deduction allocation.
        results: Bracket tax results.
        taxable_income: Taxable ordinary plus taxable qualified income.
        effective_rate: total_tax / taxable_income as a percentage.
    """

    tax_year: int
    filing_status: str
    totals: IncomeTotals
    deduction: DeductionAllocation
    results: TaxResults
    taxable_income: Decimal
    effective_rate: Decimal

    @property
    def total_income(self) -> Decimal:
        return self.totals.total_income

    @property
    def ordinary_tax(self) -> Decimal:
        return self.results.ordinary_tax

    @property
    def qualified_tax(self) -> Decimal:
        return self.results.qualified_tax

    @property
    def total_tax(self) -> Decimal:
        return self.results.total_tax
