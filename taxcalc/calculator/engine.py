"""Tax calculation functions for ordinary and qualified income.

This module provides pure functions for the estimate pipeline:
- Income aggregation into ordinary and qualified streams
- Proportional deduction allocation across both streams
- Ordinary tax using marginal brackets
- Qualified tax using preferential brackets stacked on ordinary income
- Summary figures (taxable income, effective rate)

All monetary values use Decimal for precision. None of these functions raise
for malformed amounts; inputs are coerced to zero instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from taxcalc.calculator.models import (
    ZERO,
    BracketSlice,
    DeductionAllocation,
    DeductionChoice,
    IncomeInputs,
    IncomeTotals,
    TaxResults,
    TaxSummary,
    coerce_amount,
)
from taxcalc.core.config import settings
from taxcalc.core.logging import get_logger
from taxcalc.tax.models import FilingStatus, TaxBracket
from taxcalc.tax.year_config import TaxYearConfig, get_tax_year_config

logger = get_logger(__name__)

ONE = Decimal("1")
HUNDRED = Decimal("100")


def _resolve_config(config: TaxYearConfig | None) -> TaxYearConfig:
    if config is None:
        return get_tax_year_config(settings.default_tax_year)
    return config


def _resolve_inputs(inputs: IncomeInputs | Mapping[str, object]) -> IncomeInputs:
    if isinstance(inputs, IncomeInputs):
        return inputs
    return IncomeInputs.model_validate(dict(inputs))


# =============================================================================
# Income Aggregation
# =============================================================================


def aggregate_income(inputs: IncomeInputs) -> IncomeTotals:
    """Split income into ordinary and qualified streams.

    Args:
        inputs: Coerced income fields.

    Returns:
        IncomeTotals with ordinary, qualified, and total income.

    Example:
        >>> totals = aggregate_income(IncomeInputs(wages="50000", long_term_gains="1000"))
        >>> totals.total_income
        Decimal('51000')
    """
    ordinary_income = (
        inputs.wages
        + inputs.interest
        + inputs.non_qualified_dividends
        + inputs.short_term_gains
        + inputs.other_income
    )
    qualified_income = inputs.qualified_dividends + inputs.long_term_gains

    return IncomeTotals(
        ordinary_income=ordinary_income,
        qualified_income=qualified_income,
        total_income=ordinary_income + qualified_income,
    )


# =============================================================================
# Deduction Allocation
# =============================================================================


def allocate_deduction(
    totals: IncomeTotals,
    filing_status: FilingStatus,
    choice: DeductionChoice,
    config: TaxYearConfig | None = None,
) -> DeductionAllocation:
    """Apply the deduction to both income streams by the same ratio.

    The deduction shrinks ordinary and qualified income proportionally
    instead of being taken against ordinary income first. This is a
    simplification of the actual rules and existing estimates depend on it.

    Each stream is floored at zero on its own. When the deduction exceeds
    total income both streams become zero and the excess is discarded.

    Args:
        totals: Aggregated income.
        filing_status: Selects the standard deduction.
        choice: Standard or itemized selection.
        config: Tax year tables. Defaults to the configured default year.

    Returns:
        DeductionAllocation with the ratio and both taxable amounts.
    """
    if choice.itemized:
        method = "itemized"
        amount = coerce_amount(choice.itemized_amount_raw)
    else:
        method = "standard"
        if choice.standard_amount is not None:
            amount = choice.standard_amount
        else:
            amount = _resolve_config(config).standard_deduction(filing_status)

    if totals.total_income > ZERO:
        ratio = amount / totals.total_income
    else:
        ratio = ZERO

    return DeductionAllocation(
        method=method,
        amount=amount,
        ratio=ratio,
        taxable_ordinary_income=max(ZERO, totals.ordinary_income * (ONE - ratio)),
        taxable_qualified_income=max(ZERO, totals.qualified_income * (ONE - ratio)),
    )


# =============================================================================
# Bracket Tax
# =============================================================================


def calculate_ordinary_tax(
    taxable_ordinary_income: Decimal,
    brackets: tuple[TaxBracket, ...],
) -> tuple[Decimal, tuple[BracketSlice, ...]]:
    """Calculate ordinary income tax using marginal brackets.

    Args:
        taxable_ordinary_income: Ordinary income after its deduction share.
        brackets: Ascending bracket ladder ending in an unbounded bracket.

    Returns:
        Tuple of (tax, per-bracket breakdown).

    Example:
        >>> tax, _ = calculate_ordinary_tax(Decimal("45400"), TAX_YEAR_2024.ordinary_brackets_for("single"))
        >>> tax.quantize(Decimal("1"))
        Decimal('5216')
    """
    remaining = taxable_ordinary_income
    tax = ZERO
    prev_ceiling = ZERO
    breakdown: list[BracketSlice] = []

    for bracket in brackets:
        if bracket.is_unbounded:
            # Top bracket - no limit
            amount = remaining
        else:
            amount = min(remaining, bracket.up_to - prev_ceiling)
        if amount <= ZERO:
            break

        tax_in_bracket = amount * bracket.rate
        tax += tax_in_bracket
        breakdown.append(
            BracketSlice(
                rate=bracket.rate,
                floor=prev_ceiling,
                ceiling=bracket.up_to,
                amount=amount,
                tax=tax_in_bracket,
            )
        )

        remaining -= amount
        if not bracket.is_unbounded:
            prev_ceiling = bracket.up_to

    return tax, tuple(breakdown)


def calculate_qualified_tax(
    taxable_qualified_income: Decimal,
    taxable_ordinary_income: Decimal,
    brackets: tuple[TaxBracket, ...],
) -> tuple[Decimal, tuple[BracketSlice, ...]]:
    """Calculate preferential-rate tax with qualified income stacked on top.

    Qualified income fills the preferential brackets starting where taxable
    ordinary income ends. Brackets already filled by ordinary income are
    skipped, so their rate never applies to qualified income.

    Args:
        taxable_qualified_income: Qualified income after its deduction share.
        taxable_ordinary_income: Ordinary income the qualified stream sits on.
        brackets: Ascending preferential ladder ending in an unbounded bracket.

    Returns:
        Tuple of (tax, per-bracket breakdown). Zero tax when there is no
        taxable qualified income.
    """
    if taxable_qualified_income <= ZERO:
        return ZERO, ()

    stacked_income = taxable_ordinary_income
    remaining = taxable_qualified_income
    tax = ZERO
    prev_ceiling = ZERO
    breakdown: list[BracketSlice] = []

    for bracket in brackets:
        # Bracket fully consumed by income below this point
        if not bracket.is_unbounded and bracket.up_to <= stacked_income:
            prev_ceiling = bracket.up_to
            continue

        floor = max(stacked_income, prev_ceiling)
        if bracket.is_unbounded:
            amount = remaining
        else:
            amount = min(remaining, bracket.up_to - floor)
        if amount <= ZERO:
            break

        tax_in_bracket = amount * bracket.rate
        tax += tax_in_bracket
        breakdown.append(
            BracketSlice(
                rate=bracket.rate,
                floor=floor,
                ceiling=bracket.up_to,
                amount=amount,
                tax=tax_in_bracket,
            )
        )

        remaining -= amount
        stacked_income += amount
        if not bracket.is_unbounded:
            prev_ceiling = bracket.up_to

    return tax, tuple(breakdown)


# =============================================================================
# Pipeline
# =============================================================================


def _run(
    inputs: IncomeInputs | Mapping[str, object],
    filing_status: FilingStatus | str,
    deduction: DeductionChoice | None,
    config: TaxYearConfig | None,
) -> tuple[IncomeTotals, DeductionAllocation, TaxResults, TaxYearConfig, FilingStatus]:
    """Run every stage once and return the intermediate records."""
    config = _resolve_config(config)
    status = FilingStatus(filing_status)
    income = _resolve_inputs(inputs)

    totals = aggregate_income(income)
    allocation = allocate_deduction(totals, status, deduction or DeductionChoice(), config)

    ordinary_tax, ordinary_breakdown = calculate_ordinary_tax(
        allocation.taxable_ordinary_income,
        config.ordinary_brackets_for(status),
    )
    qualified_tax, qualified_breakdown = calculate_qualified_tax(
        allocation.taxable_qualified_income,
        allocation.taxable_ordinary_income,
        config.qualified_brackets_for(status),
    )

    results = TaxResults(
        ordinary_tax=ordinary_tax,
        qualified_tax=qualified_tax,
        total_tax=ordinary_tax + qualified_tax,
        taxable_ordinary_income=allocation.taxable_ordinary_income,
        taxable_qualified_income=allocation.taxable_qualified_income,
        ordinary_breakdown=ordinary_breakdown,
        qualified_breakdown=qualified_breakdown,
    )

    logger.debug(
        "tax_computed",
        tax_year=config.tax_year,
        filing_status=status.value,
        deduction_method=allocation.method,
        total_tax=results.total_tax,
    )
    return totals, allocation, results, config, status


def compute_tax(
    inputs: IncomeInputs | Mapping[str, object],
    filing_status: FilingStatus | str,
    deduction: DeductionChoice | None = None,
    config: TaxYearConfig | None = None,
) -> TaxResults:
    """Compute ordinary and qualified tax for one set of inputs.

    Args:
        inputs: IncomeInputs, or a mapping of raw field values to coerce.
        filing_status: FilingStatus or its string value.
        deduction: Deduction selection. Defaults to the standard deduction.
        config: Tax year tables. Defaults to the configured default year.

    Returns:
        TaxResults recomputed from scratch.

    Raises:
        ValueError: If filing_status is not a known FilingStatus value.

    Example:
        >>> result = compute_tax({"wages": "60000"}, "single", config=TAX_YEAR_2024)
        >>> result.ordinary_tax.quantize(Decimal("1"))
        Decimal('5216')
    """
    return _run(inputs, filing_status, deduction, config)[2]


def summarize(
    inputs: IncomeInputs | Mapping[str, object],
    filing_status: FilingStatus | str,
    deduction: DeductionChoice | None = None,
    config: TaxYearConfig | None = None,
) -> TaxSummary:
    """Compute tax and derive the summary figures.

    Args:
        inputs: IncomeInputs, or a mapping of raw field values to coerce.
        filing_status: FilingStatus or its string value.
        deduction: Deduction selection. Defaults to the standard deduction.
        config: Tax year tables. Defaults to the configured default year.

    Returns:
        TaxSummary with taxable income and effective rate (percent).
    """
    totals, allocation, results, config, status = _run(
        inputs, filing_status, deduction, config
    )

    taxable_income = results.taxable_ordinary_income + results.taxable_qualified_income
    if taxable_income > ZERO:
        effective_rate = results.total_tax / taxable_income * HUNDRED
    else:
        effective_rate = ZERO

    return TaxSummary(
        tax_year=config.tax_year,
        filing_status=status.value,
        totals=totals,
        deduction=allocation,
        results=results,
        taxable_income=taxable_income,
        effective_rate=effective_rate,
    )
