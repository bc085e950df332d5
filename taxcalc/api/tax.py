"""Tax estimate API endpoints.

The handlers are thin: they resolve the tax year, hand raw field values to
the calculator, and shape the result for JSON or Excel download.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal

from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from taxcalc.api.deps import resolve_tax_year
from taxcalc.calculator.engine import summarize
from taxcalc.calculator.models import BracketSlice, DeductionChoice, IncomeInputs, TaxSummary
from taxcalc.calculator.output import build_estimate_workbook, summary_to_display
from taxcalc.core.logging import filing_status_ctx, get_logger, tax_year_ctx
from taxcalc.tax.models import FilingStatus, TaxBracket
from taxcalc.tax.year_config import TaxYearConfig

logger = get_logger(__name__)

router = APIRouter(prefix="/api/tax", tags=["tax"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

RawAmount = str | int | float | None


class TaxEstimateRequest(BaseModel):
    """Raw form values for one estimate. Unparsable amounts count as zero."""

    wages: RawAmount = ""
    interest: RawAmount = ""
    non_qualified_dividends: RawAmount = ""
    qualified_dividends: RawAmount = ""
    short_term_gains: RawAmount = ""
    long_term_gains: RawAmount = ""
    other_income: RawAmount = ""
    filing_status: FilingStatus = FilingStatus.SINGLE
    itemized: bool = False
    itemized_amount: RawAmount = ""
    tax_year: int | None = None


class BracketSliceResponse(BaseModel):
    """One taxed bracket slice."""

    rate: str
    floor: str
    ceiling: str | None
    amount: str
    tax: str


class TaxEstimateResponse(BaseModel):
    """Computed estimate with decimal strings and display values."""

    tax_year: int
    filing_status: FilingStatus
    deduction_method: str
    deduction_amount: str
    ordinary_income: str
    qualified_income: str
    total_income: str
    taxable_ordinary_income: str
    taxable_qualified_income: str
    taxable_income: str
    ordinary_tax: str
    qualified_tax: str
    total_tax: str
    effective_rate: str
    display: dict[str, str]
    ordinary_brackets: list[BracketSliceResponse]
    qualified_brackets: list[BracketSliceResponse]


class BracketResponse(BaseModel):
    """One bracket of a reference table."""

    rate: str
    up_to: str | None


class TaxTablesResponse(BaseModel):
    """Reference tables for a tax year."""

    tax_year: int
    ordinary_brackets: dict[FilingStatus, list[BracketResponse]]
    qualified_brackets: dict[FilingStatus, list[BracketResponse]]
    standard_deductions: dict[FilingStatus, str]


def _money(value: Decimal) -> str:
    """Format decimal money as a string rounded to cents."""
    return format(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP), "f")


def _slice_response(item: BracketSlice) -> BracketSliceResponse:
    return BracketSliceResponse(
        rate=format(item.rate, "f"),
        floor=_money(item.floor),
        ceiling=None if item.ceiling is None else format(item.ceiling, "f"),
        amount=_money(item.amount),
        tax=_money(item.tax),
    )


def _bracket_response(bracket: TaxBracket) -> BracketResponse:
    return BracketResponse(
        rate=format(bracket.rate, "f"),
        up_to=None if bracket.up_to is None else format(bracket.up_to, "f"),
    )


@contextmanager
def _calculation_context(tax_year: int, filing_status: FilingStatus) -> Iterator[None]:
    """Bind tax year and filing status to log events for one calculation."""
    year_token = tax_year_ctx.set(tax_year)
    status_token = filing_status_ctx.set(filing_status.value)
    try:
        yield
    finally:
        filing_status_ctx.reset(status_token)
        tax_year_ctx.reset(year_token)


def _summarize_request(payload: TaxEstimateRequest, config: TaxYearConfig) -> TaxSummary:
    """Run the calculator for a request payload."""
    inputs = IncomeInputs(
        wages=payload.wages,
        interest=payload.interest,
        non_qualified_dividends=payload.non_qualified_dividends,
        qualified_dividends=payload.qualified_dividends,
        short_term_gains=payload.short_term_gains,
        long_term_gains=payload.long_term_gains,
        other_income=payload.other_income,
    )
    deduction = DeductionChoice(
        itemized=payload.itemized,
        itemized_amount_raw="" if payload.itemized_amount is None else str(payload.itemized_amount),
    )
    return summarize(inputs, payload.filing_status, deduction, config)


@router.post("/estimate", response_model=TaxEstimateResponse)
async def estimate_tax(payload: TaxEstimateRequest) -> TaxEstimateResponse:
    """Compute ordinary tax, stacked qualified tax, and summary figures.

    Raises:
        HTTPException: 404 if the requested tax year has no tables.
    """
    config = resolve_tax_year(payload.tax_year)
    with _calculation_context(config.tax_year, payload.filing_status):
        summary = _summarize_request(payload, config)
        logger.info(
            "tax_estimate_computed",
            deduction_method=summary.deduction.method,
            total_tax=_money(summary.total_tax),
        )

    results = summary.results
    return TaxEstimateResponse(
        tax_year=summary.tax_year,
        filing_status=payload.filing_status,
        deduction_method=summary.deduction.method,
        deduction_amount=_money(summary.deduction.amount),
        ordinary_income=_money(summary.totals.ordinary_income),
        qualified_income=_money(summary.totals.qualified_income),
        total_income=_money(summary.total_income),
        taxable_ordinary_income=_money(results.taxable_ordinary_income),
        taxable_qualified_income=_money(results.taxable_qualified_income),
        taxable_income=_money(summary.taxable_income),
        ordinary_tax=_money(results.ordinary_tax),
        qualified_tax=_money(results.qualified_tax),
        total_tax=_money(results.total_tax),
        effective_rate=format(
            summary.effective_rate.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP), "f"
        ),
        display=summary_to_display(summary),
        ordinary_brackets=[_slice_response(item) for item in results.ordinary_breakdown],
        qualified_brackets=[_slice_response(item) for item in results.qualified_breakdown],
    )


@router.post("/estimate/workbook")
async def download_estimate_workbook(
    payload: TaxEstimateRequest,
) -> StreamingResponse:
    """Download the estimate as an Excel workbook."""
    config = resolve_tax_year(payload.tax_year)
    with _calculation_context(config.tax_year, payload.filing_status):
        summary = _summarize_request(payload, config)
        buffer = io.BytesIO()
        build_estimate_workbook(summary).save(buffer)
        buffer.seek(0)
        logger.info("tax_estimate_workbook_generated", size_bytes=buffer.getbuffer().nbytes)

    filename = f"tax-estimate-{summary.tax_year}-{summary.filing_status}.xlsx"
    return StreamingResponse(
        buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/tables/{tax_year}", response_model=TaxTablesResponse)
async def get_tax_tables(tax_year: int) -> TaxTablesResponse:
    """Return the bracket tables and standard deductions for a tax year.

    Raises:
        HTTPException: 404 if the tax year has no tables.
    """
    config = resolve_tax_year(tax_year)
    return TaxTablesResponse(
        tax_year=config.tax_year,
        ordinary_brackets={
            status: [_bracket_response(b) for b in brackets]
            for status, brackets in config.ordinary_brackets.items()
        },
        qualified_brackets={
            status: [_bracket_response(b) for b in brackets]
            for status, brackets in config.qualified_brackets.items()
        },
        standard_deductions={
            status: format(amount, "f") for status, amount in config.standard_deductions.items()
        },
    )
