"""Output generators for tax estimates.

This module turns a TaxSummary into presentation-ready values:
- format_currency / format_rate: display strings for the summary panel
- summary_to_display: the labelled lines of the summary panel
- generate_estimate_workbook: Excel workbook with the summary and bracket detail
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from taxcalc.calculator.models import BracketSlice, TaxSummary
from taxcalc.tax.models import FilingStatus

CURRENCY_FORMAT = '"$"#,##0'
PERCENT_FORMAT = '0.0"%"'

FILING_STATUS_LABELS: dict[FilingStatus, str] = {
    FilingStatus.SINGLE: "Single",
    FilingStatus.JOINT: "Married Filing Jointly",
    FilingStatus.HEAD: "Head of Household",
}


# =============================================================================
# Display Formatting
# =============================================================================


def format_currency(amount: Decimal) -> str:
    """Format an amount as whole US dollars.

    Halves round away from zero.

    Example:
        >>> format_currency(Decimal("5216.4"))
        '$5,216'
        >>> format_currency(Decimal("-1200"))
        '-$1,200'
    """
    rounded = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "$0"
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}"


def format_rate(rate: Decimal) -> str:
    """Format a percentage with one decimal place (e.g., '11.5%')."""
    rounded = rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded}%"


def filing_status_label(filing_status: FilingStatus | str) -> str:
    """Human-readable filing status name."""
    return FILING_STATUS_LABELS[FilingStatus(filing_status)]


def summary_to_display(summary: TaxSummary) -> dict[str, str]:
    """Build the labelled lines of the tax summary panel.

    Args:
        summary: Computed tax summary.

    Returns:
        Ordered mapping of label to formatted value.
    """
    return {
        "Total Income": format_currency(summary.total_income),
        "Taxable Income": format_currency(summary.taxable_income),
        "Ordinary Income Tax": format_currency(summary.ordinary_tax),
        "Qualified Income Tax": format_currency(summary.qualified_tax),
        "Total Tax": format_currency(summary.total_tax),
        "Effective Tax Rate": format_rate(summary.effective_rate),
    }


# =============================================================================
# Estimate Workbook
# =============================================================================


def _format_decimal(value: Decimal | None) -> float | None:
    """Convert Decimal to float for Excel."""
    if value is None:
        return None
    return float(value)


def _auto_fit_columns(worksheet) -> None:
    """Auto-fit column widths based on content.

    Args:
        worksheet: openpyxl worksheet to adjust.
    """
    for column_cells in worksheet.columns:
        max_length = 0
        column = column_cells[0].column_letter
        for cell in column_cells:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))
        worksheet.column_dimensions[column].width = min(max_length + 2, 50)


def _add_summary_sheet(workbook: Workbook, summary: TaxSummary) -> None:
    """Add Summary sheet with income, deduction, and tax lines."""
    ws = workbook.active
    ws.title = "Summary"

    ws["A1"] = f"Federal Tax Estimate ({summary.tax_year})"
    ws["A1"].font = Font(bold=True, size=14)
    ws["A2"] = f"Filing Status: {filing_status_label(summary.filing_status)}"
    ws["A3"] = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}"

    ws["A5"] = "INCOME"
    ws["A5"].font = Font(bold=True)

    rows: list[tuple[str, Decimal]] = [
        ("Ordinary Income", summary.totals.ordinary_income),
        ("Qualified Income", summary.totals.qualified_income),
        ("TOTAL INCOME", summary.total_income),
    ]
    row = 6
    for label, amount in rows:
        ws[f"A{row}"] = label
        ws[f"B{row}"] = _format_decimal(amount)
        ws[f"B{row}"].number_format = CURRENCY_FORMAT
        row += 1

    row += 1
    ws[f"A{row}"] = "DEDUCTION"
    ws[f"A{row}"].font = Font(bold=True)
    row += 1
    ws[f"A{row}"] = f"Deduction Method: {summary.deduction.method.title()}"
    row += 1
    ws[f"A{row}"] = "Deduction Amount"
    ws[f"B{row}"] = _format_decimal(summary.deduction.amount)
    ws[f"B{row}"].number_format = CURRENCY_FORMAT
    row += 2

    ws[f"A{row}"] = "TAX CALCULATION"
    ws[f"A{row}"].font = Font(bold=True)
    row += 1

    tax_rows: list[tuple[str, Decimal]] = [
        ("Taxable Ordinary Income", summary.results.taxable_ordinary_income),
        ("Taxable Qualified Income", summary.results.taxable_qualified_income),
        ("Taxable Income", summary.taxable_income),
        ("Ordinary Income Tax", summary.ordinary_tax),
        ("Qualified Income Tax", summary.qualified_tax),
        ("Total Tax", summary.total_tax),
    ]
    for label, amount in tax_rows:
        ws[f"A{row}"] = label
        ws[f"B{row}"] = _format_decimal(amount)
        ws[f"B{row}"].number_format = CURRENCY_FORMAT
        if label == "Total Tax":
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"].font = Font(bold=True)
        row += 1

    ws[f"A{row}"] = "Effective Tax Rate"
    ws[f"B{row}"] = _format_decimal(summary.effective_rate)
    ws[f"B{row}"].number_format = PERCENT_FORMAT

    _auto_fit_columns(ws)


def _add_brackets_sheet(workbook: Workbook, summary: TaxSummary) -> None:
    """Add Brackets sheet listing every bracket slice that was taxed."""
    ws = workbook.create_sheet("Brackets")

    headers = ["Stream", "Rate", "From", "To", "Amount", "Tax"]
    header_fill = PatternFill(start_color="DAEEF3", end_color="DAEEF3", fill_type="solid")
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    slices: list[tuple[str, BracketSlice]] = [
        ("Ordinary", item) for item in summary.results.ordinary_breakdown
    ] + [("Qualified", item) for item in summary.results.qualified_breakdown]

    for row, (stream, item) in enumerate(slices, start=2):
        ws.cell(row=row, column=1, value=stream)
        ws.cell(row=row, column=2, value=_format_decimal(item.rate * 100))
        ws.cell(row=row, column=2).number_format = PERCENT_FORMAT
        ws.cell(row=row, column=3, value=_format_decimal(item.floor))
        ws.cell(row=row, column=4, value=_format_decimal(item.ceiling) if item.ceiling is not None else "and up")
        ws.cell(row=row, column=5, value=_format_decimal(item.amount))
        ws.cell(row=row, column=6, value=_format_decimal(item.tax))
        for col in (3, 4, 5, 6):
            ws.cell(row=row, column=col).number_format = CURRENCY_FORMAT

    _auto_fit_columns(ws)


def build_estimate_workbook(summary: TaxSummary) -> Workbook:
    """Build the estimate workbook in memory.

    Args:
        summary: Computed tax summary.

    Returns:
        Workbook with Summary and Brackets sheets.
    """
    workbook = Workbook()
    _add_summary_sheet(workbook, summary)
    _add_brackets_sheet(workbook, summary)
    return workbook


def generate_estimate_workbook(summary: TaxSummary, output_path: Path) -> Path:
    """Generate the estimate workbook on disk.

    Args:
        summary: Computed tax summary.
        output_path: Where to save the xlsx file.

    Returns:
        Path to generated file.
    """
    workbook = build_estimate_workbook(summary)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output_path)
    return output_path
