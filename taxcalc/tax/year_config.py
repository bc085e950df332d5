"""Tax year-specific bracket tables and standard deductions.

This module centralizes the constant reference data for each supported tax
year so the calculation functions never hardcode a year. Adding a year means
adding a new TaxYearConfig record and registering it in TAX_YEAR_CONFIGS.

Example:
    >>> from taxcalc.tax.models import FilingStatus
    >>> from taxcalc.tax.year_config import get_tax_year_config
    >>> config = get_tax_year_config(2024)
    >>> print(config.standard_deduction(FilingStatus.SINGLE))
    14600
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from taxcalc.tax.models import BracketTable, FilingStatus, TaxBracket, validate_brackets


def _ladder(*rows: tuple[str | None, str]) -> tuple[TaxBracket, ...]:
    """Build a bracket ladder from (up_to, rate) string pairs."""
    return tuple(
        TaxBracket(rate=Decimal(rate), up_to=None if up_to is None else Decimal(up_to))
        for up_to, rate in rows
    )


@dataclass(frozen=True)
class TaxYearConfig:
    """Tax year-specific brackets and deductions.

    All monetary values are Decimal for precision in tax calculations.
    This dataclass is frozen to prevent accidental modification.

    Attributes:
        tax_year: The tax year these values apply to.
        ordinary_brackets: Ordinary-income brackets by filing status.
        qualified_brackets: Preferential brackets for qualified dividends and
            long-term gains by filing status.
        standard_deductions: Standard deduction by filing status.
    """

    tax_year: int
    ordinary_brackets: BracketTable
    qualified_brackets: BracketTable
    standard_deductions: dict[FilingStatus, Decimal]

    def __post_init__(self) -> None:
        for name in ("ordinary_brackets", "qualified_brackets", "standard_deductions"):
            table = getattr(self, name)
            missing = [status.value for status in FilingStatus if status not in table]
            if missing:
                raise ValueError(f"{self.tax_year} {name} missing filing statuses: {missing}")

        for table in (self.ordinary_brackets, self.qualified_brackets):
            for brackets in table.values():
                validate_brackets(brackets)

    def ordinary_brackets_for(self, filing_status: FilingStatus) -> tuple[TaxBracket, ...]:
        """Ordinary-income bracket ladder for a filing status."""
        return self.ordinary_brackets[FilingStatus(filing_status)]

    def qualified_brackets_for(self, filing_status: FilingStatus) -> tuple[TaxBracket, ...]:
        """Preferential-rate bracket ladder for a filing status."""
        return self.qualified_brackets[FilingStatus(filing_status)]

    def standard_deduction(self, filing_status: FilingStatus) -> Decimal:
        """Standard deduction for a filing status."""
        return self.standard_deductions[FilingStatus(filing_status)]


# 2024 - IRS published values (Rev. Proc. 2023-34)
ORDINARY_BRACKETS_2024: BracketTable = {
    FilingStatus.SINGLE: _ladder(
        ("11600", "0.10"),
        ("47150", "0.12"),
        ("100525", "0.22"),
        ("191950", "0.24"),
        ("243725", "0.32"),
        ("609350", "0.35"),
        (None, "0.37"),
    ),
    FilingStatus.JOINT: _ladder(
        ("23200", "0.10"),
        ("94300", "0.12"),
        ("201050", "0.22"),
        ("383900", "0.24"),
        ("487450", "0.32"),
        ("731200", "0.35"),
        (None, "0.37"),
    ),
    FilingStatus.HEAD: _ladder(
        ("16550", "0.10"),
        ("63100", "0.12"),
        ("100500", "0.22"),
        ("191950", "0.24"),
        ("243700", "0.32"),
        ("609350", "0.35"),
        (None, "0.37"),
    ),
}

# Long-term capital gains / qualified dividends (0%/15%/20%)
QUALIFIED_BRACKETS_2024: BracketTable = {
    FilingStatus.SINGLE: _ladder(("47025", "0.00"), ("518900", "0.15"), (None, "0.20")),
    FilingStatus.JOINT: _ladder(("94050", "0.00"), ("583750", "0.15"), (None, "0.20")),
    FilingStatus.HEAD: _ladder(("63000", "0.00"), ("551350", "0.15"), (None, "0.20")),
}

STANDARD_DEDUCTIONS_2024: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("14600"),
    FilingStatus.JOINT: Decimal("29200"),
    FilingStatus.HEAD: Decimal("21900"),
}

TAX_YEAR_2024 = TaxYearConfig(
    tax_year=2024,
    ordinary_brackets=ORDINARY_BRACKETS_2024,
    qualified_brackets=QUALIFIED_BRACKETS_2024,
    standard_deductions=STANDARD_DEDUCTIONS_2024,
)

# 2025 - IRS published values (Rev. Proc. 2024-40)
TAX_YEAR_2025 = TaxYearConfig(
    tax_year=2025,
    ordinary_brackets={
        FilingStatus.SINGLE: _ladder(
            ("11925", "0.10"),
            ("48475", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250525", "0.32"),
            ("626350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.JOINT: _ladder(
            ("23850", "0.10"),
            ("96950", "0.12"),
            ("206700", "0.22"),
            ("394600", "0.24"),
            ("501050", "0.32"),
            ("751600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HEAD: _ladder(
            ("17000", "0.10"),
            ("64850", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250500", "0.32"),
            ("626350", "0.35"),
            (None, "0.37"),
        ),
    },
    qualified_brackets={
        FilingStatus.SINGLE: _ladder(("48350", "0.00"), ("533400", "0.15"), (None, "0.20")),
        FilingStatus.JOINT: _ladder(("96700", "0.00"), ("600050", "0.15"), (None, "0.20")),
        FilingStatus.HEAD: _ladder(("64750", "0.00"), ("566700", "0.15"), (None, "0.20")),
    },
    standard_deductions={
        FilingStatus.SINGLE: Decimal("15000"),
        FilingStatus.JOINT: Decimal("30000"),
        FilingStatus.HEAD: Decimal("22500"),
    },
)

# Registry of available tax year configurations
TAX_YEAR_CONFIGS: dict[int, TaxYearConfig] = {
    2024: TAX_YEAR_2024,
    2025: TAX_YEAR_2025,
}

DEFAULT_TAX_YEAR = 2024


def get_tax_year_config(year: int) -> TaxYearConfig:
    """Get configuration for a specific tax year.

    Args:
        year: The tax year (e.g., 2024).

    Returns:
        TaxYearConfig for the specified year.

    Raises:
        ValueError: If no configuration exists for the requested year.

    Example:
        >>> config = get_tax_year_config(2024)
        >>> print(config.standard_deduction(FilingStatus.JOINT))
        29200
    """
    if year not in TAX_YEAR_CONFIGS:
        available = sorted(TAX_YEAR_CONFIGS.keys())
        raise ValueError(
            f"No tax configuration for year {year}. Available years: {available}"
        )
    return TAX_YEAR_CONFIGS[year]
