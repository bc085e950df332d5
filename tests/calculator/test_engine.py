"""Tests for the tax estimate pipeline.

These tests cover:
- Income aggregation into ordinary and qualified streams
- Proportional deduction allocation and clamping
- Ordinary bracket tax
- Qualified tax stacked on top of ordinary income
- Summary derivation and end-to-end scenarios
"""

from decimal import Decimal

import pytest

from taxcalc.calculator.engine import (
    aggregate_income,
    allocate_deduction,
    calculate_ordinary_tax,
    calculate_qualified_tax,
    compute_tax,
    summarize,
)
from taxcalc.calculator.models import (
    DeductionChoice,
    IncomeInputs,
    IncomeTotals,
    TaxResults,
)
from taxcalc.core.config import settings
from taxcalc.tax.models import FilingStatus
from taxcalc.tax.year_config import TAX_YEAR_2024, TaxYearConfig

CENT = Decimal("0.01")


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENT)


def _totals(ordinary: str, qualified: str) -> IncomeTotals:
    ordinary_income = Decimal(ordinary)
    qualified_income = Decimal(qualified)
    return IncomeTotals(
        ordinary_income=ordinary_income,
        qualified_income=qualified_income,
        total_income=ordinary_income + qualified_income,
    )


SINGLE_ORDINARY = TAX_YEAR_2024.ordinary_brackets_for(FilingStatus.SINGLE)
SINGLE_QUALIFIED = TAX_YEAR_2024.qualified_brackets_for(FilingStatus.SINGLE)


# =============================================================================
# Income Aggregation
# =============================================================================


class TestAggregateIncome:
    """Tests for splitting income into ordinary and qualified streams."""

    def test_all_fields_routed_to_correct_stream(self) -> None:
        """Each field lands in the ordinary or qualified stream."""
        inputs = IncomeInputs(
            wages="50000",
            interest="1000",
            non_qualified_dividends="200",
            qualified_dividends="800",
            short_term_gains="300",
            long_term_gains="5000",
            other_income="700",
        )

        totals = aggregate_income(inputs)

        assert totals.ordinary_income == Decimal("52200")
        assert totals.qualified_income == Decimal("5800")
        assert totals.total_income == Decimal("58000")

    def test_unparsable_fields_count_as_zero(self) -> None:
        """Garbage in one field does not affect the others."""
        inputs = IncomeInputs(wages="40000", interest="abc", long_term_gains="")

        totals = aggregate_income(inputs)

        assert totals.ordinary_income == Decimal("40000")
        assert totals.qualified_income == Decimal("0")

    def test_empty_inputs(self) -> None:
        """No income yields zero totals."""
        totals = aggregate_income(IncomeInputs())

        assert totals.total_income == Decimal("0")


# =============================================================================
# Deduction Allocation
# =============================================================================


class TestAllocateDeduction:
    """Tests for the proportional deduction allocation."""

    def test_standard_deduction_from_config(self, config_2024: TaxYearConfig) -> None:
        """Standard deduction is looked up by filing status."""
        allocation = allocate_deduction(
            _totals("100000", "0"), FilingStatus.JOINT, DeductionChoice(), config_2024
        )

        assert allocation.method == "standard"
        assert allocation.amount == Decimal("29200")
        assert allocation.taxable_ordinary_income == Decimal("70800")

    def test_deduction_shrinks_both_streams_by_same_ratio(
        self, config_2024: TaxYearConfig
    ) -> None:
        """Qualified income absorbs its proportional share of the deduction."""
        allocation = allocate_deduction(
            _totals("80000", "20000"), FilingStatus.SINGLE, DeductionChoice(), config_2024
        )

        assert allocation.ratio == Decimal("0.146")
        assert allocation.taxable_ordinary_income == Decimal("68320")
        assert allocation.taxable_qualified_income == Decimal("17080")

    def test_itemized_amount_used_when_selected(self, config_2024: TaxYearConfig) -> None:
        """Itemized selection uses the entered amount."""
        allocation = allocate_deduction(
            _totals("100000", "0"),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw="25000"),
            config_2024,
        )

        assert allocation.method == "itemized"
        assert allocation.amount == Decimal("25000")
        assert allocation.taxable_ordinary_income == Decimal("75000")

    def test_unparsable_itemized_amount_is_zero(self, config_2024: TaxYearConfig) -> None:
        """Itemized with garbage text deducts nothing."""
        allocation = allocate_deduction(
            _totals("100000", "0"),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw="lots"),
            config_2024,
        )

        assert allocation.amount == Decimal("0")
        assert allocation.taxable_ordinary_income == Decimal("100000")

    def test_standard_amount_override(self, config_2024: TaxYearConfig) -> None:
        """An explicit standard amount replaces the table value."""
        allocation = allocate_deduction(
            _totals("50000", "0"),
            FilingStatus.SINGLE,
            DeductionChoice(standard_amount=Decimal("10000")),
            config_2024,
        )

        assert allocation.amount == Decimal("10000")
        assert allocation.taxable_ordinary_income == Decimal("40000")

    def test_deduction_larger_than_income_clamps_both_streams(
        self, config_2024: TaxYearConfig
    ) -> None:
        """Ratio above 1 floors each stream at zero independently."""
        allocation = allocate_deduction(
            _totals("30000", "20000"),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw="200000"),
            config_2024,
        )

        assert allocation.ratio == Decimal("4")
        assert allocation.taxable_ordinary_income == Decimal("0")
        assert allocation.taxable_qualified_income == Decimal("0")

    def test_zero_income_has_zero_ratio(self, config_2024: TaxYearConfig) -> None:
        """No division by zero when total income is zero."""
        allocation = allocate_deduction(
            _totals("0", "0"), FilingStatus.HEAD, DeductionChoice(), config_2024
        )

        assert allocation.amount == Decimal("21900")
        assert allocation.ratio == Decimal("0")
        assert allocation.taxable_ordinary_income == Decimal("0")
        assert allocation.taxable_qualified_income == Decimal("0")

    @pytest.mark.parametrize(
        ("ordinary", "qualified", "itemized"),
        [
            ("0", "0", "0"),
            ("10000", "0", "50000"),
            ("0", "10000", "50000"),
            ("12345.67", "8901.23", "21246.90"),
            ("500000", "250000", "1"),
            ("1", "1", "999999"),
        ],
    )
    def test_taxable_streams_never_negative(
        self, config_2024: TaxYearConfig, ordinary: str, qualified: str, itemized: str
    ) -> None:
        """Non-negative inputs never produce negative taxable income."""
        allocation = allocate_deduction(
            _totals(ordinary, qualified),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw=itemized),
            config_2024,
        )

        assert allocation.taxable_ordinary_income >= 0
        assert allocation.taxable_qualified_income >= 0


# =============================================================================
# Ordinary Bracket Tax
# =============================================================================


class TestCalculateOrdinaryTax:
    """Tests for the marginal bracket walk."""

    def test_first_bracket_only(self) -> None:
        """Income inside the 10% bracket is taxed at 10%."""
        tax, breakdown = calculate_ordinary_tax(Decimal("10000"), SINGLE_ORDINARY)

        assert tax == Decimal("1000")
        assert len(breakdown) == 1

    def test_two_brackets(self) -> None:
        """$45,400 single spans the 10% and 12% brackets."""
        tax, breakdown = calculate_ordinary_tax(Decimal("45400"), SINGLE_ORDINARY)

        # 11600 * 0.10 + 33800 * 0.12
        assert tax == Decimal("5216")
        assert [item.rate for item in breakdown] == [Decimal("0.10"), Decimal("0.12")]
        assert breakdown[1].floor == Decimal("11600")
        assert breakdown[1].amount == Decimal("33800")

    def test_exact_bracket_boundary(self) -> None:
        """Income equal to a ceiling does not enter the next bracket."""
        tax, breakdown = calculate_ordinary_tax(Decimal("11600"), SINGLE_ORDINARY)

        assert tax == Decimal("1160")
        assert len(breakdown) == 1

    def test_top_bracket_absorbs_remaining_income(self) -> None:
        """Income above the last ceiling is taxed at 37%."""
        tax, breakdown = calculate_ordinary_tax(Decimal("700000"), SINGLE_ORDINARY)

        assert tax == Decimal("217187.75")
        assert breakdown[-1].ceiling is None
        assert breakdown[-1].amount == Decimal("90650")

    def test_joint_brackets(self) -> None:
        """Joint filers use the wider joint ladder."""
        tax, _ = calculate_ordinary_tax(
            Decimal("100000"), TAX_YEAR_2024.ordinary_brackets_for(FilingStatus.JOINT)
        )

        # 2320 + 8532 + 1254
        assert tax == Decimal("12106")

    def test_zero_income(self) -> None:
        """Zero income produces no tax and no slices."""
        tax, breakdown = calculate_ordinary_tax(Decimal("0"), SINGLE_ORDINARY)

        assert tax == Decimal("0")
        assert breakdown == ()

    @pytest.mark.parametrize("income", ["45400", "150000", "243725", "609349.99"])
    def test_bracket_amounts_sum_to_income(self, income: str) -> None:
        """Every dollar of taxable income is taxed exactly once."""
        _, breakdown = calculate_ordinary_tax(Decimal(income), SINGLE_ORDINARY)

        assert sum(item.amount for item in breakdown) == Decimal(income)

    def test_tax_non_decreasing_in_income(self) -> None:
        """More taxable income never means less ordinary tax."""
        previous = Decimal("-1")
        for step in range(0, 80):
            tax, _ = calculate_ordinary_tax(Decimal(step * 10000), SINGLE_ORDINARY)
            assert tax >= previous
            previous = tax


# =============================================================================
# Stacked Qualified Tax
# =============================================================================


class TestCalculateQualifiedTax:
    """Tests for preferential rates stacked on ordinary income."""

    def test_no_qualified_income(self) -> None:
        """Zero qualified income is untaxed regardless of ordinary income."""
        for ordinary in ("0", "50000", "1000000"):
            tax, breakdown = calculate_qualified_tax(
                Decimal("0"), Decimal(ordinary), SINGLE_QUALIFIED
            )
            assert tax == Decimal("0")
            assert breakdown == ()

    def test_fits_in_zero_percent_bracket(self) -> None:
        """Qualified income below the 0% ceiling is untaxed."""
        tax, breakdown = calculate_qualified_tax(
            Decimal("45400"), Decimal("0"), SINGLE_QUALIFIED
        )

        assert tax == Decimal("0")
        assert breakdown[0].amount == Decimal("45400")

    def test_straddles_zero_and_fifteen_percent(self) -> None:
        """Stacking on $40,000 leaves $7,025 in the 0% bracket."""
        tax, breakdown = calculate_qualified_tax(
            Decimal("20000"), Decimal("40000"), SINGLE_QUALIFIED
        )

        # 7025 at 0% + 12975 at 15%
        assert tax == Decimal("1946.25")
        assert [item.floor for item in breakdown] == [Decimal("40000"), Decimal("47025")]
        assert [item.amount for item in breakdown] == [Decimal("7025"), Decimal("12975")]

    def test_skips_brackets_filled_by_ordinary_income(self) -> None:
        """Ordinary income above the 0% ceiling pushes all gains to 15%."""
        tax, breakdown = calculate_qualified_tax(
            Decimal("10000"), Decimal("100000"), SINGLE_QUALIFIED
        )

        assert tax == Decimal("1500")
        assert len(breakdown) == 1
        assert breakdown[0].rate == Decimal("0.15")
        assert breakdown[0].floor == Decimal("100000")

    def test_reaches_twenty_percent_bracket(self) -> None:
        """Gains stacked past the 15% ceiling are taxed at 20%."""
        tax, breakdown = calculate_qualified_tax(
            Decimal("100000"), Decimal("500000"), SINGLE_QUALIFIED
        )

        # 18900 at 15% + 81100 at 20%
        assert tax == Decimal("19055")
        assert breakdown[-1].ceiling is None

    def test_ordinary_income_above_all_bounded_brackets(self) -> None:
        """Everything lands in the top bracket when ordinary income is huge."""
        tax, breakdown = calculate_qualified_tax(
            Decimal("1000"), Decimal("2000000"), SINGLE_QUALIFIED
        )

        assert tax == Decimal("200")
        assert len(breakdown) == 1


# =============================================================================
# Pipeline
# =============================================================================


class TestComputeTax:
    """End-to-end scenarios through compute_tax and summarize."""

    def test_single_wages_standard_deduction(self, config_2024: TaxYearConfig) -> None:
        """Single filer with $60,000 wages owes $5,216."""
        result = compute_tax(IncomeInputs(wages="60000"), FilingStatus.SINGLE, config=config_2024)

        assert _cents(result.taxable_ordinary_income) == Decimal("45400.00")
        assert _cents(result.ordinary_tax) == Decimal("5216.00")
        assert result.qualified_tax == Decimal("0")
        assert _cents(result.total_tax) == Decimal("5216.00")

    def test_long_term_gains_only(self, config_2024: TaxYearConfig) -> None:
        """$60,000 of long-term gains after deduction falls in the 0% bracket."""
        result = compute_tax(
            IncomeInputs(long_term_gains="60000"), FilingStatus.SINGLE, config=config_2024
        )

        assert result.taxable_ordinary_income == Decimal("0")
        assert _cents(result.taxable_qualified_income) == Decimal("45400.00")
        assert result.qualified_tax == Decimal("0")
        assert result.total_tax == Decimal("0")

    def test_itemized_exceeds_income(self, config_2024: TaxYearConfig) -> None:
        """A deduction four times income zeroes everything."""
        summary = summarize(
            IncomeInputs(wages="30000", qualified_dividends="20000"),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw="200000"),
            config_2024,
        )

        assert summary.total_income == Decimal("50000")
        assert summary.taxable_income == Decimal("0")
        assert summary.total_tax == Decimal("0")
        assert summary.effective_rate == Decimal("0")

    def test_zero_income(self, config_2024: TaxYearConfig) -> None:
        """All-empty inputs produce an all-zero summary without errors."""
        summary = summarize(IncomeInputs(), FilingStatus.JOINT, config=config_2024)

        assert summary.deduction.ratio == Decimal("0")
        assert summary.taxable_income == Decimal("0")
        assert summary.total_tax == Decimal("0")
        assert summary.effective_rate == Decimal("0")

    def test_mixed_income_summary(self, config_2024: TaxYearConfig) -> None:
        """Wages plus gains: proportional deduction then stacking."""
        summary = summarize(
            IncomeInputs(wages="80000", long_term_gains="20000"),
            FilingStatus.SINGLE,
            config=config_2024,
        )

        assert summary.taxable_income == Decimal("85400")
        # 1160 + 4266 + 21170 * 0.22
        assert summary.ordinary_tax == Decimal("10083.40")
        # 0% bracket is already filled by $68,320 of ordinary income
        assert summary.qualified_tax == Decimal("2562.00")
        assert summary.total_tax == Decimal("12645.40")
        assert summary.effective_rate.quantize(Decimal("0.001")) == Decimal("14.807")

    def test_accepts_raw_mapping_and_string_status(self, config_2024: TaxYearConfig) -> None:
        """Raw form values and a plain status string are accepted."""
        result = compute_tax(
            {"wages": "60000", "interest": "", "other_income": "n/a"},
            "single",
            config=config_2024,
        )

        assert _cents(result.total_tax) == Decimal("5216.00")

    def test_unknown_filing_status_raises(self, config_2024: TaxYearConfig) -> None:
        """Filing status must be one of the enum values."""
        with pytest.raises(ValueError):
            compute_tax(IncomeInputs(wages="1"), "married", config=config_2024)

    def test_default_config_follows_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without an explicit config the configured default year is used."""
        monkeypatch.setattr(settings, "default_tax_year", 2025)

        result = compute_tax(IncomeInputs(wages="60000"), FilingStatus.SINGLE)

        # 2025: 60000 - 15000 = 45000 -> 1192.50 + 33075 * 0.12
        assert result.taxable_ordinary_income == Decimal("45000")
        assert result.ordinary_tax == Decimal("5161.50")

    def test_recomputation_is_identical(self, config_2024: TaxYearConfig) -> None:
        """Same inputs give the same results on every call."""
        inputs = IncomeInputs(wages="123456.78", qualified_dividends="4321", long_term_gains="9876")
        deduction = DeductionChoice(itemized=True, itemized_amount_raw="31000")

        first = compute_tax(inputs, FilingStatus.HEAD, deduction, config_2024)
        second = compute_tax(inputs, FilingStatus.HEAD, deduction, config_2024)

        assert isinstance(first, TaxResults)
        assert first == second

    def test_oversized_income_field_is_ignored(self, config_2024: TaxYearConfig) -> None:
        """An exponent beyond computable range counts as no income."""
        summary = summarize(
            {"wages": "1e9999999", "interest": "60000"}, "single", config=config_2024
        )

        assert summary.total_income == Decimal("60000")
        assert _cents(summary.total_tax) == Decimal("5216.00")

    def test_oversized_itemized_amount_is_ignored(self, config_2024: TaxYearConfig) -> None:
        """An out-of-range itemized amount deducts nothing."""
        summary = summarize(
            IncomeInputs(wages="60000"),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw="1e999999999"),
            config_2024,
        )

        assert summary.deduction.amount == Decimal("0")
        assert summary.deduction.ratio == Decimal("0")
        assert summary.taxable_income == Decimal("60000")

    def test_itemized_amount_reads_leading_number(self, config_2024: TaxYearConfig) -> None:
        """Itemized text is parsed like income fields: "14,600" deducts 14."""
        summary = summarize(
            IncomeInputs(wages="60000"),
            FilingStatus.SINGLE,
            DeductionChoice(itemized=True, itemized_amount_raw="14,600"),
            config_2024,
        )

        assert summary.deduction.amount == Decimal("14")
        assert _cents(summary.taxable_income) == Decimal("59986.00")
