"""Tests for baseline proration and the employment blend."""

from decimal import Decimal

import pytest

from crewtax_core import EmploymentOverrides, ProrationEngine, TaxBaseline


@pytest.fixture
def baseline() -> TaxBaseline:
    return TaxBaseline(
        gross_income=Decimal("100000"),
        federal_tax=Decimal("15000"),
        provincial_tax=Decimal("10000"),
        cpp_contribution=Decimal("5000"),
    )


@pytest.fixture
def engine() -> ProrationEngine:
    return ProrationEngine()


class TestReproportion:
    """Test suite for reproportion()."""

    def test_half_income(self, engine, baseline):
        result = engine.reproportion(baseline, Decimal("50000"))

        assert result.income_ratio == Decimal("0.5")
        assert result.federal_tax == Decimal("7500")
        assert result.provincial_tax == Decimal("5000")
        assert result.cpp_contribution == Decimal("2500")
        assert result.total_owed == Decimal("15000")

    def test_full_income_leaves_baseline_unchanged(self, engine, baseline):
        result = engine.reproportion(baseline, baseline.gross_income)

        assert result.income_ratio == 1
        assert result.federal_tax == baseline.federal_tax
        assert result.provincial_tax == baseline.provincial_tax
        assert result.cpp_contribution == baseline.cpp_contribution

    def test_zero_gross_income(self, engine):
        """A baseline without gross income prorates to zero."""
        result = engine.reproportion(TaxBaseline(federal_tax=Decimal("100")), Decimal("5000"))

        assert result.income_ratio == 0
        assert result.total_owed == 0

    def test_total_is_sum_of_parts(self, engine, baseline):
        result = engine.reproportion(baseline, Decimal("12345.67"))

        assert result.total_owed == (
            result.federal_tax + result.provincial_tax + result.cpp_contribution
        )


class TestEffectiveRate:
    """Test suite for effective_rate()."""

    def test_rate(self, engine):
        assert engine.effective_rate(Decimal("15000"), Decimal("40000")) == Decimal("37.5")

    @pytest.mark.parametrize("net_income", [Decimal("0"), Decimal("-100")])
    def test_non_positive_net_income(self, engine, net_income):
        assert engine.effective_rate(Decimal("15000"), net_income) == 0


class TestCombineWithEmployment:
    """Test suite for combine_with_employment()."""

    @pytest.fixture
    def prorated(self, engine, baseline):
        return engine.reproportion(baseline, Decimal("50000"))

    def test_employment_income_blended(self, engine, prorated):
        overrides = EmploymentOverrides(
            regular_employment_income=Decimal("20000"),
            taxes_paid_on_employment=Decimal("6000"),
            cpp_paid_on_employment=Decimal("3000"),
        )

        result = engine.combine_with_employment(
            prorated, Decimal("40000"), Decimal("37.5"), overrides, 2024,
        )

        assert result.federal_share == Decimal("0.6")
        assert result.estimated_tax_on_employment == Decimal("7500")
        assert result.federal_tax == Decimal("12000")
        assert result.provincial_tax == Decimal("8000")
        assert result.cpp_contribution == Decimal("2500")
        assert not result.cpp_cap_applied
        assert result.total_owed_signed == Decimal("16500")
        assert result.amount_owed == Decimal("16500")
        assert result.combined_net_income == Decimal("60000")
        assert result.effective_rate == Decimal("27.5")
        assert not result.is_refund

    def test_refund_when_taxes_paid_exceed_owed(self, engine, prorated):
        overrides = EmploymentOverrides(
            regular_employment_income=Decimal("20000"),
            taxes_paid_on_employment=Decimal("30000"),
        )

        result = engine.combine_with_employment(
            prorated, Decimal("40000"), Decimal("37.5"), overrides, 2024,
        )

        assert result.total_owed_signed < 0
        assert result.is_refund
        assert result.amount_owed == 0
        assert result.effective_rate == 0

    def test_cpp_capped(self, engine, prorated):
        overrides = EmploymentOverrides(cpp_paid_on_employment=Decimal("7000"))

        result = engine.combine_with_employment(
            prorated, Decimal("40000"), Decimal("37.5"), overrides, 2024,
        )

        assert result.cpp_contribution == Decimal("735")
        assert result.cpp_cap_applied
        assert result.max_cpp_contribution == Decimal("7735")
        assert result.estimated_tax_on_employment == 0

    def test_no_overrides_pass_through(self, engine, prorated):
        result = engine.combine_with_employment(
            prorated, Decimal("40000"), Decimal("37.5"), None, 2024,
        )

        assert result.federal_tax == prorated.federal_tax
        assert result.provincial_tax == prorated.provincial_tax
        assert result.cpp_contribution == prorated.cpp_contribution
        assert result.total_owed_signed == prorated.total_owed
        assert result.estimated_tax_on_employment == 0

    def test_even_split_without_net_income(self, engine, prorated):
        """The federal share falls back to one half."""
        overrides = EmploymentOverrides(regular_employment_income=Decimal("1000"))

        result = engine.combine_with_employment(
            prorated, Decimal("0"), Decimal("10"), overrides, 2024,
        )

        assert result.federal_share == Decimal("0.5")
        assert result.federal_tax == prorated.federal_tax + Decimal("50")
        assert result.provincial_tax == prorated.provincial_tax + Decimal("50")
