"""Tests for CPP parameters and contributions."""

from decimal import Decimal

import pytest

from crewtax_core import (
    ConfigurationError,
    CPPCalculator,
    CppParameterTable,
    CPPYearParameters,
    DEFAULT_CPP_TABLE,
)


@pytest.fixture
def calculator() -> CPPCalculator:
    return CPPCalculator()


class TestCppParameterTable:
    """Test suite for the CPP parameter table."""

    def test_known_years(self):
        assert DEFAULT_CPP_TABLE.years == (2020, 2021, 2022, 2023, 2024, 2025, 2026)
        assert DEFAULT_CPP_TABLE.latest_year == 2026

    def test_exact_lookup(self):
        params = DEFAULT_CPP_TABLE.for_year(2022)

        assert params.max_pensionable_earnings == Decimal("64900")
        assert params.basic_exemption == Decimal("3500")
        assert params.self_employed_rate == Decimal("0.1115")
        assert params.max_contributory_earnings == Decimal("61400")

    def test_missing_year_falls_back_to_latest(self):
        """Unknown years use the latest year's parameters."""
        assert DEFAULT_CPP_TABLE.for_year(1999) == DEFAULT_CPP_TABLE.for_year(2026)
        assert DEFAULT_CPP_TABLE.for_year(2031) == DEFAULT_CPP_TABLE.for_year(2026)
        assert DEFAULT_CPP_TABLE.get(1999) is None

    def test_table_is_copied(self):
        """Changes to the source mapping do not reach the table."""
        source = {2024: CPPYearParameters(Decimal("68500"), Decimal("3500"), Decimal("0.1190"))}
        table = CppParameterTable(source, version="test")

        source[2030] = CPPYearParameters(Decimal("1"), Decimal("0"), Decimal("1"))

        assert 2030 not in table
        assert table.version == "test"

    def test_empty_table_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CppParameterTable({})

        assert exc_info.value.config_key == "cpp_parameters"
        assert not exc_info.value.recoverable


class TestCPPCalculator:
    """Test suite for CPPCalculator."""

    def test_max_contribution_2024(self, calculator):
        assert calculator.max_contribution(2024) == Decimal("7735.00")

    def test_max_contribution_fallback(self, calculator):
        """A year before the table uses 2026 figures."""
        assert calculator.max_contribution(1999) == Decimal("8460.90")

    def test_owed_is_capped(self, calculator):
        """Only the room left under the cap is owed."""
        owed = calculator.self_employed_cpp_owed(2024, Decimal("5000"), Decimal("4000"))

        assert owed == Decimal("3735")

    def test_owed_below_cap(self, calculator):
        owed = calculator.self_employed_cpp_owed(2024, Decimal("1000"), Decimal("500"))

        assert owed == Decimal("1000")

    def test_owed_never_negative(self, calculator):
        """Employment CPP above the cap leaves nothing owed."""
        owed = calculator.self_employed_cpp_owed(2024, Decimal("1000"), Decimal("9000"))

        assert owed == 0

    @pytest.mark.parametrize(
        "needed, already_paid",
        [("0", "0"), ("100", "0"), ("5000", "4000"), ("20000", "0"), ("10", "9000")],
    )
    def test_owed_within_bounds(self, calculator, needed, already_paid):
        owed = calculator.self_employed_cpp_owed(2024, Decimal(needed), Decimal(already_paid))
        cap = calculator.max_contribution(2024)

        assert 0 <= owed <= cap
        assert owed <= Decimal(needed)

    def test_cap_reached(self, calculator):
        assert calculator.cap_reached(2024, Decimal("5000"), Decimal("4000"))
        assert not calculator.cap_reached(2024, Decimal("1000"), Decimal("500"))

    def test_injected_table(self):
        """A custom table replaces the statutory figures."""
        table = CppParameterTable(
            {2024: CPPYearParameters(Decimal("10000"), Decimal("0"), Decimal("0.1"))},
            version="custom",
        )
        calculator = CPPCalculator(table)

        assert calculator.max_contribution(2024) == Decimal("1000")
        assert calculator.table_version == "custom"
