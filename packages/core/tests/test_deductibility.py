"""Tests for the deductibility classifier."""

from decimal import Decimal

import pytest

from crewtax_core import DeductibilityClassifier, ExpenseRecord


def make_expense(**overrides) -> ExpenseRecord:
    """Expense of base 100, PST 7, GST 5 unless overridden."""
    data = {
        "id": "e1",
        "amount": "112",
        "baseCost": "100",
        "pstAmount": "7",
        "gstAmount": "5",
        "date": "2024-06-01",
        "category": "office_supplies",
    }
    data.update(overrides)
    return ExpenseRecord.model_validate(data)


@pytest.fixture
def classifier() -> DeductibilityClassifier:
    return DeductibilityClassifier()


class TestDeductibilityRules:
    """Test suite for the per-type deduction rules."""

    def test_not_tax_deductible_flag_wins(self, classifier):
        """An expense flagged not deductible yields nothing, whatever its type."""
        expense = make_expense(expenseType="self_employment", isTaxDeductible=False)

        result = classifier.classify(expense)

        assert result.deductible_amount == 0
        assert result.deductible_gst == 0

    def test_personal(self, classifier):
        result = classifier.classify(make_expense(expenseType="personal"))

        assert result.deductible_amount == 0
        assert result.deductible_gst == 0

    def test_self_employment_full_amount(self, classifier):
        """Self-employment deducts base plus PST; GST is a credit."""
        result = classifier.classify(make_expense(expenseType="self_employment"))

        assert result.deductible_amount == Decimal("107")
        assert result.deductible_gst == Decimal("5")

    def test_unknown_type_treated_as_self_employment(self, classifier):
        result = classifier.classify(make_expense(expenseType="something_new"))

        assert result.deductible_amount == Decimal("107")
        assert result.deductible_gst == Decimal("5")

    @pytest.mark.parametrize("expense_type", ["Personal", "PERSONAL", " personal "])
    def test_type_match_is_exact(self, classifier, expense_type):
        """A near-miss spelling of personal is still deducted in full."""
        result = classifier.classify(make_expense(expenseType=expense_type))

        assert result.deductible_amount == Decimal("107")
        assert result.deductible_gst == Decimal("5")

    def test_missing_type_treated_as_self_employment(self, classifier):
        result = classifier.classify(make_expense())

        assert result.deductible_amount == Decimal("107")

    def test_deductible_never_includes_gst(self, classifier):
        """Deductible amount stays at or below amount minus GST."""
        expense = make_expense(expenseType="self_employment")

        result = classifier.classify(expense)

        assert result.deductible_amount <= expense.amount - expense.gst_amount


class TestHomeOffice:
    """Test suite for home-office apportionment."""

    def test_without_percentage(self, classifier):
        """Home-office expenses are fully deductible when no share is set."""
        result = classifier.classify(make_expense(expenseType="home_office_living"))

        assert result.deductible_amount == Decimal("107")
        assert result.deductible_gst == Decimal("5")

    def test_with_percentage(self):
        classifier = DeductibilityClassifier(home_office_percentage=Decimal("25"))

        result = classifier.classify(make_expense(expenseType="home_office_living"))

        assert result.deductible_amount == Decimal("26.75")
        assert result.deductible_gst == Decimal("1.25")

    @pytest.mark.parametrize("percentage", [Decimal("0"), Decimal("150"), Decimal("-5")])
    def test_out_of_range_percentage_ignored(self, percentage):
        """Shares outside (0, 100] count as not configured."""
        classifier = DeductibilityClassifier(home_office_percentage=percentage)

        result = classifier.classify(make_expense(expenseType="home_office_living"))

        assert result.deductible_amount == Decimal("107")


class TestVehicle:
    """Test suite for vehicle expenses."""

    def test_business_use_applied(self, classifier):
        expense = make_expense(expenseType="vehicle", vehicleId="v1")

        result = classifier.classify(expense, {"v1": Decimal("60")})

        assert result.deductible_amount == Decimal("64.2")
        assert result.deductible_gst == Decimal("3.0")

    def test_unknown_vehicle_defaults_to_full_use(self, classifier):
        expense = make_expense(expenseType="vehicle", vehicleId="v9")

        result = classifier.classify(expense, {"v1": Decimal("60")})

        assert result.deductible_amount == Decimal("107")
        assert result.deductible_gst == Decimal("5")

    def test_no_vehicle_id_defaults_to_full_use(self, classifier):
        expense = make_expense(expenseType="vehicle", vehicleId="")

        result = classifier.classify(expense, {"v1": Decimal("60")})

        assert result.deductible_amount == Decimal("107")

    def test_unset_lookup_value_defaults_to_full_use(self, classifier):
        expense = make_expense(expenseType="vehicle", vehicleId="v1")

        result = classifier.classify(expense, {"v1": None})

        assert result.deductible_amount == Decimal("107")

    def test_zero_business_use(self, classifier):
        expense = make_expense(expenseType="vehicle", vehicleId="v1")

        result = classifier.classify(expense, {"v1": Decimal("0")})

        assert result.deductible_amount == 0
        assert result.deductible_gst == 0


class TestMixed:
    """Test suite for mixed-use expenses."""

    def test_business_use_percentage(self, classifier):
        expense = make_expense(expenseType="mixed", businessUsePercentage="50")

        result = classifier.classify(expense)

        assert result.deductible_amount == Decimal("53.5")
        assert result.deductible_gst == Decimal("2.5")

    def test_unset_percentage_is_zero(self, classifier):
        result = classifier.classify(make_expense(expenseType="mixed"))

        assert result.deductible_amount == 0
        assert result.deductible_gst == 0

    def test_household_category_compounds_with_home_office(self):
        """Mixed household expenses are apportioned twice."""
        classifier = DeductibilityClassifier(home_office_percentage=Decimal("40"))
        expense = make_expense(
            expenseType="mixed", businessUsePercentage="50", category="utilities",
        )

        result = classifier.classify(expense)

        assert result.deductible_amount == Decimal("21.4")
        assert result.deductible_gst == Decimal("1.0")

    def test_other_category_not_compounded(self):
        classifier = DeductibilityClassifier(home_office_percentage=Decimal("40"))
        expense = make_expense(
            expenseType="mixed", businessUsePercentage="50", category="office_supplies",
        )

        result = classifier.classify(expense)

        assert result.deductible_amount == Decimal("53.5")


class TestClassifyAll:
    """Test suite for batch classification."""

    def test_pairs_in_order(self, classifier):
        expenses = [
            make_expense(id="a", expenseType="personal"),
            make_expense(id="b", expenseType="vehicle", vehicleId="v1"),
        ]

        results = classifier.classify_all(expenses, {"v1": Decimal("50")})

        assert [e.id for e, _ in results] == ["a", "b"]
        assert results[0][1].deductible_amount == 0
        assert results[1][1].deductible_amount == Decimal("53.5")
