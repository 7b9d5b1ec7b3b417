"""Tax summary for one tax year.

Runs the full pipeline over a record snapshot:

1. Scope income and expenses to the tax year
2. Classify and aggregate the scoped transactions
3. Rescale the whole-year baseline to the scoped income
4. Compute the effective rate on net income
5. Blend in regular employment when the user supplied any figures

Every step is recorded in the audit log so the figures on screen can be
traced back to their inputs.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

import structlog

from .aggregation import SummaryAggregator
from .cpp import CPPCalculator
from .deductibility import DeductibilityClassifier
from .exceptions import ConfigurationError
from .models import (
    AuditEntry,
    EmploymentOverrides,
    ExpenseRecord,
    IncomeRecord,
    TaxBaseline,
    TaxSummary,
    parse_records,
)
from .proration import ProrationEngine
from .tax_year import filter_by_year

logger = structlog.get_logger()

BaselineLike = Union[TaxBaseline, Mapping[str, Any]]
OverridesLike = Union[EmploymentOverrides, Mapping[str, Any], None]


class TaxSummaryCalculator:
    """
    Produce a TaxSummary from income, expenses and the backend baseline.

    Collaborators are injected so the CPP table, home-office percentage and
    report sizes can be configured by the caller. When only a classifier is
    supplied, the default aggregator is built around it.
    """

    def __init__(
        self,
        classifier: Optional[DeductibilityClassifier] = None,
        cpp_calculator: Optional[CPPCalculator] = None,
        aggregator: Optional[SummaryAggregator] = None,
    ):
        """
        Args:
            classifier: Deductibility rules for the default aggregator.
            cpp_calculator: CPP table and cap calculations.
            aggregator: Report builder. It carries its own classifier.

        Raises:
            ConfigurationError: If both a classifier and an aggregator with a
                different classifier are supplied.
        """
        if (
            aggregator is not None
            and classifier is not None
            and classifier is not aggregator.classifier
        ):
            raise ConfigurationError(
                "Pass either a classifier or an aggregator built with it, not both",
                config_key="classifier",
                expected="The aggregator's own classifier",
            )
        if aggregator is None:
            aggregator = SummaryAggregator(classifier=classifier)
        self.aggregator = aggregator
        self.classifier = aggregator.classifier
        self.cpp_calculator = cpp_calculator or CPPCalculator()
        self.proration = ProrationEngine(self.cpp_calculator)
        self._audit_log: list[AuditEntry] = []

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.info(
            "calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def calculate(
        self,
        income: Iterable[Union[IncomeRecord, Mapping[str, Any]]],
        expenses: Iterable[Union[ExpenseRecord, Mapping[str, Any]]],
        tax_year: int,
        baseline: BaselineLike,
        vehicle_use_percent: Optional[Mapping[str, Optional[Decimal]]] = None,
        overrides: OverridesLike = None,
    ) -> TaxSummary:
        """
        Calculate the tax summary for a year.

        Args:
            income: Income records (models or raw API dictionaries).
            expenses: Expense records (models or raw API dictionaries).
            tax_year: Year to report on.
            baseline: Whole-year figures computed by the backend.
            vehicle_use_percent: Vehicle id -> business-use percentage.
            overrides: Regular-employment figures entered by the user.

        Returns:
            TaxSummary with audit trail and warnings.

        Raises:
            ValidationError: If a record cannot be modelled.
        """
        self._audit_log = []  # Reset audit log
        warnings: list[str] = []

        income_records = parse_records(income, IncomeRecord)
        expense_records = parse_records(expenses, ExpenseRecord)
        baseline = parse_records([baseline], TaxBaseline)[0]
        if overrides is not None:
            overrides = parse_records([overrides], EmploymentOverrides)[0]

        # Step 1: Scope to the tax year
        year_income = filter_by_year(income_records, tax_year)
        year_expenses = filter_by_year(expense_records, tax_year)
        self._log_step(
            step="tax_year_filter",
            input_value=f"{len(income_records)} income, {len(expense_records)} expenses",
            output_value=f"{len(year_income)} income, {len(year_expenses)} expenses",
            source=f"Date prefix = {tax_year}",
        )

        # Step 2: Aggregate
        report = self.aggregator.aggregate(year_income, year_expenses, vehicle_use_percent)
        self._log_step(
            step="total_income",
            input_value=f"{report.income_count} income records",
            output_value=str(report.total_income),
            source="Sum of income amounts",
        )
        self._log_step(
            step="deductible_expenses",
            input_value=f"{report.expense_count} expenses totalling {report.total_expenses}",
            output_value=str(report.total_deductible),
            source="Deductibility by expense type",
            notes=f"GST input tax credits {report.total_deductible_gst}",
        )

        net_income = report.total_income - report.total_deductible
        self._log_step(
            step="net_income",
            input_value=f"{report.total_income} - {report.total_deductible}",
            output_value=str(net_income),
            source="Income less deductible expenses",
        )

        # Step 3: Rescale the baseline
        prorated = self.proration.reproportion(baseline, report.total_income)
        self._log_step(
            step="income_ratio",
            input_value=f"{report.total_income} / {baseline.gross_income}",
            output_value=str(prorated.income_ratio),
            source="Backend whole-year baseline",
            notes="Linear approximation of progressive brackets",
        )
        self._log_step(
            step="prorated_tax",
            input_value=(
                f"federal={baseline.federal_tax}, provincial={baseline.provincial_tax}, "
                f"cpp={baseline.cpp_contribution}"
            ),
            output_value=str(prorated.total_owed),
            source="Baseline x income ratio",
        )

        # Step 4: Effective rate
        effective_rate = self.proration.effective_rate(prorated.total_owed, net_income)
        self._log_step(
            step="effective_rate",
            input_value=f"{prorated.total_owed} / {net_income}",
            output_value=str(effective_rate),
            source="Total owed as percentage of net income",
        )

        # Step 5: Regular employment
        combined = None
        if overrides is not None and overrides.has_any:
            combined = self.proration.combine_with_employment(
                prorated, net_income, effective_rate, overrides, tax_year,
            )
            self._log_step(
                step="combined_with_employment",
                input_value=(
                    f"employment={overrides.regular_employment_income}, "
                    f"taxes_paid={overrides.taxes_paid_on_employment}, "
                    f"cpp_paid={overrides.cpp_paid_on_employment}"
                ),
                output_value=str(combined.total_owed_signed),
                source=f"CPP table {self.cpp_calculator.table_version}",
                notes="CPP capped at annual maximum" if combined.cpp_cap_applied else None,
            )

        # Validation warnings
        if report.total_income == 0:
            warnings.append(f"No income recorded for {tax_year}.")
        if baseline.gross_income <= 0:
            warnings.append(
                "Tax baseline has no gross income; prorated taxes are zero."
            )
        if net_income < 0:
            warnings.append(
                "Deductible expenses exceed income, resulting in a net loss."
            )

        return TaxSummary(
            tax_year=tax_year,
            total_income=report.total_income,
            total_expenses=report.total_expenses,
            deductible_expenses=report.total_deductible,
            deductible_gst_credits=report.total_deductible_gst,
            net_income=net_income,
            net_cashflow=report.total_income - report.total_expenses,
            federal_tax=prorated.federal_tax,
            provincial_tax=prorated.provincial_tax,
            cpp_contribution=prorated.cpp_contribution,
            total_tax_owed=prorated.total_owed,
            effective_rate=effective_rate,
            income_ratio=prorated.income_ratio,
            combined=combined,
            report=report,
            audit_log=self._audit_log,
            warnings=warnings,
            cpp_table_version=self.cpp_calculator.table_version,
        )
