"""Category, GST/HST and summary totals over a set of transactions."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Mapping, Optional

import structlog

from .categories import category_label
from .deductibility import DeductibilityClassifier
from .models import (
    AggregateReport,
    CategoryTotal,
    ExpenseRecord,
    GstHstSummary,
    IncomeDeductionSummary,
    IncomeRecord,
    INCOME_DEDUCTION_FIELDS,
    MonthlyTotal,
)
from .money import ZERO
from .tax_year import month_from_date_string

logger = structlog.get_logger()

DEFAULT_REPORT_TOP_N = 8
DEFAULT_CHART_TOP_N = 5


class SummaryAggregator:
    """
    Roll transactions up into an AggregateReport.

    The aggregator does not filter by year; pass it the records that should
    be counted. It never mutates its inputs, and the same inputs always
    produce the same report.
    """

    def __init__(
        self,
        classifier: Optional[DeductibilityClassifier] = None,
        report_top_n: int = DEFAULT_REPORT_TOP_N,
        chart_top_n: int = DEFAULT_CHART_TOP_N,
    ):
        """
        Args:
            classifier: Used to compute deductible totals and GST credits.
            report_top_n: Categories kept in ``totals_by_category``.
            chart_top_n: Categories returned by chart_categories().
        """
        self.classifier = classifier or DeductibilityClassifier()
        self.report_top_n = report_top_n
        self.chart_top_n = chart_top_n

    def aggregate(
        self,
        income: Iterable[IncomeRecord],
        expenses: Iterable[ExpenseRecord],
        vehicle_use_percent: Optional[Mapping[str, Optional[Decimal]]] = None,
    ) -> AggregateReport:
        """
        Build the report.

        Args:
            income: Income records to total.
            expenses: Expense records to total and classify.
            vehicle_use_percent: Vehicle id -> business-use percentage.

        Returns:
            AggregateReport
        """
        income = list(income)
        expenses = list(expenses)
        classified = self.classifier.classify_all(expenses, vehicle_use_percent)

        total_income = sum((i.amount for i in income), ZERO)
        total_expenses = sum((e.amount for e in expenses), ZERO)
        total_deductible = sum((d.deductible_amount for _, d in classified), ZERO)
        total_deductible_gst = sum((d.deductible_gst for _, d in classified), ZERO)
        total_gst_collected = sum((i.gst_hst_collected for i in income), ZERO)

        gst_transactions = (
            sum(1 for i in income if i.gst_hst_collected > 0)
            + sum(1 for _, d in classified if d.deductible_gst > 0)
        )

        report = AggregateReport(
            totals_by_category=self._category_totals(expenses),
            total_income=total_income,
            total_expenses=total_expenses,
            total_deductible=total_deductible,
            total_deductible_gst=total_deductible_gst,
            total_gst_hst_collected=total_gst_collected,
            gst_hst=GstHstSummary(
                collected=total_gst_collected,
                input_tax_credits=total_deductible_gst,
                transactions_with_gst_hst=gst_transactions,
            ),
            income_deductions=self._income_deductions(income),
            monthly_totals=self._monthly_totals(income, expenses),
            income_count=len(income),
            expense_count=len(expenses),
        )

        logger.info(
            "transactions_aggregated",
            income_count=report.income_count,
            expense_count=report.expense_count,
            total_income=str(total_income),
            total_expenses=str(total_expenses),
            total_deductible=str(total_deductible),
        )
        return report

    def chart_categories(self, report: AggregateReport) -> list[CategoryTotal]:
        """Top categories shown on the dashboard chart."""
        return report.totals_by_category[:self.chart_top_n]

    def _category_totals(self, expenses: list[ExpenseRecord]) -> list[CategoryTotal]:
        # dict keeps first-seen order, so sorted() breaks ties by first occurrence
        totals: dict[str, Decimal] = {}
        for expense in expenses:
            totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount

        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return [
            CategoryTotal(category=category, label=category_label(category), amount=amount)
            for category, amount in ranked[:self.report_top_n]
        ]

    @staticmethod
    def _income_deductions(income: list[IncomeRecord]) -> IncomeDeductionSummary:
        return IncomeDeductionSummary(**{
            name: sum((getattr(i, name) for i in income), ZERO)
            for name in INCOME_DEDUCTION_FIELDS
        })

    @staticmethod
    def _monthly_totals(
        income: list[IncomeRecord],
        expenses: list[ExpenseRecord],
    ) -> list[MonthlyTotal]:
        income_by_month: dict[int, Decimal] = defaultdict(lambda: ZERO)
        expenses_by_month: dict[int, Decimal] = defaultdict(lambda: ZERO)

        for record in income:
            month = month_from_date_string(record.date)
            if month is not None:
                income_by_month[month] += record.amount
        for record in expenses:
            month = month_from_date_string(record.date)
            if month is not None:
                expenses_by_month[month] += record.amount

        return [
            MonthlyTotal(
                month=month,
                income=income_by_month.get(month, ZERO),
                expenses=expenses_by_month.get(month, ZERO),
            )
            for month in sorted(set(income_by_month) | set(expenses_by_month))
        ]
