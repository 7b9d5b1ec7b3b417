"""Async entry point that wires settings, vehicle lookups and the calculator."""

from typing import Any, Iterable, Optional

import structlog

from crewtax_core.aggregation import SummaryAggregator
from crewtax_core.calculator import BaselineLike, OverridesLike, TaxSummaryCalculator
from crewtax_core.deductibility import DeductibilityClassifier
from crewtax_core.models import ExpenseRecord, TaxSummary, Vehicle, parse_records
from crewtax_core.tax_year import filter_by_year
from crewtax_services.config import CrewTaxConfig
from crewtax_services.interfaces.base import VehicleUsageResolver
from crewtax_services.vehicle_usage import resolve_vehicle_usage

logger = structlog.get_logger()


def build_calculator(config: CrewTaxConfig) -> TaxSummaryCalculator:
    """Create a TaxSummaryCalculator from settings."""
    classifier = DeductibilityClassifier(
        home_office_percentage=config.deductions.home_office_percentage,
    )
    aggregator = SummaryAggregator(
        classifier=classifier,
        report_top_n=config.reporting.report_top_n,
        chart_top_n=config.reporting.chart_top_n,
    )
    return TaxSummaryCalculator(aggregator=aggregator)


class TaxEstimator:
    """
    Estimate a tax year's obligations from raw records.

    Vehicle business use is resolved concurrently first, then the synchronous
    calculator runs over the full snapshot.

    Example:
        estimator = TaxEstimator(CrewTaxConfig(), StaticVehicleUsageResolver({"v1": 60}))
        summary = await estimator.estimate(income, expenses, vehicles, 2024, baseline)
    """

    def __init__(
        self,
        config: CrewTaxConfig,
        resolver: VehicleUsageResolver,
        calculator: Optional[TaxSummaryCalculator] = None,
    ):
        self.config = config
        self.resolver = resolver
        self.calculator = calculator or build_calculator(config)

    async def estimate(
        self,
        income: Iterable[Any],
        expenses: Iterable[Any],
        vehicles: Iterable[Any],
        tax_year: int,
        baseline: BaselineLike,
        overrides: OverridesLike = None,
    ) -> TaxSummary:
        """
        Resolve vehicle usage and calculate the tax summary.

        Args:
            income: Income records (models or raw dictionaries).
            expenses: Expense records (models or raw dictionaries).
            vehicles: The user's vehicles.
            tax_year: Year to report on.
            baseline: Whole-year figures computed by the backend.
            overrides: Regular-employment figures entered by the user.

        Returns:
            TaxSummary

        Raises:
            ValidationError: If a record cannot be modelled.
        """
        expense_records = parse_records(expenses, ExpenseRecord)
        vehicle_ids = [v.id for v in parse_records(vehicles, Vehicle)]
        vehicle_ids += [
            e.vehicle_id
            for e in filter_by_year(expense_records, tax_year)
            if e.vehicle_id is not None
        ]

        vehicle_use = await resolve_vehicle_usage(
            self.resolver,
            vehicle_ids,
            tax_year,
            default=self.config.deductions.default_vehicle_business_use,
        )

        summary = self.calculator.calculate(
            income,
            expense_records,
            tax_year,
            baseline,
            vehicle_use_percent=vehicle_use,
            overrides=overrides,
        )

        logger.info(
            "tax_estimated",
            tax_year=tax_year,
            total_tax_owed=str(summary.total_tax_owed),
            vehicles_resolved=len(vehicle_use),
            warning_count=len(summary.warnings),
        )
        return summary
