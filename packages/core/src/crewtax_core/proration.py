"""Reconcile a year-scoped income subset against a whole-year tax baseline.

The backend computes federal tax, provincial tax and CPP for a full tax year.
When only part of that income is being looked at, the baseline is scaled by
``filtered_income / gross_income``. This is a linear approximation: real
brackets are progressive, so the scaled figures are an estimate, not a
recomputation.

The combined-income extension blends in regular employment. Employment
income is taxed at the self-employment effective rate, the estimate is split
between federal and provincial in the baseline's proportions, and CPP is
capped at the annual maximum once CPP withheld by the employer is counted.
"""

from decimal import Decimal
from typing import Optional

import structlog

from .cpp import CPPCalculator
from .models import CombinedTax, EmploymentOverrides, ProratedTax, TaxBaseline
from .money import HUNDRED, ZERO, to_decimal

logger = structlog.get_logger()

HALF = Decimal("0.5")


class ProrationEngine:
    """Scale a baseline to filtered income and blend in employment figures."""

    def __init__(self, cpp_calculator: Optional[CPPCalculator] = None):
        self.cpp_calculator = cpp_calculator or CPPCalculator()

    def reproportion(
        self,
        baseline: TaxBaseline,
        filtered_income_total: Decimal,
    ) -> ProratedTax:
        """
        Scale the baseline to the filtered income.

        Args:
            baseline: Whole-year figures from the backend.
            filtered_income_total: Total income in the filtered subset.

        Returns:
            ProratedTax. The ratio is 0 when the baseline has no gross income.
        """
        filtered = to_decimal(filtered_income_total)
        gross = baseline.gross_income
        ratio = filtered / gross if gross > 0 else ZERO

        federal = baseline.federal_tax * ratio
        provincial = baseline.provincial_tax * ratio
        cpp = baseline.cpp_contribution * ratio

        return ProratedTax(
            income_ratio=ratio,
            federal_tax=federal,
            provincial_tax=provincial,
            cpp_contribution=cpp,
            total_owed=federal + provincial + cpp,
        )

    @staticmethod
    def effective_rate(total_owed: Decimal, net_income: Decimal) -> Decimal:
        """Tax as a percentage of net income; 0 when net income is not positive."""
        net = to_decimal(net_income)
        if net <= 0:
            return ZERO
        return to_decimal(total_owed) / net * HUNDRED

    def combine_with_employment(
        self,
        prorated: ProratedTax,
        net_income: Decimal,
        effective_rate: Decimal,
        overrides: Optional[EmploymentOverrides],
        tax_year: int,
    ) -> CombinedTax:
        """
        Blend regular-employment income and amounts already paid.

        Args:
            prorated: Self-employment figures from reproportion().
            net_income: Self-employment net income.
            effective_rate: Self-employment effective rate (0-100).
            overrides: Employment figures entered by the user. When absent
                the prorated figures pass through unchanged.
            tax_year: Year used for the CPP cap.

        Returns:
            CombinedTax. ``total_owed_signed`` is negative for a refund.
        """
        overrides = overrides or EmploymentOverrides()
        net_income = to_decimal(net_income)
        effective_rate = to_decimal(effective_rate)
        cpp = self.cpp_calculator
        max_cpp = cpp.max_contribution(tax_year)

        if not overrides.has_any:
            rate = self.effective_rate(prorated.total_owed, net_income)
            return CombinedTax(
                federal_share=self._federal_share(prorated, net_income),
                estimated_tax_on_employment=ZERO,
                federal_tax=prorated.federal_tax,
                provincial_tax=prorated.provincial_tax,
                total_income_tax=prorated.federal_tax + prorated.provincial_tax,
                cpp_contribution=prorated.cpp_contribution,
                max_cpp_contribution=max_cpp,
                cpp_cap_applied=False,
                taxes_paid_on_employment=ZERO,
                cpp_paid_on_employment=ZERO,
                total_owed_signed=prorated.total_owed,
                amount_owed=max(ZERO, prorated.total_owed),
                combined_net_income=net_income,
                effective_rate=rate,
            )

        employment_income = overrides.regular_employment_income
        taxes_paid = overrides.taxes_paid_on_employment
        cpp_paid = overrides.cpp_paid_on_employment

        federal_share = self._federal_share(prorated, net_income)
        estimated = (
            effective_rate / HUNDRED * employment_income
            if employment_income > 0 else ZERO
        )
        federal = prorated.federal_tax + estimated * federal_share
        provincial = prorated.provincial_tax + estimated * (1 - federal_share)

        cpp_owed = cpp.self_employed_cpp_owed(tax_year, prorated.cpp_contribution, cpp_paid)
        cap_applied = cpp.cap_reached(tax_year, prorated.cpp_contribution, cpp_paid)

        total_signed = federal + provincial + cpp_owed - taxes_paid
        combined_net = net_income + employment_income
        amount_owed = max(ZERO, total_signed)
        rate = amount_owed / combined_net * HUNDRED if combined_net > 0 else ZERO

        logger.info(
            "employment_combined",
            tax_year=tax_year,
            employment_income=str(employment_income),
            estimated_tax_on_employment=str(estimated),
            cpp_cap_applied=cap_applied,
            total_owed=str(total_signed),
        )

        return CombinedTax(
            federal_share=federal_share,
            estimated_tax_on_employment=estimated,
            federal_tax=federal,
            provincial_tax=provincial,
            total_income_tax=federal + provincial,
            cpp_contribution=cpp_owed,
            max_cpp_contribution=max_cpp,
            cpp_cap_applied=cap_applied,
            taxes_paid_on_employment=taxes_paid,
            cpp_paid_on_employment=cpp_paid,
            total_owed_signed=total_signed,
            amount_owed=amount_owed,
            combined_net_income=combined_net,
            effective_rate=rate,
        )

    @staticmethod
    def _federal_share(prorated: ProratedTax, net_income: Decimal) -> Decimal:
        """Federal portion of income tax; an even split when undefined."""
        income_tax = prorated.federal_tax + prorated.provincial_tax
        if net_income <= 0 or income_tax == 0:
            return HALF
        return prorated.federal_tax / income_tax
