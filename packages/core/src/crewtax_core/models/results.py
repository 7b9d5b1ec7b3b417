"""Derived, ephemeral results produced by the calculation engine.

Nothing here is persisted; every value is recomputed from the record
snapshot on each pass.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from ..money import ZERO, refund_label


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class AuditEntry(BaseModel):
    """Audit log entry for calculation transparency."""
    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


class Deductibility(BaseModel):
    """Deductible portion of one expense."""

    model_config = {"frozen": True}

    deductible_amount: Decimal = ZERO
    deductible_gst: Decimal = ZERO


class ProratedTax(BaseModel):
    """Whole-year baseline rescaled to a filtered income subset."""
    income_ratio: Decimal
    federal_tax: Decimal
    provincial_tax: Decimal
    cpp_contribution: Decimal
    total_owed: Decimal


class CombinedTax(BaseModel):
    """Self-employment taxes blended with regular-employment income.

    ``total_owed_signed`` keeps its sign (negative means a refund);
    ``amount_owed`` is the floored figure shown as "amount owed".
    """
    federal_share: Decimal
    estimated_tax_on_employment: Decimal
    federal_tax: Decimal
    provincial_tax: Decimal
    total_income_tax: Decimal
    cpp_contribution: Decimal
    max_cpp_contribution: Decimal
    cpp_cap_applied: bool
    taxes_paid_on_employment: Decimal
    cpp_paid_on_employment: Decimal
    total_owed_signed: Decimal
    amount_owed: Decimal
    combined_net_income: Decimal
    effective_rate: Decimal

    @computed_field
    @property
    def is_refund(self) -> bool:
        """Whether the signed total is a refund."""
        return self.total_owed_signed < 0


class CategoryTotal(BaseModel):
    """Total spending in one expense category."""
    category: str
    label: str
    amount: Decimal


class GstHstSummary(BaseModel):
    """GST/HST collected on income against input tax credits on expenses."""
    collected: Decimal = ZERO
    input_tax_credits: Decimal = ZERO
    transactions_with_gst_hst: int = 0

    @computed_field
    @property
    def net_owing(self) -> Decimal:
        """Positive when GST/HST is owed, negative for a refund."""
        return self.collected - self.input_tax_credits

    @computed_field
    @property
    def is_refund(self) -> bool:
        return self.net_owing < 0


class IncomeDeductionSummary(BaseModel):
    """Totals of deductions withheld from income payments."""
    dues: Decimal = ZERO
    retirement: Decimal = ZERO
    labour: Decimal = ZERO
    buyout: Decimal = ZERO
    pension: Decimal = ZERO
    insurance: Decimal = ZERO

    @computed_field
    @property
    def total(self) -> Decimal:
        return (
            self.dues + self.retirement + self.labour
            + self.buyout + self.pension + self.insurance
        )


class MonthlyTotal(BaseModel):
    """Income and expenses for one calendar month."""
    month: int = Field(ge=1, le=12)
    income: Decimal = ZERO
    expenses: Decimal = ZERO

    @computed_field
    @property
    def net_cashflow(self) -> Decimal:
        return self.income - self.expenses


class AggregateReport(BaseModel):
    """Category, GST/HST and summary totals for a set of transactions."""
    totals_by_category: list[CategoryTotal] = Field(default_factory=list)
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_deductible: Decimal = ZERO
    total_deductible_gst: Decimal = ZERO
    total_gst_hst_collected: Decimal = ZERO
    gst_hst: GstHstSummary = Field(default_factory=GstHstSummary)
    income_deductions: IncomeDeductionSummary = Field(default_factory=IncomeDeductionSummary)
    monthly_totals: list[MonthlyTotal] = Field(default_factory=list)
    income_count: int = 0
    expense_count: int = 0


class MileageSummary(BaseModel):
    """Distance driven by one vehicle over a tax year."""
    vehicle_id: str
    tax_year: int
    total_distance: Decimal = ZERO
    business_distance: Decimal = ZERO
    business_use_percentage: Optional[Decimal] = None
    log_count: int = 0


class TaxSummary(BaseModel):
    """Final, display-ready tax picture for one tax year."""

    tax_year: int

    # Transactions
    total_income: Decimal
    total_expenses: Decimal
    deductible_expenses: Decimal
    deductible_gst_credits: Decimal
    net_income: Decimal  # Income minus deductible expenses
    net_cashflow: Decimal  # Income minus all expenses

    # Prorated baseline
    federal_tax: Decimal
    provincial_tax: Decimal
    cpp_contribution: Decimal
    total_tax_owed: Decimal
    effective_rate: Decimal
    income_ratio: Decimal

    # Regular-employment blend, when the user supplied any figures
    combined: Optional[CombinedTax] = None

    report: AggregateReport

    audit_log: list[AuditEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    cpp_table_version: str
    calculated_at: datetime = Field(default_factory=_utc_now)

    @computed_field
    @property
    def is_refund(self) -> bool:
        """Negative totals denote a refund."""
        return self.total_tax_owed < 0

    @computed_field
    @property
    def tax_label(self) -> str:
        return refund_label(self.total_tax_owed)
