"""Data models for crewtax-core.

This package provides:
- Input records fetched from the remote store (records.py)
- Derived, ephemeral calculation results (results.py)
"""

from crewtax_core.models.records import (
    # Enumerations
    IncomeType,
    ExpenseType,
    # Records
    IncomeRecord,
    ExpenseRecord,
    Vehicle,
    MileageLog,
    TaxBaseline,
    EmploymentOverrides,
    INCOME_DEDUCTION_FIELDS,
    # Parsing
    parse_records,
)

from crewtax_core.models.results import (
    AuditEntry,
    Deductibility,
    ProratedTax,
    CombinedTax,
    CategoryTotal,
    GstHstSummary,
    IncomeDeductionSummary,
    MonthlyTotal,
    AggregateReport,
    MileageSummary,
    TaxSummary,
)

__all__ = [
    "IncomeType",
    "ExpenseType",
    "IncomeRecord",
    "ExpenseRecord",
    "Vehicle",
    "MileageLog",
    "TaxBaseline",
    "EmploymentOverrides",
    "INCOME_DEDUCTION_FIELDS",
    "parse_records",
    "AuditEntry",
    "Deductibility",
    "ProratedTax",
    "CombinedTax",
    "CategoryTotal",
    "GstHstSummary",
    "IncomeDeductionSummary",
    "MonthlyTotal",
    "AggregateReport",
    "MileageSummary",
    "TaxSummary",
]
