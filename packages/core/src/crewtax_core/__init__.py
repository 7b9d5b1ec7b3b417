"""CrewTax Core - Tax and deduction calculations for self-employed crew."""

__version__ = "0.1.0"

from .aggregation import SummaryAggregator
from .calculator import TaxSummaryCalculator
from .cpp import CPPCalculator
from .cpp_standards import (
    CPP_STANDARDS_VERSION,
    DEFAULT_CPP_TABLE,
    CppParameterTable,
    CPPYearParameters,
)
from .deductibility import DeductibilityClassifier
from .exceptions import (
    ConfigurationError,
    CrewTaxError,
    ResolutionError,
    ValidationError,
)
from .mileage import compute_trip_distances, summarize_mileage
from .models import (
    AggregateReport,
    CombinedTax,
    Deductibility,
    EmploymentOverrides,
    ExpenseRecord,
    ExpenseType,
    IncomeRecord,
    IncomeType,
    MileageLog,
    MileageSummary,
    ProratedTax,
    TaxBaseline,
    TaxSummary,
    Vehicle,
)
from .money import format_currency, format_percent, refund_label, to_decimal
from .proration import ProrationEngine
from .tax_year import filter_by_year, month_from_date_string, year_from_date_string

__all__ = [
    # Calculators
    "TaxSummaryCalculator",
    "DeductibilityClassifier",
    "CPPCalculator",
    "ProrationEngine",
    "SummaryAggregator",
    # CPP parameters
    "CppParameterTable",
    "CPPYearParameters",
    "DEFAULT_CPP_TABLE",
    "CPP_STANDARDS_VERSION",
    # Models
    "IncomeRecord",
    "ExpenseRecord",
    "Vehicle",
    "MileageLog",
    "TaxBaseline",
    "EmploymentOverrides",
    "IncomeType",
    "ExpenseType",
    "Deductibility",
    "ProratedTax",
    "CombinedTax",
    "AggregateReport",
    "MileageSummary",
    "TaxSummary",
    # Helpers
    "filter_by_year",
    "year_from_date_string",
    "month_from_date_string",
    "compute_trip_distances",
    "summarize_mileage",
    "to_decimal",
    "format_currency",
    "format_percent",
    "refund_label",
    # Exceptions
    "CrewTaxError",
    "ValidationError",
    "ResolutionError",
    "ConfigurationError",
]
