"""Input records consumed by the calculation engine.

Records are fetched from the remote store already deserialized, usually as
dictionaries with camelCase keys. Every model accepts either spelling
(``gstAmount`` or ``gst_amount``), reads money permissively, and is frozen:
the engine only ever reads them.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import ValidationError
from ..money import HUNDRED, ZERO, to_decimal, to_optional_decimal

RecordT = TypeVar("RecordT", bound=BaseModel)


RECORD_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    "extra": "ignore",
}


# =============================================================================
# ENUMERATIONS
# =============================================================================

class IncomeType(str, Enum):
    """Kinds of production income."""
    UNION_PRODUCTION = "union_production"
    NON_UNION_PRODUCTION = "non_union_production"
    ROYALTY_RESIDUAL = "royalty_residual"
    CASH = "cash"


class ExpenseType(str, Enum):
    """Declared use of an expense, which drives how much of it is deductible."""
    PERSONAL = "personal"
    HOME_OFFICE_LIVING = "home_office_living"
    VEHICLE = "vehicle"
    SELF_EMPLOYMENT = "self_employment"
    MIXED = "mixed"

    @classmethod
    def normalize(cls, value: Any) -> "ExpenseType":
        """Map a stored value to an ExpenseType.

        Stored values must match exactly; missing, differently cased and
        unrecognized values are all treated as self-employment.
        """
        if isinstance(value, ExpenseType):
            return value
        if not isinstance(value, str):
            return cls.SELF_EMPLOYMENT
        try:
            return cls(value)
        except ValueError:
            return cls.SELF_EMPLOYMENT


def _as_identifier(v: Any) -> Any:
    """Remote ids may be numeric; the engine keys everything by string."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


_FALSE_STRINGS = frozenset({"false", "0", "no", "n", "off"})


def _as_flag(v: Any, default: bool) -> bool:
    """Read a stored yes/no flag; blanks and nulls take the default."""
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        text = v.strip().lower()
        if not text:
            return default
        return text not in _FALSE_STRINGS
    if isinstance(v, (int, float, Decimal)):
        return v != 0
    return bool(v)


# =============================================================================
# INCOME
# =============================================================================

INCOME_DEDUCTION_FIELDS = ("dues", "retirement", "labour", "buyout", "pension", "insurance")


class IncomeRecord(BaseModel):
    """A single income payment."""

    model_config = RECORD_CONFIG

    id: str
    amount: Decimal = ZERO
    date: str = ""
    income_type: Optional[IncomeType] = None
    production_name: Optional[str] = None
    accounting_office: Optional[str] = None

    # Per-payment deductions withheld by the production
    dues: Decimal = ZERO
    retirement: Decimal = ZERO
    labour: Decimal = ZERO
    buyout: Decimal = ZERO
    pension: Decimal = ZERO
    insurance: Decimal = ZERO

    gst_hst_collected: Decimal = ZERO

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _as_identifier(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        """Keep the raw date string; year parsing happens in tax_year."""
        return "" if v is None else str(v)

    @field_validator(
        "amount", "dues", "retirement", "labour", "buyout", "pension",
        "insurance", "gst_hst_collected",
        mode="before",
    )
    @classmethod
    def coerce_money(cls, v):
        return to_decimal(v)

    @field_validator("income_type", mode="before")
    @classmethod
    def coerce_income_type(cls, v):
        """Unknown income types are kept as unset rather than rejected."""
        if isinstance(v, IncomeType) or v is None:
            return v
        try:
            return IncomeType(str(v))
        except ValueError:
            return None

    @property
    def total_deductions(self) -> Decimal:
        """Sum of all deductions withheld from this payment."""
        return sum((getattr(self, name) for name in INCOME_DEDUCTION_FIELDS), ZERO)


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseRecord(BaseModel):
    """A single expense with its sales-tax breakdown.

    ``amount`` is the total paid; ``base_cost``, ``gst_amount`` and
    ``pst_amount`` are its components. Only ``base_cost + pst_amount`` can be
    deducted from income; the GST portion is claimed as an input tax credit.
    """

    model_config = RECORD_CONFIG

    id: str
    amount: Decimal = ZERO
    base_cost: Decimal = ZERO
    gst_amount: Decimal = ZERO
    pst_amount: Decimal = ZERO
    date: str = ""
    category: str = ""
    subcategory: Optional[str] = None
    vehicle_id: Optional[str] = None
    expense_type: ExpenseType = ExpenseType.SELF_EMPLOYMENT
    business_use_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    is_tax_deductible: bool = True

    title: Optional[str] = None
    vendor: Optional[str] = None
    description: Optional[str] = None

    @field_validator("id", "vehicle_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return _as_identifier(v)

    @field_validator("date", "category", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return "" if v is None else str(v)

    @field_validator("amount", "base_cost", "gst_amount", "pst_amount", mode="before")
    @classmethod
    def coerce_money(cls, v):
        return to_decimal(v)

    @field_validator("business_use_percentage", mode="before")
    @classmethod
    def coerce_percentage(cls, v):
        """Out-of-range percentages are clamped to 0-100."""
        percent = to_optional_decimal(v)
        if percent is None:
            return None
        return min(max(percent, ZERO), HUNDRED)

    @field_validator("expense_type", mode="before")
    @classmethod
    def coerce_expense_type(cls, v):
        return ExpenseType.normalize(v)

    @field_validator("is_tax_deductible", mode="before")
    @classmethod
    def default_deductible(cls, v):
        """Expenses without an explicit flag are deductible."""
        return _as_flag(v, default=True)


# =============================================================================
# VEHICLES
# =============================================================================

class Vehicle(BaseModel):
    """A vehicle used, at least partly, for work."""

    model_config = RECORD_CONFIG

    id: str
    name: str = ""
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    is_primary: bool = False
    used_exclusively_for_business: bool = False
    current_mileage: Decimal = ZERO  # Odometer when tracking started

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _as_identifier(v)

    @field_validator("current_mileage", mode="before")
    @classmethod
    def coerce_mileage(cls, v):
        return to_decimal(v)

    @field_validator("is_primary", "used_exclusively_for_business", mode="before")
    @classmethod
    def coerce_flags(cls, v):
        return _as_flag(v, default=False)


class MileageLog(BaseModel):
    """An odometer reading recorded after a trip."""

    model_config = RECORD_CONFIG

    id: str
    vehicle_id: str
    date: str = ""
    odometer_reading: Decimal = ZERO
    description: Optional[str] = None
    is_business_use: bool = True

    @field_validator("id", "vehicle_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return _as_identifier(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return "" if v is None else str(v)

    @field_validator("odometer_reading", mode="before")
    @classmethod
    def coerce_reading(cls, v):
        return to_decimal(v)

    @field_validator("is_business_use", mode="before")
    @classmethod
    def default_business_use(cls, v):
        return _as_flag(v, default=True)


# =============================================================================
# BASELINE AND USER OVERRIDES
# =============================================================================

class TaxBaseline(BaseModel):
    """Whole-year tax figures computed by the backend.

    These are authoritative for a full tax year. The engine only rescales
    them; it never recomputes brackets.
    """

    model_config = RECORD_CONFIG

    gross_income: Decimal = ZERO
    federal_tax: Decimal = ZERO
    provincial_tax: Decimal = ZERO
    cpp_contribution: Decimal = ZERO

    @field_validator(
        "gross_income", "federal_tax", "provincial_tax", "cpp_contribution",
        mode="before",
    )
    @classmethod
    def coerce_money(cls, v):
        return to_decimal(v)


class EmploymentOverrides(BaseModel):
    """Regular-employment figures typed in by the user.

    All values are optional and read permissively: blank or non-numeric
    input counts as zero.
    """

    model_config = RECORD_CONFIG

    regular_employment_income: Decimal = ZERO
    taxes_paid_on_employment: Decimal = ZERO
    cpp_paid_on_employment: Decimal = ZERO

    @field_validator(
        "regular_employment_income", "taxes_paid_on_employment",
        "cpp_paid_on_employment",
        mode="before",
    )
    @classmethod
    def coerce_money(cls, v):
        return to_decimal(v)

    @property
    def has_any(self) -> bool:
        """Whether the user entered any positive employment figure."""
        return (
            self.regular_employment_income > 0
            or self.taxes_paid_on_employment > 0
            or self.cpp_paid_on_employment > 0
        )


# =============================================================================
# PARSING
# =============================================================================

def parse_records(items: Iterable[Any], model: type[RecordT]) -> list[RecordT]:
    """Turn raw API records (or ready-made models) into model instances.

    Args:
        items: Mappings as delivered by the remote store, or instances of
            ``model`` which are passed through unchanged.
        model: The record model to build.

    Returns:
        List of model instances in input order.

    Raises:
        ValidationError: If a record cannot be modelled at all (for example a
            missing id).
    """
    parsed: list[RecordT] = []
    for index, item in enumerate(items):
        if isinstance(item, model):
            parsed.append(item)
            continue
        try:
            parsed.append(model.model_validate(item))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raw_value = first.get("input")
            raise ValidationError(
                f"Invalid {model.__name__} at position {index}: {first.get('msg')}",
                field=field or None,
                value=None if isinstance(raw_value, dict) else raw_value,
                constraint=first.get("type"),
                details={"index": index, "error_count": e.error_count()},
            ) from e
    return parsed
