"""Deductible portion of an expense by declared use.

Only the pre-GST cost plus PST can be deducted from income. GST paid is
tracked separately because it is recovered as an input tax credit, so every
classification returns two figures: the deductible amount and the deductible
GST.

Rules, first match wins:

1. Expenses flagged not tax-deductible: nothing.
2. Personal: nothing.
3. Home office / living: the full amount, apportioned by the home-office
   percentage when one is configured.
4. Vehicle: apportioned by the vehicle's business-use percentage (full use
   when the vehicle is unknown).
5. Self-employment (and anything unrecognized): the full amount.
6. Mixed: apportioned by the expense's own business-use percentage, and
   again by the home-office percentage when the category is a household one.

No rounding is applied here.
"""

from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional

from .categories import is_home_office_category
from .models import Deductibility, ExpenseRecord, ExpenseType
from .money import HUNDRED, ZERO, to_decimal, to_optional_decimal

VehicleUsage = Mapping[str, Optional[Decimal]]

NOT_DEDUCTIBLE = Deductibility(deductible_amount=ZERO, deductible_gst=ZERO)


class DeductibilityClassifier:
    """
    Classify expenses into deductible amount and deductible GST.

    Example:
        >>> classifier = DeductibilityClassifier()
        >>> expense = ExpenseRecord(
        ...     id="e1", base_cost=100, pst_amount=7, gst_amount=5,
        ...     expense_type="vehicle", vehicle_id="v1",
        ... )
        >>> classifier.classify(expense, {"v1": Decimal("60")})
        Deductibility(deductible_amount=Decimal('64.2'), deductible_gst=Decimal('3.0'))
    """

    def __init__(self, home_office_percentage: Optional[Decimal] = None):
        """
        Args:
            home_office_percentage: Share of the home used for work (0-100).
                Values outside ``(0, 100]`` are treated as not configured.
        """
        self.home_office_percentage = to_optional_decimal(home_office_percentage)
        self._handlers: dict[
            ExpenseType,
            Callable[[ExpenseRecord, VehicleUsage], Deductibility],
        ] = {
            ExpenseType.PERSONAL: self._personal,
            ExpenseType.HOME_OFFICE_LIVING: self._home_office_living,
            ExpenseType.VEHICLE: self._vehicle,
            ExpenseType.SELF_EMPLOYMENT: self._self_employment,
            ExpenseType.MIXED: self._mixed,
        }

    @property
    def home_office_fraction(self) -> Optional[Decimal]:
        """Configured home-office share as a fraction, or None."""
        p = self.home_office_percentage
        if p is None or not ZERO < p <= HUNDRED:
            return None
        return p / HUNDRED

    def classify(
        self,
        expense: ExpenseRecord,
        vehicle_use_percent: Optional[VehicleUsage] = None,
    ) -> Deductibility:
        """
        Compute the deductible portion of a single expense.

        Args:
            expense: The expense to classify.
            vehicle_use_percent: Vehicle id -> business-use percentage (0-100).

        Returns:
            Deductibility with the deductible amount and GST.
        """
        if not expense.is_tax_deductible:
            return NOT_DEDUCTIBLE
        handler = self._handlers.get(expense.expense_type, self._self_employment)
        return handler(expense, vehicle_use_percent or {})

    def classify_all(
        self,
        expenses: Iterable[ExpenseRecord],
        vehicle_use_percent: Optional[VehicleUsage] = None,
    ) -> list[tuple[ExpenseRecord, Deductibility]]:
        """Classify each expense, keeping input order."""
        lookup = vehicle_use_percent or {}
        return [(expense, self.classify(expense, lookup)) for expense in expenses]

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _personal(self, expense: ExpenseRecord, lookup: VehicleUsage) -> Deductibility:
        return NOT_DEDUCTIBLE

    def _home_office_living(
        self, expense: ExpenseRecord, lookup: VehicleUsage
    ) -> Deductibility:
        amount = expense.base_cost + expense.pst_amount
        gst = expense.gst_amount
        fraction = self.home_office_fraction
        if fraction is not None:
            amount *= fraction
            gst *= fraction
        return Deductibility(deductible_amount=amount, deductible_gst=gst)

    def _vehicle(self, expense: ExpenseRecord, lookup: VehicleUsage) -> Deductibility:
        fraction = Decimal("1")
        if expense.vehicle_id is not None:
            percent = lookup.get(expense.vehicle_id)
            if percent is not None:
                fraction = to_decimal(percent) / HUNDRED
        return Deductibility(
            deductible_amount=(expense.base_cost + expense.pst_amount) * fraction,
            deductible_gst=expense.gst_amount * fraction,
        )

    def _self_employment(
        self, expense: ExpenseRecord, lookup: VehicleUsage
    ) -> Deductibility:
        return Deductibility(
            deductible_amount=expense.base_cost + expense.pst_amount,
            deductible_gst=expense.gst_amount,
        )

    def _mixed(self, expense: ExpenseRecord, lookup: VehicleUsage) -> Deductibility:
        fraction = (expense.business_use_percentage or ZERO) / HUNDRED
        amount = expense.base_cost * fraction + expense.pst_amount * fraction
        gst = expense.gst_amount * fraction

        # Household categories are apportioned a second time by home-office use
        home_office = self.home_office_fraction
        if home_office is not None and is_home_office_category(expense.category):
            amount *= home_office
            gst *= home_office
        return Deductibility(deductible_amount=amount, deductible_gst=gst)
