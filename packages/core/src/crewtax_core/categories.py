"""Expense category sets and display labels.

Categories are stored on expenses as plain strings. The sets below decide
which expenses receive home-office apportionment, and the label table maps
the reporting categories to the names shown on the dashboard.
"""

from enum import Enum


class ExpenseCategory(str, Enum):
    """Reporting categories for self-employment expenses."""
    ADVERTISING = "advertising"
    MEALS_ENTERTAINMENT = "meals_entertainment"
    INSURANCE = "insurance"
    BUSINESS_TAXES = "business_taxes"
    LICENSES_MEMBERSHIPS = "licenses_memberships"
    OFFICE_EXPENSES = "office_expenses"
    OFFICE_SUPPLIES = "office_supplies"
    PROFESSIONAL_FEES = "professional_fees"
    MANAGEMENT_ADMIN_FEES = "management_admin_fees"
    RENT = "rent"
    REPAIRS_MAINTENANCE = "repairs_maintenance"
    SALARIES_WAGES = "salaries_wages"
    PROPERTY_TAX = "property_tax"
    TRAVEL_EXPENSES = "travel_expenses"
    UTILITIES = "utilities"
    FUEL_COSTS = "fuel_costs"
    DELIVERY_FREIGHT = "delivery_freight"
    MOTOR_VEHICLE_EXPENSES = "motor_vehicle_expenses"
    HOME_OFFICE_EXPENSES = "home_office_expenses"
    COMMISSIONS_AGENT_FEES = "commissions_agent_fees"
    TRAINING = "training"


CATEGORY_LABELS: dict[str, str] = {
    ExpenseCategory.ADVERTISING.value: "Advertising",
    ExpenseCategory.MEALS_ENTERTAINMENT.value: "Meals & Entertainment",
    ExpenseCategory.INSURANCE.value: "Business Insurance",
    ExpenseCategory.BUSINESS_TAXES.value: "Business Taxes",
    ExpenseCategory.LICENSES_MEMBERSHIPS.value: "Licenses, memberships, & Annual Dues",
    ExpenseCategory.OFFICE_EXPENSES.value: "Office Expenses",
    ExpenseCategory.OFFICE_SUPPLIES.value: "Office Supplies",
    ExpenseCategory.PROFESSIONAL_FEES.value: "Professional Fees",
    ExpenseCategory.MANAGEMENT_ADMIN_FEES.value: "Management & Admin Fees",
    ExpenseCategory.RENT.value: "Rent (other than Home Office)",
    ExpenseCategory.REPAIRS_MAINTENANCE.value: "Repairs and Maintenance",
    ExpenseCategory.SALARIES_WAGES.value: "Salaries & Wages",
    ExpenseCategory.PROPERTY_TAX.value: "Property Tax",
    ExpenseCategory.TRAVEL_EXPENSES.value: "Travel Expenses",
    ExpenseCategory.UTILITIES.value: "Utilities (other than for home office)",
    ExpenseCategory.FUEL_COSTS.value: "Fuel (excluding motor vehicles)",
    ExpenseCategory.DELIVERY_FREIGHT.value: "Delivery & Freight",
    ExpenseCategory.MOTOR_VEHICLE_EXPENSES.value: "Vehicle Expenses",
    ExpenseCategory.HOME_OFFICE_EXPENSES.value: "Home Office Expenses",
    ExpenseCategory.COMMISSIONS_AGENT_FEES.value: "Commissions & Agent Fees",
    ExpenseCategory.TRAINING.value: "Training and Convention",
}

# Categories that receive the home-office percentage when an expense is
# recorded as mixed-use.
HOME_OFFICE_LIVING_CATEGORIES: frozenset[str] = frozenset({
    "rent",
    "utilities",
    "internet",
    "phone",
    "heat",
    "electricity",
    "insurance_home",
    "maintenance_home",
    "mortgage_interest",
    "property_taxes",
})


def is_home_office_category(category: str) -> bool:
    """Whether the category belongs to the home-office/living set."""
    return category in HOME_OFFICE_LIVING_CATEGORIES


def category_label(category: str) -> str:
    """Display label for a category.

    Known reporting categories use their fixed label; anything else is
    title-cased word by word (``"dining_out"`` -> ``"Dining Out"``).
    """
    if category in CATEGORY_LABELS:
        return CATEGORY_LABELS[category]
    return " ".join(
        word[:1].upper() + word[1:].lower() for word in category.split("_")
    )
