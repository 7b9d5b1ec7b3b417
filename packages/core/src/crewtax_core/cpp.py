"""Self-employed CPP contributions against the annual cap."""

from decimal import Decimal

import structlog

from .cpp_standards import DEFAULT_CPP_TABLE, CppParameterTable
from .money import ZERO, to_decimal

logger = structlog.get_logger()


class CPPCalculator:
    """
    Compute CPP amounts for a self-employed contributor.

    The parameter table is injected so statutory figures can be updated (or
    replaced in tests) without changing calculation logic. Years missing from
    the table use the latest known year's parameters.
    """

    def __init__(self, table: CppParameterTable = DEFAULT_CPP_TABLE):
        self.table = table

    @property
    def table_version(self) -> str:
        return self.table.version

    def max_contribution(self, year: int) -> Decimal:
        """
        Largest CPP contribution payable for a year.

        ``(max_pensionable_earnings - basic_exemption) * self_employed_rate``

        Example:
            >>> CPPCalculator().max_contribution(2024)
            Decimal('7735.0000')
        """
        return self.table.for_year(year).max_contribution

    def self_employed_cpp_owed(
        self,
        year: int,
        needed: Decimal,
        already_paid: Decimal = ZERO,
    ) -> Decimal:
        """
        CPP still owed on self-employment income once employment CPP is counted.

        Args:
            year: Tax year.
            needed: CPP computed on self-employment income alone.
            already_paid: CPP already withheld through regular employment.

        Returns:
            ``max(0, min(already_paid + needed, cap) - already_paid)``
        """
        needed = to_decimal(needed)
        already_paid = to_decimal(already_paid)
        cap = self.max_contribution(year)
        owed = max(ZERO, min(already_paid + needed, cap) - already_paid)

        logger.debug(
            "cpp_owed",
            year=year,
            needed=str(needed),
            already_paid=str(already_paid),
            cap=str(cap),
            owed=str(owed),
        )
        return owed

    def cap_reached(
        self,
        year: int,
        needed: Decimal,
        already_paid: Decimal = ZERO,
    ) -> bool:
        """Whether combined contributions would exceed the annual maximum."""
        return to_decimal(already_paid) + to_decimal(needed) > self.max_contribution(year)
