"""Canada Pension Plan statutory parameters for self-employed contributors.

Self-employed individuals pay both the employee and employer share of CPP on
earnings between the basic exemption and the year's maximum pensionable
earnings (YMPE).

Sources:
- CPP contribution rates, maximums and exemptions:
  https://www.canada.ca/en/revenue-agency/services/tax/businesses/topics/payroll/payroll-deductions-contributions/canada-pension-plan-cpp/cpp-contribution-rates-maximums-exemptions.html

The table must be extended every year. A year missing from the table is not
an error: lookups fall back to the latest known year.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional

import structlog

from .exceptions import ConfigurationError

logger = structlog.get_logger()


# =============================================================================
# VERSION TRACKING
# =============================================================================

CPP_STANDARDS_VERSION = "2026-01"


# =============================================================================
# PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class CPPYearParameters:
    """CPP parameters for one calendar year."""
    max_pensionable_earnings: Decimal
    basic_exemption: Decimal
    self_employed_rate: Decimal

    @property
    def max_contributory_earnings(self) -> Decimal:
        """Earnings on which contributions are charged."""
        return self.max_pensionable_earnings - self.basic_exemption

    @property
    def max_contribution(self) -> Decimal:
        """Largest self-employed contribution for the year."""
        return self.max_contributory_earnings * self.self_employed_rate


CPP_PARAMETERS_BY_YEAR: dict[int, CPPYearParameters] = {
    2020: CPPYearParameters(Decimal("58700"), Decimal("3500"), Decimal("0.1095")),
    2021: CPPYearParameters(Decimal("61600"), Decimal("3500"), Decimal("0.1095")),
    2022: CPPYearParameters(Decimal("64900"), Decimal("3500"), Decimal("0.1115")),
    2023: CPPYearParameters(Decimal("66600"), Decimal("3500"), Decimal("0.1140")),
    2024: CPPYearParameters(Decimal("68500"), Decimal("3500"), Decimal("0.1190")),
    2025: CPPYearParameters(Decimal("71300"), Decimal("3500"), Decimal("0.1190")),
    2026: CPPYearParameters(Decimal("74600"), Decimal("3500"), Decimal("0.1190")),
}


class CppParameterTable:
    """Immutable, versioned lookup of CPP parameters by year.

    Inject a different table into CPPCalculator to update the statutory
    figures without touching calculation logic.
    """

    def __init__(
        self,
        parameters: Mapping[int, CPPYearParameters],
        version: str = CPP_STANDARDS_VERSION,
    ):
        """
        Initialize the table.

        Args:
            parameters: Year -> parameters. Copied; later changes to the
                source mapping are not seen.
            version: Label identifying this edition of the table.

        Raises:
            ConfigurationError: If no years are supplied.
        """
        if not parameters:
            raise ConfigurationError(
                "CPP parameter table is empty",
                config_key="cpp_parameters",
                expected="At least one tax year",
            )
        self._parameters = MappingProxyType(dict(parameters))
        self._latest_year = max(self._parameters)
        self.version = version

    @property
    def years(self) -> tuple[int, ...]:
        """Known years in ascending order."""
        return tuple(sorted(self._parameters))

    @property
    def latest_year(self) -> int:
        return self._latest_year

    def __contains__(self, year: object) -> bool:
        return year in self._parameters

    def resolve_year(self, year: int) -> int:
        """Year whose parameters apply to ``year``."""
        return year if year in self._parameters else self._latest_year

    def for_year(self, year: int) -> CPPYearParameters:
        """Parameters for ``year``, or the latest known year's when absent."""
        resolved = self.resolve_year(year)
        if resolved != year:
            logger.warning(
                "cpp_parameters_fallback",
                requested_year=year,
                fallback_year=resolved,
                table_version=self.version,
            )
        return self._parameters[resolved]

    def get(self, year: int) -> Optional[CPPYearParameters]:
        """Exact lookup without fallback."""
        return self._parameters.get(year)


DEFAULT_CPP_TABLE = CppParameterTable(CPP_PARAMETERS_BY_YEAR)