"""Collaborator interfaces for the CrewTax services.

Vehicle business-use percentages come from outside the calculation engine:
a settings screen, a mileage log, or a remote service. Any class with a
matching async method satisfies VehicleUsageResolver through structural
subtyping; no inheritance is required.

Example Usage:
    ```python
    class SettingsResolver:
        async def business_use_percentage(
            self, vehicle_id: str, tax_year: int
        ) -> Optional[Decimal]:
            return await load_vehicle_setting(vehicle_id, tax_year)

    assert isinstance(SettingsResolver(), VehicleUsageResolver)
    ```
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class VehicleUsageResolver(Protocol):
    """Protocol for looking up a vehicle's business-use percentage."""

    async def business_use_percentage(
        self,
        vehicle_id: str,
        tax_year: int,
    ) -> Optional[Decimal]:
        """
        Look up the share of a vehicle's use that was for work.

        Args:
            vehicle_id: Identifier of the vehicle.
            tax_year: Year the percentage applies to.

        Returns:
            Percentage between 0 and 100, or None when unknown.

        Raises:
            ResolutionError: If the lookup itself failed.
        """
        ...
