"""Resolve vehicle business-use percentages before classification.

Lookups run concurrently, one task per vehicle. A lookup that fails or has
no answer never fails the batch: that vehicle is treated as fully business
use (or the configured default) and the failure is logged.
"""

import asyncio
from decimal import Decimal
from typing import Iterable, Mapping, Optional

import structlog

from crewtax_core.exceptions import ResolutionError
from crewtax_core.mileage import summarize_mileage
from crewtax_core.models import MileageLog, Vehicle, parse_records
from crewtax_core.money import HUNDRED, MoneyLike, ZERO, parse_decimal
from crewtax_services.interfaces.base import VehicleUsageResolver

logger = structlog.get_logger()


class StaticVehicleUsageResolver:
    """Resolve percentages from an in-memory mapping of vehicle id to percent."""

    def __init__(self, percentages: Mapping[str, MoneyLike]):
        self._percentages = {
            str(vehicle_id): parse_decimal(value)
            for vehicle_id, value in percentages.items()
        }

    async def business_use_percentage(
        self,
        vehicle_id: str,
        tax_year: int,
    ) -> Optional[Decimal]:
        return self._percentages.get(vehicle_id)


class MileageVehicleUsageResolver:
    """
    Derive business use from a vehicle's mileage logs.

    The percentage is business distance over total distance driven in the tax
    year. Vehicles marked as used exclusively for business resolve to 100.
    """

    def __init__(self, vehicles: Iterable, logs: Iterable):
        """
        Args:
            vehicles: Vehicle models or raw vehicle dictionaries.
            logs: MileageLog models or raw log dictionaries.
        """
        self._vehicles = {v.id: v for v in parse_records(vehicles, Vehicle)}
        self._logs = parse_records(logs, MileageLog)

    async def business_use_percentage(
        self,
        vehicle_id: str,
        tax_year: int,
    ) -> Optional[Decimal]:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise ResolutionError(
                f"Unknown vehicle: {vehicle_id}",
                vehicle_id=vehicle_id,
                tax_year=tax_year,
                resolver=self.__class__.__name__,
            )
        return summarize_mileage(self._logs, vehicle, tax_year).business_use_percentage


async def resolve_vehicle_usage(
    resolver: VehicleUsageResolver,
    vehicle_ids: Iterable[str],
    tax_year: int,
    default: Decimal = HUNDRED,
) -> dict[str, Decimal]:
    """
    Build the vehicle id -> business-use percentage lookup.

    Args:
        resolver: Source of per-vehicle percentages.
        vehicle_ids: Vehicles to resolve; duplicates are looked up once.
        tax_year: Year to resolve for.
        default: Percentage used when a lookup fails or returns nothing.

    Returns:
        A percentage for every requested vehicle.
    """
    ids = list(dict.fromkeys(vehicle_ids))
    if not ids:
        return {}

    results = await asyncio.gather(
        *(resolver.business_use_percentage(vehicle_id, tax_year) for vehicle_id in ids),
        return_exceptions=True,
    )

    lookup: dict[str, Decimal] = {}
    for vehicle_id, result in zip(ids, results):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        if isinstance(result, Exception):
            logger.warning(
                "vehicle_usage_failed",
                vehicle_id=vehicle_id,
                tax_year=tax_year,
                error=str(result),
                error_type=type(result).__name__,
                default=str(default),
            )
            lookup[vehicle_id] = default
            continue

        percent = parse_decimal(result)
        if percent is None or not ZERO <= percent <= HUNDRED:
            logger.warning(
                "vehicle_usage_missing",
                vehicle_id=vehicle_id,
                tax_year=tax_year,
                value=None if result is None else str(result),
                default=str(default),
            )
            lookup[vehicle_id] = default
            continue
        lookup[vehicle_id] = percent

    logger.info(
        "vehicle_usage_resolved",
        tax_year=tax_year,
        vehicle_count=len(ids),
    )
    return lookup
