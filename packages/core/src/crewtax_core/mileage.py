"""Vehicle business-use percentage derived from odometer logs.

Each log records the odometer after a trip. A trip's distance is the change
from the previous reading; the first log in the history is measured from the
vehicle's starting odometer. Readings that go backwards count as zero.
"""

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from .models import MileageLog, MileageSummary, Vehicle
from .money import HUNDRED, ZERO, to_decimal
from .tax_year import year_from_date_string

logger = structlog.get_logger()


def compute_trip_distances(
    logs: Iterable[MileageLog],
    starting_mileage: Decimal = ZERO,
) -> list[tuple[MileageLog, Decimal]]:
    """
    Pair each log with the distance driven since the previous reading.

    Args:
        logs: Logs for a single vehicle, in any order.
        starting_mileage: Odometer when tracking started.

    Returns:
        (log, distance) pairs sorted by date.
    """
    ordered = sorted(logs, key=lambda log: log.date)
    previous = to_decimal(starting_mileage)
    trips = []
    for log in ordered:
        trips.append((log, max(ZERO, log.odometer_reading - previous)))
        previous = log.odometer_reading
    return trips


def summarize_mileage(
    logs: Iterable[MileageLog],
    vehicle: Vehicle,
    tax_year: int,
) -> MileageSummary:
    """
    Total and business distance for a vehicle in one tax year.

    Distances are computed over the vehicle's full history so the first trip
    of the year is measured from the last reading of the previous year.

    Args:
        logs: Mileage logs; logs for other vehicles are ignored.
        vehicle: The vehicle to summarize.
        tax_year: Year to total.

    Returns:
        MileageSummary. ``business_use_percentage`` is None when no distance
        was driven, and 100 for vehicles used exclusively for business.
    """
    own_logs = [log for log in logs if log.vehicle_id == vehicle.id]
    trips = [
        (log, distance)
        for log, distance in compute_trip_distances(own_logs, vehicle.current_mileage)
        if year_from_date_string(log.date) == tax_year
    ]

    total = sum((distance for _, distance in trips), ZERO)
    business = sum((distance for log, distance in trips if log.is_business_use), ZERO)

    percentage: Optional[Decimal]
    if vehicle.used_exclusively_for_business:
        percentage = HUNDRED
    elif total > 0:
        percentage = business / total * HUNDRED
    else:
        percentage = None

    logger.debug(
        "mileage_summarized",
        vehicle_id=vehicle.id,
        tax_year=tax_year,
        total_distance=str(total),
        business_distance=str(business),
    )

    return MileageSummary(
        vehicle_id=vehicle.id,
        tax_year=tax_year,
        total_distance=total,
        business_distance=business,
        business_use_percentage=percentage,
        log_count=len(trips),
    )
