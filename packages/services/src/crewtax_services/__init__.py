"""CrewTax Services - Settings, vehicle lookups and async tax estimates."""

from crewtax_services.config import (
    CrewTaxConfig,
    DeductionConfig,
    ReportingConfig,
    configure_logging,
)
from crewtax_services.estimator import TaxEstimator, build_calculator
from crewtax_services.interfaces import VehicleUsageResolver
from crewtax_services.vehicle_usage import (
    MileageVehicleUsageResolver,
    StaticVehicleUsageResolver,
    resolve_vehicle_usage,
)

__version__ = "0.1.0"

__all__ = [
    "CrewTaxConfig",
    "DeductionConfig",
    "ReportingConfig",
    "configure_logging",
    "TaxEstimator",
    "build_calculator",
    "VehicleUsageResolver",
    "StaticVehicleUsageResolver",
    "MileageVehicleUsageResolver",
    "resolve_vehicle_usage",
]
