"""Collaborator interfaces.

Available Interfaces:
    VehicleUsageResolver: Async lookup of a vehicle's business-use percentage
"""

from crewtax_services.interfaces.base import VehicleUsageResolver

__all__ = [
    "VehicleUsageResolver",
]
