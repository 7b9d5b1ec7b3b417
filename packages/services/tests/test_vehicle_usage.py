"""Tests for vehicle business-use resolution."""

import asyncio
from decimal import Decimal
from typing import Optional

import pytest
from structlog.testing import capture_logs

from crewtax_core import ResolutionError
from crewtax_services import (
    MileageVehicleUsageResolver,
    StaticVehicleUsageResolver,
    VehicleUsageResolver,
    resolve_vehicle_usage,
)


class FlakyResolver:
    """Resolver that fails for some vehicles."""

    def __init__(self, percentages: dict, failures: dict):
        self.percentages = percentages
        self.failures = failures
        self.calls: list[str] = []

    async def business_use_percentage(self, vehicle_id: str, tax_year: int) -> Optional[Decimal]:
        self.calls.append(vehicle_id)
        await asyncio.sleep(0)
        if vehicle_id in self.failures:
            raise self.failures[vehicle_id]
        return self.percentages.get(vehicle_id)


@pytest.fixture
def mileage_resolver() -> MileageVehicleUsageResolver:
    vehicles = [{"id": "v1", "name": "Van", "currentMileage": "1000"}]
    logs = [
        {"id": "m1", "vehicleId": "v1", "date": "2024-01-05", "odometerReading": "1600"},
        {
            "id": "m2", "vehicleId": "v1", "date": "2024-02-05",
            "odometerReading": "2000", "isBusinessUse": False,
        },
    ]
    return MileageVehicleUsageResolver(vehicles, logs)


class TestResolvers:
    """Test suite for the bundled resolvers."""

    def test_protocol_compliance(self, mileage_resolver):
        assert isinstance(StaticVehicleUsageResolver({}), VehicleUsageResolver)
        assert isinstance(mileage_resolver, VehicleUsageResolver)

    def test_static_resolver(self):
        resolver = StaticVehicleUsageResolver({"v1": "60", "v2": None})

        assert asyncio.run(resolver.business_use_percentage("v1", 2024)) == Decimal("60")
        assert asyncio.run(resolver.business_use_percentage("v2", 2024)) is None
        assert asyncio.run(resolver.business_use_percentage("v3", 2024)) is None

    def test_mileage_resolver(self, mileage_resolver):
        percent = asyncio.run(mileage_resolver.business_use_percentage("v1", 2024))

        assert percent == Decimal("60")

    def test_mileage_resolver_unknown_vehicle(self, mileage_resolver):
        with pytest.raises(ResolutionError) as exc_info:
            asyncio.run(mileage_resolver.business_use_percentage("v9", 2024))

        assert exc_info.value.vehicle_id == "v9"
        assert exc_info.value.recoverable


class TestResolveVehicleUsage:
    """Test suite for resolve_vehicle_usage()."""

    def test_all_resolved(self):
        resolver = StaticVehicleUsageResolver({"v1": 60, "v2": "35.5"})

        lookup = asyncio.run(resolve_vehicle_usage(resolver, ["v1", "v2"], 2024))

        assert lookup == {"v1": Decimal("60"), "v2": Decimal("35.5")}

    def test_duplicates_resolved_once(self):
        resolver = FlakyResolver({"v1": Decimal("50")}, {})

        lookup = asyncio.run(resolve_vehicle_usage(resolver, ["v1", "v1", "v1"], 2024))

        assert resolver.calls == ["v1"]
        assert lookup == {"v1": Decimal("50")}

    def test_failure_defaults_to_full_use(self):
        """One failing lookup does not fail the batch."""
        resolver = FlakyResolver(
            {"v1": Decimal("40")},
            {"v2": ResolutionError("Service unavailable", vehicle_id="v2")},
        )

        with capture_logs() as logs:
            lookup = asyncio.run(resolve_vehicle_usage(resolver, ["v1", "v2"], 2024))

        assert lookup == {"v1": Decimal("40"), "v2": Decimal("100")}
        failures = [e for e in logs if e["event"] == "vehicle_usage_failed"]
        assert len(failures) == 1
        assert failures[0]["vehicle_id"] == "v2"
        assert failures[0]["log_level"] == "warning"

    def test_unexpected_error_defaults(self):
        resolver = FlakyResolver({}, {"v1": RuntimeError("boom")})

        lookup = asyncio.run(resolve_vehicle_usage(resolver, ["v1"], 2024))

        assert lookup == {"v1": Decimal("100")}

    def test_missing_value_uses_default(self):
        resolver = StaticVehicleUsageResolver({})

        lookup = asyncio.run(
            resolve_vehicle_usage(resolver, ["v1"], 2024, default=Decimal("75"))
        )

        assert lookup == {"v1": Decimal("75")}

    def test_out_of_range_value_uses_default(self):
        resolver = StaticVehicleUsageResolver({"v1": "250"})

        lookup = asyncio.run(resolve_vehicle_usage(resolver, ["v1"], 2024))

        assert lookup == {"v1": Decimal("100")}

    def test_unparseable_value_uses_default(self):
        """A non-numeric answer falls back to the default, not to zero."""
        resolver = FlakyResolver({"v1": "n/a", "v2": "40"}, {})

        with capture_logs() as logs:
            lookup = asyncio.run(
                resolve_vehicle_usage(resolver, ["v1", "v2"], 2024, default=Decimal("80"))
            )

        assert lookup == {"v1": Decimal("80"), "v2": Decimal("40")}
        missing = [e for e in logs if e["event"] == "vehicle_usage_missing"]
        assert [e["vehicle_id"] for e in missing] == ["v1"]
        assert missing[0]["value"] == "n/a"

    def test_static_unparseable_value_uses_default(self):
        resolver = StaticVehicleUsageResolver({"v1": "n/a"})

        assert asyncio.run(resolver.business_use_percentage("v1", 2024)) is None
        lookup = asyncio.run(resolve_vehicle_usage(resolver, ["v1"], 2024))

        assert lookup == {"v1": Decimal("100")}

    def test_cancellation_propagates(self):
        resolver = FlakyResolver({}, {"v1": asyncio.CancelledError()})

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(resolve_vehicle_usage(resolver, ["v1"], 2024))

    def test_no_vehicles(self):
        resolver = StaticVehicleUsageResolver({})

        assert asyncio.run(resolve_vehicle_usage(resolver, [], 2024)) == {}
