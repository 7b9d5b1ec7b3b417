"""Custom exceptions for the CrewTax engine.

The calculation engine itself recovers locally from bad input (malformed
numbers become zero, unknown tax years fall back to the latest parameters,
zero denominators short-circuit to zero). The exceptions below cover the
edges around it: records that cannot be modelled at all, invalid settings,
and failures of the collaborators that resolve vehicle business use.

All exceptions inherit from CrewTaxError, so callers can catch every
application-specific error in one place.

Example:
    try:
        percent = await resolver.business_use_percentage(vehicle_id, 2024)
    except ResolutionError as e:
        if e.recoverable:
            percent = Decimal("100")
        else:
            raise
    except CrewTaxError as e:
        logger.error("vehicle_usage_failed", error=str(e))
"""

from typing import Any, Optional


class CrewTaxError(Exception):
    """Base exception for all CrewTax errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise CrewTaxError("Something went wrong", details={"year": 2024})
        CrewTaxError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize CrewTaxError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the caller can substitute a safe default and
                carry on. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(CrewTaxError):
    """Error raised when a record or override cannot be turned into a model.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Business use percentage out of range",
        ...     field="business_use_percentage",
        ...     value="140",
        ...     constraint="0 <= value <= 100",
        ... )
        ValidationError: Business use percentage out of range
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by correcting the
                input. Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ResolutionError(CrewTaxError):
    """Error raised when a vehicle business-use lookup fails.

    Resolvers raise this for a single vehicle; the batch resolver catches it
    and substitutes the 100 % default for that vehicle only.

    Attributes:
        vehicle_id: The vehicle whose percentage could not be resolved.
        tax_year: The tax year being resolved.
        resolver: Name of the resolver implementation.

    Example:
        >>> raise ResolutionError(
        ...     "Mileage service unavailable",
        ...     vehicle_id="veh-1",
        ...     tax_year=2024,
        ...     resolver="MileageVehicleUsageResolver",
        ... )
        ResolutionError: Mileage service unavailable
    """

    def __init__(
        self,
        message: str,
        *,
        vehicle_id: Optional[str] = None,
        tax_year: Optional[int] = None,
        resolver: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ResolutionError.

        Args:
            message: Human-readable error description.
            vehicle_id: Identifier of the vehicle being resolved.
            tax_year: Tax year of the lookup.
            resolver: Name of the resolver that failed.
            details: Optional dictionary with additional context.
            recoverable: Whether a default may be used instead. Defaults to
                True since a missing percentage degrades to full business use.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.vehicle_id = vehicle_id
        self.tax_year = tax_year
        self.resolver = resolver

        if vehicle_id:
            self.details["vehicle_id"] = vehicle_id
        if tax_year is not None:
            self.details["tax_year"] = tax_year
        if resolver:
            self.details["resolver"] = resolver


class ConfigurationError(CrewTaxError):
    """Error raised when configuration or statutory tables are unusable.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "CPP parameter table is empty",
        ...     config_key="cpp_table",
        ...     expected="At least one tax year",
        ... )
        ConfigurationError: CPP parameter table is empty
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "CrewTaxError",
    "ValidationError",
    "ResolutionError",
    "ConfigurationError",
]
