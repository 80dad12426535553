"""Domain-level validation rules and error taxonomy for risk scoring and allocation."""

from __future__ import annotations


class AllocationError(Exception):
    """Base failure raised by the scoring and allocation core."""


class InvalidAttributeError(AllocationError):
    """Raised when a district attribute is malformed, unknown, or non-positive."""


class EmptyInputError(AllocationError):
    """Raised when an allocation run receives no districts."""


class InvalidBudgetError(AllocationError):
    """Raised when the total resource budget is not a positive integer."""


class DistrictNotFoundError(AllocationError):
    """Raised when a registry lookup references an unknown district id."""


class RegistryFullError(AllocationError):
    """Raised when the district registry has reached its configured capacity."""


def _is_strict_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_positive_int(value: object, field_name: str) -> int:
    if not _is_strict_int(value):
        raise InvalidAttributeError(f"{field_name} must be an integer")
    if value <= 0:
        raise InvalidAttributeError(f"{field_name} must be a positive number")
    return value


def validate_district_fields(name: object, population: object, resource_demand: object) -> str:
    """Validate the free-form district fields and return the normalized name."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidAttributeError("District name cannot be empty")
    validate_positive_int(population, "Population")
    validate_positive_int(resource_demand, "Resource demand")
    return name.strip()


def validate_total_resources(total_resources: object) -> int:
    if not _is_strict_int(total_resources):
        raise InvalidBudgetError("Total resources must be an integer")
    if total_resources <= 0:
        raise InvalidBudgetError("Total resources must be a positive number")
    return total_resources
