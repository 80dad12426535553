"""District scoring entry points, including parsing of raw form input.

``parse_district_form`` and ``parse_total_resources`` take fields exactly as a
form or command line delivers them (text) and apply the same messages the
entry form always showed. ``POST /districts/form`` is the HTTP caller of the
former; other text-driven callers use them directly.
"""

from __future__ import annotations

from typing import Union

from backend.domain.categories import LandType, Urbanization
from backend.domain.constraints import (
    InvalidAttributeError,
    InvalidBudgetError,
    validate_total_resources,
)
from backend.domain.models import District


def score_district(
    name: str,
    population: int,
    land_type: Union[LandType, str],
    urbanization: Union[Urbanization, str],
    resource_demand: int,
) -> District:
    """Validate the attributes and return an immutable, scored district."""
    return District(
        name=name,
        population=population,
        land_type=land_type,
        urbanization=urbanization,
        resource_demand=resource_demand,
    )


def _parse_int_field(raw_value: str, label: str) -> int:
    text = (raw_value or "").strip()
    try:
        value = int(text)
    except ValueError as exc:
        raise InvalidAttributeError(f"{label} must be a valid number") from exc
    if value <= 0:
        raise InvalidAttributeError(f"{label} must be a positive number")
    return value


def parse_district_form(
    *,
    name: str,
    population: str,
    land_type: str,
    urbanization: str,
    resource_demand: str,
) -> District:
    """Convert text fields as typed into an entry form into a scored district."""
    if not (name or "").strip():
        raise InvalidAttributeError("District name cannot be empty")
    return score_district(
        name=name,
        population=_parse_int_field(population, "Population"),
        land_type=land_type,
        urbanization=urbanization,
        resource_demand=_parse_int_field(resource_demand, "Resource demand"),
    )


def parse_total_resources(raw_value: str) -> int:
    text = (raw_value or "").strip()
    try:
        value = int(text)
    except ValueError as exc:
        raise InvalidBudgetError("Total resources must be a valid number") from exc
    return validate_total_resources(value)
