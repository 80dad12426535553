"""Weighted risk scoring for districts.

Every function here is pure: the score depends only on the arguments, and
population is weighted highest, urbanization lowest.
"""

from __future__ import annotations

from typing import Union

from backend.domain.categories import LandType, Urbanization, parse_land_type, parse_urbanization
from backend.domain.constraints import validate_positive_int


POPULATION_WEIGHT = 3
LAND_TYPE_WEIGHT = 2
URBANIZATION_WEIGHT = 1

# Upper bounds (inclusive) of population tiers 2 and 3; tier 1 is below the first.
POPULATION_TIER_SMALL = 10_000
POPULATION_TIER_MEDIUM = 50_000
POPULATION_TIER_LARGE = 100_000

_LAND_TYPE_RISK = {
    LandType.FOREST: 1,
    LandType.COASTAL: 2,
    LandType.DESERT: 3,
    LandType.URBAN: 4,
}

_URBANIZATION_RISK = {
    Urbanization.RURAL: 1,
    Urbanization.SUBURBAN: 2,
    Urbanization.URBAN: 3,
}

# (inclusive upper score, label); anything above the last band is Critical.
RISK_LEVEL_BANDS = (
    (10, "Low"),
    (15, "Medium"),
    (20, "High"),
)
CRITICAL_RISK_LEVEL = "Critical"


def population_risk(population: int) -> int:
    validate_positive_int(population, "Population")
    if population < POPULATION_TIER_SMALL:
        return 1
    if population <= POPULATION_TIER_MEDIUM:
        return 2
    if population <= POPULATION_TIER_LARGE:
        return 3
    return 4


def land_type_risk(land_type: Union[LandType, str]) -> int:
    return _LAND_TYPE_RISK[parse_land_type(land_type)]


def urbanization_risk(urbanization: Union[Urbanization, str]) -> int:
    return _URBANIZATION_RISK[parse_urbanization(urbanization)]


def total_risk(population_score: int, land_type_score: int, urbanization_score: int) -> int:
    return (
        POPULATION_WEIGHT * population_score
        + LAND_TYPE_WEIGHT * land_type_score
        + URBANIZATION_WEIGHT * urbanization_score
    )


def district_risk(
    population: int,
    land_type: Union[LandType, str],
    urbanization: Union[Urbanization, str],
) -> int:
    """Score a district from its raw risk-relevant attributes."""
    return total_risk(
        population_risk(population),
        land_type_risk(land_type),
        urbanization_risk(urbanization),
    )


def risk_level(score: int) -> str:
    """Map a total risk score onto the Low/Medium/High/Critical bands."""
    for upper_bound, label in RISK_LEVEL_BANDS:
        if score <= upper_bound:
            return label
    return CRITICAL_RISK_LEVEL
