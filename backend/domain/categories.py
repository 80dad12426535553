"""Closed categorical attributes of a district.

Raw values coming from forms or JSON are parsed here, at the boundary, so the
risk model only ever sees members of these enums.
"""

from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar, Union

from backend.domain.constraints import InvalidAttributeError


class LandType(str, Enum):
    FOREST = "Forest"
    COASTAL = "Coastal"
    DESERT = "Desert"
    URBAN = "Urban"


class Urbanization(str, Enum):
    RURAL = "Rural"
    SUBURBAN = "Suburban"
    URBAN = "Urban"


_E = TypeVar("_E", LandType, Urbanization)


def _parse_member(enum_type: Type[_E], value: object, label: str) -> _E:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        for member in enum_type:
            if member.value == value:
                return member
    allowed = ", ".join(member.value for member in enum_type)
    raise InvalidAttributeError(f"Unknown {label} {value!r}; expected one of: {allowed}")


def parse_land_type(value: Union[LandType, str]) -> LandType:
    return _parse_member(LandType, value, "land type")


def parse_urbanization(value: Union[Urbanization, str]) -> Urbanization:
    return _parse_member(Urbanization, value, "urbanization level")
