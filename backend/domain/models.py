"""Domain models for district risk scoring and resource allocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from backend.domain.categories import LandType, Urbanization, parse_land_type, parse_urbanization
from backend.domain.constraints import validate_district_fields
from backend.domain.risk_model import district_risk, risk_level


@dataclass(frozen=True)
class District:
    """Administrative unit requesting resources.

    ``risk_score`` is derived from population, land type and urbanization when
    the record is built and cannot be supplied by the caller. Rescoring means
    building a new ``District``.
    """

    name: str
    population: int
    land_type: LandType
    urbanization: Urbanization
    resource_demand: int
    risk_score: int = field(init=False)

    def __post_init__(self) -> None:
        name = validate_district_fields(self.name, self.population, self.resource_demand)
        land_type = parse_land_type(self.land_type)
        urbanization = parse_urbanization(self.urbanization)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "land_type", land_type)
        object.__setattr__(self, "urbanization", urbanization)
        object.__setattr__(
            self,
            "risk_score",
            district_risk(self.population, land_type, urbanization),
        )

    @property
    def risk_resource_ratio(self) -> float:
        return self.risk_score / self.resource_demand

    @property
    def risk_level(self) -> str:
        return risk_level(self.risk_score)


@dataclass(frozen=True)
class AllocationOutcome:
    district: District
    allocated: int
    is_partial: bool

    @property
    def fulfillment_ratio(self) -> float:
        return self.allocated / self.district.resource_demand


@dataclass(frozen=True)
class AllocationPlan:
    """Result of one allocation run, outcomes in priority order.

    Unpacks as ``outcomes, remaining = plan``.
    """

    outcomes: tuple[AllocationOutcome, ...]
    remaining: int
    total_resources: int
    total_demand: int

    def __iter__(self) -> Iterator[Union[tuple[AllocationOutcome, ...], int]]:
        yield self.outcomes
        yield self.remaining

    @property
    def total_allocated(self) -> int:
        return self.total_resources - self.remaining

    @property
    def allocated_percentage(self) -> float:
        return self.total_allocated / self.total_resources * 100.0

    @property
    def fulfillment_percentage(self) -> float:
        if self.total_demand <= 0:
            return 0.0
        return min(100.0, self.total_resources / self.total_demand * 100.0)

    @property
    def fully_allocated(self) -> bool:
        return self.remaining == 0

    @property
    def partial_outcomes(self) -> list[AllocationOutcome]:
        return [outcome for outcome in self.outcomes if outcome.is_partial]
