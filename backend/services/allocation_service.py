"""Greedy risk-per-resource allocation and its orchestration service."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from backend.domain.categories import LandType, Urbanization
from backend.domain.constraints import EmptyInputError, validate_total_resources
from backend.domain.models import AllocationOutcome, AllocationPlan, District
from backend.domain.risk_model import CRITICAL_RISK_LEVEL, RISK_LEVEL_BANDS
from backend.repository.district_repository import DistrictRecord, DistrictRepository
from backend.services.scoring_service import score_district
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def rank_districts(districts: Iterable[District]) -> list[District]:
    """Order districts by risk-resource ratio, highest first.

    The sort is stable, so districts with equal ratios keep their input order.
    """
    return sorted(districts, key=lambda district: district.risk_resource_ratio, reverse=True)


def allocate(
    districts: Iterable[District],
    total_resources: int,
    *,
    truncate_on_exhaustion: bool = False,
) -> AllocationPlan:
    """Walk the priority ordering once, filling each demand while resources last.

    By default every district gets an outcome; once the budget is exhausted the
    rest are recorded as ``allocated=0, is_partial=True``. With
    ``truncate_on_exhaustion`` the walk stops right after the outcome that
    brings the budget to zero, so trailing districts are omitted.
    """
    district_list = list(districts)
    if not district_list:
        raise EmptyInputError("At least one district is required to allocate resources")
    validate_total_resources(total_resources)

    remaining = total_resources
    outcomes: list[AllocationOutcome] = []
    for district in rank_districts(district_list):
        demand = district.resource_demand
        if remaining >= demand:
            allocated = demand
            remaining -= demand
            is_partial = False
        else:
            allocated = remaining
            remaining = 0
            is_partial = True
        outcomes.append(
            AllocationOutcome(district=district, allocated=allocated, is_partial=is_partial)
        )
        if truncate_on_exhaustion and remaining == 0:
            break

    return AllocationPlan(
        outcomes=tuple(outcomes),
        remaining=remaining,
        total_resources=total_resources,
        total_demand=sum(district.resource_demand for district in district_list),
    )


@dataclass(frozen=True)
class RiskOverview:
    district_count: int
    total_risk: int
    total_demand: int
    average_risk: float
    level_counts: dict[str, int]


def summarize_risk(districts: Sequence[District]) -> RiskOverview:
    levels = Counter(district.risk_level for district in districts)
    ordered_levels = [label for _, label in RISK_LEVEL_BANDS] + [CRITICAL_RISK_LEVEL]
    total_risk = sum(district.risk_score for district in districts)
    return RiskOverview(
        district_count=len(districts),
        total_risk=total_risk,
        total_demand=sum(district.resource_demand for district in districts),
        average_risk=(total_risk / len(districts)) if districts else 0.0,
        level_counts={label: levels.get(label, 0) for label in ordered_levels},
    )


class DistrictAllocationService:
    """Registry-backed allocation workflow used by the HTTP layer."""

    def __init__(
        self,
        repository: Optional[DistrictRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DistrictRepository(self._settings)

    def register_district(
        self,
        *,
        name: str,
        population: int,
        land_type: Union[LandType, str],
        urbanization: Union[Urbanization, str],
        resource_demand: int,
    ) -> DistrictRecord:
        district = score_district(
            name=name,
            population=population,
            land_type=land_type,
            urbanization=urbanization,
            resource_demand=resource_demand,
        )
        record = self._repository.add_district(district)
        logger.info(
            "District added | district_id=%s | name=%s | risk_score=%s | demand=%s",
            record.district_id,
            district.name,
            district.risk_score,
            district.resource_demand,
        )
        return record

    def list_districts(self) -> list[DistrictRecord]:
        return self._repository.list_districts()

    def remove_district(self, district_id: int) -> DistrictRecord:
        record = self._repository.remove_district(district_id)
        logger.info("District removed | district_id=%s | name=%s", district_id, record.district.name)
        return record

    def clear_districts(self) -> int:
        removed = self._repository.clear()
        logger.info("District registry cleared | removed=%s", removed)
        return removed

    def risk_overview(self) -> RiskOverview:
        return summarize_risk([record.district for record in self._repository.list_districts()])

    def run_allocation(
        self,
        *,
        total_resources: int,
        districts: Optional[Sequence[District]] = None,
        truncate_on_exhaustion: Optional[bool] = None,
    ) -> AllocationPlan:
        """Allocate over ``districts`` if given, otherwise over the registry."""
        candidates = (
            list(districts)
            if districts is not None
            else [record.district for record in self._repository.list_districts()]
        )
        truncate = (
            truncate_on_exhaustion
            if truncate_on_exhaustion is not None
            else self._settings.allocation_truncate_on_exhaustion
        )
        plan = allocate(candidates, total_resources, truncate_on_exhaustion=truncate)

        for rank, outcome in enumerate(plan.outcomes, start=1):
            logger.debug(
                "Allocation decision | rank=%s | district=%s | ratio=%.4f | allocated=%s/%s",
                rank,
                outcome.district.name,
                outcome.district.risk_resource_ratio,
                outcome.allocated,
                outcome.district.resource_demand,
            )
        logger.info(
            (
                "Allocation completed | districts=%s | outcomes=%s | total_resources=%s | "
                "allocated=%s | remaining=%s | partial=%s | truncated=%s"
            ),
            len(candidates),
            len(plan.outcomes),
            plan.total_resources,
            plan.total_allocated,
            plan.remaining,
            len(plan.partial_outcomes),
            truncate,
        )
        return plan
