"""Tests for greedy allocation and the registry-backed allocation service.

Exhaustion policy: by default every district receives an outcome, and the ones
reached after the budget runs out get ``allocated=0, is_partial=True``. Passing
``truncate_on_exhaustion=True`` reproduces the legacy output, which stops
listing districts at the outcome that exhausts the budget.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import pytest

from backend.domain.constraints import EmptyInputError, InvalidBudgetError
from backend.domain.models import District
from backend.repository.district_repository import DistrictRepository
from backend.services.allocation_service import (
    DistrictAllocationService,
    allocate,
    rank_districts,
    summarize_risk,
)
from backend.services.scoring_service import score_district
from backend.utils.config import get_settings


@dataclass(frozen=True)
class ScoredStub:
    """Pre-scored stand-in used to exercise ratios outside the 6-23 score range."""

    name: str
    risk_score: int
    resource_demand: int

    @property
    def risk_resource_ratio(self) -> float:
        return self.risk_score / self.resource_demand


def _build_test_settings(**overrides):
    base = get_settings()
    return replace(base, **overrides)


def _sample_districts() -> list[District]:
    return [
        score_district("Metro", 150_000, "Urban", "Urban", 100),         # 23 / 100 = 0.23
        score_district("Harbor", 60_000, "Coastal", "Suburban", 50),     # 15 / 50 = 0.30
        score_district("Pinewood", 5_000, "Forest", "Rural", 60),        # 6 / 60 = 0.10
    ]


# --- ordering ---

def test_rank_districts_orders_by_ratio_descending() -> None:
    ranked = rank_districts(_sample_districts())
    assert [district.name for district in ranked] == ["Harbor", "Metro", "Pinewood"]


def test_rank_districts_keeps_input_order_for_equal_ratios() -> None:
    first = score_district("First", 5_000, "Forest", "Rural", 20)          # 6 / 20 = 0.3
    second = score_district("Second", 60_000, "Coastal", "Suburban", 50)   # 15 / 50 = 0.3
    third = score_district("Third", 5_000, "Forest", "Rural", 20)
    top = score_district("Top", 150_000, "Urban", "Urban", 10)

    ranked = rank_districts([first, second, top, third])

    assert [district.name for district in ranked] == ["Top", "First", "Second", "Third"]


# --- core allocation ---

def test_reference_scenario_emits_every_district() -> None:
    a = ScoredStub("A", risk_score=50, resource_demand=100)
    b = ScoredStub("B", risk_score=160, resource_demand=200)
    c = ScoredStub("C", risk_score=20, resource_demand=50)

    outcomes, remaining = allocate([a, b, c], 250)

    assert [outcome.district.name for outcome in outcomes] == ["B", "A", "C"]
    assert [outcome.allocated for outcome in outcomes] == [200, 50, 0]
    assert [outcome.is_partial for outcome in outcomes] == [False, True, True]
    assert len(outcomes) == 3
    assert remaining == 0


def test_reference_scenario_legacy_truncation() -> None:
    a = ScoredStub("A", risk_score=50, resource_demand=100)
    b = ScoredStub("B", risk_score=160, resource_demand=200)
    c = ScoredStub("C", risk_score=20, resource_demand=50)

    outcomes, remaining = allocate([a, b, c], 250, truncate_on_exhaustion=True)

    assert [outcome.district.name for outcome in outcomes] == ["B", "A"]
    assert [outcome.allocated for outcome in outcomes] == [200, 50]
    assert len(outcomes) == 2
    assert remaining == 0


def test_budget_covering_all_demand_leaves_remainder() -> None:
    districts = _sample_districts()
    plan = allocate(districts, 500)

    assert plan.remaining == 500 - sum(district.resource_demand for district in districts)
    assert all(not outcome.is_partial for outcome in plan.outcomes)
    assert [outcome.allocated for outcome in plan.outcomes] == [50, 100, 60]
    assert plan.total_allocated == 210
    assert plan.total_demand == 210


def test_partial_then_zero_allocation() -> None:
    plan = allocate(_sample_districts(), 120)

    assert [(o.district.name, o.allocated, o.is_partial) for o in plan.outcomes] == [
        ("Harbor", 50, False),
        ("Metro", 70, True),
        ("Pinewood", 0, True),
    ]
    assert plan.remaining == 0
    assert plan.total_allocated == 120


def test_exact_fill_truncates_after_exhausting_outcome() -> None:
    truncated = allocate(_sample_districts(), 150, truncate_on_exhaustion=True)
    full = allocate(_sample_districts(), 150)

    assert [o.district.name for o in truncated.outcomes] == ["Harbor", "Metro"]
    assert all(not o.is_partial for o in truncated.outcomes)
    assert [(o.district.name, o.allocated, o.is_partial) for o in full.outcomes][-1] == (
        "Pinewood",
        0,
        True,
    )
    assert truncated.remaining == full.remaining == 0


def test_allocation_never_exceeds_demand_or_budget() -> None:
    districts = _sample_districts()
    for budget in (1, 49, 50, 51, 149, 150, 209, 210, 211):
        plan = allocate(districts, budget)
        assert len(plan.outcomes) == len(districts)
        assert plan.remaining >= 0
        assert sum(o.allocated for o in plan.outcomes) + plan.remaining == budget
        for outcome in plan.outcomes:
            assert 0 <= outcome.allocated <= outcome.district.resource_demand
            assert outcome.is_partial == (outcome.allocated < outcome.district.resource_demand)


def test_allocate_accepts_any_iterable_and_leaves_input_untouched() -> None:
    districts = _sample_districts()
    snapshot = list(districts)

    plan = allocate(iter(districts), 80)

    assert districts == snapshot
    assert [d.risk_score for d in districts] == [23, 15, 6]
    assert len(plan.outcomes) == 3


def test_allocate_rejects_empty_input() -> None:
    with pytest.raises(EmptyInputError):
        allocate([], 100)


@pytest.mark.parametrize("total", [0, -1])
def test_allocate_rejects_non_positive_budget(total: int) -> None:
    with pytest.raises(InvalidBudgetError):
        allocate(_sample_districts(), total)


def test_empty_input_is_reported_before_bad_budget() -> None:
    with pytest.raises(EmptyInputError):
        allocate([], 0)


# --- risk summary ---

def test_summarize_risk_counts_levels() -> None:
    overview = summarize_risk(_sample_districts())
    assert overview.district_count == 3
    assert overview.total_risk == 44
    assert overview.total_demand == 210
    assert overview.average_risk == pytest.approx(44 / 3)
    assert overview.level_counts == {"Low": 1, "Medium": 1, "High": 0, "Critical": 1}


def test_summarize_risk_empty() -> None:
    overview = summarize_risk([])
    assert overview.district_count == 0
    assert overview.average_risk == 0.0
    assert sum(overview.level_counts.values()) == 0


# --- orchestration service ---

def _build_service(**overrides) -> DistrictAllocationService:
    settings = _build_test_settings(**overrides)
    return DistrictAllocationService(repository=DistrictRepository(settings), settings=settings)


def _register_samples(service: DistrictAllocationService) -> None:
    for district in _sample_districts():
        service.register_district(
            name=district.name,
            population=district.population,
            land_type=district.land_type,
            urbanization=district.urbanization,
            resource_demand=district.resource_demand,
        )


def test_service_allocates_over_registry() -> None:
    service = _build_service(allocation_truncate_on_exhaustion=False)
    _register_samples(service)

    plan = service.run_allocation(total_resources=120)

    assert [o.district.name for o in plan.outcomes] == ["Harbor", "Metro", "Pinewood"]
    assert plan.remaining == 0


def test_service_applies_configured_truncation_policy() -> None:
    service = _build_service(allocation_truncate_on_exhaustion=True)
    _register_samples(service)

    assert len(service.run_allocation(total_resources=120).outcomes) == 2
    assert len(
        service.run_allocation(total_resources=120, truncate_on_exhaustion=False).outcomes
    ) == 3


def test_service_prefers_inline_districts() -> None:
    service = _build_service()
    _register_samples(service)
    inline = [score_district("Solo", 20_000, "Desert", "Rural", 10)]

    plan = service.run_allocation(total_resources=5, districts=inline)

    assert [(o.district.name, o.allocated, o.is_partial) for o in plan.outcomes] == [("Solo", 5, True)]


def test_service_rejects_allocation_with_empty_registry() -> None:
    service = _build_service()
    with pytest.raises(EmptyInputError):
        service.run_allocation(total_resources=100)


def test_service_remove_and_clear() -> None:
    service = _build_service()
    _register_samples(service)

    removed = service.remove_district(2)
    assert removed.district.name == "Harbor"
    assert [record.district_id for record in service.list_districts()] == [1, 3]
    assert service.risk_overview().district_count == 2

    assert service.clear_districts() == 2
    assert service.list_districts() == []
