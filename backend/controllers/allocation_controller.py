"""HTTP controller layer for district scoring and resource allocation."""

from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from backend.controllers.dependencies import get_allocation_service
from backend.domain.categories import LandType, Urbanization
from backend.domain.constraints import (
    AllocationError,
    DistrictNotFoundError,
    RegistryFullError,
)
from backend.domain.models import AllocationPlan, District
from backend.domain.risk_model import land_type_risk, population_risk, urbanization_risk
from backend.repository.district_repository import DistrictRecord
from backend.services.allocation_service import DistrictAllocationService
from backend.services.scoring_service import parse_district_form, score_district
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["allocation"])


class DistrictInput(BaseModel):
    """Input DTO validated before entering service layer."""

    name: str = Field(min_length=1)
    population: int = Field(strict=True, gt=0)
    land_type: LandType
    urbanization: Urbanization
    resource_demand: int = Field(strict=True, gt=0)


class DistrictFormInput(BaseModel):
    """Raw text fields as typed into a district entry form."""

    name: str
    population: str
    land_type: str
    urbanization: str
    resource_demand: str


class DistrictResponse(BaseModel):
    district_id: int | None = None
    name: str
    population: int = Field(gt=0)
    land_type: LandType
    urbanization: Urbanization
    resource_demand: int = Field(gt=0)
    risk_score: int = Field(ge=6, le=23)
    risk_level: str
    risk_resource_ratio: float = Field(ge=0.0)


class RiskBreakdownResponse(DistrictResponse):
    population_risk: int = Field(ge=1, le=4)
    land_type_risk: int = Field(ge=1, le=4)
    urbanization_risk: int = Field(ge=1, le=3)


class DistrictListResponse(BaseModel):
    districts: list[DistrictResponse]


class ClearDistrictsResponse(BaseModel):
    removed: int = Field(ge=0)


class RiskOverviewResponse(BaseModel):
    district_count: int = Field(ge=0)
    total_risk: int = Field(ge=0)
    total_demand: int = Field(ge=0)
    average_risk: float = Field(ge=0.0)
    level_counts: dict[str, int]


class AllocateRequest(BaseModel):
    total_resources: int = Field(strict=True)
    districts: list[DistrictInput] | None = None
    truncate_on_exhaustion: bool | None = None


class AllocationOutcomeResponse(BaseModel):
    rank: int = Field(gt=0)
    name: str
    risk_score: int
    resource_demand: int = Field(gt=0)
    risk_resource_ratio: float
    allocated: int = Field(ge=0)
    is_partial: bool
    status: str
    fulfillment_percentage: float = Field(ge=0.0, le=100.0)


class AllocateResponse(BaseModel):
    outcomes: list[AllocationOutcomeResponse]
    remaining: int = Field(ge=0)
    total_resources: int = Field(gt=0)
    total_allocated: int = Field(ge=0)
    allocated_percentage: float = Field(ge=0.0, le=100.0)
    total_demand: int = Field(ge=0)
    fulfillment_percentage: float = Field(ge=0.0, le=100.0)


def _district_response(district: District, district_id: int | None = None) -> DistrictResponse:
    return DistrictResponse(
        district_id=district_id,
        name=district.name,
        population=district.population,
        land_type=district.land_type,
        urbanization=district.urbanization,
        resource_demand=district.resource_demand,
        risk_score=district.risk_score,
        risk_level=district.risk_level,
        risk_resource_ratio=district.risk_resource_ratio,
    )


def _record_response(record: DistrictRecord) -> DistrictResponse:
    return _district_response(record.district, district_id=record.district_id)


def _plan_response(plan: AllocationPlan) -> AllocateResponse:
    return AllocateResponse(
        outcomes=[
            AllocationOutcomeResponse(
                rank=rank,
                name=outcome.district.name,
                risk_score=outcome.district.risk_score,
                resource_demand=outcome.district.resource_demand,
                risk_resource_ratio=outcome.district.risk_resource_ratio,
                allocated=outcome.allocated,
                is_partial=outcome.is_partial,
                status="Partial" if outcome.is_partial else "Full",
                fulfillment_percentage=outcome.fulfillment_ratio * 100.0,
            )
            for rank, outcome in enumerate(plan.outcomes, start=1)
        ],
        remaining=plan.remaining,
        total_resources=plan.total_resources,
        total_allocated=plan.total_allocated,
        allocated_percentage=plan.allocated_percentage,
        total_demand=plan.total_demand,
        fulfillment_percentage=plan.fulfillment_percentage,
    )


def _raise_http_error(exc: AllocationError) -> NoReturn:
    if isinstance(exc, DistrictNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, RegistryFullError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=code, detail=str(exc)) from exc


@router.post(
    "/score_district",
    response_model=RiskBreakdownResponse,
    status_code=status.HTTP_200_OK,
)
async def score(payload: DistrictInput) -> RiskBreakdownResponse:
    """Score a district without registering it."""
    try:
        district = score_district(**payload.model_dump())
    except AllocationError as exc:
        _raise_http_error(exc)
    return RiskBreakdownResponse(
        **_district_response(district).model_dump(),
        population_risk=population_risk(district.population),
        land_type_risk=land_type_risk(district.land_type),
        urbanization_risk=urbanization_risk(district.urbanization),
    )


@router.post(
    "/districts",
    response_model=DistrictResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_district(
    payload: DistrictInput,
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> DistrictResponse:
    try:
        record = service.register_district(**payload.model_dump())
    except AllocationError as exc:
        _raise_http_error(exc)
    return _record_response(record)


@router.post(
    "/districts/form",
    response_model=DistrictResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_district_from_form(
    payload: DistrictFormInput,
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> DistrictResponse:
    """Register a district from unconverted form text."""
    try:
        district = parse_district_form(**payload.model_dump())
        record = service.register_district(
            name=district.name,
            population=district.population,
            land_type=district.land_type,
            urbanization=district.urbanization,
            resource_demand=district.resource_demand,
        )
    except AllocationError as exc:
        _raise_http_error(exc)
    return _record_response(record)


@router.get("/districts", response_model=DistrictListResponse)
async def list_districts(
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> DistrictListResponse:
    return DistrictListResponse(
        districts=[_record_response(record) for record in service.list_districts()]
    )


@router.delete("/districts/{district_id}", response_model=DistrictResponse)
async def remove_district(
    district_id: int,
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> DistrictResponse:
    try:
        record = service.remove_district(district_id)
    except AllocationError as exc:
        _raise_http_error(exc)
    return _record_response(record)


@router.delete("/districts", response_model=ClearDistrictsResponse)
async def clear_districts(
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> ClearDistrictsResponse:
    return ClearDistrictsResponse(removed=service.clear_districts())


@router.get("/risk_overview", response_model=RiskOverviewResponse)
async def risk_overview(
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> RiskOverviewResponse:
    overview = service.risk_overview()
    return RiskOverviewResponse(
        district_count=overview.district_count,
        total_risk=overview.total_risk,
        total_demand=overview.total_demand,
        average_risk=overview.average_risk,
        level_counts=overview.level_counts,
    )


@router.post(
    "/allocate",
    response_model=AllocateResponse,
    status_code=status.HTTP_200_OK,
)
async def allocate_resources(
    payload: AllocateRequest,
    service: DistrictAllocationService = Depends(get_allocation_service),
) -> AllocateResponse:
    """Run the greedy allocation over inline districts or the registry."""
    try:
        districts = (
            [score_district(**item.model_dump()) for item in payload.districts]
            if payload.districts is not None
            else None
        )
        plan = service.run_allocation(
            total_resources=payload.total_resources,
            districts=districts,
            truncate_on_exhaustion=payload.truncate_on_exhaustion,
        )
    except AllocationError as exc:
        _raise_http_error(exc)
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected allocation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to allocate resources",
        ) from exc
    return _plan_response(plan)
