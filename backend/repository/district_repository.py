"""In-memory district registry owned by one application instance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from backend.domain.constraints import DistrictNotFoundError, RegistryFullError
from backend.domain.models import District
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class DistrictRecord:
    """Registered district together with its registry id."""

    district_id: int
    district: District


class DistrictRepository:
    """Keeps districts in insertion order; ids are sequential and never reused."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._records: dict[int, District] = {}
        self._next_id = 1

    def add_district(self, district: District) -> DistrictRecord:
        if len(self._records) >= self._settings.max_districts:
            raise RegistryFullError(
                f"District registry is full ({self._settings.max_districts} districts)"
            )
        district_id = self._next_id
        self._next_id += 1
        self._records[district_id] = district
        logger.debug(
            "District registered | district_id=%s | name=%s | risk_score=%s",
            district_id,
            district.name,
            district.risk_score,
        )
        return DistrictRecord(district_id=district_id, district=district)

    def get_district(self, district_id: int) -> DistrictRecord:
        district = self._records.get(district_id)
        if district is None:
            raise DistrictNotFoundError(f"District {district_id} does not exist")
        return DistrictRecord(district_id=district_id, district=district)

    def remove_district(self, district_id: int) -> DistrictRecord:
        record = self.get_district(district_id)
        del self._records[district_id]
        return record

    def clear(self) -> int:
        removed = len(self._records)
        self._records.clear()
        return removed

    def list_districts(self) -> list[DistrictRecord]:
        return [
            DistrictRecord(district_id=district_id, district=district)
            for district_id, district in self._records.items()
        ]

    def count_districts(self) -> int:
        return len(self._records)
