"""Vehicle load analysis result models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class LoadClassification(StrEnum):
    OVERCROWDED = "overcrowded"
    UNDERUTILIZED = "underutilized"
    OK = "ok"


_RECOMMENDATIONS: dict[LoadClassification, str] = {
    LoadClassification.OVERCROWDED: "extra vehicle required",
    LoadClassification.UNDERUTILIZED: "vehicle can be reduced",
    LoadClassification.OK: "optimal capacity",
}


def recommendation_for(classification: LoadClassification) -> str:
    """Recommended action for a load classification."""
    return _RECOMMENDATIONS[classification]


class LoadRecord(BaseModel):
    """Occupancy of one vehicle in one snapshot.

    Derived data: never stored on its own and never mutated, always
    recomputed from the rider collection.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    vehicle_no: str
    capacity: int
    """Capacity the classification used (fleet default when the vehicle has none)."""
    assigned_riders: int
    utilization: int
    """Occupancy as a rounded percentage of ``capacity``."""
    classification: LoadClassification
    capacity_defaulted: bool = False
    """True when ``capacity`` is the fleet default rather than the vehicle's own."""
    vehicle_known: bool = True
    """False when no vehicle record carries this key (dangling rider reference)."""

    @property
    def recommendation(self) -> str:
        return recommendation_for(self.classification)

    @property
    def ratio(self) -> float:
        return self.assigned_riders / self.capacity

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(mode="json")
        row["recommendation"] = self.recommendation
        return row
