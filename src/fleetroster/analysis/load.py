"""Load analyzer: per-vehicle occupancy classification.

A pure function of one rider collection and one vehicle collection. There
is no smoothing, hysteresis, or history: every run starts from a clean
slate, and rider counts are always recounted rather than cached.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from fleetroster._constants import NOT_AVAILABLE
from fleetroster.config import LoadThresholds
from fleetroster.models.load import LoadClassification, LoadRecord
from fleetroster.models.rider import Rider
from fleetroster.models.vehicle import Vehicle


def classify(count: int, capacity: int, thresholds: LoadThresholds | None = None) -> LoadClassification:
    """Classify *count* riders against *capacity*.

    Evaluated in order, with strict inequalities:

    - ``count > capacity * overcrowded_ratio``  -> overcrowded
    - ``count < capacity * underutilized_ratio`` -> underutilized
    - otherwise                                  -> ok
    """
    thresholds = thresholds or LoadThresholds()
    if count > capacity * thresholds.overcrowded_ratio:
        return LoadClassification.OVERCROWDED
    if count < capacity * thresholds.underutilized_ratio:
        return LoadClassification.UNDERUTILIZED
    return LoadClassification.OK


def utilization_percent(count: int, capacity: int) -> int:
    """Occupancy percentage, rounded half up (45.5 -> 46)."""
    return (200 * count + capacity) // (2 * capacity)


def analyze_load(
    riders: Iterable[Rider],
    vehicles: Iterable[Vehicle],
    thresholds: LoadThresholds | None = None,
) -> tuple[LoadRecord, ...]:
    """Build one :class:`LoadRecord` per vehicle key that riders reference.

    Riders without a vehicle key are left out. Records come out in order of
    first appearance of each vehicle key in *riders*.
    """
    thresholds = thresholds or LoadThresholds()

    counts: Counter[str] = Counter()
    for rider in riders:
        if rider.has_vehicle:
            counts[rider.vehicle_no] += 1

    by_key: dict[str, Vehicle] = {}
    for vehicle in vehicles:
        if vehicle.vehicle_no != NOT_AVAILABLE:
            by_key.setdefault(vehicle.vehicle_no, vehicle)

    records: list[LoadRecord] = []
    for vehicle_no, count in counts.items():
        vehicle = by_key.get(vehicle_no)
        if vehicle is None:
            capacity = thresholds.default_capacity
        else:
            capacity = vehicle.effective_capacity(thresholds.default_capacity)
        records.append(
            LoadRecord(
                vehicle_no=vehicle_no,
                capacity=capacity,
                assigned_riders=count,
                utilization=utilization_percent(count, capacity),
                classification=classify(count, capacity, thresholds),
                capacity_defaulted=vehicle is None or vehicle.capacity is None,
                vehicle_known=vehicle is not None,
            )
        )
    return tuple(records)
