"""Read-side queries over a reconciled roster."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from fleetroster.models.load import LoadClassification, LoadRecord
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider
from fleetroster.models.vehicle import Vehicle

_ALL = "all"


def find_rider(riders: Iterable[Rider], roll_no: str) -> Rider | None:
    """First rider with *roll_no*, in shard priority order.

    Roll numbers are unique per shard only; a later shard's rider with the
    same number is shadowed here.
    """
    wanted = roll_no.strip()
    for rider in riders:
        if rider.roll_no == wanted:
            return rider
    return None


def find_operator(operators: Iterable[Operator], operator_id: str) -> Operator | None:
    wanted = operator_id.strip()
    for operator in operators:
        if operator.operator_id == wanted:
            return operator
    return None


def _filter_value(value: str | None) -> str | None:
    if value is None or value.strip().lower() in ("", _ALL):
        return None
    return value.strip()


def filter_riders(
    riders: Iterable[Rider],
    *,
    search: str | None = None,
    department: str | None = None,
    year: str | None = None,
) -> list[Rider]:
    """Filter riders the way the roster table does.

    ``search`` is a case-insensitive substring match on name or roll number;
    ``department`` and ``year`` are exact matches. ``None``, ``""`` and
    ``"all"`` disable a filter.
    """
    needle = search.strip().lower() if search else ""
    wanted_department = _filter_value(department)
    wanted_year = _filter_value(year)
    result: list[Rider] = []
    for rider in riders:
        if needle and needle not in rider.name.lower() and needle not in rider.roll_no.lower():
            continue
        if wanted_department is not None and rider.department != wanted_department:
            continue
        if wanted_year is not None and rider.year != wanted_year:
            continue
        result.append(rider)
    return result


class FleetSummary(BaseModel):
    """Headline counts for a roster snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_riders: int
    total_operators: int
    total_vehicles: int
    fleet_capacity: int
    """Sum of the vehicles' own capacities; vehicles without one add nothing."""
    overcrowded_vehicles: int
    underutilized_vehicles: int


def summarize(
    riders: Sequence[Rider],
    operators: Sequence[Operator],
    vehicles: Sequence[Vehicle],
    load_records: Iterable[LoadRecord],
) -> FleetSummary:
    classifications = [record.classification for record in load_records]
    return FleetSummary(
        total_riders=len(riders),
        total_operators=len(operators),
        total_vehicles=len(vehicles),
        fleet_capacity=sum(vehicle.capacity or 0 for vehicle in vehicles),
        overcrowded_vehicles=classifications.count(LoadClassification.OVERCROWDED),
        underutilized_vehicles=classifications.count(LoadClassification.UNDERUTILIZED),
    )
