"""Reference resolver: attach operator, vehicle, and route context.

Joins are exact key matches (after whitespace stripping at the model
boundary). A reference that does not resolve leaves the context fields on
the sentinel; resolution never fails. Resolution is pure: the same inputs
always give the same view, and resolving an already-resolved view against
the same collections returns it unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from fleetroster._constants import NOT_AVAILABLE
from fleetroster.models._base import RosterBaseModel
from fleetroster.models.enriched import EnrichedOperator, EnrichedRider
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider
from fleetroster.models.route import Route
from fleetroster.models.vehicle import Vehicle

TRecord = TypeVar("TRecord", bound=RosterBaseModel)


def _index(records: Iterable[TRecord], key_field: str) -> dict[str, TRecord]:
    """Map key -> first record carrying it.

    Sentinel keys are not indexed, nor are records missing their own identity
    key: malformed records never take part in joins.
    """
    index: dict[str, TRecord] = {}
    for record in records:
        if not record.has_key:
            continue
        key = str(getattr(record, key_field))
        if key == NOT_AVAILABLE or key in index:
            continue
        index[key] = record
    return index


def _capacity_text(vehicle: Vehicle) -> str:
    return str(vehicle.capacity) if vehicle.capacity is not None else NOT_AVAILABLE


@dataclass(frozen=True)
class ReferenceIndex:
    """Hashed lookups over one snapshot's operator, vehicle, and route collections.

    When two records share a key the first one (store order) wins.
    """

    vehicles: dict[str, Vehicle] = field(default_factory=dict)
    routes: dict[str, Route] = field(default_factory=dict)
    operators_by_vehicle: dict[str, Operator] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        operators: Iterable[Operator],
        vehicles: Iterable[Vehicle],
        routes: Iterable[Route],
    ) -> ReferenceIndex:
        return cls(
            vehicles=_index(vehicles, "vehicle_no"),
            routes=_index(routes, "route_number"),
            operators_by_vehicle=_index(operators, "vehicle_no"),
        )

    def resolve_rider(self, rider: Rider | EnrichedRider) -> EnrichedRider:
        if isinstance(rider, EnrichedRider):
            rider = rider.rider
        if not rider.has_key:
            return EnrichedRider(rider=rider)

        fields: dict[str, Any] = {}

        vehicle = self.vehicles.get(rider.vehicle_no)
        if vehicle is not None:
            fields.update(
                vehicle_capacity=_capacity_text(vehicle),
                vehicle_status=vehicle.status,
                vehicle_resolved=True,
            )

        operator = self.operators_by_vehicle.get(rider.vehicle_no)
        if operator is not None:
            fields.update(
                operator_id=operator.operator_id,
                operator_name=operator.name,
                operator_contact=operator.contact,
                operator_license_no=operator.license_no,
                operator_resolved=True,
            )

        route = self.routes.get(rider.route_number)
        if route is not None:
            fields.update(
                resolved_route_name=route.route_name,
                route_stops=route.stops,
                route_distance=route.distance,
                route_avg_time=route.avg_time,
                route_resolved=True,
            )

        return EnrichedRider(rider=rider, **fields)

    def resolve_operator(self, operator: Operator | EnrichedOperator) -> EnrichedOperator:
        if isinstance(operator, EnrichedOperator):
            operator = operator.operator
        if not operator.has_key:
            return EnrichedOperator(operator=operator)

        fields: dict[str, Any] = {}

        vehicle = self.vehicles.get(operator.vehicle_no)
        if vehicle is not None:
            fields.update(
                vehicle_capacity=_capacity_text(vehicle),
                vehicle_route_name=vehicle.route_name,
                vehicle_route_number=vehicle.route_number,
                vehicle_status=vehicle.status,
                vehicle_resolved=True,
            )

        # An operator's route field holds the route number it drives.
        route = self.routes.get(operator.route)
        if route is not None:
            fields.update(
                resolved_route_name=route.route_name,
                route_stops=route.stops,
                route_distance=route.distance,
                route_avg_time=route.avg_time,
                route_resolved=True,
            )

        return EnrichedOperator(operator=operator, **fields)


def resolve(
    rider: Rider | EnrichedRider,
    operators: Iterable[Operator],
    vehicles: Iterable[Vehicle],
    routes: Iterable[Route],
) -> EnrichedRider:
    """Resolve one rider against separately fetched reference collections."""
    return ReferenceIndex.build(operators, vehicles, routes).resolve_rider(rider)


def resolve_operator(
    operator: Operator | EnrichedOperator,
    vehicles: Iterable[Vehicle],
    routes: Iterable[Route],
) -> EnrichedOperator:
    """Resolve one operator against separately fetched reference collections."""
    return ReferenceIndex.build((), vehicles, routes).resolve_operator(operator)
