"""Denormalized rider and operator views."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from fleetroster._constants import NOT_AVAILABLE
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider


class EnrichedRider(BaseModel):
    """A rider with its operator, vehicle, and route context attached.

    Every context field holds :data:`~fleetroster._constants.NOT_AVAILABLE`
    when the rider's reference does not resolve.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rider: Rider

    operator_id: str = NOT_AVAILABLE
    operator_name: str = NOT_AVAILABLE
    operator_contact: str = NOT_AVAILABLE
    operator_license_no: str = NOT_AVAILABLE

    vehicle_capacity: str = NOT_AVAILABLE
    vehicle_status: str = NOT_AVAILABLE

    resolved_route_name: str = NOT_AVAILABLE
    route_stops: str = NOT_AVAILABLE
    route_distance: str = NOT_AVAILABLE
    route_avg_time: str = NOT_AVAILABLE

    vehicle_resolved: bool = False
    route_resolved: bool = False
    operator_resolved: bool = False

    def to_row(self) -> dict[str, Any]:
        row = self.rider.to_row()
        row.update(self.model_dump(mode="json", exclude={"rider"}))
        return row


class EnrichedOperator(BaseModel):
    """An operator with its vehicle and route context attached."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    operator: Operator

    vehicle_capacity: str = NOT_AVAILABLE
    vehicle_route_name: str = NOT_AVAILABLE
    vehicle_route_number: str = NOT_AVAILABLE
    vehicle_status: str = NOT_AVAILABLE

    resolved_route_name: str = NOT_AVAILABLE
    route_stops: str = NOT_AVAILABLE
    route_distance: str = NOT_AVAILABLE
    route_avg_time: str = NOT_AVAILABLE

    vehicle_resolved: bool = False
    route_resolved: bool = False

    def to_row(self) -> dict[str, Any]:
        row = self.operator.to_row()
        row.update(self.model_dump(mode="json", exclude={"operator"}))
        return row
