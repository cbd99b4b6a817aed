"""Vehicle model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import AliasChoices, Field, field_validator

from fleetroster._constants import DEFAULT_CAPACITY, NOT_AVAILABLE, VEHICLE_LABELS
from fleetroster.ingestion.normalize import positive_int_or_none
from fleetroster.models._base import RosterBaseModel


class VehicleStatus(StrEnum):
    """Known operational states.

    Free-text statuses the stores send resolve to ``UNKNOWN`` instead of
    raising ``ValueError``.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> VehicleStatus:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.UNKNOWN


class Vehicle(RosterBaseModel):
    """A fleet vehicle.

    ``capacity`` is ``None`` when the store has no usable (positive,
    parsable) capacity; :meth:`effective_capacity` applies the fleet default.
    ``operator_assigned`` is a back-reference to an operator by key.
    """

    _KEY_FIELD: ClassVar[str] = "vehicle_no"
    _LABELS: ClassVar[dict[str, str]] = VEHICLE_LABELS

    vehicle_no: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Bus No", "vehicle_no", "busNo"))
    capacity: int | None = Field(default=None, validation_alias=AliasChoices("Capacity", "capacity"))
    route_name: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Route Name", "route_name", "routeName"))
    route_number: str = Field(
        default=NOT_AVAILABLE,
        validation_alias=AliasChoices("Route Number", "route_number", "routeNumber"),
    )
    operator_assigned: str = Field(
        default=NOT_AVAILABLE,
        validation_alias=AliasChoices("Driver Assigned", "operator_assigned", "driverAssigned"),
    )
    status: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Status", "status"))
    """Status text as sent by the store; see :attr:`status_kind`."""

    @field_validator("capacity", mode="before")
    @classmethod
    def _parse_capacity(cls, value: Any) -> int | None:
        return positive_int_or_none(value)

    @property
    def status_kind(self) -> VehicleStatus:
        return VehicleStatus(self.status)

    def effective_capacity(self, default: int = DEFAULT_CAPACITY) -> int:
        return self.capacity if self.capacity is not None and self.capacity > 0 else default
