"""Rider model."""

from __future__ import annotations

from typing import ClassVar

from pydantic import AliasChoices, Field

from fleetroster._constants import NOT_AVAILABLE, RIDER_LABELS
from fleetroster.models._base import RosterBaseModel


class Rider(RosterBaseModel):
    """A rider assigned to a vehicle, read from one rider shard.

    ``roll_no`` is unique within its home shard only; riders from two
    shards may share a roll number and are never deduplicated.
    """

    _KEY_FIELD: ClassVar[str] = "roll_no"
    _LABELS: ClassVar[dict[str, str]] = RIDER_LABELS

    serial_no: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Serial No", "serial_no", "serialNo"))
    """Position in the merged roster (synthetic when the shard has no serial column)."""
    name: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Name", "name"))
    roll_no: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Roll No", "roll_no", "rollNo"))
    department: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Department", "department"))
    year: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Year", "year"))
    vehicle_no: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Bus No", "vehicle_no", "busNo"))
    route_name: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Route Name", "route_name", "routeName"))
    route_number: str = Field(
        default=NOT_AVAILABLE,
        validation_alias=AliasChoices("Route Number", "route_number", "routeNumber"),
    )

    @property
    def has_vehicle(self) -> bool:
        return self.vehicle_no != NOT_AVAILABLE
