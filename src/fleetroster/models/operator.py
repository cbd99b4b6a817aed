"""Operator (driver) model."""

from __future__ import annotations

from typing import ClassVar

from pydantic import AliasChoices, Field

from fleetroster._constants import NOT_AVAILABLE, OPERATOR_LABELS
from fleetroster.models._base import RosterBaseModel


class Operator(RosterBaseModel):
    """A vehicle operator.

    ``route`` holds the route number the operator drives.
    """

    _KEY_FIELD: ClassVar[str] = "operator_id"
    _LABELS: ClassVar[dict[str, str]] = OPERATOR_LABELS

    operator_id: str = Field(
        default=NOT_AVAILABLE,
        validation_alias=AliasChoices("Driver ID", "operator_id", "driverId", "Operator ID"),
    )
    name: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Name", "name"))
    contact: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Contact", "contact"))
    vehicle_no: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Bus No", "vehicle_no", "busNo"))
    route: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Route", "route"))
    license_no: str = Field(
        default=NOT_AVAILABLE,
        validation_alias=AliasChoices("License No", "license_no", "licenseNo"),
    )
