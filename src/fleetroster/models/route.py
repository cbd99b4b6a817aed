"""Route model."""

from __future__ import annotations

from typing import ClassVar

from pydantic import AliasChoices, Field

from fleetroster._constants import NOT_AVAILABLE, ROUTE_LABELS
from fleetroster.models._base import RosterBaseModel


class Route(RosterBaseModel):
    _KEY_FIELD: ClassVar[str] = "route_number"
    _LABELS: ClassVar[dict[str, str]] = ROUTE_LABELS

    route_number: str = Field(
        default=NOT_AVAILABLE,
        validation_alias=AliasChoices("Route Number", "route_number", "routeNumber"),
    )
    route_name: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Route Name", "route_name", "routeName"))
    stops: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Stops", "stops"))
    """Ordered stop list, kept as the store's free text."""
    distance: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Distance", "distance"))
    avg_time: str = Field(default=NOT_AVAILABLE, validation_alias=AliasChoices("Avg Time", "avg_time", "avgTime"))
