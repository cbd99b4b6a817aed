"""Data models for roster records and analysis results."""

from fleetroster.models._base import EntityKind, RecordState, RosterBaseModel
from fleetroster.models.enriched import EnrichedOperator, EnrichedRider
from fleetroster.models.load import LoadClassification, LoadRecord, recommendation_for
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider
from fleetroster.models.route import Route
from fleetroster.models.vehicle import Vehicle, VehicleStatus
from fleetroster.models.warning import RosterWarning, WarningKind

__all__ = [
    "EnrichedOperator",
    "EnrichedRider",
    "EntityKind",
    "LoadClassification",
    "LoadRecord",
    "Operator",
    "RecordState",
    "Rider",
    "RosterBaseModel",
    "RosterWarning",
    "Route",
    "Vehicle",
    "VehicleStatus",
    "WarningKind",
    "recommendation_for",
]
