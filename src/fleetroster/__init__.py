"""fleetroster - Async fleet roster reconciliation and vehicle load analysis."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetroster")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetroster.analysis import FleetSummary, ReferenceIndex, analyze_load, classify, filter_riders, resolve
from fleetroster.client import RosterClient, SubmitResult
from fleetroster.config import LoadThresholds, RosterConfig, SourceEndpoint
from fleetroster.exceptions import (
    MalformedRecordError,
    RosterConfigError,
    RosterError,
    SourceUnavailableError,
    WriteRejectedError,
)
from fleetroster.export import export_csv
from fleetroster.models import (
    EnrichedOperator,
    EnrichedRider,
    EntityKind,
    LoadClassification,
    LoadRecord,
    Operator,
    RecordState,
    Rider,
    RosterWarning,
    Route,
    Vehicle,
    VehicleStatus,
    WarningKind,
)
from fleetroster.state.snapshot import RosterSnapshot
from fleetroster.state.store import PendingRecord, RosterView, SnapshotStore

__all__ = [
    "__version__",
    "EnrichedOperator",
    "EnrichedRider",
    "EntityKind",
    "FleetSummary",
    "LoadClassification",
    "LoadRecord",
    "LoadThresholds",
    "MalformedRecordError",
    "Operator",
    "PendingRecord",
    "RecordState",
    "ReferenceIndex",
    "Rider",
    "RosterClient",
    "RosterConfig",
    "RosterConfigError",
    "RosterError",
    "RosterSnapshot",
    "RosterView",
    "RosterWarning",
    "Route",
    "SnapshotStore",
    "SourceEndpoint",
    "SourceUnavailableError",
    "SubmitResult",
    "Vehicle",
    "VehicleStatus",
    "WarningKind",
    "WriteRejectedError",
    "analyze_load",
    "classify",
    "export_csv",
    "filter_riders",
    "resolve",
]
