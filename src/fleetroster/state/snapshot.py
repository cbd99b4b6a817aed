"""Reconciled roster snapshot."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from fleetroster.models.enriched import EnrichedOperator, EnrichedRider
from fleetroster.models.load import LoadRecord
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider
from fleetroster.models.route import Route
from fleetroster.models.vehicle import Vehicle
from fleetroster.models.warning import RosterWarning


class RosterSnapshot(BaseModel):
    """The complete, internally consistent output of one reconciliation pass.

    Never mutated: a new pass produces a new snapshot.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sequence: int = 0
    """Ticket of the pass that produced the snapshot; 0 for the empty snapshot."""
    reconciled_at: datetime | None = None

    riders: tuple[Rider, ...] = ()
    operators: tuple[Operator, ...] = ()
    vehicles: tuple[Vehicle, ...] = ()
    routes: tuple[Route, ...] = ()

    enriched_riders: tuple[EnrichedRider, ...] = ()
    enriched_operators: tuple[EnrichedOperator, ...] = ()
    load_records: tuple[LoadRecord, ...] = ()

    warnings: tuple[RosterWarning, ...] = ()

    @classmethod
    def empty(cls) -> RosterSnapshot:
        return cls()

    @property
    def is_reconciled(self) -> bool:
        return self.reconciled_at is not None
