"""In-memory snapshot store.

Holds one :class:`RosterSnapshot` and replaces it wholesale. Readers always
see either the previous or the next snapshot, never a mix. Locally accepted
submissions live beside the snapshot as *pending* records until a pass
that started after them completes.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from fleetroster.models._base import EntityKind, RecordState, RosterBaseModel
from fleetroster.models.load import LoadRecord
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider
from fleetroster.models.route import Route
from fleetroster.models.vehicle import Vehicle
from fleetroster.models.warning import RosterWarning
from fleetroster.state.snapshot import RosterSnapshot

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class PendingRecord:
    """A submission accepted by its store but not yet seen by a reconciliation pass."""

    entity: EntityKind
    record: RosterBaseModel
    ticket: int
    submitted_at: datetime


@dataclass(frozen=True, slots=True)
class RosterView:
    """What consumers read: the trusted snapshot plus the pending overlay.

    Confirmed and pending records are kept apart so a consumer can tell them
    from each other.
    """

    snapshot: RosterSnapshot
    pending: tuple[PendingRecord, ...] = field(default_factory=tuple)

    @property
    def riders(self) -> tuple[Rider, ...]:
        return self.snapshot.riders

    @property
    def operators(self) -> tuple[Operator, ...]:
        return self.snapshot.operators

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return self.snapshot.vehicles

    @property
    def routes(self) -> tuple[Route, ...]:
        return self.snapshot.routes

    @property
    def load_records(self) -> tuple[LoadRecord, ...]:
        return self.snapshot.load_records

    @property
    def warnings(self) -> tuple[RosterWarning, ...]:
        return self.snapshot.warnings

    def pending_of(self, entity: EntityKind) -> tuple[RosterBaseModel, ...]:
        return tuple(item.record for item in self.pending if item.entity is entity)


class SnapshotStore:
    """Process-wide holder of the latest reconciled snapshot.

    Every pass takes a ticket from :meth:`begin_pass`. :meth:`replace`
    refuses a snapshot whose ticket is older than the current one, so a
    slow pass that finishes after a newer one cannot roll the store back.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._tickets = itertools.count(1)
        self._lock = threading.Lock()
        self._snapshot = RosterSnapshot.empty()
        self._pending: tuple[PendingRecord, ...] = ()

    @property
    def snapshot(self) -> RosterSnapshot:
        return self._snapshot

    def now(self) -> datetime:
        return self._clock()

    def begin_pass(self) -> int:
        """Reserve the ticket of a new reconciliation pass."""
        with self._lock:
            return next(self._tickets)

    def replace(self, snapshot: RosterSnapshot) -> bool:
        """Swap in *snapshot*; return False if a newer pass already landed."""
        with self._lock:
            if snapshot.sequence < self._snapshot.sequence:
                _logger.debug(
                    "Discarding snapshot %d: store already holds %d",
                    snapshot.sequence,
                    self._snapshot.sequence,
                )
                return False
            self._snapshot = snapshot
            # Submissions made while the pass was in flight may be missing from it.
            self._pending = tuple(item for item in self._pending if item.ticket > snapshot.sequence)
            return True

    def add_pending(self, entity: EntityKind, record: RosterBaseModel) -> PendingRecord:
        """Record a locally accepted submission."""
        with self._lock:
            pending = PendingRecord(
                entity=entity,
                record=record.model_copy(update={"record_state": RecordState.PENDING}),
                ticket=next(self._tickets),
                submitted_at=self._clock(),
            )
            self._pending = (*self._pending, pending)
            return pending

    def pending(self, entity: EntityKind | None = None) -> tuple[PendingRecord, ...]:
        items = self._pending
        if entity is None:
            return items
        return tuple(item for item in items if item.entity is entity)

    def view(self) -> RosterView:
        with self._lock:
            return RosterView(snapshot=self._snapshot, pending=self._pending)
