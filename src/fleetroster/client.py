"""High-level async client: reconciliation pipeline and write-through."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import aiohttp
from pydantic import ValidationError

from fleetroster._constants import NOT_AVAILABLE, REQUIRED_FIELDS
from fleetroster._transport import HttpTransport, Transport, record_path
from fleetroster.analysis.load import analyze_load
from fleetroster.analysis.queries import FleetSummary, find_operator, find_rider, summarize
from fleetroster.analysis.resolver import ReferenceIndex
from fleetroster.config import RosterConfig, SourceEndpoint
from fleetroster.exceptions import RosterError, WriteRejectedError
from fleetroster.ingestion.shards import merge_shards, normalize_source
from fleetroster.ingestion.source import fetch_source
from fleetroster.models._base import EntityKind, RosterBaseModel
from fleetroster.models.enriched import EnrichedOperator, EnrichedRider
from fleetroster.models.operator import Operator
from fleetroster.models.rider import Rider
from fleetroster.models.route import Route
from fleetroster.models.vehicle import Vehicle
from fleetroster.state.snapshot import RosterSnapshot
from fleetroster.state.store import RosterView, SnapshotStore

_logger = logging.getLogger(__name__)

_MODELS: dict[EntityKind, type[RosterBaseModel]] = {
    EntityKind.RIDER: Rider,
    EntityKind.OPERATOR: Operator,
    EntityKind.VEHICLE: Vehicle,
    EntityKind.ROUTE: Route,
}

_WRITABLE: frozenset[EntityKind] = frozenset({EntityKind.RIDER, EntityKind.OPERATOR, EntityKind.VEHICLE})


@dataclass(frozen=True, slots=True)
class SubmitResult:
    """Outcome of a write-through call. Failures never touch the store."""

    ok: bool
    entity: str
    message: str = ""
    record: RosterBaseModel | None = None


class RosterClient:
    """Async client for the fleet roster stores.

    Usage::

        async with RosterClient(config) as client:
            snapshot = await client.reconcile()
            view = client.get_snapshot()
    """

    def __init__(
        self,
        config: RosterConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        store: SnapshotStore | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport
        self._store = store if store is not None else SnapshotStore()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RosterClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RosterError("Client not initialized. Use 'async with RosterClient(...) as client:'")
        return self._transport

    @property
    def config(self) -> RosterConfig:
        return self._config

    @property
    def store(self) -> SnapshotStore:
        return self._store

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    async def reconcile(self) -> RosterSnapshot:
        """Run one full pass: fetch all stores, merge, resolve, analyze, swap.

        Every store is fetched concurrently and the pass waits for all of
        them. Failed stores become warnings; the pass itself does not raise.
        If the caller abandons the pass, the store keeps its previous snapshot.
        """
        transport = self._require_transport()
        ticket = self._store.begin_pass()
        config = self._config

        shard_count = len(config.rider_shards)
        results = await asyncio.gather(*(fetch_source(transport, source) for source in config.sources()))
        operator_result, vehicle_result, route_result = results[shard_count:]

        riders = merge_shards(results[:shard_count])
        operators = normalize_source(operator_result, Operator)
        vehicles = normalize_source(vehicle_result, Vehicle)
        routes = normalize_source(route_result, Route)

        index = ReferenceIndex.build(operators.records, vehicles.records, routes.records)
        snapshot = RosterSnapshot(
            sequence=ticket,
            reconciled_at=self._store.now(),
            riders=riders.records,
            operators=operators.records,
            vehicles=vehicles.records,
            routes=routes.records,
            enriched_riders=tuple(index.resolve_rider(rider) for rider in riders.records),
            enriched_operators=tuple(index.resolve_operator(operator) for operator in operators.records),
            load_records=analyze_load(riders.records, vehicles.records, config.thresholds),
            warnings=(*riders.warnings, *operators.warnings, *vehicles.warnings, *routes.warnings),
        )

        if self._store.replace(snapshot):
            _logger.info(
                "Reconciled pass %d: %d riders, %d operators, %d vehicles, %d routes, %d warnings",
                ticket,
                len(snapshot.riders),
                len(snapshot.operators),
                len(snapshot.vehicles),
                len(snapshot.routes),
                len(snapshot.warnings),
            )
        return snapshot

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_snapshot(self) -> RosterView:
        """Latest reconciled snapshot plus pending submissions."""
        return self._store.view()

    def summary(self) -> FleetSummary:
        snapshot = self._store.snapshot
        return summarize(snapshot.riders, snapshot.operators, snapshot.vehicles, snapshot.load_records)

    def rider_view(self, roll_no: str) -> EnrichedRider | None:
        """Resolved view of the rider with *roll_no* (first shard in priority order)."""
        snapshot = self._store.snapshot
        rider = find_rider(snapshot.riders, roll_no)
        if rider is None:
            return None
        return ReferenceIndex.build(snapshot.operators, snapshot.vehicles, snapshot.routes).resolve_rider(rider)

    def operator_view(self, operator_id: str) -> EnrichedOperator | None:
        snapshot = self._store.snapshot
        operator = find_operator(snapshot.operators, operator_id)
        if operator is None:
            return None
        return ReferenceIndex.build((), snapshot.vehicles, snapshot.routes).resolve_operator(operator)

    # ------------------------------------------------------------------
    # Write-through
    # ------------------------------------------------------------------

    def _target_for(self, entity: EntityKind, record: RosterBaseModel) -> SourceEndpoint:
        if isinstance(record, Rider):
            return self._config.rider_shard_for(record.department)
        return self._config.source_for(entity)

    async def submit_new(self, entity: EntityKind | str, record: Mapping[str, Any] | RosterBaseModel) -> SubmitResult:
        """Write a new record through to its store.

        On success the record is held as pending until the next
        reconciliation pass; call :meth:`reconcile` afterwards. On failure
        nothing changes locally and nothing is retried.
        """
        try:
            kind = EntityKind(entity)
        except ValueError:
            return SubmitResult(ok=False, entity=str(entity), message=f"unknown entity kind {entity!r}")
        if kind not in _WRITABLE:
            return SubmitResult(ok=False, entity=kind, message=f"{kind} records cannot be submitted")

        model_cls = _MODELS[kind]
        if isinstance(record, RosterBaseModel):
            if not isinstance(record, model_cls):
                return SubmitResult(
                    ok=False,
                    entity=kind,
                    message=f"expected {model_cls.__name__}, got {type(record).__name__}",
                )
            model = record
        else:
            try:
                model = model_cls.from_store_record(record)
            except ValidationError as exc:
                return SubmitResult(ok=False, entity=kind, message=f"invalid record: {exc.error_count()} error(s)")

        missing = [
            model_cls.label_for(name)
            for name in REQUIRED_FIELDS[kind]
            if getattr(model, name) in (None, NOT_AVAILABLE)
        ]
        if missing:
            return SubmitResult(ok=False, entity=kind, message=f"missing required fields: {', '.join(missing)}")

        endpoint = self._target_for(kind, model)
        model = model.model_copy(update={"source_id": endpoint.source_id})
        transport = self._require_transport()
        try:
            await transport.post_json(endpoint, {"data": [model.to_store_record()]})
        except WriteRejectedError as exc:
            _logger.warning("Submission of %s %s rejected: %s", kind, model.key, exc)
            return SubmitResult(ok=False, entity=kind, message=str(exc))
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Submission of %s %s failed unexpectedly", kind, model.key, exc_info=True)
            return SubmitResult(ok=False, entity=kind, message=f"{type(exc).__name__}: {exc}")

        pending = self._store.add_pending(kind, model)
        _logger.info("Submitted %s %s to %s", kind, model.key, endpoint.source_id)
        return SubmitResult(ok=True, entity=kind, record=pending.record)

    async def update_record(
        self,
        entity: EntityKind | str,
        key: str,
        fields: Mapping[str, Any],
        *,
        source_id: str | None = None,
    ) -> SubmitResult:
        """Partially update the record whose natural key is *key*.

        Field names may be canonical (``vehicle_no``) or store labels
        (``"Bus No"``). Riders are updated in their home shard: *source_id*
        if given, else the shard the current snapshot read them from, else
        the default shard. The local snapshot is left alone; the next
        reconciliation pass picks the change up.
        """
        try:
            kind = EntityKind(entity)
        except ValueError:
            return SubmitResult(ok=False, entity=str(entity), message=f"unknown entity kind {entity!r}")
        if kind not in _WRITABLE:
            return SubmitResult(ok=False, entity=kind, message=f"{kind} records cannot be updated")
        if not key or not key.strip():
            return SubmitResult(ok=False, entity=kind, message="a record key is required")
        if not fields:
            return SubmitResult(ok=False, entity=kind, message="no fields to update")

        model_cls = _MODELS[kind]
        data: dict[str, str] = {}
        for name, value in fields.items():
            label = model_cls.label_for(name) if name in model_cls.model_fields else name
            # None clears the cell rather than writing the text "None".
            data[label] = "" if value is None else str(value)

        if kind is EntityKind.RIDER:
            endpoint = self._rider_home_shard(key.strip(), source_id)
        else:
            endpoint = self._config.source_for(kind)

        transport = self._require_transport()
        try:
            await transport.patch_json(endpoint, record_path(model_cls.key_label(), key.strip()), {"data": data})
        except WriteRejectedError as exc:
            _logger.warning("Update of %s %s rejected: %s", kind, key, exc)
            return SubmitResult(ok=False, entity=kind, message=str(exc))
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Update of %s %s failed unexpectedly", kind, key, exc_info=True)
            return SubmitResult(ok=False, entity=kind, message=f"{type(exc).__name__}: {exc}")

        _logger.info("Updated %s %s in %s", kind, key, endpoint.source_id)
        return SubmitResult(ok=True, entity=kind)

    def _rider_home_shard(self, roll_no: str, source_id: str | None) -> SourceEndpoint:
        if source_id is None:
            rider = find_rider(self._store.snapshot.riders, roll_no)
            if rider is not None:
                source_id = rider.source_id
        for shard in self._config.rider_shards:
            if shard.source_id == source_id:
                return shard
        return self._config.rider_shard_for(None)
