"""Shard merger: combine same-schema stores into one collection.

Riders are partitioned by organizational sub-unit, one store per unit.
Shards are merged in the caller's priority order. A failed shard
contributes zero records and exactly one warning; the other shards merge
unaffected.

Records from different shards are never deduplicated: roll numbers are
unique within a shard only. When global identity is needed, key riders by
``(source_id, roll_no)``.

The synthetic ``serial_no`` given to rows without a serial column is their
1-based position in the merged collection, so it depends on shard order.
The set of accepted records does not.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import ValidationError

from fleetroster._constants import NOT_AVAILABLE
from fleetroster.exceptions import MalformedRecordError
from fleetroster.ingestion.source import FetchResult, RawRecord, SourceFailure
from fleetroster.models._base import RecordState, RosterBaseModel
from fleetroster.models.rider import Rider
from fleetroster.models.warning import RosterWarning, WarningKind

_logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=RosterBaseModel)


@dataclass(frozen=True, slots=True)
class MergeResult(Generic[TModel]):
    records: tuple[TModel, ...]
    warnings: tuple[RosterWarning, ...]


def _unavailable(failure: SourceFailure) -> RosterWarning:
    return RosterWarning(
        kind=WarningKind.SOURCE_UNAVAILABLE,
        source_id=failure.source.source_id,
        message=failure.cause,
    )


def _malformed(exc: MalformedRecordError) -> RosterWarning:
    return RosterWarning(kind=WarningKind.MALFORMED_RECORD, source_id=exc.source_id, message=str(exc))


def normalize_record(model: type[TModel], raw: RawRecord, *, source_id: str, index: int) -> TModel:
    """Validate one raw record into *model*.

    Raises
    ------
    MalformedRecordError
        If the record cannot be represented at all.
    """
    try:
        record = model.from_store_record(raw)
    except ValidationError as exc:
        raise MalformedRecordError(
            f"record {index} rejected: {exc.error_count()} invalid field(s)",
            source_id=source_id,
            entity=model.__name__.lower(),
            index=index,
        ) from exc
    return record.model_copy(update={"source_id": source_id, "record_state": RecordState.CONFIRMED})


def _check_key(record: RosterBaseModel, *, source_id: str, index: int) -> None:
    if not record.has_key:
        raise MalformedRecordError(
            f"record {index} has no {record.key_label()!r}; kept unresolved",
            source_id=source_id,
            entity=type(record).__name__.lower(),
            index=index,
        )


def normalize_source(result: FetchResult, model: type[TModel]) -> MergeResult[TModel]:
    """Normalize a single (unsharded) store's records."""
    if isinstance(result, SourceFailure):
        return MergeResult(records=(), warnings=(_unavailable(result),))

    source_id = result.source.source_id
    records: list[TModel] = []
    warnings: list[RosterWarning] = []
    for index, raw in enumerate(result.records):
        try:
            record = normalize_record(model, raw, source_id=source_id, index=index)
        except MalformedRecordError as exc:
            _logger.warning("%s: %s", source_id, exc)
            warnings.append(_malformed(exc))
            continue
        try:
            _check_key(record, source_id=source_id, index=index)
        except MalformedRecordError as exc:
            _logger.warning("%s: %s", source_id, exc)
            warnings.append(_malformed(exc))
        records.append(record)
    return MergeResult(records=tuple(records), warnings=tuple(warnings))


def merge_shards(results: Sequence[FetchResult]) -> MergeResult[Rider]:
    """Merge rider shards, in the given order, into one rider collection."""
    merged: list[Rider] = []
    warnings: list[RosterWarning] = []

    for result in results:
        if isinstance(result, SourceFailure):
            _logger.warning("Shard %s skipped: %s", result.source.source_id, result.cause)
            warnings.append(_unavailable(result))
            continue

        shard = normalize_source(result, Rider)
        warnings.extend(shard.warnings)
        for rider in shard.records:
            if rider.serial_no == NOT_AVAILABLE:
                rider = rider.model_copy(update={"serial_no": str(len(merged) + 1)})
            merged.append(rider)

    return MergeResult(records=tuple(merged), warnings=tuple(warnings))
