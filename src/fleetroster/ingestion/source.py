"""Source client: fetch the current record set of one external store.

Every call returns a tagged result. Failures are captured with the
offending source and a readable cause; nothing raises past this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from fleetroster._transport import Transport
from fleetroster.config import SourceEndpoint
from fleetroster.exceptions import SourceUnavailableError

_logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]
"""One store row: header label -> value, exactly as received."""


@dataclass(frozen=True, slots=True)
class SourceRecords:
    """A successful retrieval."""

    source: SourceEndpoint
    records: tuple[RawRecord, ...]
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class SourceFailure:
    """A failed retrieval: the store contributes nothing to this pass."""

    source: SourceEndpoint
    cause: str
    status_code: int | None = None
    ok: Literal[False] = False


FetchResult = SourceRecords | SourceFailure


def _unwrap_payload(payload: Any) -> Any:
    # Some stores wrap the rows as {"data": [...]}.
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return payload


def parse_records(source: SourceEndpoint, payload: Any) -> FetchResult:
    """Validate the shape of a decoded payload: a list of flat objects."""
    rows = _unwrap_payload(payload)
    if not isinstance(rows, list):
        return SourceFailure(
            source=source,
            cause=f"Malformed payload from {source.source_id}: expected a list of records, got {type(rows).__name__}",
        )
    records: list[RawRecord] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            return SourceFailure(
                source=source,
                cause=f"Malformed payload from {source.source_id}: item {index} is {type(row).__name__}, not an object",
            )
        records.append({str(key): value for key, value in row.items()})
    return SourceRecords(source=source, records=tuple(records))


async def fetch_source(transport: Transport, source: SourceEndpoint) -> FetchResult:
    """Fetch every record of *source*."""
    try:
        payload = await transport.get_json(source)
    except SourceUnavailableError as exc:
        _logger.warning("Source %s unavailable: %s", source.source_id, exc)
        return SourceFailure(source=source, cause=str(exc), status_code=exc.status_code)
    except Exception as exc:  # noqa: BLE001
        _logger.warning("Source %s failed unexpectedly", source.source_id, exc_info=True)
        return SourceFailure(source=source, cause=f"{type(exc).__name__}: {exc}")

    result = parse_records(source, payload)
    if isinstance(result, SourceFailure):
        _logger.warning("%s", result.cause)
    else:
        _logger.debug("Fetched %d records from %s", len(result.records), source.source_id)
    return result
