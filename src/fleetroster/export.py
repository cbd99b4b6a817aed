"""Delimited-text export of roster collections."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Mapping
from typing import Any


def _as_row(record: Any) -> Mapping[str, Any]:
    to_row = getattr(record, "to_row", None)
    if callable(to_row):
        row: Mapping[str, Any] = to_row()
        return row
    if isinstance(record, Mapping):
        return record
    raise TypeError(f"cannot export {type(record).__name__}; expected a mapping or a roster model")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def export_csv(records: Iterable[Any], name: str, *, delimiter: str = ",") -> tuple[str, str]:
    """Serialize *records* as delimited text.

    The header row is the first record's field names, in order; every row
    follows that order. Fields a later record lacks are written empty and
    fields it adds are dropped. An empty collection gives empty text.

    Returns
    -------
    tuple[str, str]
        ``(f"{name}.csv", text)``.
    """
    rows = [_as_row(record) for record in records]
    filename = f"{name}.csv"
    if not rows:
        return filename, ""

    header = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(row.get(column)) for column in header])
    return filename, buffer.getvalue()
