"""Per-pass reconciliation warnings."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class WarningKind(StrEnum):
    SOURCE_UNAVAILABLE = "source_unavailable"
    MALFORMED_RECORD = "malformed_record"


class RosterWarning(BaseModel):
    """A degraded-coverage notice produced by a reconciliation pass.

    Callers surface these to an operator-facing channel and keep using the
    partial data.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: WarningKind
    source_id: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.source_id}: {self.message}"
