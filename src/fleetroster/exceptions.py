"""Custom exception hierarchy for fleetroster."""

from __future__ import annotations


class RosterError(Exception):
    """Base exception for all fleetroster errors."""


class RosterConfigError(RosterError):
    """Invalid or missing configuration."""


class SourceUnavailableError(RosterError):
    """Retrieval from one record store failed (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        source_id: str = "",
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.source_id = source_id
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class MalformedRecordError(RosterError):
    """A record is missing its identifying key.

    Never raised out of a reconciliation pass: the merger converts it into
    a warning and keeps the record as an unresolved entity.
    """

    def __init__(
        self,
        message: str,
        *,
        source_id: str = "",
        entity: str = "",
        index: int | None = None,
    ) -> None:
        self.source_id = source_id
        self.entity = entity
        self.index = index
        super().__init__(message)


class WriteRejectedError(RosterError):
    """An insertion or partial-update call was rejected by the record store."""

    def __init__(
        self,
        message: str,
        *,
        entity: str = "",
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.entity = entity
        self.status_code = status_code
        self.url = url
        super().__init__(message)
