"""Base model and enums for roster records.

Every roster record inherits from :class:`RosterBaseModel` which
provides:

* ``populate_by_name`` so records validate from either the store's
  header labels (``"Roll No"``) or the canonical field names.
* A ``model_validator(mode="before")`` that drops placeholder values
  (``""``, ``"--"``, ``"N/A"``, NaN) so the field default, the
  :data:`~fleetroster._constants.NOT_AVAILABLE` sentinel, is used.
* A ``raw`` dict that captures the original record.
* The identity key of the record through :attr:`key`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fleetroster._constants import NOT_AVAILABLE
from fleetroster.ingestion.normalize import clean_text, is_placeholder


class EntityKind(StrEnum):
    RIDER = "rider"
    OPERATOR = "operator"
    VEHICLE = "vehicle"
    ROUTE = "route"


class RecordState(StrEnum):
    """Whether a record came from a reconciliation pass or a local submission."""

    CONFIRMED = "confirmed"
    PENDING = "pending"


class RosterBaseModel(BaseModel):
    """Base for roster records.

    Subclasses set ``_KEY_FIELD`` to the name of their identity field and
    ``_LABELS`` to the canonical-field -> header-label map of their store.
    """

    _KEY_FIELD: ClassVar[str] = ""
    _LABELS: ClassVar[dict[str, str]] = {}
    _EXPORT_EXCLUDE: ClassVar[frozenset[str]] = frozenset({"raw"})
    _INTERNAL_FIELDS: ClassVar[frozenset[str]] = frozenset({"source_id", "record_state", "raw"})

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
    )

    source_id: str = NOT_AVAILABLE
    """Store the record was read from (or submitted to)."""
    record_state: RecordState = RecordState.CONFIRMED
    raw: dict[str, Any] = Field(default_factory=dict)
    """Original store record."""

    @model_validator(mode="before")
    @classmethod
    def _clean_record_values(cls, values: Any) -> Any:
        """Drop placeholder values, strip keys, and stash the raw record."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned: dict[str, Any] = {}
        for key, value in original.items():
            if is_placeholder(value):
                continue
            if isinstance(value, (str, float)):
                value = clean_text(value)
            cleaned[str(key).strip()] = value
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

    @classmethod
    def from_store_record(cls, record: Mapping[str, Any]) -> Self:
        """Validate a row received from a store or submitted by a caller.

        Columns named like the bookkeeping fields (``source_id``,
        ``record_state``, ``raw``) are only kept in ``raw``; the library
        sets those fields itself.
        """
        fields = {key: value for key, value in record.items() if str(key).strip() not in cls._INTERNAL_FIELDS}
        fields["raw"] = dict(record)
        return cls.model_validate(fields)

    @property
    def key(self) -> str:
        """Identity key, or the sentinel when the record has none."""
        return str(getattr(self, self._KEY_FIELD, NOT_AVAILABLE))

    @property
    def has_key(self) -> bool:
        return self.key != NOT_AVAILABLE

    @classmethod
    def key_label(cls) -> str:
        """Header label of the identity field in the store."""
        return cls._LABELS[cls._KEY_FIELD]

    @classmethod
    def label_for(cls, field_name: str) -> str:
        """Header label for *field_name*, falling back to the name itself."""
        return cls._LABELS.get(field_name, field_name)

    def to_store_record(self) -> dict[str, str]:
        """Serialize to the store's header labels for write-through."""
        record: dict[str, str] = {}
        for field_name, label in self._LABELS.items():
            value = getattr(self, field_name)
            if value is None or value == NOT_AVAILABLE:
                continue
            record[label] = str(value)
        return record

    def to_row(self) -> dict[str, Any]:
        """Flat row for tabular export."""
        return self.model_dump(mode="json", exclude=set(self._EXPORT_EXCLUDE))
