"""Masking of roster payloads for request tracing.

Operator records carry a phone number and a licence number; neither
belongs in a DEBUG log. Cells are masked when their column is one of the
personal fields below, whether the payload uses the store's header label
(``"Contact"``) or the canonical field name (``contact``). Credential
keys are masked as well in case an envelope echoes them back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fleetroster._constants import NOT_AVAILABLE, OPERATOR_LABELS

PERSONAL_FIELDS: tuple[str, ...] = ("contact", "license_no")

MASK = "<redacted>"


def _fold(key: object) -> str:
    return "".join(ch for ch in str(key).lower() if ch.isalnum())


_CREDENTIAL_KEYS = frozenset({"authorization", "token", "apitoken", "cookie", "password"})
_MASKED_COLUMNS = frozenset(
    {_fold(name) for name in PERSONAL_FIELDS} | {_fold(OPERATOR_LABELS[name]) for name in PERSONAL_FIELDS}
) | _CREDENTIAL_KEYS


def is_masked_column(key: object) -> bool:
    """True if values under *key* are never logged."""
    return _fold(key) in _MASKED_COLUMNS


def _mask_cell(value: Any) -> Any:
    # An empty or sentinel cell reveals nothing; keep it so traces stay readable.
    if value is None or value == "" or value == NOT_AVAILABLE:
        return value
    return MASK


def redact_payload(payload: Any, *, max_cell: int = 512) -> Any:
    """Copy of a decoded JSON payload with personal cells masked.

    Strings longer than *max_cell* are cut short. Anything that is not
    plain JSON data is logged by its ``repr``.
    """
    if isinstance(payload, Mapping):
        return {
            str(key): _mask_cell(value) if is_masked_column(key) else redact_payload(value, max_cell=max_cell)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple)):
        return [redact_payload(item, max_cell=max_cell) for item in payload]
    if isinstance(payload, str):
        if len(payload) <= max_cell:
            return payload
        return f"{payload[:max_cell]}...({len(payload)} chars)"
    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    return repr(payload)
