"""
Metabox Kernel — Value Codec

Pure functions: (field, old stored value, submitted value) → Decision
No IO. The panel applies the decision to storage.

Flat mode: each field is its own record. A submitted value equal to the
field default (strictly, or numerically as strings) is not stored, and a
brand-new item whose form never carried the field stores nothing.

Serialize mode: all fields share one composite record keyed by field name.
A field is removed from the composite, then re-added when the trimmed
submitted value is non-empty.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from metabox.kernel.types import (
    SEQUENCE_TYPES,
    Decision,
    Delete,
    FieldDefinition,
    NoOp,
    Persist,
    StorageMode,
    accepts_many,
    is_empty,
    loosely_equal,
)

# Returned by payload lookups when the form did not carry the field at all
ABSENT: Any = object()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def decide(
    fdef: FieldDefinition,
    old: Any,
    submitted: Any,
    is_update: bool,
    *,
    key_present: bool = True,
    mode: StorageMode = StorageMode.FLAT,
) -> Decision:
    """
    Decide what to do with one field's submitted value.

    old is the field's stored value in flat mode, the panel composite in
    serialize mode. key_present says whether the submitted form carried
    the field at all.
    """
    if mode is StorageMode.SERIALIZE:
        writes = serialized_writes(fdef, old, submitted)
        return Persist(writes[-1]) if writes else NoOp()

    return _decide_flat(fdef, submitted, is_update, key_present)


def serialized_writes(fdef: FieldDefinition, composite: Any, submitted: Any) -> list[dict[str, Any]]:
    """
    The composites to write, in order, for one field in serialize mode.
    A removal write when the field was stored, then an addition write when
    there is something to store. The input composite is not modified.
    """
    current = dict(composite) if isinstance(composite, Mapping) else {}
    writes: list[dict[str, Any]] = []

    if fdef.name in current:
        del current[fdef.name]
        writes.append(dict(current))

    value = submitted.strip() if isinstance(submitted, str) else submitted
    if is_empty(value):
        return writes

    if isinstance(value, SEQUENCE_TYPES):
        value = list(value)
    current[fdef.name] = value
    writes.append(dict(current))
    return writes


def submitted_value(fdef: FieldDefinition, raw: Any) -> Any:
    """
    Normalize a raw payload lookup for a field.
    Missing values become "" (or [] for multi-value fields); a multi-value
    field always yields a list.
    """
    many = accepts_many(fdef)
    if raw is ABSENT or raw is None:
        return [] if many else ""
    if many and not isinstance(raw, SEQUENCE_TYPES):
        return [raw]
    if many:
        return list(raw)
    return raw


# ---------------------------------------------------------------------------
# Flat mode
# ---------------------------------------------------------------------------


def _decide_flat(fdef: FieldDefinition, submitted: Any, is_update: bool, key_present: bool) -> Decision:
    if fdef.save_default_on_equality:
        return Persist(submitted)

    untouched_new_item = not is_update and not key_present

    if isinstance(submitted, SEQUENCE_TYPES):
        # A list never equals a scalar default
        if untouched_new_item or not submitted:
            return Delete()
        return Persist(list(submitted))

    if loosely_equal(submitted, fdef.default) or untouched_new_item:
        return Delete()
    return Persist(submitted)
