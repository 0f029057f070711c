"""
Metabox Kernel — Shared Types

Data classes used across registry, renderer, codec, and panel.
These are the contracts that bind the kernel together.

- Field definitions are a closed tagged union over FieldKind.
  `options` and `multiple` exist only on SelectField.
- Decisions (Persist / Delete / NoOp) are what the codec hands back to the
  panel; the panel is the only place that talks to storage.
- PanelConfig is validated once at construction and never mutated.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Union

from pydantic import BaseModel, Field

from metabox.config import settings

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FieldKind(str, Enum):
    TEXT = "text"
    TEXT_AREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"


class StorageMode(str, Enum):
    FLAT = "flat"  # one record per field name
    SERIALIZE = "serialize"  # one composite record per panel


# ---------------------------------------------------------------------------
# Field definitions
# ---------------------------------------------------------------------------


def _frozen_mapping(value: Any) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        return MappingProxyType({})
    return MappingProxyType(dict(value))


@dataclass(frozen=True, kw_only=True)
class FieldDefinition:
    """
    One form field of a panel.

    The base class carries no kind and renders nothing. Concrete kinds are
    the subclasses below.
    """

    kind: ClassVar[FieldKind | None] = None

    name: str
    label: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)
    default: Any = ""
    save_default_on_equality: bool = False

    def __post_init__(self) -> None:
        attrs = {str(k): str(v) for k, v in _frozen_mapping(self.attributes).items()}
        object.__setattr__(self, "attributes", MappingProxyType(attrs))


@dataclass(frozen=True, kw_only=True)
class TextField(FieldDefinition):
    kind: ClassVar[FieldKind] = FieldKind.TEXT


@dataclass(frozen=True, kw_only=True)
class TextAreaField(FieldDefinition):
    kind: ClassVar[FieldKind] = FieldKind.TEXT_AREA


@dataclass(frozen=True, kw_only=True)
class CheckboxField(FieldDefinition):
    kind: ClassVar[FieldKind] = FieldKind.CHECKBOX


@dataclass(frozen=True, kw_only=True)
class SelectField(FieldDefinition):
    """
    A select control.
    `default` is always the first option key ("" with no options).
    With `multiple`, the stored value is a list of keys.
    """

    kind: ClassVar[FieldKind] = FieldKind.SELECT

    options: Mapping[Any, str] = field(default_factory=dict)
    multiple: bool = False
    save_default_on_equality: bool = True

    def __post_init__(self) -> None:
        super().__post_init__()
        options = _frozen_mapping(self.options)
        object.__setattr__(self, "options", options)
        object.__setattr__(self, "default", next(iter(options), ""))


def accepts_many(fdef: FieldDefinition) -> bool:
    """True if the field submits and stores a list of values."""
    return isinstance(fdef, SelectField) and fdef.multiple


# ---------------------------------------------------------------------------
# Persistence decisions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Persist:
    value: Any


@dataclass(frozen=True)
class Delete:
    pass


@dataclass(frozen=True)
class NoOp:
    pass


Decision = Union[Persist, Delete, NoOp]


@dataclass
class SaveResult:
    """
    Outcome of one save pass over a panel.
    `actions` lists (storage_key, decision) in the order they hit storage.
    """

    skipped: bool = False
    reason: str | None = None
    actions: list[tuple[str, Decision]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Panel configuration
# ---------------------------------------------------------------------------


class PanelConfig(BaseModel):
    """How and where a panel is shown, and how its values are stored."""

    model_config = {"extra": "forbid", "frozen": True}

    id: str = Field(min_length=1)
    title: str
    screens: list[str] = Field(default_factory=list)
    prefix: str = ""
    context: Literal["normal", "side", "advanced"] = settings.CONTEXT
    priority: Literal["high", "core", "default", "low"] = settings.PRIORITY
    serialize: bool = settings.SERIALIZE

    @property
    def meta_name(self) -> str:
        return f"{self.prefix}{self.id}"

    @property
    def nonce_field(self) -> str:
        return f"{self.meta_name}_nonce"

    @property
    def storage_mode(self) -> StorageMode:
        return StorageMode.SERIALIZE if self.serialize else StorageMode.FLAT


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def is_numeric(value: Any) -> bool:
    """Numbers and numeric-looking strings ("1", " -2.5", "1e3"). Booleans are not numeric."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value))
    return False


def string_form(value: Any) -> str | None:
    """
    The string a form would transmit for a scalar value.
    Returns None for collections, which have no scalar string form.
    """
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (*SEQUENCE_TYPES, Mapping)):
        return None
    return str(value)


def is_empty(value: Any) -> bool:
    """None, "" and empty collections. "0" is a value."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (*SEQUENCE_TYPES, Mapping)):
        return len(value) == 0
    return False


def loosely_equal(a: Any, b: Any) -> bool:
    """
    Equality that tolerates form transport: 1 and "1" match when both
    sides are numeric and share a string form.
    """
    if type(a) is type(b) and a == b:
        return True
    if is_numeric(a) and is_numeric(b):
        return string_form(a) == string_form(b)
    return False
