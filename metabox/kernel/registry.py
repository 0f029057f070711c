"""
Metabox Kernel — Field Registry

Ordered collection of field definitions for one panel.
Insertion order is display order and save order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from metabox.kernel.types import (
    CheckboxField,
    FieldDefinition,
    SelectField,
    TextAreaField,
    TextField,
)
from metabox.kernel.validation import validate_field

logger = logging.getLogger(__name__)


class DuplicateFieldError(ValueError):
    """A field with this name is already registered on the panel."""
    pass


class FieldRegistry:
    def __init__(self) -> None:
        self._fields: dict[str, FieldDefinition] = {}

    # -- builder ------------------------------------------------------------

    def add_text(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
        default: Any = "",
    ) -> TextField:
        return self.add(TextField(name=name, attributes=attributes or {}, label=label, default=default))

    def add_text_area(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
        default: Any = "",
    ) -> TextAreaField:
        return self.add(TextAreaField(name=name, attributes=attributes or {}, label=label, default=default))

    def add_select(
        self,
        name: str,
        options: Mapping[Any, str],
        multiple: bool = False,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
        save_default: bool = True,
    ) -> SelectField:
        """
        Add a select field. The default is the first option key.
        save_default: whether to store a value equal to that default.
        """
        fdef = SelectField(
            name=name,
            options=options,
            multiple=bool(multiple),
            attributes=attributes or {},
            label=label,
            save_default_on_equality=bool(save_default),
        )
        return self.add(fdef, raw_options=options)

    def add_checkbox(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
    ) -> CheckboxField:
        return self.add(CheckboxField(name=name, attributes=attributes or {}, label=label))

    def add(self, fdef: FieldDefinition, raw_options: Any = None) -> Any:
        """Append a definition. Duplicate names are rejected."""
        if fdef.name in self._fields:
            raise DuplicateFieldError(f"Field already registered: {fdef.name}")

        for problem in validate_field(fdef, raw_options):
            logger.warning("metabox field %s: %s", fdef.name or "<unnamed>", problem)

        self._fields[fdef.name] = fdef
        return fdef

    # -- read access --------------------------------------------------------

    def get(self, name: str) -> FieldDefinition | None:
        return self._fields.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._fields)

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(list(self._fields.values()))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields
