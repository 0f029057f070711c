"""
Metabox Kernel — Field Validation

Structural checks on field definitions before they join a registry.
Returns a list of problems; the registry logs them and keeps the field.
Validation is structural (will the markup be well-formed?) not semantic.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from metabox.kernel.types import FieldDefinition, SelectField

# Field names travel inside "meta_name[field_name]"
FIELD_NAME_PATTERN = re.compile(r"^[^\s\[\]\"'<>&]+$")
ATTRIBUTE_NAME_PATTERN = re.compile(r"^[^\s\"'<>/=\x00-\x1f]+$")


def validate_field(fdef: FieldDefinition, raw_options: Any = None) -> list[str]:
    """
    Validate a field definition.
    Returns a list of error strings. Empty list = valid.

    raw_options is the `options` argument as the caller passed it, so a
    non-mapping that was normalized away can still be reported.
    """
    errors: list[str] = []

    if not fdef.name:
        errors.append("Field name must not be empty")
    elif not FIELD_NAME_PATTERN.match(fdef.name):
        errors.append(f"Invalid field name: {fdef.name!r}")

    for attr in fdef.attributes:
        if not ATTRIBUTE_NAME_PATTERN.match(attr):
            errors.append(f"Invalid attribute name for '{fdef.name}': {attr!r}")

    if isinstance(fdef, SelectField):
        if raw_options is not None and not isinstance(raw_options, Mapping):
            errors.append(f"'options' for '{fdef.name}' must be a mapping, got {type(raw_options).__name__}")
        elif not fdef.options:
            errors.append(f"Select field '{fdef.name}' has no options")

    return errors
