"""
Metabox Kernel — Renderer

Pure functions: (field, stored values) → HTML fragment
No IO. Deterministic: same input → same output, always.

Dispatch is by FieldKind through a table. A field whose kind has no entry
renders as an empty string. The enclosing panel table is a Mustache
template rendered with chevron; every value placed into it is escaped here
first and inserted with triple braces.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from html import escape as _html_escape
from typing import Any

import chevron

from metabox.kernel.types import (
    SEQUENCE_TYPES,
    FieldDefinition,
    FieldKind,
    SelectField,
    accepts_many,
    is_empty,
    loosely_equal,
    string_form,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

PANEL_TEMPLATE = """\
<table class="form-table">
  <tbody>
{{#rows}}
    <tr>
{{#label}}
      <th scope="row"><label for="{{{target}}}">{{{text}}}</label></th>
{{/label}}
      <td>{{{control}}}</td>
    </tr>
{{/rows}}
  </tbody>
</table>
{{#nonce}}
<input type="hidden" name="{{{name}}}" value="{{{value}}}" />
{{/nonce}}
"""


def render_field(fdef: FieldDefinition, meta: Mapping[str, Any], meta_name: str) -> str:
    """
    Render one field's control from the stored values view.
    meta maps field names to stored values (missing name = nothing stored).
    Returns "" for a field kind with no renderer.
    """
    renderer = _RENDERERS.get(fdef.kind)
    if renderer is None:
        return ""
    return renderer(fdef, meta, meta_name)


def render_panel(
    fields: list[tuple[FieldDefinition, Mapping[str, Any]]],
    meta_name: str,
    nonce: tuple[str, str] | None = None,
) -> str:
    """
    Render the panel table: one row per field, label cell only when the
    field has a label. nonce is an optional (input name, token) pair for
    the hidden anti-forgery input.
    """
    rows = []
    for fdef, meta in fields:
        label = None
        if fdef.label:
            label = {"target": escape_attr(fdef.name), "text": escape_html(fdef.label)}
        rows.append({"label": label, "control": render_field(fdef, meta, meta_name)})

    nonce_ctx = None
    if nonce is not None:
        nonce_ctx = {"name": escape_attr(nonce[0]), "value": escape_attr(nonce[1])}

    return chevron.render(PANEL_TEMPLATE, {"rows": rows, "nonce": nonce_ctx})


def transmitted_name(fdef: FieldDefinition, meta_name: str) -> str:
    """The form name a field's control submits under."""
    name = f"{meta_name}[{fdef.name}]"
    if accepts_many(fdef):
        name += "[]"
    return name


# ---------------------------------------------------------------------------
# Per-kind renderers
# ---------------------------------------------------------------------------


def _display_value(fdef: FieldDefinition, meta: Mapping[str, Any]) -> str:
    value = meta.get(fdef.name)
    if is_empty(value):
        value = fdef.default
    return string_form(value) or ""


def _render_text(fdef: FieldDefinition, meta: Mapping[str, Any], meta_name: str) -> str:
    value = _display_value(fdef, meta)
    return (
        f'<input id="{escape_attr(fdef.name)}" type="text" '
        f'name="{escape_attr(transmitted_name(fdef, meta_name))}" '
        f'value="{escape_attr(value)}"{render_attributes(fdef.attributes)} />'
    )


def _render_text_area(fdef: FieldDefinition, meta: Mapping[str, Any], meta_name: str) -> str:
    value = _display_value(fdef, meta)
    return (
        f'<textarea id="{escape_attr(fdef.name)}" '
        f'name="{escape_attr(transmitted_name(fdef, meta_name))}"'
        f"{render_attributes(fdef.attributes)}>{escape_html(value)}</textarea>"
    )


def _render_select(fdef: SelectField, meta: Mapping[str, Any], meta_name: str) -> str:
    value = meta.get(fdef.name)
    if value is None:
        value = ""

    parts = [
        f'<select id="{escape_attr(fdef.name)}" name="{escape_attr(transmitted_name(fdef, meta_name))}"'
        + (' multiple="multiple"' if fdef.multiple else "")
        + f"{render_attributes(fdef.attributes)}>"
    ]
    for key, option_label in fdef.options.items():
        selected = " selected" if option_selected(value, key, fdef.multiple) else ""
        parts.append(
            f'<option value="{escape_attr(string_form(key) or "")}"{selected}>{escape_html(option_label)}</option>'
        )
    parts.append("</select>")
    return "".join(parts)


def _render_checkbox(fdef: FieldDefinition, meta: Mapping[str, Any], meta_name: str) -> str:
    value = meta.get(fdef.name)
    checked = " checked" if isinstance(value, str) and value == "on" else ""
    return (
        f'<input id="{escape_attr(fdef.name)}" type="checkbox" '
        f'name="{escape_attr(transmitted_name(fdef, meta_name))}"{checked}'
        f"{render_attributes(fdef.attributes)} />"
    )


_RENDERERS: dict[FieldKind | None, Callable[[FieldDefinition, Mapping[str, Any], str], str]] = {
    FieldKind.TEXT: _render_text,
    FieldKind.TEXT_AREA: _render_text_area,
    FieldKind.SELECT: _render_select,
    FieldKind.CHECKBOX: _render_checkbox,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def option_selected(stored: Any, key: Any, multiple: bool = False) -> bool:
    """
    Is the option `key` selected for this stored value?
    A multiple select stores a list of keys and matches by membership. Any
    other stored value must match the key itself, with numeric strings and
    numbers compared by value.
    """
    if multiple and isinstance(stored, SEQUENCE_TYPES):
        return any(loosely_equal(item, key) for item in stored)
    return loosely_equal(stored, key)


def render_attributes(attributes: Mapping[str, str]) -> str:
    """Extra attributes as ` key="value"` pairs, in mapping order."""
    return "".join(f' {key}="{escape_attr(value)}"' for key, value in attributes.items())


def escape_attr(text: Any) -> str:
    """Escape for a double- or single-quoted attribute value."""
    return _html_escape(str(text), quote=True)


def escape_html(text: Any) -> str:
    """Escape for element body text."""
    return _html_escape(str(text), quote=False)
