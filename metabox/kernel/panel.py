"""
Metabox Kernel — Panel Controller

Sits between the pure functions (renderer, codec) and the outside world
(host lifecycle, request payload, metadata storage). Coordinates the two
passes of a panel's life:

  display — read stored values, render one table row per field
  save    — check eligibility, decide per field, apply to storage

This is where IO happens. The renderer and codec are pure.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from metabox.kernel.codec import decide, serialized_writes, submitted_value
from metabox.kernel.hooks import ADD_META_BOXES, SAVE_POST, LifecycleRegistrar, SaveRequest
from metabox.kernel.registry import FieldRegistry
from metabox.kernel.renderer import render_panel, transmitted_name
from metabox.kernel.security import SaveEligibility
from metabox.kernel.storage import ContentId, MetaStorage
from metabox.kernel.types import (
    Decision,
    Delete,
    FieldDefinition,
    NoOp,
    PanelConfig,
    Persist,
    SaveResult,
    StorageMode,
)

logger = logging.getLogger(__name__)


class MetaBox:
    """
    One panel on the edit screens of the configured content types.

    Collaborators are injected: the registrar that fires lifecycle events,
    the metadata storage, and the eligibility check for saves.
    """

    def __init__(
        self,
        config: PanelConfig,
        registrar: LifecycleRegistrar,
        storage: MetaStorage,
        eligibility: SaveEligibility | None = None,
        fields: FieldRegistry | None = None,
    ) -> None:
        self.config = config
        self.registrar = registrar
        self.storage = storage
        self.eligibility = eligibility or SaveEligibility()
        self.fields = fields if fields is not None else FieldRegistry()

    # -- setup --------------------------------------------------------------

    def register(self) -> MetaBox:
        """Subscribe to the host's edit-screen and save events."""
        self.registrar.add_action(ADD_META_BOXES, self.add_meta_boxes)
        self.registrar.add_action(SAVE_POST, self.save)
        return self

    def add_meta_boxes(self, *_: Any) -> None:
        for screen in self.config.screens:
            self.registrar.add_meta_box(
                self.config.id,
                self.config.title,
                self.display,
                screen,
                self.config.context,
                self.config.priority,
            )

    def add_text_field(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
        default: Any = "",
    ) -> FieldDefinition:
        return self.fields.add_text(name, attributes, label, default)

    def add_text_area_field(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
        default: Any = "",
    ) -> FieldDefinition:
        return self.fields.add_text_area(name, attributes, label, default)

    def add_select_field(
        self,
        name: str,
        options: Mapping[Any, str],
        multiple: bool = False,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
        save_default: bool = True,
    ) -> FieldDefinition:
        return self.fields.add_select(name, options, multiple, attributes, label, save_default)

    def add_checkbox_field(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
        label: str = "",
    ) -> FieldDefinition:
        return self.fields.add_checkbox(name, attributes, label)

    # -- display ------------------------------------------------------------

    def display(self, content_id: ContentId) -> str:
        """Render the panel for one content item."""
        rows: list[tuple[FieldDefinition, Mapping[str, Any]]] = []
        for fdef in self.fields:
            rows.append((fdef, self._stored_view(content_id, fdef)))

        token = self.eligibility.token_for(content_id)
        nonce = (self.config.nonce_field, token) if token else None
        return render_panel(rows, self.config.meta_name, nonce)

    def _stored_view(self, content_id: ContentId, fdef: FieldDefinition) -> Mapping[str, Any]:
        if self.config.storage_mode is StorageMode.SERIALIZE:
            composite = self.storage.get(content_id, self.config.meta_name)
            return composite if isinstance(composite, Mapping) else {}
        return {fdef.name: self.storage.get(content_id, fdef.name)}

    # -- save ---------------------------------------------------------------

    def save(self, content_id: ContentId, request: SaveRequest, is_update: bool = True) -> SaveResult:
        """
        Persist submitted values for every field.
        An ineligible request, or one whose form never drew this panel,
        skips the whole pass and touches nothing.
        """
        reason = self.eligibility.rejection(content_id, request, self.config.nonce_field)
        if reason is None and not self.eligibility.allows(content_id, request, self.config.nonce_field):
            reason = "ineligible"
        if reason is not None:
            logger.info("metabox %s: save skipped for %s (%s)", self.config.id, content_id, reason)
            return SaveResult(skipped=True, reason=reason)

        if not self._carries_panel(request):
            logger.info("metabox %s: save skipped for %s (no_payload)", self.config.id, content_id)
            return SaveResult(skipped=True, reason="no_payload")

        result = SaveResult()
        for fdef in self.fields:
            name = transmitted_name(fdef, self.config.meta_name)
            raw = request.payload.lookup(name)
            submitted = submitted_value(fdef, raw)

            if self.config.storage_mode is StorageMode.SERIALIZE:
                self._save_serialized(content_id, fdef, submitted, result)
                continue

            old = self.storage.get(content_id, fdef.name)
            decision = decide(fdef, old, submitted, is_update, key_present=name in request.payload)
            self._apply(content_id, fdef.name, decision, result)

        return result

    def _carries_panel(self, request: SaveRequest) -> bool:
        """Did the submitted form include any of this panel's controls?"""
        meta_name = self.config.meta_name
        return any(name == meta_name or name.startswith(meta_name + "[") for name in request.payload)

    def _save_serialized(
        self,
        content_id: ContentId,
        fdef: FieldDefinition,
        submitted: Any,
        result: SaveResult,
    ) -> None:
        key = self.config.meta_name
        composite = self.storage.get(content_id, key)
        for write in serialized_writes(fdef, composite, submitted):
            self._apply(content_id, key, Persist(write), result)

    def _apply(self, content_id: ContentId, key: str, decision: Decision, result: SaveResult) -> None:
        logger.debug("metabox %s: %s %s -> %s", self.config.id, content_id, key, decision)
        if isinstance(decision, Persist):
            self.storage.set(content_id, key, decision.value)
        elif isinstance(decision, Delete):
            self.storage.delete(content_id, key)
        elif isinstance(decision, NoOp):
            return
        result.actions.append((key, decision))
