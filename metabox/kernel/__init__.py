"""
Metabox Kernel — the pure engine plus its panel coordinator.

Components:
  registry  — ordered field definitions for one panel
  renderer  — (field, stored values) → HTML  (pure, deterministic)
  codec     — (field, old, submitted) → Persist / Delete / NoOp  (pure)
  panel     — coordinates renderer + codec + IO (hooks, storage)
"""

from metabox.kernel.codec import decide, serialized_writes
from metabox.kernel.hooks import FormPayload, HookRegistry, SaveRequest
from metabox.kernel.panel import MetaBox
from metabox.kernel.registry import DuplicateFieldError, FieldRegistry
from metabox.kernel.renderer import render_field, render_panel
from metabox.kernel.security import NonceEligibility, SaveEligibility
from metabox.kernel.storage import MemoryMetaStorage, MetaStorage
from metabox.kernel.types import Delete, NoOp, PanelConfig, Persist, StorageMode

__all__ = [
    "MetaBox",
    "PanelConfig",
    "StorageMode",
    "FieldRegistry",
    "DuplicateFieldError",
    "render_field",
    "render_panel",
    "decide",
    "serialized_writes",
    "Persist",
    "Delete",
    "NoOp",
    "HookRegistry",
    "FormPayload",
    "SaveRequest",
    "SaveEligibility",
    "NonceEligibility",
    "MetaStorage",
    "MemoryMetaStorage",
]
