"""
Metabox Kernel — Host Lifecycle and Request Contracts

The host fires two events a panel cares about: "add_meta_boxes" when an
edit screen is assembled, and "save_post" when a content item is saved.
HookRegistry is an in-process registrar for hosts without their own hook
system, and for tests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from metabox.kernel.codec import ABSENT

ADD_META_BOXES = "add_meta_boxes"
SAVE_POST = "save_post"


# ---------------------------------------------------------------------------
# Lifecycle registrar
# ---------------------------------------------------------------------------


class LifecycleRegistrar:
    """Abstract registrar interface."""

    def add_action(self, hook: str, callback: Callable[..., Any]) -> None:
        """Subscribe a callback to a lifecycle event."""
        raise NotImplementedError

    def add_meta_box(
        self,
        box_id: str,
        title: str,
        callback: Callable[..., str],
        screen: str,
        context: str,
        priority: str,
    ) -> None:
        """Attach a panel to the edit screen of one content type."""
        raise NotImplementedError


@dataclass
class MetaBoxEntry:
    box_id: str
    title: str
    callback: Callable[..., str]
    screen: str
    context: str
    priority: str


class HookRegistry(LifecycleRegistrar):
    """Records subscriptions and fires them in registration order."""

    def __init__(self) -> None:
        self.actions: dict[str, list[Callable[..., Any]]] = {}
        self.meta_boxes: list[MetaBoxEntry] = []

    def add_action(self, hook: str, callback: Callable[..., Any]) -> None:
        self.actions.setdefault(hook, []).append(callback)

    def add_meta_box(
        self,
        box_id: str,
        title: str,
        callback: Callable[..., str],
        screen: str,
        context: str,
        priority: str,
    ) -> None:
        self.meta_boxes.append(MetaBoxEntry(box_id, title, callback, screen, context, priority))

    def do_action(self, hook: str, *args: Any) -> list[Any]:
        """Fire every callback on a hook. Returns their results in order."""
        return [callback(*args) for callback in list(self.actions.get(hook, []))]

    def boxes_for(self, screen: str) -> list[MetaBoxEntry]:
        return [box for box in self.meta_boxes if box.screen == screen]


# ---------------------------------------------------------------------------
# Request payload
# ---------------------------------------------------------------------------


class FormPayload(Mapping[str, Any]):
    """
    Submitted form data keyed by transmitted name, e.g.
    {"mb_box[color]": "red", "mb_box[tags][]": ["a", "b"]}.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data = dict(data or {})

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def lookup(self, name: str) -> Any:
        """The submitted value, or ABSENT if the form did not carry it."""
        return self._data.get(name, ABSENT)


@dataclass
class SaveRequest:
    """What the host knows about the request that triggered a save."""

    payload: FormPayload = field(default_factory=FormPayload)
    is_autosave: bool = False
    is_revision: bool = False
