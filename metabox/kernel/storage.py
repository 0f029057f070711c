"""
Metadata storage adapter for the metabox panel.

Key-value records scoped by content id. Last write wins.
The kernel never caches values across calls; every render and save pass
reads through this interface.
"""

from __future__ import annotations

import copy
from typing import Any, Union

ContentId = Union[int, str]


class MetaStorage:
    """
    Abstract storage interface.
    Implement against the host's metadata tables, or in-memory for tests.
    """

    def get(self, content_id: ContentId, key: str) -> Any:
        """Fetch a stored value. Returns None if not found."""
        raise NotImplementedError

    def set(self, content_id: ContentId, key: str, value: Any) -> None:
        """Create or replace a stored value."""
        raise NotImplementedError

    def delete(self, content_id: ContentId, key: str) -> None:
        """Remove a stored value. Removing a missing key is not an error."""
        raise NotImplementedError


class MemoryMetaStorage(MetaStorage):
    """
    In-memory storage for testing.
    Values are copied in and out so callers never share state with the store.
    Every write is appended to `calls` as (op, content_id, key[, value]).
    """

    def __init__(self, initial: dict[ContentId, dict[str, Any]] | None = None) -> None:
        self.records: dict[ContentId, dict[str, Any]] = copy.deepcopy(initial) if initial else {}
        self.calls: list[tuple[Any, ...]] = []

    def get(self, content_id: ContentId, key: str) -> Any:
        return copy.deepcopy(self.records.get(content_id, {}).get(key))

    def set(self, content_id: ContentId, key: str, value: Any) -> None:
        self.calls.append(("set", content_id, key, copy.deepcopy(value)))
        self.records.setdefault(content_id, {})[key] = copy.deepcopy(value)

    def delete(self, content_id: ContentId, key: str) -> None:
        self.calls.append(("delete", content_id, key))
        self.records.get(content_id, {}).pop(key, None)

    def writes(self, op: str) -> list[tuple[Any, ...]]:
        """Recorded calls of one kind ("set" or "delete")."""
        return [call for call in self.calls if call[0] == op]
