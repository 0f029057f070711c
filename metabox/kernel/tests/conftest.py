"""
Metabox kernel test configuration.

Shared builders for panels wired to in-memory collaborators.
"""

import pytest

from metabox.kernel.hooks import FormPayload, HookRegistry, SaveRequest
from metabox.kernel.panel import MetaBox
from metabox.kernel.storage import MemoryMetaStorage
from metabox.kernel.types import PanelConfig


@pytest.fixture
def make_request():
    def _make(data=None, **flags):
        return SaveRequest(payload=FormPayload(data or {}), **flags)

    return _make


@pytest.fixture
def storage():
    return MemoryMetaStorage()


@pytest.fixture
def hooks():
    return HookRegistry()


@pytest.fixture
def flat_config():
    return PanelConfig(id="details", title="Details", screens=["post"], prefix="mb_", serialize=False)


@pytest.fixture
def serialize_config():
    return PanelConfig(id="details", title="Details", screens=["post"], prefix="mb_", serialize=True)


@pytest.fixture
def flat_box(flat_config, hooks, storage):
    return MetaBox(flat_config, hooks, storage)


@pytest.fixture
def serialize_box(serialize_config, hooks, storage):
    return MetaBox(serialize_config, hooks, storage)
