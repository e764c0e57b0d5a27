"""Shared pytest fixtures for lifewire tests."""

from __future__ import annotations

import pytest

from lifewire.bean import ProductionRequest
from tests.helpers import CountingIntrospector, RecordingReferences

pytest_plugins = ["lifewire.integrations.pytest_plugin"]


@pytest.fixture()
def references() -> RecordingReferences:
    """Empty in-memory reference selector."""
    return RecordingReferences()


@pytest.fixture()
def introspector() -> CountingIntrospector:
    """Reflective introspector counting its calls."""
    return CountingIntrospector()


@pytest.fixture()
def make_request(references: RecordingReferences):
    """Build creation requests resolving through ``references``."""

    def _make_request(id_):
        return ProductionRequest(id=id_, selector=references)

    return _make_request
