"""Shared fixtures for resourcekit tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from resourcekit import Model, TransportAdapter
from resourcekit.config import get_settings


@pytest.fixture
def mock_adapter(monkeypatch):
    """A TransportAdapter mock installed as the adapter for every model."""
    adapter = MagicMock(spec=TransportAdapter)
    adapter.get = AsyncMock()
    adapter.post = AsyncMock()
    adapter.put = AsyncMock()
    adapter.patch = AsyncMock()
    adapter.delete = AsyncMock()
    monkeypatch.setattr(Model, "adapter", adapter)
    return adapter


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
