"""Shared pytest fixtures for orchestrator and service tests."""

from __future__ import annotations

import pytest

from fakes import FakeStoreClient, RecordingRenderer
from storesearch.config import StoreSearchSettings


@pytest.fixture
def settings() -> StoreSearchSettings:
    return StoreSearchSettings(debounce_seconds=0)


@pytest.fixture
def client() -> FakeStoreClient:
    return FakeStoreClient()


@pytest.fixture
def renderers() -> dict[str, RecordingRenderer]:
    return {"table": RecordingRenderer(), "grid": RecordingRenderer()}
