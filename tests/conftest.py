"""
Shared fixtures for the places proxy test suite.
"""

from __future__ import annotations

import pytest

from app.config import AppSettings, ConnectionParams, ExecutionLogSettings, PlacesAPISettings
from fakes import BASE_URL, RecordingStore


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(
        database=ConnectionParams(
            username="places",
            password="secret",
            host="localhost",
            port=5432,
            db_name="places",
        ),
        places_api=PlacesAPISettings(base_url=BASE_URL, start_page=1, timeout_seconds=3.0),
        execution_log=ExecutionLogSettings(queue_size=10),
    )


@pytest.fixture()
def recording_store() -> RecordingStore:
    return RecordingStore()
