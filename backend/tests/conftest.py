"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from medrecords.config import Settings
from medrecords.main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'records.db'}",
        API_PREFIX="/api",
        DEBUG=False,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ann_record():
    return {
        "patient": {"id": "p1", "name": "Ann", "age": 30},
        "visitRecords": [
            {"date": "2024-01-01", "reason": "checkup", "doctorName": "Dr. X", "hospital": "General"},
        ],
        "treatmentRecords": [],
        "diagnosticRecords": [],
    }
