"""
Pytest configuration and shared fixtures for the ShiftSense test suite.

Provides model factories, an in-memory settings store, seeded prediction
stores, and a FastAPI test client with simulated latency switched off.
"""

import os
import random
import tempfile
import uuid as _uuid
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

# Set testing environment BEFORE importing app
os.environ["TESTING"] = "true"
os.environ["SETTINGS_DB_PATH"] = os.path.join(
    tempfile.gettempdir(), f"shiftsense_test_{_uuid.uuid4().hex[:8]}.duckdb"
)
os.environ["MOCK_SEED"] = "1234"
for _delay in (
    "DASHBOARD_DELAY_SECONDS",
    "HISTORY_DELAY_SECONDS",
    "ANALYSIS_DELAY_SECONDS",
    "SAVE_DELAY_SECONDS",
    "BATCH_ROW_DELAY_SECONDS",
):
    os.environ[_delay] = "0"


# ---------------------------------------------------------------------------
# Model factories - reusable across all test suites
# ---------------------------------------------------------------------------

from shiftsense.engine.mock_data import MockDataGenerator
from shiftsense.models.predictions import EmployeeMetrics, Prediction
from shiftsense.services.settings_service import WebhookSettingsService
from shiftsense.storage.base import SettingsStore
from shiftsense.storage.memory_storage import InMemoryPredictionStore

DEFAULT_WEBHOOK_URL = "https://mock.n8n.io/webhook/shiftsense-intake"
BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_metrics(
    employee_id: str = "EMP900",
    employee_name: str = "Test Employee",
    shift_date: date = date(2025, 3, 1),
    adherence_pct: float = 95,
    tardiness_count: int = 0,
    aux_time_pct: float = 8,
    calls_handled: int = 120,
    unplanned_absences: int = 0,
) -> EmployeeMetrics:
    """Factory function for creating test EmployeeMetrics objects."""
    return EmployeeMetrics(
        employee_id=employee_id,
        employee_name=employee_name,
        shift_date=shift_date,
        adherence_pct=adherence_pct,
        tardiness_count=tardiness_count,
        aux_time_pct=aux_time_pct,
        calls_handled=calls_handled,
        unplanned_absences=unplanned_absences,
    )


def make_prediction(
    score: int = 50,
    employee_id: str = "EMP900",
    employee_name: str = "Test Employee",
    shift_date: date = date(2025, 3, 1),
    analysis_timestamp: Optional[datetime] = None,
    **overrides,
) -> Prediction:
    """Factory function for creating test Prediction objects."""
    defaults = dict(
        employee_id=employee_id,
        employee_name=employee_name,
        shift_date=shift_date,
        adherence_pct=80,
        tardiness_count=1,
        aux_time_pct=20,
        calls_handled=110,
        unplanned_absences=0,
        analysis_timestamp=analysis_timestamp or BASE_TIME,
        calculated_risk_score=score,
        risk_factors="Test factors",
        needs_shift_coverage=score >= 70,
        ai_prediction="Test prediction",
        ai_recommendation="Test recommendation",
        ot_strategy="Test OT strategy",
        aux_strategy="Test AUX strategy",
    )
    defaults.update(overrides)
    return Prediction(**defaults)


def make_prediction_series(scores: list[int], names: Optional[list[str]] = None) -> list[Prediction]:
    """Predictions one day apart, newest first, one per score."""
    predictions = []
    for i, score in enumerate(scores):
        name = names[i] if names else f"Employee {i:02d}"
        predictions.append(
            make_prediction(
                score=score,
                employee_id=f"EMP{100 + i}",
                employee_name=name,
                shift_date=date(2025, 3, 1) - timedelta(days=i),
                analysis_timestamp=BASE_TIME - timedelta(days=i),
            )
        )
    return predictions


class MockSettingsStore(SettingsStore):
    """Dict-backed settings store for tests."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.writes = 0

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value
        self.writes += 1


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_settings_store():
    """Fresh in-memory settings store."""
    return MockSettingsStore()


@pytest.fixture
def webhook_settings(mock_settings_store):
    """Webhook settings service over the in-memory store."""
    return WebhookSettingsService(store=mock_settings_store, default_url=DEFAULT_WEBHOOK_URL)


@pytest.fixture
def sample_predictions():
    """Twelve predictions spanning every risk level, newest first."""
    scores = [85, 10, 45, 72, 30, 0, 69, 70, 19, 20, 40, 100]
    names = [
        "Alice Moreno", "Bob Stone", "Carla Diaz", "Dan Wu", "Eve Park", "Frank Hill",
        "Grace Kim", "Hank Lopez", "Ivy Chen", "Jack Ryan", "Kara Bell", "Liam Ford",
    ]
    return make_prediction_series(scores, names)


@pytest.fixture
def prediction_store(sample_predictions):
    """In-memory store over the sample predictions with a seeded random source."""
    return InMemoryPredictionStore(predictions=sample_predictions, rng=random.Random(7))


@pytest.fixture
def seeded_predictions():
    """Seed-only mock data (hand-authored rows, no synthetic rows)."""
    generator = MockDataGenerator(rng=random.Random(42), synthetic_count=0)
    return generator.generate(now=BASE_TIME)


@pytest.fixture
def client(mock_settings_store):
    """FastAPI test client with the settings store replaced by an in-memory one."""
    from shiftsense.main import app
    from shiftsense.storage import get_settings_store

    app.dependency_overrides[get_settings_store] = lambda: mock_settings_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
