"""
Data storage layer.

Predictions live in an in-memory store owned by the application session.
Persisted UI settings live in a small DuckDB key-value table.
"""

import random
from functools import lru_cache

from shiftsense.config import Settings, get_settings
from shiftsense.engine.mock_data import MockDataGenerator

from .base import PredictionStore, SettingsStore, StorageError
from .memory_storage import InMemoryPredictionStore
from .settings_store import DuckDBSettingsStore


def build_prediction_store(settings: Settings) -> InMemoryPredictionStore:
    """
    Create a prediction store seeded with mock predictions.

    A configured ``mock_seed`` makes both the generated data and the
    dashboard's placeholder alert statuses reproducible.
    """
    rng = random.Random(settings.mock_seed)
    generator = MockDataGenerator(
        rng=rng,
        synthetic_count=settings.mock_synthetic_count,
        synthetic_scoring=settings.mock_synthetic_scoring,
        seed_jitter=settings.mock_seed_jitter,
    )
    return InMemoryPredictionStore(
        predictions=generator.generate(),
        rng=rng,
        total_employees=settings.total_employees,
        avg_team_adherence=settings.avg_team_adherence,
        dashboard_limit=settings.dashboard_list_limit,
        at_risk_critical_count=settings.team_at_risk_critical_count,
    )


@lru_cache
def get_settings_store() -> SettingsStore:
    """
    Get cached settings store instance (singleton).

    Returns:
        SettingsStore implementation instance
    """
    settings = get_settings()
    return DuckDBSettingsStore(db_path=settings.settings_db_path)


__all__ = [
    "DuckDBSettingsStore",
    "InMemoryPredictionStore",
    "PredictionStore",
    "SettingsStore",
    "StorageError",
    "build_prediction_store",
    "get_settings_store",
]
