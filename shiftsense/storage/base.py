"""
Abstract storage interfaces for ShiftSense.

Two independent stores back the service:

- PredictionStore: the session's working set of predictions, keyed for
  upsert by (employee_id, shift_date). Never persisted.
- SettingsStore: a small persistent key-value store for configuration
  saved from the UI (currently only the webhook URL).
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from shiftsense.models.enums import RiskLevel, SortDirection
from shiftsense.models.predictions import DashboardSummary, Prediction, PredictionPage


class StorageError(Exception):
    """Base exception for all storage operation failures."""

    pass


class PredictionStore(ABC):
    """
    Contract for the prediction working set.

    Implementations keep a canonical order (newest first as generated, with
    new inserts at the front) and must never hold two records with the same
    (employee_id, shift_date).
    """

    @abstractmethod
    def list_all(self) -> list[Prediction]:
        """
        Return every prediction in canonical order.

        Returns:
            A new list; mutating it does not affect the store
        """
        pass

    @abstractmethod
    def get(self, employee_id: str, shift_date: date) -> Optional[Prediction]:
        """Look up a prediction by its upsert key."""
        pass

    @abstractmethod
    def upsert(self, prediction: Prediction) -> bool:
        """
        Replace the record with the same (employee_id, shift_date) in place,
        or insert at the front when none exists.

        Returns:
            True (the operation always succeeds)
        """
        pass

    @abstractmethod
    def dashboard_summary(self) -> DashboardSummary:
        """Aggregate counts, alerts and high-risk employees for the dashboard."""
        pass

    @abstractmethod
    def query(
        self,
        search: Optional[str] = None,
        risk_level: Optional[RiskLevel] = None,
        sort_key: Optional[str] = "analysis_timestamp",
        direction: SortDirection = SortDirection.DESC,
        page: int = 1,
        page_size: int = 10,
    ) -> PredictionPage:
        """
        Filter, sort and paginate predictions for the history view.

        Raises:
            ValueError: If sort_key is not supported
        """
        pass

    def count(self) -> int:
        return len(self.list_all())


class SettingsStore(ABC):
    """Contract for the persistent key-value settings store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a setting.

        Returns:
            Stored value, or None when the key was never written

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a setting, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass
