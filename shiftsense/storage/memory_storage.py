"""
In-memory prediction store.

Holds the session's working set of predictions. One instance is created per
application session (see ``shiftsense.main.lifespan``) and injected into
routers; there is no module-level state.
"""

import random
from datetime import date
from typing import Iterable, Optional

import structlog

from shiftsense.engine.dashboard import build_dashboard_summary, query_predictions
from shiftsense.models.enums import RiskLevel, SortDirection
from shiftsense.models.predictions import DashboardSummary, Prediction, PredictionPage

from .base import PredictionStore

logger = structlog.get_logger(__name__)


class InMemoryPredictionStore(PredictionStore):
    """
    List-backed prediction store.

    Attributes:
        total_employees: Team population reported on the dashboard
        avg_team_adherence: Team adherence reported on the dashboard
        dashboard_limit: Max alerts / high-risk employees on the dashboard
        at_risk_critical_count: Critical count above which the team is "At Risk"
    """

    def __init__(
        self,
        predictions: Optional[Iterable[Prediction]] = None,
        rng: Optional[random.Random] = None,
        total_employees: int = 120,
        avg_team_adherence: float = 88.0,
        dashboard_limit: int = 10,
        at_risk_critical_count: int = 5,
    ):
        self._predictions: list[Prediction] = list(predictions or [])
        self._rng = rng or random.Random()
        self.total_employees = total_employees
        self.avg_team_adherence = avg_team_adherence
        self.dashboard_limit = dashboard_limit
        self.at_risk_critical_count = at_risk_critical_count

        logger.info("prediction_store_initialized", records=len(self._predictions))

    def list_all(self) -> list[Prediction]:
        return list(self._predictions)

    def count(self) -> int:
        return len(self._predictions)

    def get(self, employee_id: str, shift_date: date) -> Optional[Prediction]:
        index = self._find_index(employee_id, shift_date)
        return self._predictions[index] if index is not None else None

    def upsert(self, prediction: Prediction) -> bool:
        index = self._find_index(prediction.employee_id, prediction.shift_date)
        if index is not None:
            self._predictions[index] = prediction
        else:
            self._predictions.insert(0, prediction)

        logger.info(
            "prediction_upserted",
            employee_id=prediction.employee_id,
            shift_date=prediction.shift_date.isoformat(),
            operation="replaced" if index is not None else "inserted",
            risk_level=prediction.calculated_risk_level.value,
            records=len(self._predictions),
        )
        return True

    def dashboard_summary(self) -> DashboardSummary:
        summary = build_dashboard_summary(
            self._predictions,
            total_employees=self.total_employees,
            avg_team_adherence=self.avg_team_adherence,
            rng=self._rng,
            limit=self.dashboard_limit,
            at_risk_critical_count=self.at_risk_critical_count,
        )
        logger.debug(
            "dashboard_summary_built",
            critical=summary.critical_risk_count,
            warning=summary.warning_count,
            team_health=summary.team_health_status,
        )
        return summary

    def query(
        self,
        search: Optional[str] = None,
        risk_level: Optional[RiskLevel] = None,
        sort_key: Optional[str] = "analysis_timestamp",
        direction: SortDirection = SortDirection.DESC,
        page: int = 1,
        page_size: int = 10,
    ) -> PredictionPage:
        return query_predictions(
            self._predictions,
            search=search,
            risk_level=risk_level,
            sort_key=sort_key,
            direction=direction,
            page=page,
            page_size=page_size,
        )

    def _find_index(self, employee_id: str, shift_date: date) -> Optional[int]:
        for index, existing in enumerate(self._predictions):
            if existing.employee_id == employee_id and existing.shift_date == shift_date:
                return index
        return None
