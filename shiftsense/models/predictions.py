"""
Prediction models: employee metrics in, scored predictions out.

The risk level is never a stored field. ``Prediction`` and ``RiskAssessment``
expose it as a computed field derived from the score, so the two can never
disagree.
"""

import random
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import ActionStatus, RiskLevel


def generate_employee_id(rng: Optional[random.Random] = None) -> str:
    """Generate an employee identifier of the form ``E`` + 4 digits."""
    rng = rng or random
    return f"E{rng.randint(1000, 9999)}"


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class RiskAssessment(BaseModel):
    """
    Immutable score/level pair.

    The level is computed from the score at construction; there is no way to
    set it independently.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100, description="Risk score 0-100")

    @computed_field
    @property
    def level(self) -> RiskLevel:
        return RiskLevel.from_score(self.score)


class EmployeeMetrics(BaseModel):
    """
    Shift performance metrics for a single employee.

    Defaults mirror the blank analysis form: a healthy shift with no name.

    Attributes:
        employee_id: Caller supplied or generated ``E`` + 4 digits
        employee_name: Display name (required by the analysis caller)
        shift_date: Calendar date of the shift
        adherence_pct: Schedule adherence percentage (0-100)
        tardiness_count: Late arrivals in the period
        aux_time_pct: Share of time in auxiliary (non-productive) states
        calls_handled: Calls handled in the period
        unplanned_absences: Unplanned absences in the period
    """

    model_config = ConfigDict(validate_assignment=True)

    employee_id: str = Field(default_factory=generate_employee_id, min_length=1)
    employee_name: str = Field(default="", description="Employee display name")
    shift_date: date = Field(default_factory=date.today, description="Shift date (yyyy-MM-dd)")
    adherence_pct: float = Field(default=95, ge=0, le=100)
    tardiness_count: int = Field(default=0, ge=0)
    aux_time_pct: float = Field(default=8, ge=0, le=100)
    calls_handled: int = Field(default=120, ge=0)
    unplanned_absences: int = Field(default=0, ge=0)

    @property
    def upsert_key(self) -> tuple[str, date]:
        """Identity used by the prediction store: (employee_id, shift_date)."""
        return (self.employee_id, self.shift_date)

    def metrics_only(self) -> dict:
        """Plain metric fields, without any prediction enrichment."""
        return self.model_dump(include=set(EmployeeMetrics.model_fields))


class Prediction(EmployeeMetrics):
    """
    Scored analysis result for one employee shift.

    Attributes:
        analysis_timestamp: When the analysis ran (UTC)
        calculated_risk_score: Risk score 0-100
        calculated_risk_level: Derived from the score (read-only)
        risk_factors: Free-text summary of contributing factors
        needs_shift_coverage: Whether backup coverage should be arranged
        ai_prediction: Narrative outlook
        ai_recommendation: Narrative next step for the manager
        ot_strategy: Overtime coverage strategy
        aux_strategy: Auxiliary-time coaching strategy
    """

    analysis_timestamp: datetime = Field(default_factory=utcnow)
    calculated_risk_score: int = Field(ge=0, le=100)
    risk_factors: str = ""
    needs_shift_coverage: bool = False
    ai_prediction: str = ""
    ai_recommendation: str = ""
    ot_strategy: str = ""
    aux_strategy: str = ""

    @computed_field
    @property
    def calculated_risk_level(self) -> RiskLevel:
        return RiskLevel.from_score(self.calculated_risk_score)

    @property
    def assessment(self) -> RiskAssessment:
        return RiskAssessment(score=self.calculated_risk_score)

    @classmethod
    def from_metrics(
        cls,
        metrics: EmployeeMetrics,
        assessment: RiskAssessment,
        **enrichment,
    ) -> "Prediction":
        """Build a prediction from input metrics and a risk assessment."""
        return cls(
            **metrics.metrics_only(),
            calculated_risk_score=assessment.score,
            **enrichment,
        )


class Alert(BaseModel):
    """Critical prediction projected for action tracking on the dashboard."""

    alert_timestamp: datetime
    employee_id: str
    employee_name: str
    risk_level: RiskLevel
    risk_score: int = Field(ge=0, le=100)
    recommended_action: str
    action_status: ActionStatus = ActionStatus.PENDING

    @classmethod
    def from_prediction(cls, prediction: Prediction, action_status: ActionStatus) -> "Alert":
        return cls(
            alert_timestamp=prediction.analysis_timestamp,
            employee_id=prediction.employee_id,
            employee_name=prediction.employee_name,
            risk_level=prediction.calculated_risk_level,
            risk_score=prediction.calculated_risk_score,
            recommended_action=prediction.ai_recommendation,
            action_status=action_status,
        )


class RiskDistributionEntry(BaseModel):
    """One slice of the risk distribution chart."""

    name: RiskLevel
    value: int = Field(ge=0)


class DashboardSummary(BaseModel):
    """Aggregated view of the prediction store for the dashboard page."""

    total_employees: int
    critical_risk_count: int
    warning_count: int
    risk_counts: dict[RiskLevel, int]
    risk_distribution: list[RiskDistributionEntry]
    team_health_status: str
    avg_team_adherence: float
    recent_alerts: list[Alert] = Field(default_factory=list)
    high_risk_employees: list[Prediction] = Field(default_factory=list)


class Pagination(BaseModel):
    """Pagination metadata for list endpoints."""

    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool
    showing_from: int
    showing_to: int


class PredictionPage(BaseModel):
    """One page of a filtered, sorted history query."""

    items: list[Prediction]
    pagination: Pagination
