"""
Pydantic v2 data models for ShiftSense.

Model Organization:
    - enums: Risk levels, alert action statuses, sort directions
    - predictions: Employee metrics, predictions, alerts, dashboard summary
    - batch: Batch upload progress and results

Usage:
    >>> from shiftsense.models import EmployeeMetrics, RiskAssessment
    >>> RiskAssessment(score=72).level
    <RiskLevel.CRITICAL: 'Critical'>
"""

from .batch import BatchProgress, BatchResult, RowOutcome
from .enums import (
    DISTRIBUTION_ORDER,
    RISK_LEVEL_THRESHOLDS,
    ActionStatus,
    RiskLevel,
    SortDirection,
)
from .predictions import (
    Alert,
    DashboardSummary,
    EmployeeMetrics,
    Pagination,
    Prediction,
    PredictionPage,
    RiskAssessment,
    RiskDistributionEntry,
    generate_employee_id,
    utcnow,
)

__all__ = [
    # Enumerations
    "ActionStatus",
    "DISTRIBUTION_ORDER",
    "RISK_LEVEL_THRESHOLDS",
    "RiskLevel",
    "SortDirection",
    # Prediction models
    "Alert",
    "DashboardSummary",
    "EmployeeMetrics",
    "Pagination",
    "Prediction",
    "PredictionPage",
    "RiskAssessment",
    "RiskDistributionEntry",
    "generate_employee_id",
    "utcnow",
    # Batch models
    "BatchProgress",
    "BatchResult",
    "RowOutcome",
]
