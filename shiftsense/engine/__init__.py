"""
ShiftSense core components.

- Risk scoring: weighted band heuristic mapping shift metrics to a 0-100 score
- Mock data: seed and synthetic predictions for the startup working set
- Dashboard: aggregation and history queries over stored predictions

All engine components are pure or take their random source by injection,
so they can be tested in isolation.
"""

__all__ = [
    "MockDataGenerator",
    "RiskScorer",
    "build_dashboard_summary",
    "query_predictions",
]

from shiftsense.engine.dashboard import build_dashboard_summary, query_predictions
from shiftsense.engine.mock_data import MockDataGenerator
from shiftsense.engine.risk_scorer import RiskScorer
