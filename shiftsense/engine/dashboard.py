"""
Dashboard aggregation and history queries over a list of predictions.

Pure functions over an already-ordered prediction sequence; the store owns
the data and delegates here.
"""

import math
import random
from collections import Counter
from typing import Optional, Sequence

from shiftsense.models.enums import (
    DISTRIBUTION_ORDER,
    ActionStatus,
    RiskLevel,
    SortDirection,
)
from shiftsense.models.predictions import (
    Alert,
    DashboardSummary,
    Pagination,
    Prediction,
    PredictionPage,
    RiskDistributionEntry,
)


TEAM_STATUS_AT_RISK = "At Risk"
TEAM_STATUS_GOOD = "Good"

HIGH_RISK_LEVELS = (RiskLevel.CRITICAL, RiskLevel.WARNING)

# Sort keys exposed by the history view; level sorts by severity
SORT_KEYS = {
    "analysis_timestamp": lambda p: p.analysis_timestamp,
    "employee_name": lambda p: p.employee_name,
    "calculated_risk_level": lambda p: p.calculated_risk_level.severity,
    "calculated_risk_score": lambda p: p.calculated_risk_score,
}

DEFAULT_PAGE_SIZE = 10


def count_by_level(predictions: Sequence[Prediction]) -> dict[RiskLevel, int]:
    """Count predictions per level; every level is present, zeros included."""
    counts = Counter(p.calculated_risk_level for p in predictions)
    return {level: counts.get(level, 0) for level in DISTRIBUTION_ORDER}


def build_dashboard_summary(
    predictions: Sequence[Prediction],
    total_employees: int,
    avg_team_adherence: float,
    rng: Optional[random.Random] = None,
    limit: int = 10,
    at_risk_critical_count: int = 5,
) -> DashboardSummary:
    """
    Aggregate predictions into the dashboard view.

    Args:
        predictions: Store contents in canonical (newest first) order
        total_employees: Team population (a constant; the store is a sample)
        avg_team_adherence: Team adherence figure (a constant)
        rng: Random source for alert action statuses
        limit: Max alerts and high-risk employees returned
        at_risk_critical_count: Team is "At Risk" when critical count exceeds this

    Returns:
        DashboardSummary
    """
    rng = rng or random.Random()
    counts = count_by_level(predictions)
    critical_count = counts[RiskLevel.CRITICAL]

    critical = [p for p in predictions if p.calculated_risk_level == RiskLevel.CRITICAL][:limit]
    # Placeholder statuses; alerts have no follow-up workflow
    recent_alerts = [
        Alert.from_prediction(
            p,
            ActionStatus.PENDING if rng.random() > 0.5 else ActionStatus.COMPLETE,
        )
        for p in critical
    ]

    # sorted() is stable: equal scores keep store order
    high_risk = sorted(
        (p for p in predictions if p.calculated_risk_level in HIGH_RISK_LEVELS),
        key=lambda p: p.calculated_risk_score,
        reverse=True,
    )[:limit]

    return DashboardSummary(
        total_employees=total_employees,
        critical_risk_count=critical_count,
        warning_count=counts[RiskLevel.WARNING],
        risk_counts=counts,
        risk_distribution=[
            RiskDistributionEntry(name=level, value=counts[level])
            for level in DISTRIBUTION_ORDER
        ],
        team_health_status=(
            TEAM_STATUS_AT_RISK if critical_count > at_risk_critical_count else TEAM_STATUS_GOOD
        ),
        avg_team_adherence=avg_team_adherence,
        recent_alerts=recent_alerts,
        high_risk_employees=high_risk,
    )


def query_predictions(
    predictions: Sequence[Prediction],
    search: Optional[str] = None,
    risk_level: Optional[RiskLevel] = None,
    sort_key: Optional[str] = "analysis_timestamp",
    direction: SortDirection = SortDirection.DESC,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PredictionPage:
    """
    Filter, sort, and paginate predictions for the history view.

    Search is a case-insensitive substring match on employee name. Passing
    ``sort_key=None`` keeps store order. Out-of-range pages return an empty
    item list with accurate metadata.

    Raises:
        ValueError: If sort_key is not a supported key
    """
    if sort_key is not None and sort_key not in SORT_KEYS:
        raise ValueError(
            f"Unsupported sort key: {sort_key}. Must be one of {sorted(SORT_KEYS)}"
        )

    page = max(1, page)
    page_size = max(1, page_size)

    items = list(predictions)
    if search:
        needle = search.lower()
        items = [p for p in items if needle in p.employee_name.lower()]
    if risk_level is not None:
        items = [p for p in items if p.calculated_risk_level == risk_level]
    if sort_key is not None:
        items.sort(key=SORT_KEYS[sort_key], reverse=direction == SortDirection.DESC)

    total_count = len(items)
    total_pages = max(1, math.ceil(total_count / page_size))
    offset = (page - 1) * page_size
    page_items = items[offset : offset + page_size]

    return PredictionPage(
        items=page_items,
        pagination=Pagination(
            page=page,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
            showing_from=min(offset + 1, total_count),
            showing_to=min(offset + page_size, total_count),
        ),
    )
