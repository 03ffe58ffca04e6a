"""
Mock prediction generation for seeding the in-memory store.

Two populations are generated:

1. Hand-authored seed rows: five clearly at-risk employees and five clearly
   healthy ones, scored with the canonical RiskScorer and timestamped one day
   apart starting now.
2. Synthetic rows: uniformly random metrics, timestamped further back. By
   default their scores are drawn uniformly at random, independent of the
   metrics (mode "random"); mode "metrics" scores them with the RiskScorer.

The result is sorted newest first, which is the store's canonical order.
"""

import random
from datetime import date, datetime, timedelta
from typing import Literal, Optional

import structlog

from shiftsense.engine.risk_scorer import RiskScorer
from shiftsense.models.enums import RiskLevel
from shiftsense.models.predictions import (
    EmployeeMetrics,
    Prediction,
    RiskAssessment,
    utcnow,
)

logger = structlog.get_logger()


SEED_SHIFT_DATE = date(2024, 11, 16)

SEED_METRICS = [
    # At risk
    {"employee_id": "EMP201", "employee_name": "Jessica Torres", "adherence_pct": 42, "tardiness_count": 6, "aux_time_pct": 58, "calls_handled": 38, "unplanned_absences": 3},
    {"employee_id": "EMP202", "employee_name": "Kevin Brown", "adherence_pct": 35, "tardiness_count": 8, "aux_time_pct": 70, "calls_handled": 25, "unplanned_absences": 4},
    {"employee_id": "EMP203", "employee_name": "Linda Chen", "adherence_pct": 48, "tardiness_count": 5, "aux_time_pct": 52, "calls_handled": 55, "unplanned_absences": 2},
    {"employee_id": "EMP204", "employee_name": "Robert Kim", "adherence_pct": 31, "tardiness_count": 9, "aux_time_pct": 65, "calls_handled": 18, "unplanned_absences": 5},
    {"employee_id": "EMP205", "employee_name": "Amanda Lee", "adherence_pct": 52, "tardiness_count": 7, "aux_time_pct": 48, "calls_handled": 62, "unplanned_absences": 3},
    # Healthy
    {"employee_id": "EMP206", "employee_name": "Michael Santos", "adherence_pct": 94, "tardiness_count": 0, "aux_time_pct": 14, "calls_handled": 158, "unplanned_absences": 0},
    {"employee_id": "EMP207", "employee_name": "Emma Wilson", "adherence_pct": 91, "tardiness_count": 1, "aux_time_pct": 16, "calls_handled": 145, "unplanned_absences": 0},
    {"employee_id": "EMP208", "employee_name": "James Park", "adherence_pct": 96, "tardiness_count": 0, "aux_time_pct": 11, "calls_handled": 162, "unplanned_absences": 0},
    {"employee_id": "EMP209", "employee_name": "Sofia Garcia", "adherence_pct": 89, "tardiness_count": 1, "aux_time_pct": 18, "calls_handled": 138, "unplanned_absences": 0},
    {"employee_id": "EMP210", "employee_name": "Daniel Cooper", "adherence_pct": 93, "tardiness_count": 0, "aux_time_pct": 15, "calls_handled": 151, "unplanned_absences": 0},
]

SYNTHETIC_NAMES = [
    "John Doe",
    "Jane Smith",
    "Peter Jones",
    "Mary Williams",
    "David Brown",
    "Susan Miller",
    "Michael Wilson",
]

# Synthetic rows start this many days before the seed rows' window
SYNTHETIC_DAY_OFFSET = 10

SEED_NARRATIVES = {
    "ai_prediction": "Employee shows signs of burnout and may be a flight risk.",
    "ai_recommendation": "Schedule a 1-on-1 meeting to discuss workload and well-being.",
    "ot_strategy": "Offer OT to high-performing peers to cover potential gaps.",
    "aux_strategy": "Review AUX codes for coaching opportunities.",
}


class MockDataGenerator:
    """
    Builds the startup working set of predictions.

    Attributes:
        scorer: Canonical risk scorer
        rng: Random source (seed it for reproducible fixtures)
        synthetic_count: Number of synthetic rows to add
        synthetic_scoring: "random" or "metrics"
        seed_jitter: Max extra points (inclusive) added to seed-row scores
    """

    def __init__(
        self,
        scorer: Optional[RiskScorer] = None,
        rng: Optional[random.Random] = None,
        synthetic_count: int = 40,
        synthetic_scoring: Literal["random", "metrics"] = "random",
        seed_jitter: int = 0,
    ):
        self.scorer = scorer or RiskScorer()
        self.rng = rng or random.Random()
        self.synthetic_count = synthetic_count
        self.synthetic_scoring = synthetic_scoring
        self.seed_jitter = seed_jitter

    def generate(self, now: Optional[datetime] = None) -> list[Prediction]:
        """
        Generate seed and synthetic predictions, newest first.

        Args:
            now: Reference time for timestamps (defaults to current UTC time)

        Returns:
            Predictions sorted by analysis_timestamp descending
        """
        now = now or utcnow()
        predictions = self.generate_seed(now) + self.generate_synthetic(now)
        predictions.sort(key=lambda p: p.analysis_timestamp, reverse=True)

        logger.info(
            "mock_predictions_generated",
            total=len(predictions),
            seed=len(SEED_METRICS),
            synthetic=self.synthetic_count,
            synthetic_scoring=self.synthetic_scoring,
        )
        return predictions

    def generate_seed(self, now: datetime) -> list[Prediction]:
        predictions = []
        for i, row in enumerate(SEED_METRICS):
            metrics = EmployeeMetrics(shift_date=SEED_SHIFT_DATE, **row)
            jitter = self.rng.randint(0, self.seed_jitter) if self.seed_jitter else 0
            assessment = self.scorer.assess(metrics, jitter=jitter)
            predictions.append(
                self._build(metrics, assessment, now - timedelta(days=i))
            )
        return predictions

    def generate_synthetic(self, now: datetime) -> list[Prediction]:
        predictions = []
        for i in range(self.synthetic_count):
            offset = timedelta(days=i + SYNTHETIC_DAY_OFFSET)
            metrics = EmployeeMetrics(
                employee_id=f"E{1000 + i}",
                employee_name=SYNTHETIC_NAMES[i % len(SYNTHETIC_NAMES)],
                shift_date=(now - offset).date(),
                adherence_pct=self.rng.randint(50, 99),
                tardiness_count=self.rng.randint(0, 4),
                aux_time_pct=self.rng.randint(0, 29),
                calls_handled=self.rng.randint(50, 149),
                unplanned_absences=self.rng.randint(0, 2),
            )
            if self.synthetic_scoring == "metrics":
                assessment = self.scorer.assess(metrics)
            else:
                assessment = RiskAssessment(score=self.rng.randint(0, 99))
            predictions.append(self._build(metrics, assessment, now - offset))
        return predictions

    def _build(
        self,
        metrics: EmployeeMetrics,
        assessment: RiskAssessment,
        timestamp: datetime,
    ) -> Prediction:
        return Prediction.from_metrics(
            metrics,
            assessment,
            analysis_timestamp=timestamp,
            risk_factors=self.scorer.risk_factors(metrics),
            needs_shift_coverage=assessment.level == RiskLevel.CRITICAL,
            **SEED_NARRATIVES,
        )
