"""
Risk Scorer - Weighted Band Heuristic for Employee Shift Risk.

Maps a set of shift metrics to a 0-100 risk score by summing independent
point contributions from five signals. Each signal has ordered threshold
bands; the first band the value falls into contributes its points, and the
signals are additive (a shift can trip every signal at once). The sum is
clamped to [0, 100] and bucketed into a RiskLevel.

Missing metrics fall back to neutral defaults, so scoring never fails.

Version: risk_scorer_v1
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

import structlog

from shiftsense.models.enums import RiskLevel
from shiftsense.models.predictions import EmployeeMetrics, RiskAssessment

logger = structlog.get_logger()


# ============================================================================
# Signal Definitions - thresholds and points
# ============================================================================

# "below": value < threshold trips the band; "above": value > threshold.
# Bands are checked in order and only the first match scores.
SIGNAL_BANDS = {
    "adherence_pct": {
        "direction": "below",
        "bands": [(60, 35), (75, 20), (85, 10)],
        "factor": "Low adherence",
    },
    "tardiness_count": {
        "direction": "above",
        "bands": [(4, 25), (2, 15)],
        "factor": "High tardiness",
    },
    "aux_time_pct": {
        "direction": "above",
        "bands": [(40, 20), (25, 10)],
        "factor": "Excessive AUX time",
    },
    "calls_handled": {
        "direction": "below",
        "bands": [(60, 15), (100, 5)],
        "factor": "Low call volume",
    },
    "unplanned_absences": {
        "direction": "above",
        "bands": [(2, 25), (0, 10)],
        "factor": "Unplanned absences",
    },
}

# Substituted for any signal that is absent or not numeric
DEFAULT_METRICS = {
    "adherence_pct": 90,
    "tardiness_count": 0,
    "aux_time_pct": 10,
    "calls_handled": 120,
    "unplanned_absences": 0,
}

MIN_SCORE = 0
MAX_SCORE = 100

MetricsInput = Union[EmployeeMetrics, Mapping[str, Any], None]


def clamp_score(value: float) -> int:
    """Clamp a raw point total into the [0, 100] integer range."""
    return int(min(MAX_SCORE, max(MIN_SCORE, value)))


class RiskScorer:
    """
    Deterministic weighted-band risk scorer.

    Example:
        >>> scorer = RiskScorer()
        >>> scorer.score({"adherence_pct": 42, "tardiness_count": 6})
        60
        >>> scorer.assess({"adherence_pct": 42, "tardiness_count": 6}).level
        <RiskLevel.WARNING: 'Warning'>
    """

    def __init__(self, bands: Optional[dict] = None, defaults: Optional[dict] = None):
        self.bands = bands or SIGNAL_BANDS
        self.defaults = defaults or DEFAULT_METRICS

    def score(self, metrics: MetricsInput, jitter: int = 0) -> int:
        """
        Compute the clamped 0-100 risk score.

        Args:
            metrics: Full metrics model, partial mapping, or None
            jitter: Extra points added before clamping (seed-data flavor)

        Returns:
            Integer score in [0, 100]
        """
        total = sum(points for _, points in self._contributions(metrics))
        return clamp_score(total + jitter)

    def assess(self, metrics: MetricsInput, jitter: int = 0) -> RiskAssessment:
        """Score metrics and wrap the result with its derived level."""
        return RiskAssessment(score=self.score(metrics, jitter=jitter))

    def level(self, score: float) -> RiskLevel:
        return RiskLevel.from_score(score)

    def breakdown(self, metrics: MetricsInput) -> dict[str, int]:
        """Points contributed by each signal (zero for untripped signals)."""
        contributions = dict(self._contributions(metrics))
        return {signal: contributions.get(signal, 0) for signal in self.bands}

    def risk_factors(self, metrics: MetricsInput) -> str:
        """Comma-separated labels of every signal that contributed points."""
        factors = [
            self.bands[signal]["factor"]
            for signal, points in self._contributions(metrics)
            if points > 0
        ]
        return ", ".join(factors) if factors else "No significant risk factors"

    def _contributions(self, metrics: MetricsInput) -> list[tuple[str, int]]:
        values = self._resolve(metrics)
        contributions = []
        for signal, config in self.bands.items():
            value = values[signal]
            for threshold, points in config["bands"]:
                tripped = value < threshold if config["direction"] == "below" else value > threshold
                if tripped:
                    contributions.append((signal, points))
                    break
        return contributions

    def _resolve(self, metrics: MetricsInput) -> dict[str, float]:
        """Numeric value per signal, substituting defaults where needed."""
        if metrics is None:
            raw: Mapping[str, Any] = {}
        elif isinstance(metrics, EmployeeMetrics):
            raw = metrics.model_dump()
        else:
            raw = metrics

        resolved = {}
        for signal, default in self.defaults.items():
            value = raw.get(signal)
            if value is None or value == "":
                resolved[signal] = default
                continue
            try:
                resolved[signal] = float(value)
            except (TypeError, ValueError):
                logger.debug("risk_signal_not_numeric", signal=signal, value=str(value))
                resolved[signal] = default
        return resolved
