"""
Enumeration types for ShiftSense.

All enums inherit from str to ensure JSON serialization compatibility.
"""

from enum import Enum


class RiskLevel(str, Enum):
    """
    Ordinal risk buckets derived from a 0-100 risk score.

    Ascending severity: Good < Monitor < Warning < Critical. String comparison
    does not follow severity, so ordering always goes through ``severity``.
    """

    GOOD = "Good"
    MONITOR = "Monitor"
    WARNING = "Warning"
    CRITICAL = "Critical"

    @property
    def severity(self) -> int:
        """Ordinal rank, 0 (Good) through 3 (Critical)."""
        return _SEVERITY[self]

    @property
    def score_range(self) -> tuple[int, int]:
        """Inclusive (low, high) score range mapped to this level."""
        return _SCORE_RANGES[self]

    @classmethod
    def from_score(cls, score: float) -> "RiskLevel":
        """
        Bucket a risk score into its level.

        Thresholds are evaluated high to low with inclusive lower bounds:
        >=70 Critical, >=40 Warning, >=20 Monitor, otherwise Good.
        """
        for lower_bound, level in RISK_LEVEL_THRESHOLDS:
            if score >= lower_bound:
                return level
        return cls.GOOD


# Evaluated in order; the first lower bound the score reaches wins.
RISK_LEVEL_THRESHOLDS = (
    (70, RiskLevel.CRITICAL),
    (40, RiskLevel.WARNING),
    (20, RiskLevel.MONITOR),
)

_SEVERITY = {
    RiskLevel.GOOD: 0,
    RiskLevel.MONITOR: 1,
    RiskLevel.WARNING: 2,
    RiskLevel.CRITICAL: 3,
}

_SCORE_RANGES = {
    RiskLevel.CRITICAL: (70, 100),
    RiskLevel.WARNING: (40, 69),
    RiskLevel.MONITOR: (20, 39),
    RiskLevel.GOOD: (0, 19),
}

# Display order used by the dashboard distribution chart
DISTRIBUTION_ORDER = (
    RiskLevel.CRITICAL,
    RiskLevel.WARNING,
    RiskLevel.MONITOR,
    RiskLevel.GOOD,
)


class ActionStatus(str, Enum):
    """Follow-up status of an alert raised for a critical prediction."""

    PENDING = "Pending"
    COMPLETE = "Complete"
    DISMISSED = "Dismissed"


class SortDirection(str, Enum):
    """Sort direction for history queries."""

    ASC = "asc"
    DESC = "desc"
