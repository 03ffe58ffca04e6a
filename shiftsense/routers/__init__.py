"""API routers for all endpoints."""

from shiftsense.routers import analysis, batch, dashboard, predictions, settings

__all__ = [
    "analysis",
    "batch",
    "dashboard",
    "predictions",
    "settings",
]
