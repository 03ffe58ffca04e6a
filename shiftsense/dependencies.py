"""
FastAPI dependencies wiring stores and services into routers.

The prediction store belongs to the application session and lives on
``app.state``; tests swap any of these through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from shiftsense.config import Settings, get_settings
from shiftsense.connectors.webhook_client import WebhookClient
from shiftsense.engine.risk_scorer import RiskScorer
from shiftsense.services.analysis_service import AnalysisService
from shiftsense.services.batch_service import BatchService
from shiftsense.services.settings_service import WebhookSettingsService
from shiftsense.storage import get_settings_store
from shiftsense.storage.base import PredictionStore, SettingsStore


def get_prediction_store(request: Request) -> PredictionStore:
    """Session-owned prediction store created in the application lifespan."""
    return request.app.state.prediction_store


def get_risk_scorer() -> RiskScorer:
    return RiskScorer()


def get_webhook_settings(
    store: SettingsStore = Depends(get_settings_store),
    settings: Settings = Depends(get_settings),
) -> WebhookSettingsService:
    return WebhookSettingsService(store=store, default_url=settings.default_webhook_url)


def get_analysis_service(
    request: Request,
    store: PredictionStore = Depends(get_prediction_store),
    webhook_settings: WebhookSettingsService = Depends(get_webhook_settings),
    settings: Settings = Depends(get_settings),
) -> AnalysisService:
    webhook_client = None
    if settings.webhook_forwarding_enabled:
        webhook_client = WebhookClient(timeout=settings.webhook_timeout_seconds)
    return AnalysisService(
        webhook_settings=webhook_settings,
        store=store,
        rng=request.app.state.analysis_rng,
        analysis_delay=settings.analysis_delay_seconds,
        save_delay=settings.save_delay_seconds,
        webhook_client=webhook_client,
    )


def get_batch_service(settings: Settings = Depends(get_settings)) -> BatchService:
    return BatchService(row_delay=settings.batch_row_delay_seconds)
