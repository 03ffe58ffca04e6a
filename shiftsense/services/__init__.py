"""
Business logic layer.
Services orchestrate stores, connectors and simulated latency.
"""

from shiftsense.services.analysis_service import AnalysisService
from shiftsense.services.batch_service import BatchService, EmptyBatchError, is_valid_row
from shiftsense.services.settings_service import (
    WEBHOOK_URL_KEY,
    InvalidWebhookUrlError,
    WebhookSettingsService,
)

__all__ = [
    "AnalysisService",
    "BatchService",
    "EmptyBatchError",
    "InvalidWebhookUrlError",
    "WEBHOOK_URL_KEY",
    "WebhookSettingsService",
    "is_valid_row",
]
