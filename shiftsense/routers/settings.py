"""
Settings router - webhook configuration and risk thresholds.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from shiftsense.dependencies import get_webhook_settings
from shiftsense.models.enums import DISTRIBUTION_ORDER
from shiftsense.services.settings_service import (
    WEBHOOK_URL_KEY,
    InvalidWebhookUrlError,
    WebhookSettingsService,
)
from shiftsense.storage.base import StorageError
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class WebhookUrlRequest(BaseModel):
    """Webhook URL update."""

    url: str


@router.get("/webhook")
def get_webhook(
    webhook_settings: WebhookSettingsService = Depends(get_webhook_settings),
):
    """Current webhook URL (the default mock URL until one is saved)."""
    return {
        "success": True,
        "data": {
            "key": WEBHOOK_URL_KEY,
            "url": webhook_settings.get_webhook_url(),
            "is_default": webhook_settings.is_default(),
        },
    }


@router.put("/webhook")
def save_webhook(
    request: WebhookUrlRequest,
    webhook_settings: WebhookSettingsService = Depends(get_webhook_settings),
):
    """Validate and persist the webhook URL."""
    try:
        url = webhook_settings.save_webhook_url(request.url)
    except InvalidWebhookUrlError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageError as e:
        logger.error("webhook_save_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to save settings.")

    return {"success": True, "data": {"key": WEBHOOK_URL_KEY, "url": url, "is_default": False}}


@router.get("/risk-thresholds")
async def get_risk_thresholds():
    """Score range for each risk level (read-only)."""
    thresholds = []
    for level in DISTRIBUTION_ORDER:
        low, high = level.score_range
        thresholds.append({"level": level.value, "min_score": low, "max_score": high})
    return {"success": True, "data": thresholds}
