"""
Dashboard router - team risk summary.
"""

import asyncio

from fastapi import APIRouter, Depends

from shiftsense.config import Settings, get_settings
from shiftsense.dependencies import get_prediction_store
from shiftsense.storage.base import PredictionStore
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/summary")
async def get_dashboard_summary(
    store: PredictionStore = Depends(get_prediction_store),
    settings: Settings = Depends(get_settings),
):
    """
    Dashboard card data: per-level counts, team health, recent critical
    alerts and the highest-risk employees.
    """
    logger.info("dashboard_summary", records=store.count())

    await asyncio.sleep(settings.dashboard_delay_seconds)
    summary = store.dashboard_summary()

    return {"success": True, "data": summary.model_dump(mode="json")}
