"""
Predictions router - history browsing and saving analysis results.
"""

import asyncio
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from shiftsense.config import Settings, get_settings
from shiftsense.dependencies import get_analysis_service, get_prediction_store
from shiftsense.models.enums import RiskLevel, SortDirection
from shiftsense.models.predictions import Prediction
from shiftsense.services.analysis_service import AnalysisService
from shiftsense.storage.base import PredictionStore
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/")
async def list_predictions(
    store: PredictionStore = Depends(get_prediction_store),
    settings: Settings = Depends(get_settings),
    search: Optional[str] = Query(None, description="Case-insensitive employee name filter"),
    risk_level: Optional[RiskLevel] = None,
    sort_key: str = "analysis_timestamp",
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
):
    """
    Browse, filter and search historical predictions with pagination.
    """
    logger.info(
        "predictions_list",
        search=search,
        risk_level=risk_level.value if risk_level else None,
        sort_key=sort_key,
        direction=direction.value,
        page=page,
    )

    await asyncio.sleep(settings.history_delay_seconds)

    try:
        result = store.query(
            search=search,
            risk_level=risk_level,
            sort_key=sort_key,
            direction=direction,
            page=page,
            page_size=page_size,
        )
    except ValueError as e:
        logger.warning("predictions_list_rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "success": True,
        "data": [p.model_dump(mode="json") for p in result.items],
        "pagination": result.pagination.model_dump(),
    }


@router.get("/all")
async def list_all_predictions(
    store: PredictionStore = Depends(get_prediction_store),
    settings: Settings = Depends(get_settings),
):
    """Every stored prediction in canonical (newest first) order."""
    await asyncio.sleep(settings.history_delay_seconds)
    predictions = store.list_all()
    return {
        "success": True,
        "data": [p.model_dump(mode="json") for p in predictions],
        "total_count": len(predictions),
    }


@router.get("/{employee_id}/{shift_date}")
async def get_prediction(
    employee_id: str,
    shift_date: date,
    store: PredictionStore = Depends(get_prediction_store),
):
    """Prediction for one employee shift."""
    prediction = store.get(employee_id, shift_date)
    if prediction is None:
        raise HTTPException(
            status_code=404,
            detail=f"No prediction for {employee_id} on {shift_date.isoformat()}",
        )
    return {"success": True, "data": prediction.model_dump(mode="json")}


@router.post("/")
async def save_prediction(
    prediction: Prediction,
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    Save a prediction. Replaces the existing record for the same employee
    and shift date, otherwise adds it to the top of the history.
    """
    logger.info(
        "prediction_save",
        employee_id=prediction.employee_id,
        shift_date=prediction.shift_date.isoformat(),
    )
    result = await service.save(prediction)
    return {**result, "data": prediction.model_dump(mode="json")}
