"""
Employee analysis router - live risk preview and AI analysis submission.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from shiftsense.dependencies import get_analysis_service, get_risk_scorer
from shiftsense.engine.risk_scorer import RiskScorer
from shiftsense.models.predictions import EmployeeMetrics
from shiftsense.services.analysis_service import AnalysisService
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class LiveRiskRequest(BaseModel):
    """Partial metrics from the analysis form; omitted fields use defaults."""

    adherence_pct: Optional[float] = Field(None, ge=0, le=100)
    tardiness_count: Optional[int] = Field(None, ge=0)
    aux_time_pct: Optional[float] = Field(None, ge=0, le=100)
    calls_handled: Optional[int] = Field(None, ge=0)
    unplanned_absences: Optional[int] = Field(None, ge=0)


@router.post("/live-risk")
async def compute_live_risk(
    request: LiveRiskRequest,
    scorer: RiskScorer = Depends(get_risk_scorer),
):
    """
    Canonical heuristic score for the metrics currently on the form.
    """
    metrics = request.model_dump()
    assessment = scorer.assess(metrics)
    return {
        "success": True,
        "data": {
            **assessment.model_dump(mode="json"),
            "breakdown": scorer.breakdown(metrics),
            "risk_factors": scorer.risk_factors(metrics),
        },
    }


@router.post("/analyze")
async def analyze_employee(
    metrics: EmployeeMetrics,
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    Submit one employee's metrics to the analysis workflow.
    """
    if not metrics.employee_name.strip():
        logger.warning("analysis_rejected", reason="missing_employee_name")
        raise HTTPException(status_code=422, detail="Please enter an employee name.")

    prediction = await service.analyze(metrics)
    return {"success": True, "data": prediction.model_dump(mode="json")}
