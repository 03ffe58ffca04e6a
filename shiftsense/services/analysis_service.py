"""
Analysis service - simulated submission to the external AI workflow.

Stands in for the automation webhook that produces predictions. The
external system is a black box: its score is drawn at random, independent of
the submitted metrics, and the narrative fields are fixed templates. What is
guaranteed is that every returned Prediction is internally consistent (level
derived from score, shift coverage flagged exactly for Critical).
"""

import asyncio
import random
from typing import Optional

from shiftsense.connectors.webhook_client import WebhookClient, WebhookDeliveryError
from shiftsense.models.enums import RiskLevel
from shiftsense.models.predictions import (
    EmployeeMetrics,
    Prediction,
    RiskAssessment,
    utcnow,
)
from shiftsense.services.settings_service import WebhookSettingsService
from shiftsense.storage.base import PredictionStore
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)


RISK_FACTORS_TEXT = "AI-generated risk factors based on input."
PREDICTION_TEMPLATE = (
    "Based on the provided metrics, {employee_name} is showing a performance "
    "trend that requires attention."
)
RECOMMENDATION_TEXT = "Immediate follow-up is recommended to address the key performance indicators."
OT_STRATEGY_TEXT = "Consider pre-booking overtime with top performers as a contingency."
AUX_STRATEGY_TEXT = "Analyze AUX usage patterns for potential system issues or coaching needs."


class AnalysisService:
    """
    Submits employee metrics for analysis and saves results.

    Attributes:
        webhook_settings: Source of the configured webhook URL
        store: Prediction store used by ``save``
        rng: Random source for the simulated external score
        analysis_delay: Simulated round-trip latency (seconds)
        save_delay: Simulated save latency (seconds)
        webhook_client: When set, metrics are also POSTed to the webhook
    """

    def __init__(
        self,
        webhook_settings: WebhookSettingsService,
        store: PredictionStore,
        rng: Optional[random.Random] = None,
        analysis_delay: float = 1.5,
        save_delay: float = 0.5,
        webhook_client: Optional[WebhookClient] = None,
    ):
        self.webhook_settings = webhook_settings
        self.store = store
        self.rng = rng or random.Random()
        self.analysis_delay = analysis_delay
        self.save_delay = save_delay
        self.webhook_client = webhook_client

    async def analyze(self, metrics: EmployeeMetrics) -> Prediction:
        """
        Submit one employee's metrics and return the enriched prediction.

        The caller is responsible for rejecting an empty employee name.

        Args:
            metrics: Shift metrics to analyze

        Returns:
            New Prediction stamped with the current time
        """
        webhook_url = await asyncio.to_thread(self.webhook_settings.get_webhook_url)
        logger.info(
            "analysis_submitted",
            webhook_url=webhook_url,
            employee_id=metrics.employee_id,
            shift_date=metrics.shift_date.isoformat(),
        )

        if self.webhook_client is not None:
            try:
                await self.webhook_client.submit(webhook_url, metrics.model_dump(mode="json"))
            except WebhookDeliveryError as e:
                # Forwarding failures never fail the analysis
                logger.warning("analysis_forward_failed", webhook_url=webhook_url, error=str(e))

        await asyncio.sleep(self.analysis_delay)

        assessment = RiskAssessment(score=self.rng.randint(0, 99))
        prediction = Prediction.from_metrics(
            metrics,
            assessment,
            analysis_timestamp=utcnow(),
            risk_factors=RISK_FACTORS_TEXT,
            needs_shift_coverage=assessment.level == RiskLevel.CRITICAL,
            ai_prediction=PREDICTION_TEMPLATE.format(employee_name=metrics.employee_name),
            ai_recommendation=RECOMMENDATION_TEXT,
            ot_strategy=OT_STRATEGY_TEXT,
            aux_strategy=AUX_STRATEGY_TEXT,
        )

        logger.info(
            "analysis_completed",
            employee_id=prediction.employee_id,
            risk_score=prediction.calculated_risk_score,
            risk_level=prediction.calculated_risk_level.value,
        )
        return prediction

    async def save(self, prediction: Prediction) -> dict:
        """
        Persist a prediction into the working set (upsert).

        Returns:
            ``{"success": True}``
        """
        await asyncio.sleep(self.save_delay)
        success = self.store.upsert(prediction)
        return {"success": success}
