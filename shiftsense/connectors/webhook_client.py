"""
HTTP client for the external automation webhook.

Posts employee metrics as JSON to the configured intake URL (an n8n
workflow in the reference deployment). Only used when webhook forwarding is
enabled; otherwise submission is simulated.
"""

from typing import Any, Optional

import httpx
import structlog

logger = structlog.get_logger()


class WebhookDeliveryError(Exception):
    """Raised when the webhook cannot be reached or rejects the payload."""

    pass


class WebhookClient:
    """
    Minimal async webhook poster.

    Attributes:
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests inject a MockTransport)
    """

    def __init__(self, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def submit(self, url: str, payload: dict[str, Any]) -> int:
        """
        POST a JSON payload to the webhook.

        Args:
            url: Absolute webhook URL
            payload: JSON-serializable body

        Returns:
            HTTP status code of the accepted response

        Raises:
            WebhookDeliveryError: On connection failure or non-2xx status
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "webhook_rejected",
                url=url,
                status_code=e.response.status_code,
                error=e.response.text[:200],
            )
            raise WebhookDeliveryError(
                f"Webhook returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("webhook_unreachable", url=url, error=str(e))
            raise WebhookDeliveryError(f"Webhook request failed: {e}") from e

        logger.info("webhook_delivered", url=url, status_code=response.status_code)
        return response.status_code
