"""
External collaborators: the uploaded-table parser and the automation webhook.
"""

from shiftsense.connectors.csv_parser import DelimitedParseError, parse_delimited
from shiftsense.connectors.webhook_client import WebhookClient, WebhookDeliveryError

__all__ = [
    "DelimitedParseError",
    "WebhookClient",
    "WebhookDeliveryError",
    "parse_delimited",
]
