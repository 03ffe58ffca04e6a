"""
Webhook configuration service.

The webhook URL is the only setting the UI persists. It is treated as an
opaque string: validation only requires that it parses as an absolute URL.
"""

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shiftsense.storage.base import SettingsStore
from shiftsense.utils.logging import get_logger

logger = get_logger(__name__)

WEBHOOK_URL_KEY = "n8nWebhookUrl"

_url_adapter = TypeAdapter(AnyUrl)


class InvalidWebhookUrlError(Exception):
    """Raised when a webhook URL cannot be parsed as an absolute URL."""

    pass


def validate_webhook_url(url: str) -> str:
    """
    Check that a value is constructible as an absolute URL.

    Returns:
        The URL with surrounding whitespace removed, otherwise unchanged

    Raises:
        InvalidWebhookUrlError: If the value is empty or not a URL
    """
    candidate = (url or "").strip()
    try:
        _url_adapter.validate_python(candidate)
    except ValidationError as e:
        raise InvalidWebhookUrlError("Invalid Webhook URL provided.") from e
    return candidate


class WebhookSettingsService:
    """
    Reads and writes the webhook URL in the settings store.

    Attributes:
        store: Persistent key-value settings store
        default_url: URL returned when nothing has been saved
    """

    def __init__(self, store: SettingsStore, default_url: str):
        self.store = store
        self.default_url = default_url

    def get_webhook_url(self) -> str:
        """Saved webhook URL, or the default when none is saved."""
        return self.store.get(WEBHOOK_URL_KEY) or self.default_url

    def is_default(self) -> bool:
        return self.store.get(WEBHOOK_URL_KEY) is None

    def save_webhook_url(self, url: str) -> str:
        """
        Validate and persist a webhook URL.

        Nothing is written when validation fails.

        Raises:
            InvalidWebhookUrlError: If the URL is invalid
            StorageError: If the write fails
        """
        try:
            valid_url = validate_webhook_url(url)
        except InvalidWebhookUrlError:
            logger.warning("webhook_url_rejected", url=url)
            raise

        self.store.set(WEBHOOK_URL_KEY, valid_url)
        logger.info("webhook_url_saved", url=valid_url)
        return valid_url
