"""Extract-and-notify handler.

:class:`RelayHandler` sequences the two units for one inbound URL:

    validate input → extract (fetch + clean) → build payload → notify

Extraction failures abort the run.  Notification failures do not: the run
still succeeds, with ``webhook_status="failed"`` and the error description
attached (a partial success).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Optional

from pagerelay.config import Settings
from pagerelay.errors import ExtractionError, InvalidInputError, NotificationError
from pagerelay.notifier import NotificationPayload, notify
from pagerelay.scraper import ExtractedContent, extract

logger = logging.getLogger(__name__)

WebhookStatus = Literal["success", "failed"]

Extractor = Callable[[str, Settings], ExtractedContent]
Notifier = Callable[[str, NotificationPayload, float], None]


@dataclass(frozen=True)
class RelayResult:
    """Outcome of one extract-and-notify run."""

    content: ExtractedContent
    webhook_status: WebhookStatus
    webhook_error: Optional[str] = None

    def as_dict(self) -> dict[str, str]:
        data = self.content.as_dict()
        data["webhook_status"] = self.webhook_status
        if self.webhook_error is not None:
            data["webhook_error"] = self.webhook_error
        return data


class RelayHandler:
    """Run extraction, then forward the result to the configured webhook.

    Args:
        settings: Resolved configuration; the webhook address and timeouts
            are read from it.
        extractor: Replaces :func:`~pagerelay.scraper.extract` (tests).
        notifier: Replaces :func:`~pagerelay.notifier.notify` (tests).
    """

    def __init__(
        self,
        settings: Settings,
        extractor: Extractor = extract,
        notifier: Notifier = notify,
    ) -> None:
        self.settings = settings
        self._extract = extractor
        self._notify = notifier

    def run(self, url: Any) -> RelayResult:
        """Extract *url* and notify the webhook.

        Raises:
            InvalidInputError: If *url* is missing, not a string, or blank.
            ExtractionError: If extraction fails; ``source_url`` is set to
                *url*.  The webhook is not called.
        """
        if not url or not isinstance(url, str) or not url.strip():
            raise InvalidInputError("URL is required and must be a string")

        try:
            extracted = self._extract(url, self.settings)
        except ExtractionError as exc:
            if exc.source_url is None:
                exc.source_url = url
            logger.error("Error fetching content from URL %s: %s", url, exc)
            raise

        payload = NotificationPayload.from_content(url, extracted)
        destination = self.settings.webhook_url
        try:
            self._notify(destination, payload, self.settings.webhook_timeout)
        except NotificationError as exc:
            logger.warning(
                "Webhook notification failed for URL %s, but content was extracted. Error: %s",
                url,
                exc,
            )
            return RelayResult(
                content=extracted,
                webhook_status="failed",
                webhook_error=f"Webhook notification failed: {exc}",
            )

        return RelayResult(content=extracted, webhook_status="success")
