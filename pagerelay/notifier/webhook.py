"""Webhook notifier: one JSON POST per extracted page, no retries."""

from __future__ import annotations

import logging

import httpx

from pagerelay.errors import NotificationError, NotificationNetworkError
from pagerelay.notifier.models import NotificationPayload

logger = logging.getLogger(__name__)

UNREADABLE_BODY = "Could not read error body."


def _read_error_body(response: httpx.Response) -> str:
    """Read a streamed response body as text, or return :data:`UNREADABLE_BODY`.

    A failure here never replaces the status code the caller already has.
    """
    try:
        response.read()
        return response.text
    except (httpx.HTTPError, httpx.StreamError, UnicodeDecodeError, LookupError) as exc:
        logger.warning("Failed to read error body from webhook response: %s", exc)
        return UNREADABLE_BODY


def notify(destination: str, payload: NotificationPayload, timeout: float = 15.0) -> None:
    """POST *payload* as JSON to *destination*.

    A single attempt is made.  Any 2xx answer counts as delivered; the
    response body is ignored.  The body of a rejection is read only after the
    status is known.

    Raises:
        NotificationError: If the endpoint answers with a non-2xx status.
            ``status_code`` and ``body`` carry the rejection details.
        NotificationNetworkError: If the endpoint cannot be reached.
    """
    logger.info("Sending data to webhook URL: %s", destination)
    with httpx.Client(timeout=timeout) as client:
        try:
            response = client.send(
                client.build_request("POST", destination, json=payload.as_dict()),
                stream=True,
            )
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            logger.error("Error sending data to webhook: %s", exc)
            raise NotificationNetworkError(
                f"Network error: Failed to send data to webhook: {exc}. "
                "Check webhook URL and network connectivity."
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Error sending data to webhook: %s", exc)
            raise NotificationError(f"Failed to send data to webhook: {exc}") from exc

        try:
            if not response.is_success:
                body = _read_error_body(response)
                logger.error(
                    "Webhook notification failed. Status: %s, Body: %s",
                    response.status_code,
                    body,
                )
                raise NotificationError(
                    f"Webhook request failed with status {response.status_code}. "
                    f"Response: {body}",
                    status_code=response.status_code,
                    body=body,
                )
        finally:
            response.close()

    logger.info("Data successfully sent to webhook.")
