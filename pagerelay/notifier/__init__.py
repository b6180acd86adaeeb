"""Notifier package: delivers extracted pages to the outbound webhook."""

from pagerelay.notifier.models import NotificationPayload
from pagerelay.notifier.webhook import notify

__all__ = ["notify", "NotificationPayload"]
