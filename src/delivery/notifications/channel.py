"""Notification channel port: abstract interface for customer notifications."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationResult:
    """Result of a notification dispatch."""

    success: bool
    message_id: str | None = None
    failure_reason: str | None = None


class NotificationChannel(ABC):
    """Abstract interface for notification channels.

    ``notify`` is fire-and-forget: callers only learn whether the channel
    accepted the message.
    """

    channel_id: str

    @abstractmethod
    def notify(self, message: str) -> NotificationResult:
        ...
