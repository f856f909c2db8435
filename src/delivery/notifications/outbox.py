"""Outbox of confirmations that could not be delivered at checkout.

Notification failure never fails an order. The undelivered message is kept
here and re-attempted out of band until it goes through or runs out of
attempts.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import Lock


@dataclass
class PendingNotification:
    user_id: str
    message: str
    attempts: int = 1
    last_error: str | None = None
    queued_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class NotificationOutbox:
    def __init__(self) -> None:
        self._pending: list[PendingNotification] = []
        self._lock = Lock()

    def enqueue(self, entry: PendingNotification) -> None:
        with self._lock:
            self._pending.append(entry)

    def drain(self) -> list[PendingNotification]:
        """Remove and return every pending entry, oldest first."""
        with self._lock:
            entries, self._pending = self._pending, []
        return entries

    def pending(self) -> list[PendingNotification]:
        with self._lock:
            return list(self._pending)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
