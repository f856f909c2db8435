"""Email channel: records sent emails in memory."""

from uuid import uuid4

from delivery.notifications.channel import NotificationChannel, NotificationResult


class EmailChannel(NotificationChannel):
    """Email channel that records messages in memory for later inspection."""

    def __init__(self, address: str) -> None:
        self.channel_id = address
        self.address = address
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        """Configure the channel to accept or reject subsequent messages."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify(self, message: str) -> NotificationResult:
        if not self.should_succeed:
            return NotificationResult(success=False, failure_reason=self.failure_reason)

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "to": self.address,
                "body": message,
            }
        )
        return NotificationResult(success=True, message_id=message_id)

    def reset(self):
        """Clear sent emails and restore the default behavior."""
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
