"""Tests for the email notification channel."""

from delivery.notifications.channel import NotificationChannel, NotificationResult
from delivery.notifications.email import EmailChannel


class TestEmailChannel:
    def setup_method(self):
        self.channel = EmailChannel("shivank@gmail.com")

    def test_is_a_notification_channel(self):
        assert isinstance(self.channel, NotificationChannel)
        assert self.channel.channel_id == "shivank@gmail.com"

    def test_notify_records_email(self):
        result = self.channel.notify("Order placed")
        assert isinstance(result, NotificationResult)
        assert result.success is True
        assert result.message_id is not None
        assert len(self.channel.sent_emails) == 1
        assert self.channel.sent_emails[0]["to"] == "shivank@gmail.com"
        assert self.channel.sent_emails[0]["body"] == "Order placed"

    def test_notify_failure(self):
        self.channel.configure(should_succeed=False, failure_reason="SMTP error")
        result = self.channel.notify("Order placed")
        assert result.success is False
        assert result.failure_reason == "SMTP error"
        assert len(self.channel.sent_emails) == 0

    def test_reset(self):
        self.channel.notify("Hi")
        self.channel.configure(should_succeed=False)
        self.channel.reset()
        assert len(self.channel.sent_emails) == 0
        assert self.channel.should_succeed is True
