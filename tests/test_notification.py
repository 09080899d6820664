"""
Tests for the simulated verification email sender
"""

from unittest.mock import patch

from services.notification_service import LoggingVerificationSender


class TestLoggingVerificationSender:
    """Test outbox recording and simulated delay"""

    def test_send_records_message(self):
        sender = LoggingVerificationSender(delay_seconds=0, sender_address="noreply@test",
                                           subject="Verify")

        assert sender.send_verification_link("ann@x.io", "http://app/verify-email?token=t") is True

        message = sender.outbox[0]
        assert message.recipient == "ann@x.io"
        assert message.sender == "noreply@test"
        assert message.subject == "Verify"
        assert message.link in message.body

    def test_messages_for_is_case_insensitive(self):
        sender = LoggingVerificationSender(delay_seconds=0)
        sender.send_verification_link("ann@x.io", "link-1")
        sender.send_verification_link("bob@x.io", "link-2")
        sender.send_verification_link("ann@x.io", "link-3")

        assert [m.link for m in sender.messages_for("ANN@x.io")] == ["link-1", "link-3"]
        assert sender.latest_link("ann@x.io") == "link-3"
        assert sender.latest_link("nobody@x.io") is None

    def test_delay_is_applied(self):
        sender = LoggingVerificationSender(delay_seconds=1.5)

        with patch("services.notification_service.verification_sender.time.sleep") as mock_sleep:
            sender.send_verification_link("ann@x.io", "link")

        mock_sleep.assert_called_once_with(1.5)

    def test_no_delay_when_zero(self):
        sender = LoggingVerificationSender(delay_seconds=0)

        with patch("services.notification_service.verification_sender.time.sleep") as mock_sleep:
            sender.send_verification_link("ann@x.io", "link")

        mock_sleep.assert_not_called()

    def test_logs_email(self, caplog):
        sender = LoggingVerificationSender(delay_seconds=0)

        with caplog.at_level("INFO"):
            sender.send_verification_link("ann@x.io", "http://app/verify-email?token=t")

        assert "=== EMAIL VERIFICATION ===" in caplog.text
        assert "To: ann@x.io" in caplog.text
