"""
Verification email delivery.

The credential service only needs one capability from a mail transport:
deliver a verification link to an address. ``LoggingVerificationSender``
simulates delivery by logging the message and keeping it in an outbox.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import get_logger


@dataclass
class OutboxMessage:
    """A verification email that was (simulated as) sent"""
    recipient: str
    subject: str
    body: str
    link: str
    sender: str
    sent_at: datetime = field(default_factory=datetime.now)


class VerificationSender:
    """Interface for delivering verification links"""

    def send_verification_link(self, email: str, link: str) -> bool:
        raise NotImplementedError


class LoggingVerificationSender(VerificationSender):
    """
    Simulated mail transport: logs the email, waits a fixed delay and
    records it in an in-memory outbox.
    """

    def __init__(self, delay_seconds: float = None, sender_address: str = None,
                 subject: str = None):
        config = get_config().notification
        self.logger = get_logger(__name__)
        self.delay_seconds = config.simulated_delay_seconds if delay_seconds is None else delay_seconds
        self.sender_address = sender_address or config.sender_address
        self.subject = subject or config.subject
        self.outbox: List[OutboxMessage] = []

    def send_verification_link(self, email: str, link: str) -> bool:
        body = f"Please click the following link to verify your email: {link}"

        self.logger.info("=== EMAIL VERIFICATION ===")
        self.logger.info(f"To: {email}")
        self.logger.info(f"Subject: {self.subject}")
        self.logger.info(f"Message: {body}")

        if self.delay_seconds > 0:
            time.sleep(self.delay_seconds)

        self.outbox.append(OutboxMessage(
            recipient=email,
            subject=self.subject,
            body=body,
            link=link,
            sender=self.sender_address
        ))
        return True

    def messages_for(self, email: str) -> List[OutboxMessage]:
        """Outbox messages addressed to ``email`` (newest last)"""
        email = email.strip().lower()
        return [message for message in self.outbox if message.recipient.lower() == email]

    def latest_link(self, email: str) -> Optional[str]:
        messages = self.messages_for(email)
        return messages[-1].link if messages else None


# Global sender instance
_verification_sender: Optional[LoggingVerificationSender] = None


def get_verification_sender() -> LoggingVerificationSender:
    """Get the global verification sender instance"""
    global _verification_sender
    if _verification_sender is None:
        _verification_sender = LoggingVerificationSender()
    return _verification_sender
