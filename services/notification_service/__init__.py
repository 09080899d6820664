"""
Notification service - delivers email verification links.
"""

from .verification_sender import (
    OutboxMessage,
    VerificationSender,
    LoggingVerificationSender,
    get_verification_sender
)

__all__ = [
    'OutboxMessage',
    'VerificationSender',
    'LoggingVerificationSender',
    'get_verification_sender'
]
