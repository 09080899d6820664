"""
Credential service - registration, sign-in, the session user and email verification.
"""

import secrets
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

from pydantic import ValidationError

from services.auth_service.models import (
    ProfileUpdate,
    SessionUser,
    UserRecord,
    derive_username,
    normalize_email
)
from services.auth_service.user_repository import UserRepository, get_user_repository
from services.auth_service.validation import validate_registration
from services.notification_service import VerificationSender, get_verification_sender
from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import (
    get_logger,
    get_error_tracker,
    log_user_interaction
)
from infrastructure.storage import utc_now


class CredentialService:
    """
    Main authentication service.
    Owns the user accounts and the single persisted session user.
    """

    def __init__(self, user_repository: UserRepository = None,
                 sender: VerificationSender = None,
                 clock: Callable[[], datetime] = utc_now):
        config = get_config()
        self.user_repository = user_repository or get_user_repository()
        self.sender = sender or get_verification_sender()
        self.clock = clock
        self.logger = get_logger(__name__)
        self.token_ttl = timedelta(hours=config.auth.verification_token_ttl_hours)
        self.base_url = config.auth.verification_base_url

    def get_session_user(self) -> Optional[SessionUser]:
        """Currently authenticated identity, or None"""
        return self.user_repository.get_session_user()

    def get_user_by_email(self, email: str) -> Optional[SessionUser]:
        user = self.user_repository.find_by_email(email)
        return user.to_session_user() if user else None

    def register(self, email: str, password: str, display_name: str) -> bool:
        """
        Create an account, sign it in and send the verification email

        Args:
            email: Email address (unique, case-insensitive)
            password: Plain text password (will be hashed)
            display_name: Public name; the username is derived from it

        Returns:
            True if the account was created, False otherwise
        """
        errors = validate_registration(email, password, display_name)
        if errors:
            self.logger.warning(f"Registration rejected: {', '.join(sorted(errors))}")
            return False

        if self.user_repository.find_by_email(email):
            self.logger.warning(f"User already exists with email: {normalize_email(email)}")
            return False

        now = self.clock()
        display_name = display_name.strip()
        user = self.user_repository.create_user(
            user_id=str(uuid.uuid4()),
            email=email,
            display_name=display_name,
            username=derive_username(display_name),
            password=password,
            name=display_name,
            created_at=now,
            email_verified=False,
            verification_token=self._new_token(),
            verification_token_expiry=now + self.token_ttl
        )

        self.user_repository.set_session_user(user.to_session_user())
        self.send_verification_email(user.email)

        log_user_interaction(self.logger, "register", user_id=user.id)
        return True

    def login(self, email: str, password: str) -> bool:
        """
        Authenticate and make the account the session user

        Returns:
            True if successful, False otherwise (never says which part was wrong)
        """
        user = self.user_repository.authenticate(email, password)

        if not user:
            self.logger.warning("Failed sign-in attempt")
            return False

        self.user_repository.set_session_user(user.to_session_user())
        log_user_interaction(self.logger, "login", user_id=user.id)
        return True

    def logout(self) -> None:
        session_user = self.get_session_user()
        self.user_repository.clear_session_user()
        if session_user:
            log_user_interaction(self.logger, "logout", user_id=session_user.id)

    def update_profile(self, session_user: Optional[SessionUser],
                       changes: Dict[str, Any]) -> Optional[SessionUser]:
        """
        Merge profile fields into the account and the session user

        Args:
            session_user: Identity performing the update
            changes: Subset of display_name, name, phone, address, avatar

        Returns:
            The refreshed SessionUser, or None when rejected
        """
        if session_user is None:
            return None

        try:
            update = ProfileUpdate.model_validate(changes)
        except ValidationError as e:
            self.logger.warning(f"Profile update rejected: {e.error_count()} invalid field(s)")
            return None

        user = self.user_repository.get_user_by_id(session_user.id)
        if user is None:
            self.logger.warning(f"Profile update for unknown user: {session_user.id}")
            return None

        updated = user.model_copy(update=update.changes())
        self.user_repository.replace_user(updated)
        refreshed = updated.to_session_user()
        self._refresh_session(refreshed)

        log_user_interaction(self.logger, "update_profile", user_id=user.id,
                             fields=sorted(update.changes()))
        return refreshed

    def build_verification_link(self, token: str) -> str:
        return f"{self.base_url.rstrip('/')}/verify-email?{urlencode({'token': token})}"

    def send_verification_email(self, email: str) -> bool:
        """
        Send the verification link for an account

        A missing or expired token is replaced by a fresh one first, so an
        account never holds more than one outstanding token.
        """
        user = self.user_repository.find_by_email(email)
        if not user:
            return False

        if user.email_verified:
            self.logger.info(f"Email already verified for user: {user.id}")
            return False

        now = self.clock()
        if not user.verification_token or self._is_expired(user, now):
            user = user.model_copy(update={
                "verification_token": self._new_token(),
                "verification_token_expiry": now + self.token_ttl
            })
            self.user_repository.replace_user(user)
            self._refresh_session(user.to_session_user())

        link = self.build_verification_link(user.verification_token)
        try:
            return self.sender.send_verification_link(user.email, link)
        except Exception as e:
            get_error_tracker().track_error(e, "send_verification_email", user_id=user.id)
            return False

    def verify_email(self, token: str) -> bool:
        """
        Consume a verification token

        Returns:
            True if the token was valid and unexpired
        """
        if not token:
            return False

        user = self.user_repository.find_by_verification_token(token)
        if not user:
            self.logger.warning("Unknown verification token")
            return False

        if self._is_expired(user, self.clock()):
            self.logger.warning(f"Expired verification token for user: {user.id}")
            return False

        verified = user.model_copy(update={
            "email_verified": True,
            "verification_token": None,
            "verification_token_expiry": None
        })
        self.user_repository.replace_user(verified)
        self._refresh_session(verified.to_session_user())

        log_user_interaction(self.logger, "verify_email", user_id=user.id)
        return True

    def resend_verification_email(self, session_user: Optional[SessionUser]) -> bool:
        if session_user is None:
            return False
        return self.send_verification_email(session_user.email)

    def clear_all_data(self) -> None:
        """Remove the session user and every account"""
        self.user_repository.clear_session_user()
        self.user_repository.clear_users()
        self.logger.info("All user data cleared")

    def _refresh_session(self, session_user: SessionUser) -> None:
        """Replace the stored session user if it is the same identity"""
        current = self.get_session_user()
        if current and current.id == session_user.id:
            self.user_repository.set_session_user(session_user)

    @staticmethod
    def _is_expired(user: UserRecord, now: datetime) -> bool:
        expiry = user.verification_token_expiry
        return expiry is None or now > expiry

    @staticmethod
    def _new_token() -> str:
        return secrets.token_urlsafe(32)


# Global credential service instance
_credential_service: Optional[CredentialService] = None


def get_credential_service() -> CredentialService:
    """Get the global credential service instance"""
    global _credential_service
    if _credential_service is None:
        _credential_service = CredentialService()
    return _credential_service
