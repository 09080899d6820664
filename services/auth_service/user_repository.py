"""
User repository - handles user account and session-user persistence.
"""

import secrets
from typing import List, Optional

import bcrypt

from services.auth_service.models import SessionUser, UserRecord, normalize_email
from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import get_logger
from infrastructure.storage import (
    KeyValueStore,
    RecordCodec,
    RecordRepository,
    get_key_value_store
)


class UserRepository:
    """
    Repository for user accounts and the persisted session user.
    Password hashing lives here so hashes never leave this layer.
    """

    def __init__(self, store: KeyValueStore = None, bcrypt_rounds: int = None):
        """
        Initialize user repository

        Args:
            store: Key-value store (defaults to the global store)
            bcrypt_rounds: bcrypt work factor (defaults to config setting)
        """
        self.logger = get_logger(__name__)
        config = get_config()
        self.store = store or get_key_value_store()
        self.bcrypt_rounds = bcrypt_rounds or config.auth.bcrypt_rounds
        keys = config.storage.keys

        self._users = RecordRepository(
            self.store, keys.users, RecordCodec("users", List[UserRecord]), list
        )
        self._session = RecordRepository(
            self.store, keys.session_user, RecordCodec("session_user", SessionUser), lambda: None
        )
        self._dummy_hash: Optional[bytes] = None

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def _verify_password(self, password: str, hashed: str) -> bool:
        """Verify password against hash"""
        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            # Malformed stored hash or password over the bcrypt length limit
            self.logger.warning("Password check rejected by bcrypt")
            return False

    def burn_password_check(self, password: str) -> None:
        """Run a check against a throwaway hash so unknown emails cost the same time"""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(
                secrets.token_bytes(16), bcrypt.gensalt(rounds=self.bcrypt_rounds)
            )
        self._verify_password(password, self._dummy_hash.decode('utf-8'))

    def list_users(self) -> List[UserRecord]:
        return self._users.load()

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Case-insensitive lookup by email"""
        email = normalize_email(email)
        if not email:
            return None
        for user in self.list_users():
            if user.has_email(email):
                return user
        return None

    def find_by_verification_token(self, token: str) -> Optional[UserRecord]:
        for user in self.list_users():
            if user.verification_token and secrets.compare_digest(user.verification_token, token):
                return user
        return None

    def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        for user in self.list_users():
            if user.id == user_id:
                return user
        return None

    def add_user(self, user: UserRecord) -> None:
        users = self.list_users()
        users.append(user)
        self._users.save(users)
        self.logger.info(f"User stored: {user.id}")

    def replace_user(self, user: UserRecord) -> bool:
        """Replace the stored record with the same id"""
        users = self.list_users()
        for index, existing in enumerate(users):
            if existing.id == user.id:
                users[index] = user
                self._users.save(users)
                return True
        return False

    def create_user(self, user_id: str, email: str, display_name: str, username: str,
                    password: str, **fields) -> UserRecord:
        """Hash the password and store a new account"""
        user = UserRecord(
            id=user_id,
            email=normalize_email(email),
            display_name=display_name,
            username=username,
            password_hash=self._hash_password(password),
            **fields
        )
        self.add_user(user)
        return user

    def authenticate(self, email: str, password: str) -> Optional[UserRecord]:
        """
        Authenticate user with email and password

        Returns:
            UserRecord if authentication successful, None otherwise
        """
        user = self.find_by_email(email)

        if not user:
            self.burn_password_check(password)
            return None

        if not self._verify_password(password, user.password_hash):
            return None

        return user

    def clear_users(self) -> None:
        self._users.clear()

    def get_session_user(self) -> Optional[SessionUser]:
        return self._session.load()

    def set_session_user(self, session_user: SessionUser) -> None:
        self._session.save(session_user)

    def clear_session_user(self) -> None:
        self._session.clear()


# Global user repository instance
_user_repository: Optional[UserRepository] = None


def get_user_repository() -> UserRepository:
    """Get the global user repository instance"""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
