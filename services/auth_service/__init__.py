"""
Auth service - accounts, sign-in, session user and email verification.
"""

from .models import SessionUser, UserRecord, ProfileUpdate, derive_username, normalize_email
from .user_repository import UserRepository, get_user_repository
from .credential_service import CredentialService, get_credential_service
from .validation import validate_registration, validate_login, validate_password, validate_email

__all__ = [
    'SessionUser',
    'UserRecord',
    'ProfileUpdate',
    'derive_username',
    'normalize_email',
    'UserRepository',
    'get_user_repository',
    'CredentialService',
    'get_credential_service',
    'validate_registration',
    'validate_login',
    'validate_password',
    'validate_email'
]
