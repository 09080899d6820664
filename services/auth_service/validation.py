"""
Form validation for sign-in and registration.

Each validator returns a ``{field: message}`` dict; an empty dict means the
input is acceptable.
"""

import re
from typing import Dict, Optional, Tuple

from infrastructure.config.settings import get_config


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARACTERS = "@$!%*?&"

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_password(password: str, min_length: int = None) -> Tuple[bool, str]:
    """
    Check password strength

    Args:
        password: Candidate password
        min_length: Minimum length (defaults to config setting)

    Returns:
        (is_valid, message) tuple
    """
    if min_length is None:
        min_length = get_config().auth.password_min_length

    if len(password) < min_length:
        return False, f"Password must be at least {min_length} characters long"
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False, f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
    if not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"
    if not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"
    if not re.search(r"\d", password):
        return False, "Password must contain at least one number"
    if not any(char in SPECIAL_CHARACTERS for char in password):
        return False, f"Password must contain at least one special character ({SPECIAL_CHARACTERS})"
    return True, ""


def validate_registration(email: str, password: str, display_name: str,
                          confirm_password: Optional[str] = None) -> Dict[str, str]:
    """Validate the registration form"""
    errors: Dict[str, str] = {}
    min_display_name = get_config().auth.display_name_min_length

    if not email.strip():
        errors["email"] = "Email is required"
    elif not validate_email(email):
        errors["email"] = "Please enter a valid email address"

    if not password:
        errors["password"] = "Password is required"
    else:
        is_valid, message = validate_password(password)
        if not is_valid:
            errors["password"] = message

    if not display_name.strip():
        errors["display_name"] = "Display name is required"
    elif len(display_name.strip()) < min_display_name:
        errors["display_name"] = f"Display name must be at least {min_display_name} characters long"

    if confirm_password is not None:
        if not confirm_password:
            errors["confirm_password"] = "Please confirm your password"
        elif confirm_password != password:
            errors["confirm_password"] = "Passwords do not match"

    return errors


def validate_login(email: str, password: str) -> Dict[str, str]:
    """Validate the sign-in form"""
    errors: Dict[str, str] = {}

    if not email.strip():
        errors["email"] = "Email is required"
    elif not validate_email(email):
        errors["email"] = "Please enter a valid email address"

    if not password:
        errors["password"] = "Password is required"

    return errors
