"""Field validators shared by request schemas and services."""
import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.\-]{3,50}$")


def password_problem(password: str) -> Optional[str]:
    """Describe why *password* is too weak, or None when it is acceptable"""
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if not any(char.isdigit() for char in password):
        return "Password must contain at least one digit"
    if not any(char.isupper() for char in password):
        return "Password must contain at least one uppercase letter"
    if not any(char.islower() for char in password):
        return "Password must contain at least one lowercase letter"
    return None


def username_problem(username: str) -> Optional[str]:
    if not _USERNAME_RE.match(username):
        return "Username must be 3-50 characters: letters, digits, '.', '_' or '-'"
    return None


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
