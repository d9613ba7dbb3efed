"""
Input validation for the auth flows.

Messages are shown to the user as-is and name the failing rule.
"""

import re
from typing import Optional

from finai.libs.result import Error, Result, Return

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8

PASSWORD_RULES = (
    (lambda p: len(p) >= PASSWORD_MIN_LENGTH, "Password must be at least 8 characters"),
    (lambda p: re.search(r"[A-Z]", p) is not None, "Password must contain at least one uppercase letter"),
    (lambda p: re.search(r"[a-z]", p) is not None, "Password must contain at least one lowercase letter"),
    (lambda p: re.search(r"\d", p) is not None, "Password must contain at least one digit"),
)


def validation_error(message: str, field: Optional[str] = None) -> Error:
    return Error("VALIDATION_ERROR", message, field=field)


def validate_email(email: str) -> Result[None]:
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        return Return.err(validation_error("Invalid email format", field="email"))
    return Return.ok(None)


def validate_password(password: str) -> Result[None]:
    """First failing rule wins"""
    for rule, message in PASSWORD_RULES:
        if not rule(password):
            return Return.err(validation_error(message, field="password"))
    return Return.ok(None)


def sanitize_name(name: str) -> str:
    return name.strip()[:NAME_MAX_LENGTH]
