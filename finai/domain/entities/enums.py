"""
finai Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class TokenType(str, Enum):
    """Purpose of a single-use verification token"""

    email_verify = "email_verify"
    password_reset = "password_reset"


class OAuthProviderName(str, Enum):
    """External identity providers"""

    github = "github"
    google = "google"


class BankItemStatus(str, Enum):
    """Connection status of a linked bank item"""

    healthy = "healthy"
    degraded = "degraded"
