"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from finai.domain.entities import User

# ============================================================================
# Response messages
# ============================================================================

REGISTERED_MESSAGE = "Registration successful. Please check your email to verify your account."
FORGOT_PASSWORD_MESSAGE = (
    "If an account exists with that email, a password reset link has been sent."
)
RESEND_VERIFICATION_MESSAGE = (
    "If an account exists with that email, a verification link has been sent."
)
PASSWORD_RESET_MESSAGE = "Password reset successfully. You can now log in with your new password."
EMAIL_VERIFIED_MESSAGE = "Email verified successfully"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Registration intent; fields may be missing and are checked by the use case"""

    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class MessageResponse(BaseModel):
    """Plain acknowledgement"""

    message: str


class SessionUser(BaseModel):
    """User fields carried inside the session cookie"""

    id: int
    email: str
    name: str
    avatar_url: Optional[str] = None
    email_verified: bool
    provider: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            email_verified=user.email_verified,
            provider=user.provider,
        )


class UserSummary(BaseModel):
    """Public user fields returned by login"""

    id: int
    email: str
    name: str
    avatar_url: Optional[str] = None


class LoginResponse(BaseModel):
    user: UserSummary


@dataclass
class AuthenticatedResult:
    """Use case output for flows that end with a new session"""

    session_user: SessionUser
    body: BaseModel
