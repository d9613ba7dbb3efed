"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .oauth_login_use_case import OAuthLoginUseCase
from .dtos import (
    AuthenticatedResult,
    LoginResponse,
    MessageResponse,
    RegisterCommand,
    SessionUser,
    UserSummary,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    "OAuthLoginUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "MessageResponse",
    "LoginResponse",
    "AuthenticatedResult",
    # DTOs - Nested Models
    "SessionUser",
    "UserSummary",
]
