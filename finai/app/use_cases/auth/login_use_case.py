"""
Login Use Case

Password authentication for verified accounts.
"""

import logging
from typing import Optional

from finai.app.services.credential_store import CredentialStore, normalize_email
from finai.app.services.passwords import burn_password_check, verify_password
from finai.app.services.rate_limiter import IRateLimiter, RateLimitBucket
from finai.app.services.unit_of_work import UnitOfWork
from finai.libs.result import Error, Result, Return

from .dtos import (
    INVALID_CREDENTIALS_MESSAGE,
    AuthenticatedResult,
    LoginResponse,
    SessionUser,
    UserSummary,
)
from .validation import validate_email, validation_error

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for password login.

    Business Rules:
    - Per-account budget consumed on the lower-cased email
    - Unknown email, OAuth-only account and wrong password all fail with the
      same INVALID_CREDENTIALS message and the same bcrypt cost
    - Verification status is checked only after the password matched, so an
      unverified user with the right password gets EMAIL_NOT_VERIFIED
    - Success yields the session principal; the caller issues the cookie
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: IRateLimiter):
        self.uow = uow
        self.rate_limiter = rate_limiter

    async def execute(
        self, email: Optional[str], password: Optional[str]
    ) -> Result[AuthenticatedResult]:
        if not email or not password:
            return Return.err(validation_error("Email and password are required"))

        email_check = validate_email(email)
        if email_check.is_err():
            return Return.err(email_check.error)

        limited = self.rate_limiter.consume(RateLimitBucket.auth_account, normalize_email(email))
        if limited.is_err():
            return Return.err(limited.error)

        # The row expires when the unit of work rolls back, so everything read
        # from it stays inside the block
        async with self.uow:
            user = await CredentialStore(self.uow).find_user_by_email(email)

            if user is None or not user.password_hash:
                await burn_password_check(password)
                return Return.err(Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE))

            if not await verify_password(password, user.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE))

            if not user.email_verified:
                return Return.err(
                    Error("EMAIL_NOT_VERIFIED", "Please verify your email before logging in")
                )

            authenticated = AuthenticatedResult(
                session_user=SessionUser.from_user(user),
                body=LoginResponse(
                    user=UserSummary(
                        id=user.id,
                        email=user.email,
                        name=user.name,
                        avatar_url=user.avatar_url,
                    )
                ),
            )

        logger.info(f"Password login for user_id={authenticated.session_user.id}")
        return Return.ok(authenticated)
