"""
Verify Email Use Case

Redeems an email verification token and signs the user in.
"""

import logging
from typing import Optional

from finai.app.services.token_ledger import TokenLedger
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import TokenType
from finai.libs.result import Error, Result, Return

from .dtos import EMAIL_VERIFIED_MESSAGE, AuthenticatedResult, MessageResponse, SessionUser
from .validation import validation_error

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token must be an unused, unexpired email_verify token
    - Sets email_verified = True in the same transaction
    - Ends with a session for the verified user (auto-login)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: Optional[str]) -> Result[AuthenticatedResult]:
        if not token:
            return Return.err(validation_error("Token is required", field="token"))

        async with self.uow:
            verified = await TokenLedger(self.uow).verify_token(token, TokenType.email_verify)
            if verified is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired verification token")
                )

            user = await self.uow.users.get_by_id(verified.user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            user.email_verified = True
            user = await self.uow.users.update(user)
            await self.uow.commit()

        logger.info(f"Email verified for user_id={user.id}")
        return Return.ok(
            AuthenticatedResult(
                session_user=SessionUser.from_user(user),
                body=MessageResponse(message=EMAIL_VERIFIED_MESSAGE),
            )
        )
