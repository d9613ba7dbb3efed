"""
Forgot Password Use Case

Issues a password reset token and mails it.
"""

import logging
from typing import Optional

from finai.app.services.credential_store import CredentialStore
from finai.app.services.email_sender import EmailDeliveryError, IEmailSender
from finai.app.services.token_ledger import TokenLedger
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import TokenType
from finai.libs.result import Result, Return

from .dtos import FORGOT_PASSWORD_MESSAGE, MessageResponse
from .validation import validation_error

logger = logging.getLogger(__name__)


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Token only for existing accounts that have a password (not OAuth-only)
    - Same response whether or not the account exists (no enumeration)
    - Mail failures are logged and never change the response
    """

    def __init__(self, uow: UnitOfWork, email_sender: IEmailSender):
        self.uow = uow
        self.email_sender = email_sender

    async def execute(self, email: Optional[str]) -> Result[MessageResponse]:
        if not email:
            return Return.err(validation_error("Email is required", field="email"))

        async with self.uow:
            user = await CredentialStore(self.uow).find_user_by_email(email)

            token = None
            if user is not None and user.password_hash:
                token = await TokenLedger(self.uow).create_verification_token(
                    user.id, TokenType.password_reset
                )
                await self.uow.commit()

        if token is not None:
            try:
                await self.email_sender.send_password_reset_email(user.email, token)
            except EmailDeliveryError:
                logger.error(f"Password reset email not delivered for user_id={user.id}")

        return Return.ok(MessageResponse(message=FORGOT_PASSWORD_MESSAGE))
