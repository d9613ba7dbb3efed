"""
Resend Verification Email Use Case

Issues a fresh email_verify token for an unverified account.
"""

import logging
from typing import Optional

from finai.app.services.credential_store import CredentialStore
from finai.app.services.email_sender import EmailDeliveryError, IEmailSender
from finai.app.services.token_ledger import TokenLedger
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import TokenType
from finai.libs.result import Result, Return

from .dtos import RESEND_VERIFICATION_MESSAGE, MessageResponse
from .validation import validation_error

logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    """
    Use case for resending email verification.

    Business Rules:
    - New token only when the account exists and is unverified
    - Older tokens stay valid until they expire or are used
    - Same response for unknown, verified and unverified emails
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
            if user is not None and not user.email_verified:
                token = await TokenLedger(self.uow).create_verification_token(
                    user.id, TokenType.email_verify
                )
                await self.uow.commit()

        if token is not None:
            try:
                await self.email_sender.send_verification_email(user.email, token)
            except EmailDeliveryError:
                logger.error(f"Verification email not delivered for user_id={user.id}")

        return Return.ok(MessageResponse(message=RESEND_VERIFICATION_MESSAGE))
