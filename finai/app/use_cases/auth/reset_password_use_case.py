"""
Reset Password Use Case

Redeems a password reset token and overwrites the password hash.
"""

import logging
from typing import Optional

from finai.app.services.passwords import hash_password
from finai.app.services.token_ledger import TokenLedger
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import TokenType
from finai.libs.result import Error, Result, Return

from .dtos import PASSWORD_RESET_MESSAGE, MessageResponse
from .validation import validate_password, validation_error

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - New password must pass the strength rules
    - Token must be an unused, unexpired password_reset token; every failure
      reads "Invalid or expired reset token"
    - Token is consumed in the same transaction as the password update
    - No session is issued; the user logs in with the new password
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, token: Optional[str], password: Optional[str]
    ) -> Result[MessageResponse]:
        if not token or not password:
            return Return.err(validation_error("Token and password are required"))

        password_check = validate_password(password)
        if password_check.is_err():
            return Return.err(password_check.error)

        # Hash before opening the transaction so the token row is not held
        # during bcrypt work
        password_hash = await hash_password(password)

        async with self.uow:
            verified = await TokenLedger(self.uow).verify_token(token, TokenType.password_reset)
            if verified is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset token"))

            user = await self.uow.users.get_by_id(verified.user_id)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset token"))

            user.password_hash = password_hash
            await self.uow.users.update(user)
            await self.uow.commit()

        logger.info(f"Password reset for user_id={user.id}")
        return Return.ok(MessageResponse(message=PASSWORD_RESET_MESSAGE))
