"""
Register Use Case

Creates a password account and starts email verification.
"""

import logging

from sqlalchemy.exc import IntegrityError

from finai.app.services.credential_store import CredentialStore, NewUser
from finai.app.services.email_sender import EmailDeliveryError, IEmailSender
from finai.app.services.passwords import hash_password
from finai.app.services.token_ledger import TokenLedger
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import TokenType
from finai.libs.result import Error, Result, Return

from .dtos import REGISTERED_MESSAGE, MessageResponse, RegisterCommand
from .validation import sanitize_name, validate_email, validate_password, validation_error

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Use case for password registration.

    Business Rules:
    - Not rate limited; a duplicate email answers 409, which reveals that
      the account exists
    - Password hashed with bcrypt cost factor 12
    - User created with email_verified=False
    - One email_verify token issued and mailed
    - User and token are committed before the mail is sent; a mail failure
      is reported as a server error but the account stays
    - Never returns the user record
    """

    def __init__(self, uow: UnitOfWork, email_sender: IEmailSender):
        self.uow = uow
        self.email_sender = email_sender

    async def execute(self, command: RegisterCommand) -> Result[MessageResponse]:
        if not command.email or not command.password or not command.name:
            return Return.err(validation_error("Email, password, and name are required"))

        email_check = validate_email(command.email)
        if email_check.is_err():
            return Return.err(email_check.error)

        password_check = validate_password(command.password)
        if password_check.is_err():
            return Return.err(password_check.error)

        name = sanitize_name(command.name)
        if not name:
            return Return.err(validation_error("Email, password, and name are required", field="name"))

        async with self.uow:
            credentials = CredentialStore(self.uow)

            existing_user = await credentials.find_user_by_email(command.email)
            if existing_user:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "An account with this email already exists")
                )

            password_hash = await hash_password(command.password)
            try:
                user = await credentials.create_user(
                    NewUser(email=command.email, name=name, password_hash=password_hash)
                )
                token = await TokenLedger(self.uow).create_verification_token(
                    user.id, TokenType.email_verify
                )
                await self.uow.commit()
            except IntegrityError:
                # A concurrent registration inserted the same email first
                logger.info("Registration lost the race on users.email")
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "An account with this email already exists")
                )

        try:
            await self.email_sender.send_verification_email(user.email, token)
        except EmailDeliveryError:
            logger.error(f"Verification email not delivered for new user_id={user.id}")
            return Return.err(
                Error("EMAIL_DELIVERY_FAILED", "Failed to send verification email")
            )

        logger.info(f"Registered user_id={user.id}")
        return Return.ok(MessageResponse(message=REGISTERED_MESSAGE))
