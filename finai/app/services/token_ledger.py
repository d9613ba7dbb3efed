"""
Token Ledger

Issues and redeems single-use, expiring tokens for email verification and
password reset. Operates inside the caller's UnitOfWork; the caller commits.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional

from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.base import utcnow
from finai.domain.entities import TokenType, VerificationToken

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
TOKEN_TTL = timedelta(hours=1)


class TokenLedger:
    """
    Business Rules:
    - Token is 32 random bytes as hex (64 chars); uniqueness left to the table
    - Expires 1 hour after creation
    - Redemption is one conditional update: used_at set only if still NULL,
      unexpired and of the requested type
    - Failed redemptions carry no reason (not found, wrong type, used and
      expired all look the same)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def create_verification_token(self, user_id: int, token_type: TokenType) -> str:
        """
        Persist a new token and return its raw value for the emailed link.
        """
        token = secrets.token_hex(TOKEN_BYTES)
        await self.uow.verification_tokens.create(
            VerificationToken(
                user_id=user_id,
                token=token,
                type=token_type,
                expires_at=utcnow() + TOKEN_TTL,
            )
        )
        logger.info(f"Issued {token_type.value} token for user_id={user_id}")
        return token

    async def verify_token(
        self, token: str, token_type: TokenType
    ) -> Optional[VerificationToken]:
        """
        Redeem a token.

        Returns:
            The consumed token record, or None when it cannot be redeemed
        """
        consumed = await self.uow.verification_tokens.mark_used_if_valid(
            token, token_type, utcnow()
        )
        if not consumed:
            return None
        return await self.uow.verification_tokens.get_by_token(token)
