from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from finai.app.repositories.verification_token_repository import (
    IVerificationTokenRepository,
)
from finai.domain.entities import TokenType, VerificationToken


class VerificationTokenRepository(IVerificationTokenRepository):
    """VerificationToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: VerificationToken) -> VerificationToken:
        """Create a new verification token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token(self, token: str) -> Optional[VerificationToken]:
        """Get verification token by its raw value"""
        stmt = select(VerificationToken).where(VerificationToken.token == token)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def mark_used_if_valid(
        self, token: str, token_type: TokenType, now: datetime
    ) -> bool:
        """Compare-and-swap on used_at; a concurrent redeemer updates zero rows"""
        stmt = (
            update(VerificationToken)
            .where(
                VerificationToken.token == token,
                VerificationToken.type == token_type,
                VerificationToken.used_at.is_(None),
                VerificationToken.expires_at > now,
            )
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
