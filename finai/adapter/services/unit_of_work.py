from sqlmodel.ext.asyncio.session import AsyncSession

from finai.adapter.repositories.bank_item_repository import BankItemRepository
from finai.adapter.repositories.user_repository import UserRepository
from finai.adapter.repositories.verification_token_repository import (
    VerificationTokenRepository,
)
from finai.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.verification_tokens = VerificationTokenRepository(self.session)
        self.bank_items = BankItemRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
