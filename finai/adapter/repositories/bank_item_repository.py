from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from finai.app.repositories.bank_item_repository import IBankItemRepository
from finai.domain.entities import BankAccount, BankItem


class BankItemRepository(IBankItemRepository):
    """BankItem repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, item: BankItem) -> BankItem:
        """Create a new bank item"""
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def get_by_item_id(self, item_id: str, user_id: int) -> Optional[BankItem]:
        """Get a bank item by aggregator item ID, scoped to its owner"""
        stmt = select(BankItem).where(
            BankItem.item_id == item_id, BankItem.user_id == user_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_by_user_id(self, user_id: int) -> List[BankItem]:
        """Get all bank items of a user"""
        stmt = select(BankItem).where(BankItem.user_id == user_id).order_by(BankItem.id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def update(self, item: BankItem) -> BankItem:
        """Update existing bank item"""
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def delete(self, item: BankItem) -> None:
        """Delete a bank item together with its accounts"""
        await self.session.execute(delete(BankAccount).where(BankAccount.bank_item_id == item.id))
        await self.session.delete(item)
        await self.session.flush()

    async def upsert_account(self, account: BankAccount) -> BankAccount:
        """Insert an account or refresh the stored one with the same account_id"""
        stmt = select(BankAccount).where(BankAccount.account_id == account.account_id)
        result = await self.session.exec(stmt)
        existing = result.one_or_none()

        if existing is None:
            self.session.add(account)
            await self.session.flush()
            await self.session.refresh(account)
            return account

        for field in (
            "name",
            "official_name",
            "mask",
            "type",
            "subtype",
            "current_balance",
            "available_balance",
            "iso_currency_code",
        ):
            setattr(existing, field, getattr(account, field))
        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        return existing
