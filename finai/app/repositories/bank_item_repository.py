from abc import ABC, abstractmethod
from typing import List, Optional

from finai.domain.entities import BankAccount, BankItem


class IBankItemRepository(ABC):
    """BankItem and BankAccount repository interface - application layer"""

    @abstractmethod
    async def create(self, item: BankItem) -> BankItem:
        """Create a new bank item"""
        pass

    @abstractmethod
    async def get_by_item_id(self, item_id: str, user_id: int) -> Optional[BankItem]:
        """Get a bank item by aggregator item ID, scoped to its owner"""
        pass

    @abstractmethod
    async def list_by_user_id(self, user_id: int) -> List[BankItem]:
        """Get all bank items of a user"""
        pass

    @abstractmethod
    async def upsert_account(self, account: BankAccount) -> BankAccount:
        """Insert an account or refresh the stored one with the same account_id"""
        pass

    @abstractmethod
    async def update(self, item: BankItem) -> BankItem:
        """Update existing bank item"""
        pass

    @abstractmethod
    async def delete(self, item: BankItem) -> None:
        """Delete a bank item together with its accounts"""
        pass
