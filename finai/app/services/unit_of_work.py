from abc import ABC, abstractmethod

from finai.app.repositories.bank_item_repository import IBankItemRepository
from finai.app.repositories.user_repository import IUserRepository
from finai.app.repositories.verification_token_repository import (
    IVerificationTokenRepository,
)


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    verification_tokens: IVerificationTokenRepository
    bank_items: IBankItemRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
