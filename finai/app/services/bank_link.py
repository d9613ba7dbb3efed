from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel

GENERIC_BANK_ERROR_MESSAGE = "An error occurred with the banking service"


class BankLinkError(Exception):
    """Aggregator failure, already mapped to a status code and safe message"""

    def __init__(self, status_code: int = 500, message: str = GENERIC_BANK_ERROR_MESSAGE):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class ExchangedItem(BaseModel):
    access_token: str
    item_id: str


class LinkedAccount(BaseModel):
    account_id: str
    name: str
    official_name: Optional[str] = None
    mask: Optional[str] = None
    type: str
    subtype: Optional[str] = None
    current_balance: Optional[float] = None
    available_balance: Optional[float] = None
    iso_currency_code: Optional[str] = None


class ItemHealth(BaseModel):
    """Error the aggregator currently reports for an item, if any"""

    error_code: Optional[str] = None
    display_message: Optional[str] = None


class IBankLinkClient(ABC):
    """Third-party bank aggregator; every method raises BankLinkError on failure"""

    @abstractmethod
    async def create_link_token(self, client_user_id: str, access_token: Optional[str] = None) -> str:
        """Create a link token; passing access_token opens update mode for that item"""
        pass

    @abstractmethod
    async def exchange_public_token(self, public_token: str) -> ExchangedItem:
        """Exchange a short-lived public token for a long-lived access token"""
        pass

    @abstractmethod
    async def get_accounts(self, access_token: str) -> List[LinkedAccount]:
        """Fetch the accounts of an item"""
        pass

    @abstractmethod
    async def get_item_error(self, access_token: str) -> Optional[ItemHealth]:
        """Current item error, or None when the item is healthy"""
        pass

    @abstractmethod
    async def remove_item(self, access_token: str) -> None:
        """Revoke the access token and remove the item at the aggregator"""
        pass
