"""
Refresh Item Status Use Case

Asks the aggregator whether an item needs attention and stores the result.
"""

from finai.app.services.bank_link import IBankLinkClient
from finai.app.services.secret_cipher import ISecretCipher
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import BankItemStatus
from finai.libs.result import Error, Result, Return

from .dtos import ItemStatusResponse


class RefreshItemStatusUseCase:
    """
    Business Rules:
    - An item error reported by the aggregator marks the item degraded,
      otherwise it is healthy
    - Aggregator failures propagate as BankLinkError and leave the status
      untouched
    """

    def __init__(self, uow: UnitOfWork, bank_client: IBankLinkClient, cipher: ISecretCipher):
        self.uow = uow
        self.bank_client = bank_client
        self.cipher = cipher

    async def execute(self, user_id: int, item_id: str) -> Result[ItemStatusResponse]:
        if not item_id or not item_id.strip():
            return Return.err(Error("VALIDATION_ERROR", "Item ID is required", field="item_id"))

        async with self.uow:
            item = await self.uow.bank_items.get_by_item_id(item_id, user_id)
            if item is None:
                return Return.err(Error("BANK_ITEM_NOT_FOUND", "Bank item not found"))
            access_token = self.cipher.decrypt(item.encrypted_access_token)

        item_error = await self.bank_client.get_item_error(access_token)
        status = BankItemStatus.degraded if item_error else BankItemStatus.healthy

        async with self.uow:
            item = await self.uow.bank_items.get_by_item_id(item_id, user_id)
            if item is None:
                return Return.err(Error("BANK_ITEM_NOT_FOUND", "Bank item not found"))
            item.status = status
            await self.uow.bank_items.update(item)
            await self.uow.commit()

        return Return.ok(ItemStatusResponse(status=status, error=item_error))
