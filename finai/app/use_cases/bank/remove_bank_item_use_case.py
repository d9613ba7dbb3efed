"""
Remove Bank Item Use Case

Unlinks an institution: revokes the access token at the aggregator and
deletes the item with its accounts.
"""

import logging

from finai.app.services.bank_link import BankLinkError, IBankLinkClient
from finai.app.services.secret_cipher import ISecretCipher
from finai.app.services.unit_of_work import UnitOfWork
from finai.libs.result import Error, Result, Return

from .dtos import RemoveItemResponse

logger = logging.getLogger(__name__)


class RemoveBankItemUseCase:
    """
    Business Rules:
    - Only the owner can remove an item
    - A 400 from the aggregator means the token is already invalid; the
      local rows are deleted anyway
    - Any other aggregator failure propagates and nothing is deleted
    """

    def __init__(self, uow: UnitOfWork, bank_client: IBankLinkClient, cipher: ISecretCipher):
        self.uow = uow
        self.bank_client = bank_client
        self.cipher = cipher

    async def execute(self, user_id: int, item_id: str) -> Result[RemoveItemResponse]:
        if not item_id or not item_id.strip():
            return Return.err(Error("VALIDATION_ERROR", "Item ID is required", field="item_id"))

        async with self.uow:
            item = await self.uow.bank_items.get_by_item_id(item_id, user_id)
            if item is None:
                return Return.err(Error("BANK_ITEM_NOT_FOUND", "Bank item not found"))
            access_token = self.cipher.decrypt(item.encrypted_access_token)

        try:
            await self.bank_client.remove_item(access_token)
        except BankLinkError as e:
            if e.status_code != 400:
                raise
            logger.warning(
                f"Aggregator rejected removal of item {item_id}; token likely already invalid, deleting locally"
            )

        async with self.uow:
            item = await self.uow.bank_items.get_by_item_id(item_id, user_id)
            if item is not None:
                await self.uow.bank_items.delete(item)
                await self.uow.commit()

        logger.info(f"Removed bank item for user_id={user_id}")
        return Return.ok(RemoveItemResponse(success=True))
