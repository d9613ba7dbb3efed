"""
Create Link Token Use Case

Starts the aggregator's link flow, either for a new item or to
re-authenticate an existing one (update mode).
"""

from typing import Optional

from finai.app.services.bank_link import IBankLinkClient
from finai.app.services.secret_cipher import ISecretCipher
from finai.app.services.unit_of_work import UnitOfWork
from finai.libs.result import Error, Result, Return

from .dtos import LinkTokenResponse


class CreateLinkTokenUseCase:
    """
    Business Rules:
    - Update mode requires an item owned by the user; its stored token is
      decrypted only to be handed to the aggregator
    - Aggregator failures propagate as BankLinkError
    """

    def __init__(self, uow: UnitOfWork, bank_client: IBankLinkClient, cipher: ISecretCipher):
        self.uow = uow
        self.bank_client = bank_client
        self.cipher = cipher

    async def execute(self, user_id: int, item_id: Optional[str] = None) -> Result[LinkTokenResponse]:
        access_token = None
        if item_id and item_id.strip():
            async with self.uow:
                item = await self.uow.bank_items.get_by_item_id(item_id, user_id)
                if item is None:
                    return Return.err(Error("BANK_ITEM_NOT_FOUND", "Bank item not found"))
                access_token = self.cipher.decrypt(item.encrypted_access_token)

        link_token = await self.bank_client.create_link_token(str(user_id), access_token)
        return Return.ok(LinkTokenResponse(link_token=link_token))
