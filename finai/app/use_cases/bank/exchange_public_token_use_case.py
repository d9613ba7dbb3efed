"""
Exchange Public Token Use Case

Completes the link flow: stores the item with its access token encrypted
and records the item's accounts.
"""

import logging
from decimal import Decimal
from typing import Optional

from finai.app.services.bank_link import IBankLinkClient
from finai.app.services.secret_cipher import ISecretCipher
from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import BankAccount, BankItem
from finai.libs.result import Error, Result, Return

from .dtos import ExchangeCommand, ExchangeResponse

logger = logging.getLogger(__name__)


def _money(value: Optional[float]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.01"))


class ExchangePublicTokenUseCase:
    """
    Business Rules:
    - public_token must be a non-blank string
    - The access token is encrypted before it reaches storage
    - Accounts are fetched with the plaintext token and upserted by account_id
    - Aggregator failures propagate as BankLinkError
    """

    def __init__(self, uow: UnitOfWork, bank_client: IBankLinkClient, cipher: ISecretCipher):
        self.uow = uow
        self.bank_client = bank_client
        self.cipher = cipher

    async def execute(self, user_id: int, command: ExchangeCommand) -> Result[ExchangeResponse]:
        if not command.public_token or not command.public_token.strip():
            return Return.err(
                Error("VALIDATION_ERROR", "public_token is required", field="public_token")
            )

        exchanged = await self.bank_client.exchange_public_token(command.public_token)

        institution = command.metadata.institution if command.metadata else None

        async with self.uow:
            item = await self.uow.bank_items.create(
                BankItem(
                    user_id=user_id,
                    item_id=exchanged.item_id,
                    encrypted_access_token=self.cipher.encrypt(exchanged.access_token),
                    institution_id=institution.institution_id if institution else None,
                    institution_name=institution.name if institution else None,
                )
            )

            accounts = await self.bank_client.get_accounts(exchanged.access_token)
            for account in accounts:
                await self.uow.bank_items.upsert_account(
                    BankAccount(
                        user_id=user_id,
                        bank_item_id=item.id,
                        account_id=account.account_id,
                        name=account.name,
                        official_name=account.official_name,
                        mask=account.mask,
                        type=account.type,
                        subtype=account.subtype,
                        current_balance=_money(account.current_balance),
                        available_balance=_money(account.available_balance),
                        iso_currency_code=account.iso_currency_code,
                    )
                )

            await self.uow.commit()

        logger.info(f"Linked bank item for user_id={user_id} with {len(accounts)} accounts")
        return Return.ok(ExchangeResponse(success=True, item_id=exchanged.item_id))
