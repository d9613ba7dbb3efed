from finai.app.services.unit_of_work import UnitOfWork
from finai.libs.result import Result, Return

from .dtos import BankItemInfo, BankItemsResponse


class ListBankItemsUseCase:
    """Bank items of a user, never including the access token"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: int) -> Result[BankItemsResponse]:
        async with self.uow:
            items = await self.uow.bank_items.list_by_user_id(user_id)
            response = BankItemsResponse(
                items=[
                    BankItemInfo(
                        id=item.id,
                        item_id=item.item_id,
                        institution_id=item.institution_id,
                        institution_name=item.institution_name,
                        status=item.status,
                        created_at=item.created_at,
                        updated_at=item.updated_at,
                    )
                    for item in items
                ]
            )

        return Return.ok(response)
