from typing import Optional

from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import BankItemStatus
from finai.libs.result import Error, Result, Return

from .dtos import UpdateItemStatusResponse

INVALID_STATUS_MESSAGE = 'Status must be either "healthy" or "degraded"'


class UpdateItemStatusUseCase:
    """Sets an owned item's status from the client, e.g. after a successful re-link"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: int, item_id: str, status: Optional[str]
    ) -> Result[UpdateItemStatusResponse]:
        if not item_id or not item_id.strip():
            return Return.err(Error("VALIDATION_ERROR", "Item ID is required", field="item_id"))

        if status not in {s.value for s in BankItemStatus}:
            return Return.err(Error("VALIDATION_ERROR", INVALID_STATUS_MESSAGE, field="status"))

        async with self.uow:
            item = await self.uow.bank_items.get_by_item_id(item_id, user_id)
            if item is None:
                return Return.err(Error("BANK_ITEM_NOT_FOUND", "Bank item not found"))
            item.status = BankItemStatus(status)
            await self.uow.bank_items.update(item)
            await self.uow.commit()

        return Return.ok(UpdateItemStatusResponse(success=True, status=BankItemStatus(status)))
