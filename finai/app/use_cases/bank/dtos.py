"""
Bank Link Use Case DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from finai.app.services.bank_link import ItemHealth
from finai.domain.entities import BankItemStatus


class InstitutionMetadata(BaseModel):
    institution_id: Optional[str] = None
    name: Optional[str] = None


class LinkMetadata(BaseModel):
    institution: Optional[InstitutionMetadata] = None


class ExchangeCommand(BaseModel):
    public_token: Optional[str] = None
    metadata: Optional[LinkMetadata] = None


class LinkTokenResponse(BaseModel):
    link_token: str


class ExchangeResponse(BaseModel):
    success: bool
    item_id: str


class BankItemInfo(BaseModel):
    """Bank item without its access token"""

    id: int
    item_id: str
    institution_id: Optional[str] = None
    institution_name: Optional[str] = None
    status: BankItemStatus
    created_at: datetime
    updated_at: datetime


class BankItemsResponse(BaseModel):
    items: List[BankItemInfo]


class RemoveItemResponse(BaseModel):
    success: bool


class ItemStatusResponse(BaseModel):
    status: BankItemStatus
    error: Optional[ItemHealth] = None


class UpdateItemStatusCommand(BaseModel):
    status: Optional[str] = None


class UpdateItemStatusResponse(BaseModel):
    success: bool
    status: BankItemStatus
