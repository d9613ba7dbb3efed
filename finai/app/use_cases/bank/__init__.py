"""
Bank Link Use Cases

Linking institutions through the bank aggregator.
"""

from .create_link_token_use_case import CreateLinkTokenUseCase
from .exchange_public_token_use_case import ExchangePublicTokenUseCase
from .list_bank_items_use_case import ListBankItemsUseCase
from .refresh_item_status_use_case import RefreshItemStatusUseCase
from .remove_bank_item_use_case import RemoveBankItemUseCase
from .update_item_status_use_case import UpdateItemStatusUseCase
from .dtos import (
    BankItemInfo,
    BankItemsResponse,
    ExchangeCommand,
    ExchangeResponse,
    ItemStatusResponse,
    LinkTokenResponse,
    RemoveItemResponse,
    UpdateItemStatusCommand,
    UpdateItemStatusResponse,
)

__all__ = [
    "CreateLinkTokenUseCase",
    "ExchangePublicTokenUseCase",
    "ListBankItemsUseCase",
    "RemoveBankItemUseCase",
    "RefreshItemStatusUseCase",
    "UpdateItemStatusUseCase",
    "ExchangeCommand",
    "ExchangeResponse",
    "LinkTokenResponse",
    "BankItemInfo",
    "BankItemsResponse",
    "RemoveItemResponse",
    "ItemStatusResponse",
    "UpdateItemStatusCommand",
    "UpdateItemStatusResponse",
]
