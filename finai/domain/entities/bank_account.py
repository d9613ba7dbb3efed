"""
BankAccount Entity

An account reported by the aggregator under a linked BankItem.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric
from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow


class BankAccount(SQLModel, table=True):
    """
    BankAccount entity - upserted by account_id whenever an item is linked.
    """

    __tablename__ = "bank_accounts"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    bank_item_id: int = Field(
        sa_column=Column(Integer, ForeignKey("bank_items.id", ondelete="CASCADE"), nullable=False)
    )
    account_id: str = Field(unique=True, max_length=255)

    name: str = Field(max_length=255)
    official_name: Optional[str] = Field(default=None, max_length=255)
    mask: Optional[str] = Field(default=None, max_length=10)
    type: str = Field(max_length=50)
    subtype: Optional[str] = Field(default=None, max_length=50)
    current_balance: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 2)))
    available_balance: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 2)))
    iso_currency_code: Optional[str] = Field(default=None, max_length=3)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False, onupdate=utcnow),
    )
