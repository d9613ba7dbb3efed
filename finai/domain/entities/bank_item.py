"""
BankItem Entity

A connection to a financial institution through the bank aggregator.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer
from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow
from .enums import BankItemStatus


class BankItem(SQLModel, table=True):
    """
    BankItem entity - one aggregator item per institution login.

    Business Rules:
    - encrypted_access_token holds the SecretCipher envelope, never plaintext
    - item_id (aggregator identifier) is unique
    - The access token is rotated only by re-creating the item
    - status is degraded while the aggregator reports an item error
    """

    __tablename__ = "bank_items"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    item_id: str = Field(unique=True, max_length=255)
    encrypted_access_token: str
    institution_id: Optional[str] = Field(default=None, max_length=255)
    institution_name: Optional[str] = Field(default=None, max_length=255)
    status: BankItemStatus = Field(default=BankItemStatus.healthy)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False, onupdate=utcnow),
    )
