"""
VerificationToken Entity

Single-use expiring tokens for email verification and password reset.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import TokenType


class VerificationToken(SQLModel, table=True):
    """
    VerificationToken entity - emailed secrets for verify/reset flows.

    Business Rules:
    - Token is 32 random bytes as hex (64 chars), unique
    - Expires 1 hour after creation
    - Valid iff used_at IS NULL AND expires_at > now AND type matches
    - Consumed exactly once by a conditional update on used_at
    - Several outstanding tokens per user and type are allowed
    - Used or expired rows stay in the table; they are inert
    """

    __tablename__ = "verification_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    )
    token: str = Field(unique=True, max_length=255)
    type: TokenType

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("verification_tokens_user_type_idx", "user_id", "type"),)
