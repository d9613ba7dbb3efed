"""
User Entity

Represents a person who signs in with a password or an external provider.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class User(SQLModel, table=True):
    """
    User entity - identity record for password and OAuth accounts.

    Business Rules:
    - Email is unique and stored lower-cased
    - password_hash is NULL for OAuth-only accounts (no password login)
    - email_verified is only set at creation for provider-attested emails
    - (provider, provider_id) is unique when both are present
    - Never hard-deleted by the auth flows
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=255)
    avatar_url: Optional[str] = Field(default=None)
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output is 60 chars

    email_verified: bool = Field(default=False)

    # External identity (GitHub, Google)
    provider: Optional[str] = Field(default=None, max_length=50)
    provider_id: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False, onupdate=utcnow),
    )

    __table_args__ = (
        Index("provider_provider_id_idx", "provider", "provider_id", unique=True),
    )
