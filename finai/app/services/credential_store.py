"""
Credential Store

User lookup and creation by email or external identity. Operates inside the
caller's UnitOfWork; the caller commits.
"""

from typing import Optional

from pydantic import BaseModel

from finai.app.services.unit_of_work import UnitOfWork
from finai.domain.entities import User


class NewUser(BaseModel):
    """Data for a user row; email is normalized on insert"""

    email: str
    name: str
    password_hash: Optional[str] = None
    avatar_url: Optional[str] = None
    provider: Optional[str] = None
    provider_id: Optional[str] = None
    email_verified: bool = False


class OAuthProfile(BaseModel):
    """Identity returned by an OAuth provider"""

    id: str
    email: str
    name: str
    avatar_url: Optional[str] = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def find_user_by_email(self, email: str) -> Optional[User]:
        return await self.uow.users.get_by_email(normalize_email(email))

    async def find_user_by_provider(self, provider: str, provider_id: str) -> Optional[User]:
        return await self.uow.users.get_by_provider(provider, provider_id)

    async def create_user(self, data: NewUser) -> User:
        user = User(
            email=normalize_email(data.email),
            name=data.name,
            password_hash=data.password_hash,
            avatar_url=data.avatar_url,
            provider=data.provider,
            provider_id=data.provider_id,
            email_verified=data.email_verified,
        )
        return await self.uow.users.create(user)

    async def upsert_oauth_user(self, provider: str, profile: OAuthProfile) -> User:
        """
        Refresh the user linked to (provider, profile.id), or create it.

        Provider-attested emails count as verified. Repeating the call with
        the same profile leaves the stored row unchanged.
        """
        existing = await self.find_user_by_provider(provider, profile.id)
        if existing is not None:
            existing.name = profile.name
            existing.avatar_url = profile.avatar_url or existing.avatar_url
            existing.email_verified = True
            return await self.uow.users.update(existing)

        return await self.create_user(
            NewUser(
                email=profile.email,
                name=profile.name,
                avatar_url=profile.avatar_url,
                provider=provider,
                provider_id=profile.id,
                email_verified=True,
            )
        )
