"""
OAuth Login Use Case

Links or creates the account behind an external identity.
"""

import logging

from finai.app.services.credential_store import CredentialStore, OAuthProfile
from finai.app.services.unit_of_work import UnitOfWork
from finai.libs.result import Error, Result, Return

from .dtos import AuthenticatedResult, MessageResponse, SessionUser

logger = logging.getLogger(__name__)


class OAuthLoginUseCase:
    """
    Business Rules:
    - Profile upserted by (provider, provider_id); email counts as verified
    - Storage failures become USER_UPSERT_FAILED (server error)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, provider: str, profile: OAuthProfile) -> Result[AuthenticatedResult]:
        try:
            async with self.uow:
                user = await CredentialStore(self.uow).upsert_oauth_user(provider, profile)
                await self.uow.commit()
        except Exception:
            logger.exception(f"Failed to upsert {provider} user")
            return Return.err(Error("USER_UPSERT_FAILED", "Failed to create or update user"))

        logger.info(f"{provider} login for user_id={user.id}")
        return Return.ok(
            AuthenticatedResult(
                session_user=SessionUser.from_user(user),
                body=MessageResponse(message="Signed in"),
            )
        )
