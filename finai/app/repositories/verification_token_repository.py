from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from finai.domain.entities import TokenType, VerificationToken


class IVerificationTokenRepository(ABC):
    """VerificationToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: VerificationToken) -> VerificationToken:
        """Create a new verification token"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[VerificationToken]:
        """Get verification token by its raw value"""
        pass

    @abstractmethod
    async def mark_used_if_valid(
        self, token: str, token_type: TokenType, now: datetime
    ) -> bool:
        """
        Atomically set used_at on an unused, unexpired token of the given type.

        Returns True only for the caller whose update changed the row.
        """
        pass
