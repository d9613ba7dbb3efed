"""
finai Domain Entities

Identity, verification token and bank link tables.
"""

# Export all enums
from .enums import BankItemStatus, OAuthProviderName, TokenType

# Export all entities
from .user import User
from .verification_token import VerificationToken
from .bank_item import BankItem
from .bank_account import BankAccount

__all__ = [
    # Enums
    "TokenType",
    "OAuthProviderName",
    "BankItemStatus",
    # Entities
    "User",
    "VerificationToken",
    "BankItem",
    "BankAccount",
]
