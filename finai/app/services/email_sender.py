from abc import ABC, abstractmethod


class EmailDeliveryError(Exception):
    """Outbound mail could not be handed to the mail provider"""


class IEmailSender(ABC):
    """Outbound mail for the token flows"""

    @abstractmethod
    async def send_verification_email(self, email: str, token: str) -> None:
        """Send the verify-email link carrying token"""
        pass

    @abstractmethod
    async def send_password_reset_email(self, email: str, token: str) -> None:
        """Send the reset-password link carrying token"""
        pass
