"""
Outbound mail for the verification and password reset flows.

ResendEmailSender posts to the Resend HTTP API. LoggingEmailSender is used
when no API key is configured (local development) and only logs that a
message would have been sent.
"""

import logging
from typing import Optional

import httpx

from finai.app.services.email_sender import EmailDeliveryError, IEmailSender

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"

VERIFY_SUBJECT = "Verify your finai account"
RESET_SUBJECT = "Reset your finai password"


def verification_url(app_url: str, token: str) -> str:
    return f"{app_url.rstrip('/')}/verify-email?token={token}"


def reset_url(app_url: str, token: str) -> str:
    return f"{app_url.rstrip('/')}/reset-password?token={token}"


def _verification_html(link: str) -> str:
    return (
        "<h2>Welcome to finai!</h2>"
        "<p>Click the link below to verify your email address:</p>"
        f'<p><a href="{link}">Verify Email</a></p>'
        "<p>This link expires in 1 hour.</p>"
        "<p>If you didn't create an account, you can safely ignore this email.</p>"
    )


def _reset_html(link: str) -> str:
    return (
        "<h2>Password Reset</h2>"
        "<p>Click the link below to reset your password:</p>"
        f'<p><a href="{link}">Reset Password</a></p>'
        "<p>This link expires in 1 hour.</p>"
        "<p>If you didn't request a password reset, you can safely ignore this email.</p>"
    )


class ResendEmailSender(IEmailSender):
    def __init__(
        self,
        api_key: str,
        sender: str,
        app_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.app_url = app_url
        self.timeout = timeout
        self._transport = transport

    async def send_verification_email(self, email: str, token: str) -> None:
        link = verification_url(self.app_url, token)
        await self._send(email, VERIFY_SUBJECT, _verification_html(link))

    async def send_password_reset_email(self, email: str, token: str) -> None:
        link = reset_url(self.app_url, token)
        await self._send(email, RESET_SUBJECT, _reset_html(link))

    async def _send(self, to: str, subject: str, html: str) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    RESEND_API_URL,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"from": self.sender, "to": to, "subject": subject, "html": html},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Email delivery failed ({subject}): {e}")
            raise EmailDeliveryError(subject) from e


class LoggingEmailSender(IEmailSender):
    async def send_verification_email(self, email: str, token: str) -> None:
        logger.info(f"Email delivery disabled; skipped '{VERIFY_SUBJECT}'")

    async def send_password_reset_email(self, email: str, token: str) -> None:
        logger.info(f"Email delivery disabled; skipped '{RESET_SUBJECT}'")
