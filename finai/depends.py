from typing import Dict

from fastapi import Depends, Request, status

from finai.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from finai.api.error import ClientError
from finai.api.utils.session import SessionIssuer, SessionPrincipal
from finai.app.services.bank_link import IBankLinkClient
from finai.app.services.email_sender import IEmailSender
from finai.app.services.oauth import IOAuthProvider
from finai.app.services.rate_limiter import IRateLimiter, RateLimitBucket
from finai.app.services.secret_cipher import ISecretCipher
from finai.libs.result import Error


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_rate_limiter(request: Request) -> IRateLimiter:
    return request.app.state.rate_limiter


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_email_sender(request: Request) -> IEmailSender:
    return request.app.state.email_sender


def get_secret_cipher(request: Request) -> ISecretCipher:
    return request.app.state.secret_cipher


def get_bank_client(request: Request) -> IBankLinkClient:
    return request.app.state.bank_client


def get_oauth_providers(request: Request) -> Dict[str, IOAuthProvider]:
    return request.app.state.oauth_providers


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def limit_by_ip(bucket: RateLimitBucket):
    """
    Dependency consuming one point of bucket for the caller's IP.

    Raises:
        ClientError: 429 once the bucket is exhausted
    """

    def dependency(request: Request, limiter: IRateLimiter = Depends(get_rate_limiter)) -> None:
        result = limiter.consume(bucket, client_ip(request))
        if result.is_err():
            raise ClientError(result.error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)

    return dependency


async def require_session(
    request: Request, issuer: SessionIssuer = Depends(get_session_issuer)
) -> SessionPrincipal:
    """
    Dependency to decode and validate the session cookie.

    Returns:
        Principal of the signed-in user

    Raises:
        ClientError: 401 if the cookie is absent, tampered or expired
    """
    principal = issuer.read_session(request)
    if principal is None:
        raise ClientError(
            Error("AUTHENTICATION_REQUIRED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return principal
