"""
OAuth sign-in (authorization-code flow)

The same endpoint starts the flow (no code) and handles the provider
callback (code + state). State is a random value echoed through the provider
and checked against a short-lived HttpOnly cookie.
"""

import logging
import secrets
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from finai.api.error import ServerError
from finai.api.utils.session import SessionIssuer
from finai.app.services.oauth import IOAuthProvider, OAuthProviderError
from finai.app.services.unit_of_work import UnitOfWork
from finai.app.use_cases.auth import OAuthLoginUseCase
from finai.depends import get_oauth_providers, get_session_issuer, get_unit_of_work

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["OAuth"])

STATE_COOKIE_NAME = "finai_oauth_state"
STATE_MAX_AGE = 600


def _failure_redirect(app_url: str, provider: str) -> RedirectResponse:
    response = RedirectResponse(
        url=f"{app_url}/login?error={provider}_auth_failed", status_code=status.HTTP_302_FOUND
    )
    response.delete_cookie(STATE_COOKIE_NAME, path="/")
    return response


async def _oauth_flow(
    provider_name: str,
    request: Request,
    code: Optional[str],
    state: Optional[str],
    error: Optional[str],
    providers: Dict[str, IOAuthProvider],
    uow: UnitOfWork,
    issuer: SessionIssuer,
):
    provider = providers[provider_name]
    app_url = request.app.state.app_url
    redirect_uri = str(request.url_for(f"{provider_name}_oauth"))

    if error:
        logger.error(f"{provider_name} OAuth error: {error}")
        return _failure_redirect(app_url, provider_name)

    if not code:
        new_state = secrets.token_urlsafe(32)
        response = RedirectResponse(
            url=provider.authorize_url(new_state, redirect_uri), status_code=status.HTTP_302_FOUND
        )
        response.set_cookie(
            key=STATE_COOKIE_NAME,
            value=new_state,
            max_age=STATE_MAX_AGE,
            path="/",
            httponly=True,
            secure=issuer.secure,
            samesite="lax",
        )
        return response

    expected_state = request.cookies.get(STATE_COOKIE_NAME)
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.error(f"{provider_name} OAuth state mismatch")
        return _failure_redirect(app_url, provider_name)

    try:
        profile = await provider.fetch_profile(code, redirect_uri)
    except OAuthProviderError as e:
        logger.error(f"{provider_name} OAuth failed: {e}")
        return _failure_redirect(app_url, provider_name)

    use_case = OAuthLoginUseCase(uow)
    result = await use_case.execute(provider_name, profile)

    if result.is_err():
        raise ServerError(result.error)

    response = RedirectResponse(url=f"{app_url}/dashboard", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(STATE_COOKIE_NAME, path="/")
    issuer.set_session(response, result.value.session_user)
    return response


@router.get("/github", name="github_oauth")
async def github_oauth(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    providers: Dict[str, IOAuthProvider] = Depends(get_oauth_providers),
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    GitHub Sign-In

    Falls back to the primary verified address when the profile email is
    private.

    Raises:
        - 500 Internal Server Error: Account could not be created or updated
    """
    return await _oauth_flow("github", request, code, state, error, providers, uow, issuer)


@router.get("/google", name="google_oauth")
async def google_oauth(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    providers: Dict[str, IOAuthProvider] = Depends(get_oauth_providers),
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Google Sign-In

    Raises:
        - 500 Internal Server Error: Account could not be created or updated
    """
    return await _oauth_flow("google", request, code, state, error, providers, uow, issuer)
