"""
GitHub and Google authorization-code clients.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from finai.app.services.credential_store import OAuthProfile
from finai.app.services.oauth import IOAuthProvider, OAuthProviderError
from finai.domain.entities import OAuthProviderName

logger = logging.getLogger(__name__)


class _HttpOAuthProvider(IOAuthProvider):
    authorize_endpoint: str
    token_endpoint: str
    scope: str

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._transport = transport

    def authorize_url(self, state: str, redirect_uri: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": redirect_uri,
                "response_type": "code",
                "scope": self.scope,
                "state": state,
            }
        )
        return f"{self.authorize_endpoint}?{query}"

    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=False, transport=self._transport
            ) as client:
                token_response = await client.post(
                    self.token_endpoint,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "code": code,
                        "redirect_uri": redirect_uri,
                        "grant_type": "authorization_code",
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthProviderError(f"{self.name}: no access token in response")

                return await self._load_profile(client, access_token)
        except httpx.HTTPError as e:
            raise OAuthProviderError(f"{self.name}: {e}") from e
        except (ValueError, KeyError) as e:
            # Unparseable or incomplete JSON body
            raise OAuthProviderError(f"{self.name}: invalid response") from e

    @abstractmethod
    async def _load_profile(self, client: httpx.AsyncClient, access_token: str) -> OAuthProfile:
        """Read the user profile with an exchanged access token"""
        pass


class GitHubOAuthProvider(_HttpOAuthProvider):
    name = OAuthProviderName.github.value
    authorize_endpoint = "https://github.com/login/oauth/authorize"
    token_endpoint = "https://github.com/login/oauth/access_token"
    scope = "user:email read:user"
    api_url = "https://api.github.com"

    async def _load_profile(self, client: httpx.AsyncClient, access_token: str) -> OAuthProfile:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }
        response = await client.get(f"{self.api_url}/user", headers=headers)
        response.raise_for_status()
        user: Dict[str, Any] = response.json()

        email = user.get("email")
        if not email:
            # Private address: take the primary verified one
            emails_response = await client.get(f"{self.api_url}/user/emails", headers=headers)
            emails_response.raise_for_status()
            email = next(
                (e["email"] for e in emails_response.json() if e.get("primary") and e.get("verified")),
                None,
            )
        if not email:
            raise OAuthProviderError("github: account has no verified email")

        return OAuthProfile(
            id=str(user["id"]),
            email=email,
            name=user.get("name") or user["login"],
            avatar_url=user.get("avatar_url"),
        )


class GoogleOAuthProvider(_HttpOAuthProvider):
    name = OAuthProviderName.google.value
    authorize_endpoint = "https://accounts.google.com/o/oauth2/v2/auth"
    token_endpoint = "https://oauth2.googleapis.com/token"
    scope = "email profile openid"
    userinfo_url = "https://openidconnect.googleapis.com/v1/userinfo"

    async def _load_profile(self, client: httpx.AsyncClient, access_token: str) -> OAuthProfile:
        response = await client.get(
            self.userinfo_url, headers={"Authorization": f"Bearer {access_token}"}
        )
        response.raise_for_status()
        user: Dict[str, Any] = response.json()

        if not user.get("email"):
            raise OAuthProviderError("google: profile has no email")

        return OAuthProfile(
            id=str(user["sub"]),
            email=user["email"],
            name=user.get("name") or user["email"],
            avatar_url=user.get("picture"),
        )
