from abc import ABC, abstractmethod

from finai.app.services.credential_store import OAuthProfile


class OAuthProviderError(Exception):
    """Provider rejected the authorization or returned an unusable profile"""


class IOAuthProvider(ABC):
    """Authorization-code flow against an external identity provider"""

    name: str

    @abstractmethod
    def authorize_url(self, state: str, redirect_uri: str) -> str:
        """URL the browser is sent to for consent"""
        pass

    @abstractmethod
    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        """Exchange the authorization code and load the user's profile"""
        pass
