"""Authentication provider port."""

from abc import ABC, abstractmethod

from app.domain.models import Identity


class AuthError(Exception):
    """The provider refused or failed the sign-in."""


class AuthProvider(ABC):
    """OAuth-style sign-in: redirect the user out, exchange the code on return."""

    @abstractmethod
    def authorization_url(self, state: str, redirect_uri: str) -> str:
        """URL the browser is sent to for sign-in."""
        ...

    @abstractmethod
    async def exchange(self, code: str, redirect_uri: str) -> Identity:
        """Trade an authorization code for the signed-in identity."""
        ...
