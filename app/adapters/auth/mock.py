import logging
from urllib.parse import urlencode

from app.domain.models import Identity
from app.ports.auth import AuthError, AuthProvider

logger = logging.getLogger(__name__)


class MockAuthAdapter(AuthProvider):
    """
    Auth adapter for testing without a real OAuth client.

    The authorization URL points straight back at the callback, and any
    non-empty code signs in a deterministic user derived from it: code
    ``alice`` yields uid ``mock-alice``.
    """

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        return f"{redirect_uri}?{urlencode({'code': 'guest', 'state': state})}"

    async def exchange(self, code: str, redirect_uri: str) -> Identity:
        if not code:
            raise AuthError("Empty authorization code")
        logger.info("MockAuth: signing in %s", code)
        return Identity(
            uid=f"mock-{code}",
            display_name=code.capitalize(),
            email=f"{code}@example.com",
        )
