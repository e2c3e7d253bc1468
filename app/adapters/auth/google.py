import logging
from urllib.parse import urlencode

import httpx

from app.domain.models import Identity
from app.ports.auth import AuthError, AuthProvider

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


class GoogleAuthAdapter(AuthProvider):
    """Google sign-in via the OAuth2 authorization-code flow."""

    def __init__(self, client_id: str, client_secret: str) -> None:
        self._client_id = client_id
        self._client_secret = client_secret

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange(self, code: str, redirect_uri: str) -> Identity:
        """Exchange the code for a token, then read the user's profile."""
        payload = {
            "code": code,
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            async with httpx.AsyncClient(timeout=15.0) as client:
                resp = await client.post(TOKEN_URL, data=payload)
                resp.raise_for_status()
                token = resp.json()["access_token"]

                resp = await client.get(
                    USERINFO_URL, headers={"Authorization": f"Bearer {token}"}
                )
                resp.raise_for_status()
                info = resp.json()
        except (httpx.HTTPError, KeyError) as exc:
            raise AuthError(f"Google sign-in failed: {exc}") from exc

        if "sub" not in info:
            raise AuthError("Google userinfo response has no subject")
        logger.info("Google sign-in: sub=%s", info.get("sub"))
        return Identity(
            uid=info["sub"],
            display_name=info.get("name", ""),
            email=info.get("email", ""),
        )
