"""Sign-in and sign-out routes."""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from app.api.deps import SESSION_KEY, get_auth_provider, get_client, get_registry, get_settings
from app.api.schemas import UserHeader
from app.config import Settings
from app.ports.auth import AuthError, AuthProvider
from app.services.sessions import ClientSession, SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/login")
async def login(
    client: ClientSession = Depends(get_client),
    auth: AuthProvider = Depends(get_auth_provider),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """Send the browser to the provider's sign-in page."""
    client.oauth_state = secrets.token_urlsafe(16)
    url = auth.authorization_url(client.oauth_state, settings.oauth_redirect_url)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/callback", response_model=UserHeader)
async def callback(
    code: str,
    state: str,
    client: ClientSession = Depends(get_client),
    auth: AuthProvider = Depends(get_auth_provider),
    settings: Settings = Depends(get_settings),
) -> UserHeader:
    """Complete the sign-in started by ``/auth/login``."""
    expected, client.oauth_state = client.oauth_state, None
    if expected is None or not secrets.compare_digest(state, expected):
        raise HTTPException(status_code=400, detail="Invalid sign-in state")
    try:
        identity = await auth.exchange(code, settings.oauth_redirect_url)
    except AuthError as exc:
        logger.error("Error signing in: %s", exc)
        raise HTTPException(status_code=400, detail="Sign-in failed")

    if not await client.library.sign_in(identity):
        raise HTTPException(status_code=502, detail="Could not save the user profile")
    return UserHeader.build(client.state)


@router.post("/signout", status_code=204)
async def signout(
    request: Request,
    client: ClientSession = Depends(get_client),
    registry: SessionRegistry = Depends(get_registry),
) -> Response:
    """Sign out and drop the client session; the next request starts a fresh one."""
    client.library.sign_out()
    registry.close(client.id)
    request.session.pop(SESSION_KEY, None)
    return Response(status_code=204)
