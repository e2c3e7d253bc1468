"""Request dependencies: resolve the caller's client session."""

from fastapi import Depends, HTTPException, Request, status

from app.config import Settings
from app.ports.auth import AuthProvider
from app.services.sessions import ClientSession, SessionRegistry

SESSION_KEY = "sid"


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_client(
    request: Request, registry: SessionRegistry = Depends(get_registry)
) -> ClientSession:
    """Return the caller's session, opening one on first contact."""
    client = await registry.open(request.session.get(SESSION_KEY))
    request.session[SESSION_KEY] = client.id
    return client


async def require_user(client: ClientSession = Depends(get_client)) -> ClientSession:
    if not client.state.signed_in:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required",
        )
    return client
