"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, actor
resolution from the bearer token, and the viewer fingerprint.
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mynote.backend.core.database import get_db_session
from mynote.backend.core.exceptions import AuthenticationError, AuthorizationError
from mynote.backend.core.security import Actor, actor_from_claims, decode_token, verify_token
from mynote.backend.core.utils import viewer_fingerprint

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)]


async def get_actor(credentials: BearerCredentials) -> Actor:
    """
    Resolve the caller. A missing, malformed or expired token is simply
    anonymous; it never fails the request.
    """
    token = credentials.credentials if credentials else None
    return actor_from_claims(verify_token(token))


CurrentActor = Annotated[Actor, Depends(get_actor)]


async def require_admin(credentials: BearerCredentials) -> Actor:
    """
    Demand an admin session token.

    Raises:
        AuthenticationError: No token, or the token is invalid/expired (401)
        AuthorizationError: Valid token without admin rights (403)
    """
    if credentials is None:
        raise AuthenticationError("No token provided")
    claims = decode_token(credentials.credentials)
    actor = actor_from_claims(claims)
    if actor != Actor.ADMIN:
        raise AuthorizationError("Admin access required")
    return actor


AdminActor = Annotated[Actor, Depends(require_admin)]


async def get_viewer_fingerprint(
    request: Request,
    user_agent: str | None = Header(None),
) -> str:
    """Fingerprint of the viewer (client address + User-Agent)."""
    client_ip = getattr(request.state, "client_ip", None)
    if client_ip is None and request.client:
        client_ip = request.client.host
    return viewer_fingerprint(client_ip, user_agent)


ViewerFingerprint = Annotated[str, Depends(get_viewer_fingerprint)]
