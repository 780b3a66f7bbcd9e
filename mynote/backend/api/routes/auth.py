"""
Auth API Endpoints.

Admin login and session verification.
"""

from fastapi import APIRouter

from mynote.backend.core.dependencies import CurrentActor
from mynote.backend.core.security import Actor, issue_admin_token
from mynote.backend.schemas.auth import AdminUser, LoginRequest, LoginResponse, SessionResponse

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Admin login",
    description="Exchange the admin credentials for a 7-day session token.",
)
async def login(data: LoginRequest) -> LoginResponse:
    token = issue_admin_token(data.username, data.password)
    return LoginResponse(token=token, user=AdminUser(username=data.username))


@router.get(
    "/verify",
    response_model=SessionResponse,
    summary="Verify session",
    description="Report whether the bearer token (if any) is a valid admin session.",
)
async def verify(actor: CurrentActor) -> SessionResponse:
    return SessionResponse(is_admin=actor == Actor.ADMIN)
