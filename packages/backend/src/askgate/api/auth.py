"""Auth API — registration, login, current user.

- POST /auth/register → create a user, returns a token
- POST /auth/login → email/password → token
- GET /auth/me → the user behind the bearer token
"""

from fastapi import APIRouter, Depends

from askgate.auth.dependencies import get_auth_gateway, get_current_user
from askgate.auth.gateway import AuthGateway, IssuedCredentials
from askgate.db.models import User
from askgate.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    PublicProfile,
    RegisterRequest,
    UserRead,
)

router = APIRouter(prefix="/auth")


def _auth_response(issued: IssuedCredentials) -> AuthResponse:
    return AuthResponse(
        token=issued.token,
        data=PublicProfile.model_validate(issued.user),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """Create a new user account and log it in."""
    issued = await gateway.register(body.name, body.email, body.password)
    return _auth_response(issued)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """Login with email and password → JWT."""
    issued = await gateway.login(body.email, body.password)
    return _auth_response(issued)


@router.get("/me", response_model=MeResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return MeResponse(data=UserRead.model_validate(user))
