"""FastAPI auth dependencies.

Used as Depends() in route handlers. The TokenService lives on app.state
(built once in create_app); the UserStore and AuthGateway are built per
request around that request's database session.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from askgate.auth.gateway import AuthGateway
from askgate.auth.tokens import TokenService
from askgate.db.engine import get_db
from askgate.db.models import User
from askgate.errors import Unauthenticated
from askgate.services.user_store import UserStore


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


async def get_auth_gateway(
    request: Request,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthGateway:
    settings = request.app.state.settings
    return AuthGateway(
        store=UserStore(db, bcrypt_rounds=settings.bcrypt_rounds),
        tokens=tokens,
        password_min_length=settings.password_min_length,
    )


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an "Authorization: Bearer <token>" header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> User:
    """Resolve the bearer token to a User (401 without a usable token)."""
    token = bearer_token(authorization)
    if token is None:
        raise Unauthenticated()
    return await gateway.identify(token)
