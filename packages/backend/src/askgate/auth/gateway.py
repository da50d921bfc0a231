"""Auth gateway — registration, login and identity resolution.

Each call is independent: nothing about a session is kept here. The
gateway validates input, delegates persistence to the UserStore and
token handling to the TokenService, and raises askgate.errors types
that the app's error handler turns into HTTP responses.

Login deliberately collapses "no such email" and "wrong password" into
the same Unauthenticated("Invalid credentials") so a caller can't tell
which accounts exist.
"""

import re
from dataclasses import dataclass
from typing import Optional

import structlog

from askgate.auth.tokens import TokenService
from askgate.db.models import User
from askgate.errors import BadRequest, NotFound, Unauthenticated
from askgate.services.user_store import UserStore

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255


@dataclass
class IssuedCredentials:
    """A freshly issued token and the user it was issued for."""

    token: str
    user: User


class AuthGateway:
    def __init__(
        self,
        store: UserStore,
        tokens: TokenService,
        password_min_length: int = 6,
    ):
        self.store = store
        self.tokens = tokens
        self.password_min_length = password_min_length

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> IssuedCredentials:
        """Create a user and issue their first token."""
        self._validate_registration(name, email, password)

        user = await self.store.create(name=name, email=email, password=password)
        logger.info("auth.registered", user_id=str(user.id))
        return IssuedCredentials(token=self.tokens.issue(str(user.id)), user=user)

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> IssuedCredentials:
        """Check email/password and issue a token."""
        if not email or not password:
            raise BadRequest("Please provide email and password")

        user = await self.store.get_by_email(email, include_secret=True)
        if not self.store.verify_secret(user, password):
            logger.info("auth.login_failed")
            raise Unauthenticated("Invalid credentials")

        logger.info("auth.logged_in", user_id=str(user.id))
        return IssuedCredentials(token=self.tokens.issue(str(user.id)), user=user)

    async def identify(self, token: str) -> User:
        """Resolve a bearer token to the User it was issued for."""
        verification = self.tokens.verify(token)
        if not verification.ok:
            raise Unauthenticated(verification.reason)

        user = await self.store.get_by_id(verification.subject)
        if user is None:
            raise NotFound("User not found")
        return user

    def _validate_registration(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> None:
        if not name or not name.strip() or not email or not password:
            raise BadRequest("Please provide name, email and password")
        if len(name.strip()) > NAME_MAX_LENGTH:
            raise BadRequest(
                f"Name must be at most {NAME_MAX_LENGTH} characters"
            )
        if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email.strip()):
            raise BadRequest("Please provide a valid email")
        if len(password) < self.password_min_length:
            raise BadRequest(
                f"Password must be at least {self.password_min_length} characters"
            )
