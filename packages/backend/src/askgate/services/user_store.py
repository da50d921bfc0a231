"""Credential store — persistence for users and their hashed secrets.

Service layer over an AsyncSession, in the same shape as the other
services: routes and the auth gateway call this, this calls the database.

The password hash stays behind this boundary. get_by_email only loads it
when asked (include_secret=True), and verify_secret is the one place it
is compared.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from askgate.auth.password import (
    DEFAULT_ROUNDS,
    dummy_hash,
    hash_password,
    verify_password,
)
from askgate.db.models import User
from askgate.errors import Conflict

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    """Create and look up users."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def create(self, name: str, email: str, password: str) -> User:
        """Persist a new user. Raises Conflict if the email is taken.

        The uniqueness check up front gives a clean error in the common
        case; the unique index catches the race between two registrations.
        """
        email = normalize_email(email)
        if await self._email_taken(email):
            raise Conflict("Email already registered")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Email already registered")
        return user

    async def get_by_email(
        self, email: str, include_secret: bool = False
    ) -> Optional[User]:
        q = select(User).where(User.email == normalize_email(email))
        if include_secret:
            q = q.options(undefer(User.password_hash))
        result = await self.db.execute(q)
        return result.scalars().first()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            key = uuid.UUID(user_id)
        except ValueError:
            return None
        return await self.db.get(User, key)

    def verify_secret(self, user: Optional[User], password: str) -> bool:
        """Check a password against a user loaded with include_secret=True.

        With no user, still burns one bcrypt check against a dummy hash.
        """
        if user is None:
            verify_password(password, dummy_hash(self.bcrypt_rounds))
            return False
        return verify_password(password, user.password_hash)

    async def _email_taken(self, email: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.email == email))
        return result.first() is not None
