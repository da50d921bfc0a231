"""SQLAlchemy ORM models — single source of truth for the database schema.

SQLAlchemy 2.0 style (Mapped[] + mapped_column). Alembic migrations in
db/migrations are generated against these models.

The password hash is a deferred column: a plain select() never loads it,
so it can't leak into a response by accident. Only the credential store
asks for it explicitly (undefer) when checking a login.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class User(Base):
    """A registered user. Created on registration, never mutated here."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )  # always lower-cased
    password_hash: Mapped[str] = mapped_column(
        String(255), nullable=False, deferred=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
