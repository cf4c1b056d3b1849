"""SQLAlchemy tables used by the auth framework's database adapter.

Migrations live outside this package; ``AuthService.create_tables`` exists for
local development and tests.
"""

from __future__ import annotations

from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTableUUID
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyBaseAccessTokenTableUUID
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from classroom_backend.domain.entities import DEFAULT_ROLE


class Base(DeclarativeBase):
    pass


class User(SQLAlchemyBaseUserTableUUID, Base):
    """Framework-managed user row plus the application's extra columns."""

    __tablename__ = "user"

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Server-side only: never exposed in create/update schemas.
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DEFAULT_ROLE.value,
        server_default=DEFAULT_ROLE.value,
    )
    image_cld_pub_id: Mapped[str | None] = mapped_column(String(255), nullable=True)


class AuthSession(SQLAlchemyBaseAccessTokenTableUUID, Base):
    """Database-backed session token issued at login."""

    __tablename__ = "session"
