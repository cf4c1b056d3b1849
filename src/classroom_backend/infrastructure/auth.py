"""Authentication service: configures fastapi-users over a SQLAlchemy adapter.

One ``AuthService`` is built at startup from validated settings and handed to
the app factory; nothing here is module-global.
"""

from __future__ import annotations

import logging
import uuid
from typing import AsyncIterator

from fastapi import Depends, Request
from fastapi_users import BaseUserManager, FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import AuthenticationBackend, CookieTransport
from fastapi_users.authentication.strategy.db import DatabaseStrategy
from fastapi_users.exceptions import UserNotExists
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyAccessTokenDatabase
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from classroom_backend.domain.entities import Role
from classroom_backend.domain.exceptions import ConfigurationError, UnknownRoleError
from classroom_backend.infrastructure.auth_schema import AuthSession, Base, User
from classroom_backend.infrastructure.config import Settings

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "classroom_session"

# provider → (SQLAlchemy backend names accepted in DATABASE_URL, async driver)
_DRIVERS: dict[str, tuple[tuple[str, ...], str]] = {
    "pg": (("postgresql", "postgres"), "postgresql+asyncpg"),
    "mysql": (("mysql", "mariadb"), "mysql+aiomysql"),
    "sqlite": (("sqlite",), "sqlite+aiosqlite"),
}


def build_database_url(database_url: str, provider: str) -> str:
    """Pin ``database_url`` to the async driver that matches ``provider``."""
    if provider not in _DRIVERS:
        raise ConfigurationError(
            f"Unsupported DATABASE_PROVIDER '{provider}'. "
            f"Expected one of: {', '.join(_DRIVERS)}",
            fields=["DATABASE_PROVIDER"],
        )
    backends, driver = _DRIVERS[provider]
    try:
        url = make_url(database_url)
    except ArgumentError as exc:
        raise ConfigurationError(
            "DATABASE_URL is not a valid database URL.", fields=["DATABASE_URL"]
        ) from exc

    backend = url.drivername.split("+", 1)[0]
    if backend not in backends:
        raise ConfigurationError(
            f"DATABASE_URL uses '{backend}' but DATABASE_PROVIDER is '{provider}'.",
            fields=["DATABASE_URL", "DATABASE_PROVIDER"],
        )
    return url.set(drivername=driver).render_as_string(hide_password=False)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    """fastapi-users manager signing reset/verification tokens with the auth secret."""

    def __init__(self, user_db: SQLAlchemyUserDatabase, secret: str) -> None:
        super().__init__(user_db)
        self.reset_password_token_secret = secret
        self.verification_token_secret = secret

    async def on_after_register(
        self, user: User, request: Request | None = None
    ) -> None:
        logger.info("Registered user %s with role %s", user.id, user.role)


class AuthService:
    """Configured authentication service bound to one database engine."""

    def __init__(self, settings: Settings, *, engine: AsyncEngine | None = None) -> None:
        secret = settings.better_auth_secret.get_secret_value()
        lifetime = settings.session_lifetime_seconds

        self.base_url = settings.better_auth_url
        self.trusted_origins: tuple[str, ...] = tuple(settings.trusted_origins)
        self.engine = engine or create_async_engine(
            build_database_url(settings.database_url, settings.database_provider)
        )
        self._session_maker = async_sessionmaker(self.engine, expire_on_commit=False)

        session_maker = self._session_maker

        async def get_async_session() -> AsyncIterator[AsyncSession]:
            async with session_maker() as session:
                yield session

        async def get_user_db(
            session: AsyncSession = Depends(get_async_session),
        ) -> AsyncIterator[SQLAlchemyUserDatabase]:
            yield SQLAlchemyUserDatabase(session, User)

        async def get_access_token_db(
            session: AsyncSession = Depends(get_async_session),
        ) -> AsyncIterator[SQLAlchemyAccessTokenDatabase]:
            yield SQLAlchemyAccessTokenDatabase(session, AuthSession)

        async def get_user_manager(
            user_db: SQLAlchemyUserDatabase = Depends(get_user_db),
        ) -> AsyncIterator[UserManager]:
            yield UserManager(user_db, secret)

        def get_database_strategy(
            access_token_db: SQLAlchemyAccessTokenDatabase = Depends(get_access_token_db),
        ) -> DatabaseStrategy:
            return DatabaseStrategy(access_token_db, lifetime_seconds=lifetime)

        # Email + password is the only credential strategy.
        self.backend = AuthenticationBackend(
            name="database",
            transport=CookieTransport(
                cookie_name=SESSION_COOKIE_NAME,
                cookie_max_age=lifetime,
                cookie_secure=self.base_url.startswith("https://"),
            ),
            get_strategy=get_database_strategy,
        )
        self.users = FastAPIUsers[User, uuid.UUID](get_user_manager, [self.backend])

        logger.info(
            "Auth configured for %s (provider=%s, trusted origins: %s)",
            self.base_url,
            settings.database_provider,
            ", ".join(self.trusted_origins),
        )

    async def create_tables(self) -> None:
        """Create the auth tables if missing (development and tests only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def assign_role(self, user_id: uuid.UUID, role: Role | str) -> User:
        """Change a user's role. Trusted server-side code path only."""
        try:
            new_role = Role(role)
        except ValueError as exc:
            raise UnknownRoleError(f"Unknown role: '{role}'.") from exc
        return await self._update_user(user_id, role=new_role.value)

    async def bind_image(self, user_id: uuid.UUID, public_id: str | None) -> User:
        """Attach (or clear) the user's hosted image id. Server-side only."""
        return await self._update_user(user_id, image_cld_pub_id=public_id)

    async def _update_user(self, user_id: uuid.UUID, **values: object) -> User:
        async with self._session_maker() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise UserNotExists()
            for key, value in values.items():
                setattr(user, key, value)
            await session.commit()
            await session.refresh(user)
            logger.info("Updated user %s: %s", user_id, ", ".join(values))
            return user

    async def close(self) -> None:
        """Release pooled database connections."""
        await self.engine.dispose()
