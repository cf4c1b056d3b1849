"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from classroom_backend.interface.dependencies import (
    Services,
    build_services,
    shutdown,
    startup,
)
from classroom_backend.interface.error_handlers import register_error_handlers
from classroom_backend.interface.origins import TrustedOriginMiddleware
from classroom_backend.interface.routes import router
from classroom_backend.interface.schemas import UserCreate, UserRead, UserUpdate


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    services: Services = app.state.services
    await startup(services)
    yield
    await shutdown(services)


def create_app(services: Services | None = None) -> FastAPI:
    """Build and wire the FastAPI application.

    Services are constructed here, before the app exists, so a bad
    configuration aborts startup instead of surfacing on the first request.
    """
    services = services or build_services()
    auth = services.auth

    app = FastAPI(
        title="La Bottega UI API",
        version="1.0.0",
        description="Authentication and AI generation endpoints for the classroom frontend.",
        lifespan=_lifespan,
    )
    app.state.services = services

    register_error_handlers(app)

    app.add_middleware(TrustedOriginMiddleware, trusted_origins=auth.trusted_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(auth.trusted_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Auth (email + password) ─────────────────────────────────────────

    app.include_router(
        auth.users.get_auth_router(auth.backend), prefix="/api/auth", tags=["auth"]
    )
    app.include_router(
        auth.users.get_register_router(UserRead, UserCreate),
        prefix="/api/auth",
        tags=["auth"],
    )
    app.include_router(
        auth.users.get_users_router(UserRead, UserUpdate),
        prefix="/api/users",
        tags=["users"],
    )

    app.include_router(router)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
