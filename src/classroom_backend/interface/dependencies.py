"""FastAPI dependency injection wiring.

Long-lived services are built once per application and kept on
``app.state.services``; handlers receive them through ``Depends``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request

from classroom_backend.domain.ports.completion_gateway import CompletionGateway
from classroom_backend.infrastructure.auth import AuthService
from classroom_backend.infrastructure.config import Settings, load_settings
from classroom_backend.infrastructure.deepseek_adapter import DeepSeekAdapter

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Process-wide service objects shared by every request."""

    settings: Settings
    auth: AuthService
    completion: CompletionGateway


def build_services(
    settings: Settings | None = None,
    *,
    auth: AuthService | None = None,
    completion: CompletionGateway | None = None,
) -> Services:
    """Construct every service eagerly; raises ``ConfigurationError`` on bad settings."""
    settings = settings or load_settings()
    return Services(
        settings=settings,
        auth=auth or AuthService(settings),
        completion=completion
        or DeepSeekAdapter(
            api_key=settings.deepseek_api_key.get_secret_value(),
            model=settings.deepseek_model,
            base_url=settings.deepseek_base_url,
        ),
    )


async def startup(services: Services) -> None:
    """Prepare shared resources — called from the lifespan context manager."""
    if services.settings.auth_create_tables:
        logger.info("Creating auth tables")
        await services.auth.create_tables()


async def shutdown(services: Services) -> None:
    """Release shared resources."""
    await services.completion.close()
    await services.auth.close()


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_completion(services: Services = Depends(get_services)) -> CompletionGateway:
    return services.completion
