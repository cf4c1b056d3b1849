"""Trusted-origin guard for the auth routes."""

from __future__ import annotations

import logging
from typing import Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from classroom_backend.interface.error_handlers import error_json

logger = logging.getLogger(__name__)

_SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class TrustedOriginMiddleware(BaseHTTPMiddleware):
    """Reject state-changing requests under *path_prefix* from untrusted origins.

    Requests without an ``Origin`` header (server-to-server) pass through.
    """

    def __init__(
        self,
        app: ASGIApp,
        trusted_origins: Sequence[str],
        path_prefix: str = "/api/auth",
    ) -> None:
        super().__init__(app)
        self._trusted = frozenset(o.rstrip("/") for o in trusted_origins)
        self._prefix = path_prefix

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path.startswith(self._prefix) and request.method not in _SAFE_METHODS:
            origin = request.headers.get("origin")
            if origin is not None and origin.rstrip("/") not in self._trusted:
                logger.warning(
                    "Rejected %s %s from untrusted origin %s",
                    request.method,
                    request.url.path,
                    origin,
                )
                return error_json(403, "Invalid origin")
        return await call_next(request)
