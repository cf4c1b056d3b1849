"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi_users import schemas
from pydantic import BaseModel, Field


class AiPromptRequest(BaseModel):
    """Request body for ``POST /api/ai``."""

    prompt: Any = None


class AiPromptResponse(BaseModel):
    """Successful response from ``POST /api/ai``."""

    data: Any


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str


# ── Auth ────────────────────────────────────────────────────────────────────
# ``role`` and ``imageCldPubId`` are read-only: they appear in ``UserRead``
# and nowhere a client can write.


class UserRead(schemas.BaseUser[uuid.UUID]):
    name: str | None = None
    role: str
    image_cld_pub_id: str | None = Field(
        default=None, serialization_alias="imageCldPubId"
    )


class UserCreate(schemas.BaseUserCreate):
    name: str | None = None


class UserUpdate(schemas.BaseUserUpdate):
    name: str | None = None
