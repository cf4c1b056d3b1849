"""API routes: thin controllers that delegate to the completion gateway."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from classroom_backend.domain.exceptions import (
    AiGenerationError,
    ClassroomError,
    InvalidPromptError,
)
from classroom_backend.domain.ports.completion_gateway import CompletionGateway
from classroom_backend.interface.dependencies import get_completion
from classroom_backend.interface.schemas import (
    AiPromptRequest,
    AiPromptResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    return {"message": "La Bottega UI - API"}


@router.post(
    "/api/ai",
    response_model=AiPromptResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing, empty or non-string prompt"},
        422: {"model": ErrorResponse, "description": "Malformed request body"},
        500: {"model": ErrorResponse, "description": "AI generation failed"},
    },
)
async def generate(
    body: AiPromptRequest,
    completion: CompletionGateway = Depends(get_completion),
) -> AiPromptResponse:
    """Run a single prompt through the completion provider."""
    if not isinstance(body.prompt, str) or not body.prompt:
        raise InvalidPromptError("prompt is required")
    try:
        result = await completion.generate(body.prompt)
    except ClassroomError as exc:
        logger.error("AI generation failed: %s", exc)
        raise AiGenerationError("AI generation failed") from exc
    return AiPromptResponse(data=result)
