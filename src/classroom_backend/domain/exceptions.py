"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class ClassroomError(Exception):
    """Base exception for the entire application."""


# ── Startup ─────────────────────────────────────────────────────────────────


class ConfigurationError(ClassroomError):
    """A required setting is missing or invalid; the service must not start."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


# ── Input validation ────────────────────────────────────────────────────────


class InvalidPromptError(ClassroomError):
    """The request body carried no usable prompt."""


class UnknownRoleError(ClassroomError):
    """A server-side code path tried to assign a role that does not exist."""


# ── Completion provider errors ──────────────────────────────────────────────


class CompletionError(ClassroomError):
    """Any error originating from the completion provider."""


class EmptyCompletionError(CompletionError):
    """The provider answered without message content."""


class AiGenerationError(ClassroomError):
    """The ``/api/ai`` endpoint could not produce a completion."""


# ── Client-side request errors ──────────────────────────────────────────────


class AiRequestError(ClassroomError):
    """The backend AI endpoint could not be reached or answered non-2xx."""
