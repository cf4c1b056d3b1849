"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Roles a user account can hold."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


DEFAULT_ROLE = Role.STUDENT


@dataclass(frozen=True, slots=True)
class AiRequestState:
    """Snapshot of an ``AiRequestHook``'s observable state."""

    result: Any = None
    is_loading: bool = False
    error: str | None = None
