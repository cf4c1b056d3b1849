"""Port: completion gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol


class CompletionGateway(Protocol):
    """Abstract contract for interacting with a chat-completion provider."""

    async def generate(self, prompt: str) -> str:
        """Send a single user prompt and return the raw completion text."""
        ...

    async def generate_json(self, system_prompt: str, user_prompt: str) -> Any:
        """Send a system + user prompt pair and return the parsed JSON object."""
        ...

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        ...
