"""DeepSeek adapter: implements the CompletionGateway port.

DeepSeek speaks the OpenAI chat-completions protocol, so the official
``openai`` SDK is pointed at its base URL.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import APIError, AsyncOpenAI, AuthenticationError, RateLimitError

from classroom_backend.domain.exceptions import CompletionError, EmptyCompletionError

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_MESSAGE = "DeepSeek returned empty response"


class DeepSeekAdapter:
    """Concrete ``CompletionGateway`` backed by the DeepSeek chat API.

    ``generate`` only rejects a ``None`` content field, so an empty string is
    a valid answer. ``generate_json`` rejects any empty content because there
    is nothing to parse.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        *,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(
            api_key=api_key, base_url=base_url, max_retries=0
        )
        self._model = model

    async def generate(self, prompt: str) -> str:
        """Send a single user-role message and return the reply text."""
        content = await self._complete(
            [{"role": "user", "content": prompt}],
        )
        if content is None:
            raise EmptyCompletionError(EMPTY_RESPONSE_MESSAGE)
        return content

    async def generate_json(self, system_prompt: str, user_prompt: str) -> Any:
        """Ask for a JSON object and return it parsed.

        The shape is whatever the model produced; callers own validation.
        ``json.JSONDecodeError`` propagates when the content is not JSON.
        """
        content = await self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )
        if not content:
            raise EmptyCompletionError(EMPTY_RESPONSE_MESSAGE)
        return json.loads(content)

    async def _complete(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, str] | None = None,
    ) -> str | None:
        kwargs: dict[str, object] = {
            "model": self._model,
            "messages": messages,
        }
        if response_format is not None:
            kwargs["response_format"] = response_format

        try:
            response = await self._client.chat.completions.create(**kwargs)  # type: ignore[arg-type]
        except AuthenticationError as exc:
            raise CompletionError(
                "Invalid DeepSeek API key. "
                "Set a valid key in the DEEPSEEK_API_KEY environment variable."
            ) from exc
        except RateLimitError as exc:
            detail = str(exc)
            logger.error("DeepSeek RateLimitError: %s", detail)
            raise CompletionError(f"DeepSeek rate limit error: {detail}") from exc
        except APIError as exc:
            raise CompletionError(f"DeepSeek call failed: {exc}") from exc

        if not response.choices:
            return None
        return response.choices[0].message.content

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
