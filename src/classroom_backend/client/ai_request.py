"""Client-side AI request hook: POSTs prompts to the backend ``/api/ai``.

Holds ``(result, is_loading, error)`` for a UI layer to render. Only the most
recent call may update that state: every call takes a new request id and a
response that settles after a newer call started is dropped.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from classroom_backend.domain.entities import AiRequestState
from classroom_backend.domain.exceptions import AiRequestError
from classroom_backend.infrastructure.config import load_client_settings

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong"

Listener = Callable[[AiRequestState], None]


class AiRequestHook:
    """Issue AI requests against the backend and expose their lifecycle state."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if base_url is None:
            base_url = load_client_settings().vite_backend_base_url
        self._endpoint = f"{base_url.rstrip('/')}/api/ai"
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None
        self._state = AiRequestState()
        self._request_id = 0
        self._listeners: list[Listener] = []

    # ── Observable state ────────────────────────────────────────────────

    @property
    def state(self) -> AiRequestState:
        return self._state

    @property
    def result(self) -> Any:
        return self._state.result

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> str | None:
        return self._state.error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new state; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = AiRequestState(
            result=changes.get("result", self._state.result),
            is_loading=changes.get("is_loading", self._state.is_loading),
            error=changes.get("error", self._state.error),
        )
        for listener in list(self._listeners):
            listener(self._state)

    # ── Request ─────────────────────────────────────────────────────────

    async def generate(self, prompt: str) -> None:
        """Send *prompt* to the backend and record the outcome in ``state``."""
        self._request_id += 1
        request_id = self._request_id
        self._set_state(is_loading=True, error="")

        try:
            data = await self._post(prompt)
        except (AiRequestError, httpx.HTTPError, ValueError) as exc:
            logger.error("AI request %d failed: %r", request_id, exc)
            if self._is_current(request_id):
                self._set_state(error=GENERIC_FAILURE_MESSAGE)
        else:
            if self._is_current(request_id):
                self._set_state(result=data)
        finally:
            if self._is_current(request_id):
                self._set_state(is_loading=False)

    def _is_current(self, request_id: int) -> bool:
        if request_id == self._request_id:
            return True
        logger.debug(
            "Dropping stale AI response %d (latest is %d)", request_id, self._request_id
        )
        return False

    async def _post(self, prompt: str) -> Any:
        resp = await self._client.post(
            self._endpoint,
            json={"prompt": prompt},
            headers={"Content-Type": "application/json"},
        )
        if not resp.is_success:
            raise AiRequestError(GENERIC_FAILURE_MESSAGE)
        body = resp.json()
        if not isinstance(body, dict):
            raise AiRequestError(GENERIC_FAILURE_MESSAGE)
        return body.get("data")

    async def aclose(self) -> None:
        """Close the HTTP client if this hook created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AiRequestHook:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
