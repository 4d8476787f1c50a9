"""
Generative backend adapter for the Moodblog service.

The resolver treats a generative backend as an unreliable oracle: it may be
missing, still loading, or fail mid-call. This module defines the interface
the resolver consumes and an implementation that talks to any
OpenAI-compatible chat-completion server (llama.cpp, Ollama, vLLM, ...).
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

# Smallest first
DEFAULT_MODEL_PREFERENCE = (
    "TinyLlama-1.1B-Chat-v0.4-q4f16_1-1k",
    "Qwen2-0.5B-Instruct-q4f16_1",
    "SmolLM-135M-Instruct-q4f16_1",
    "RedPajama-INCITE-Chat-3B-v1-q4f16_1",
)


class BackendError(RuntimeError):
    """Raised when a backend call fails."""


class BackendNotReady(BackendError):
    """Raised when a completion is requested before initialization."""


@runtime_checkable
class GenerativeBackend(Protocol):
    """Text-completion capability consumed by the mood resolver."""

    progress: str

    def is_ready(self) -> bool: ...

    async def initialize(self) -> None: ...

    async def complete(self, prompt: str, max_tokens: int, temperature: float) -> str: ...


def select_model(available: Sequence[str], preferred: Sequence[str]) -> str | None:
    """
    Pick a model to load.

    Args:
        available: Model ids the server reports, in server order
        preferred: Model ids in order of preference

    Returns:
        The first preferred model that is available, else the first available
        model, else None
    """
    for model in preferred:
        if model in available:
            return model
    return available[0] if available else None


class ChatCompletionBackend:
    """
    Backend speaking the OpenAI chat-completions protocol over httpx.

    Initialization lists the server's models and selects one. It is idempotent:
    concurrent callers share a single in-flight load task, and once ready
    further calls return immediately. A failed load is recorded in `progress`
    and may be retried by calling initialize() again.
    """

    def __init__(
        self,
        base_url: str | None,
        preferred_models: Sequence[str] = DEFAULT_MODEL_PREFERENCE,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.preferred_models = tuple(preferred_models)
        self.model: str | None = None
        self.progress = ""
        self._ready = False
        self._init_task: asyncio.Task[None] | None = None

        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.AsyncClient(
            base_url=base_url or "",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        """Load the backend once; safe to call repeatedly and concurrently."""
        if self._ready:
            logger.debug("Model backend already initialized, skipping")
            return

        if self._init_task is None:
            self._init_task = asyncio.create_task(self._load())
        else:
            logger.debug("Model backend initialization already in progress")

        await self._init_task

    async def complete(
        self, prompt: str, max_tokens: int = 200, temperature: float = 0.7
    ) -> str:
        """
        Request a single chat completion.

        Raises:
            BackendNotReady: If initialize() has not succeeded
            BackendError: On transport, HTTP, or payload errors
        """
        if not self._ready:
            raise BackendNotReady("model backend is not initialized")

        try:
            response = await self._client.post(
                "/chat/completions",
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                },
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BackendError(f"completion request failed: {e}") from e

        if not isinstance(data, dict):
            raise BackendError("completion response is not an object")

        try:
            choices = data.get("choices") or [{}]
            message = choices[0].get("message") or {}
            content = message.get("content") or ""
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise BackendError(f"malformed completion response: {e}") from e
        if not isinstance(content, str):
            raise BackendError("completion content is not text")
        return content

    async def aclose(self) -> None:
        await self._client.aclose()

    # MARK: - Private Helpers

    async def _load(self) -> None:
        try:
            if not self.base_url:
                raise BackendError("no model server configured")

            self.progress = "Checking available models..."
            response = await self._client.get("/models")
            response.raise_for_status()
            available = [
                entry["id"]
                for entry in response.json().get("data", [])
                if isinstance(entry, dict) and "id" in entry
            ]
            logger.info("Available models: %s", available)

            model = select_model(available, self.preferred_models)
            if model is None:
                raise BackendError("model server reports no models")

            self.progress = f"Initializing {model} (this may take a few minutes)..."
            logger.info("Selected model %s", model)
            self.model = model
            self._ready = True
            self.progress = "AI model ready!"

        except (httpx.HTTPError, ValueError, AttributeError, BackendError) as e:
            logger.warning("Model backend unavailable: %s", e)
            self.progress = f"AI model unavailable: {e}"
            self._init_task = None
