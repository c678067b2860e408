from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from toolkit_dev.config import LLMConfig, load_llm_config

logger = logging.getLogger(__name__)


class ModelClientError(Exception):
    """Generic error from a model backend."""
    pass


class ModelClient(ABC):
    """
    Abstract base for any chat model backend.
    Everything else in the app should talk to THIS instead of httpx directly.
    """

    @abstractmethod
    async def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.5,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Send a chat-style request and return the raw response dict.

        - messages: list of {"role": "...", "content": "..."} (plus tool messages)
        - tools: OpenAI-style function definitions the model may call
        - kwargs: extras merged into the payload via kwargs["extra_params"]
        """
        raise NotImplementedError

    @abstractmethod
    def stream_text(
        self,
        system: str,
        prompt: str,
        prediction: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Stream a completion as text deltas. prediction, when given, is the
        expected output (the current document) and lets the provider speed up
        near-identical rewrites.
        """
        raise NotImplementedError


class OpenAICompatibleClient(ModelClient):
    """
    Client for OpenAI-compatible /chat/completions HTTP APIs.

    It expects:
      - base_url like "https://openrouter.ai/api/v1" or "https://api.openai.com/v1"
      - api_key for Authorization: Bearer ...
      - model name like "openai/gpt-4o"
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    def _url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ModelClientError("LLM API key not configured.")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.AsyncClient(**kwargs)

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.5,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        headers = self._headers()

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if tools:
            payload["tools"] = tools

        extra_params = kwargs.get("extra_params")
        if isinstance(extra_params, dict):
            payload.update(extra_params)

        async with self._client() as client:
            try:
                resp = await client.post(self._url(), json=payload, headers=headers)
            except httpx.RequestError as e:
                raise ModelClientError(f"Error contacting LLM provider: {e}") from e

        if resp.status_code != 200:
            raise ModelClientError(f"LLM provider returned {resp.status_code}: {resp.text}")

        try:
            data: Dict[str, Any] = resp.json()
        except ValueError as e:
            raise ModelClientError(f"Invalid JSON from LLM provider: {e}") from e

        return data

    async def stream_text(
        self,
        system: str,
        prompt: str,
        prediction: Optional[str] = None,
    ) -> AsyncIterator[str]:
        headers = self._headers()

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "stream": True,
        }
        if prediction is not None:
            payload["prediction"] = {"type": "content", "content": prediction}

        async with self._client() as client:
            try:
                async with client.stream("POST", self._url(), json=payload, headers=headers) as resp:
                    if resp.status_code != 200:
                        body = (await resp.aread()).decode("utf-8", errors="replace")
                        raise ModelClientError(f"LLM provider returned {resp.status_code}: {body}")

                    async for line in resp.aiter_lines():
                        # Server-sent events: "data: {...}" lines, terminated by "data: [DONE]".
                        if not line.startswith("data:"):
                            continue
                        data = line[len("data:"):].strip()
                        if data == "[DONE]":
                            break
                        try:
                            chunk = json.loads(data)
                        except ValueError as e:
                            raise ModelClientError(f"Invalid stream chunk from LLM provider: {e}") from e
                        for choice in chunk.get("choices") or []:
                            delta = (choice.get("delta") or {}).get("content")
                            if delta:
                                yield delta
            except httpx.RequestError as e:
                raise ModelClientError(f"Error contacting LLM provider: {e}") from e


def create_model_client(
    model: Optional[str] = None,
    config: Optional[LLMConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ModelClient:
    """Build the configured backend; model overrides TOOLKIT_LLM_MODEL."""
    cfg = config or load_llm_config()
    chosen = model or cfg.model
    logger.debug("Creating model client for %s at %s", chosen, cfg.api_base)
    return OpenAICompatibleClient(
        base_url=cfg.api_base,
        api_key=cfg.api_key,
        model=chosen,
        timeout=cfg.timeout,
        transport=transport,
    )
