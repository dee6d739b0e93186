"""
Groq / OpenAI-compatible LLM Backend.

Uses the OpenAI-compatible chat completions API. Registered as "groq" with
Groq's endpoint and as "openai" for any other compatible server.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from ..base import HTTPModelService, InferenceTimer
from ..protocols import Message, ModelInfo
from ..registry import register_llm

logger = logging.getLogger("agrinav.services.llm.groq")


@register_llm("groq")
class GroqLLM(HTTPModelService):
    """LLM service using Groq's API."""

    CAPABILITIES = ["text", "chat", "json"]
    DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
    API_KEY_ENV = "GROQ_API_KEY"

    def __init__(
        self,
        model: str = "llama-3.3-70b-versatile",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the backend.

        Args:
            model: Model name (e.g., "llama-3.3-70b-versatile")
            api_key: API key (defaults to the provider's env var)
            base_url: API base URL
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests)
        """
        super().__init__(name=self._service_name(), model_id=model, timeout=timeout, transport=transport)
        self.model = model
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.api_key = api_key or os.environ.get(self.API_KEY_ENV, "")

    @classmethod
    def _service_name(cls) -> str:
        return "groq"

    @property
    def model_info(self) -> ModelInfo:
        """Return model information."""
        return ModelInfo(
            name=self.name,
            model_id=self.model_id,
            is_loaded=self.is_loaded,
            device=self.device,
            capabilities=self.CAPABILITIES,
        )

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def load(self) -> None:
        """Initialize HTTP client."""
        if not self.api_key:
            raise ValueError(f"{self.name} API key not set. Set {self.API_KEY_ENV} env var.")
        super().load()

    def chat(
        self,
        messages: list[Message],
        max_tokens: int = 256,
        temperature: float = 0.7,
        json_mode: bool = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Synchronous chat completion.

        Args:
            messages: List of Message objects
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            json_mode: Ask the server for a JSON object response

        Returns:
            Dict with response text and metadata
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            with InferenceTimer() as timer:
                data = self._post_json(f"{self.base_url}/chat/completions", payload)
        except httpx.HTTPError as e:
            logger.error("%s chat error: %s", self.name, e)
            raise

        choices = data.get("choices") or [{}]
        message = choices[0].get("message") or {}
        content = (message.get("content") or "").strip()

        logger.info(
            "%s chat: tokens=%s, content_len=%d, %.0fms",
            self.name, data.get("usage", {}), len(content), timer.duration * 1000,
        )
        return {
            "response": content,
            "message": {"role": "assistant", "content": content},
            "metrics": self.gather_metrics(timer.duration).to_dict(),
        }


@register_llm("openai")
class OpenAICompatibleLLM(GroqLLM):
    """LLM service for any OpenAI-compatible chat completions server."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    API_KEY_ENV = "OPENAI_API_KEY"

    def __init__(self, model: str = "gpt-4o-mini", **kwargs: Any) -> None:
        super().__init__(model=model, **kwargs)

    @classmethod
    def _service_name(cls) -> str:
        return "openai"
