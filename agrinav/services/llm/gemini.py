"""
Gemini LLM Backend.

Uses the Generative Language REST API (generateContent) over httpx.
Default backend for the remote reasoning tier.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from ..base import HTTPModelService, InferenceTimer
from ..protocols import Message, ModelInfo
from ..registry import register_llm

logger = logging.getLogger("agrinav.services.llm.gemini")


@register_llm("gemini")
class GeminiLLM(HTTPModelService):
    """LLM service using Google's Gemini API."""

    CAPABILITIES = ["text", "chat", "json"]

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Gemini LLM.

        Args:
            model: Model name (e.g., "gemini-2.5-flash")
            api_key: API key (defaults to GEMINI_API_KEY env var)
            base_url: API base URL
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests)
        """
        super().__init__(name="gemini", model_id=model, timeout=timeout, transport=transport)
        self.model = model
        self.base_url = (base_url or "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY", "")

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
        headers["x-goog-api-key"] = self.api_key
        return headers

    def load(self) -> None:
        """Initialize HTTP client."""
        if not self.api_key:
            raise ValueError("Gemini API key not set. Set GEMINI_API_KEY env var.")
        super().load()

    @staticmethod
    def _convert_messages(messages: list[Message]) -> tuple[Optional[str], list[dict]]:
        """Split out the system prompt and map roles to Gemini's user/model."""
        system_parts = []
        contents = []
        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
                continue
            role = "model" if msg.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": msg.content}]})
        system = "\n\n".join(system_parts) if system_parts else None
        return system, contents

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
            json_mode: Request an application/json response

        Returns:
            Dict with response text and metadata
        """
        system, contents = self._convert_messages(messages)
        generation_config: dict[str, Any] = {
            "maxOutputTokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload: dict[str, Any] = {
            "contents": contents,
            "generationConfig": generation_config,
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        try:
            with InferenceTimer() as timer:
                data = self._post_json(f"{self.base_url}/models/{self.model}:generateContent", payload)
        except httpx.HTTPError as e:
            logger.error("Gemini chat error: %s", e)
            raise

        candidates = data.get("candidates") or [{}]
        parts = (candidates[0].get("content") or {}).get("parts") or []
        content = "".join(p.get("text", "") for p in parts).strip()

        logger.info(
            "Gemini chat: finish=%s, content_len=%d, %.0fms",
            candidates[0].get("finishReason", "unknown"), len(content), timer.duration * 1000,
        )
        return {
            "response": content,
            "message": {"role": "assistant", "content": content},
            "metrics": self.gather_metrics(timer.duration).to_dict(),
        }
