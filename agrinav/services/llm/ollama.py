"""
Ollama LLM Backend.

Uses Ollama's HTTP API for inference, supporting any model Ollama can run.
Used for the on-device local tier when a daemon runs next to the app.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..base import HTTPModelService, InferenceTimer
from ..protocols import Message, ModelInfo
from ..registry import register_llm

logger = logging.getLogger("agrinav.services.llm.ollama")


@register_llm("ollama")
class OllamaLLM(HTTPModelService):
    """LLM service using Ollama's HTTP API."""

    CAPABILITIES = ["text", "chat", "json"]

    def __init__(
        self,
        model: str = "qwen2.5:1.5b",
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        max_retries: int = 1,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Ollama LLM.

        Args:
            model: Ollama model name (e.g., "qwen2.5:1.5b")
            base_url: Ollama API base URL
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests)
            max_retries: Retries on an empty response or transport error
        """
        super().__init__(
            name="ollama", model_id=model, timeout=timeout, transport=transport, device="api",
        )
        self.model = model
        self.base_url = (base_url or "http://localhost:11434").rstrip("/")
        self._max_retries = max_retries

    @property
    def model_info(self) -> ModelInfo:
        """Return model information."""
        return ModelInfo(
            name=self.name,
            model_id=self.model_id,
            is_loaded=self.is_loaded,
            device=self.device,  # Ollama runs in its own process
            capabilities=self.CAPABILITIES,
        )

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
            json_mode: Constrain output to JSON

        Returns:
            Dict with response text and metadata
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "keep_alive": "30m",
            "options": {
                "num_predict": max_tokens,
                "temperature": temperature,
            },
        }
        if json_mode:
            payload["format"] = "json"

        for attempt in range(self._max_retries + 1):
            try:
                with InferenceTimer() as timer:
                    data = self._post_json(f"{self.base_url}/api/chat", payload)
            except httpx.HTTPError as e:
                logger.error("Ollama chat error: %s", e)
                if attempt < self._max_retries:
                    continue
                raise

            content = (data.get("message") or {}).get("content", "").strip()
            done_reason = data.get("done_reason", "unknown")
            eval_count = data.get("eval_count", 0)
            total_duration = data.get("total_duration", 0) / 1_000_000  # ns to ms

            logger.info(
                "Ollama chat: gen_tokens=%d, total=%.1fms, done_reason=%s, content_len=%d",
                eval_count, total_duration, done_reason, len(content),
            )

            # Retry if model hit token limit before producing output
            if done_reason == "length" and not content and attempt < self._max_retries:
                logger.warning(
                    "Empty response with done_reason=length, retrying (%d/%d)",
                    attempt + 1, self._max_retries,
                )
                continue

            return {
                "response": content,
                "message": {"role": "assistant", "content": content},
                "done_reason": done_reason,
                "eval_count": eval_count,
                "metrics": self.gather_metrics(timer.duration).to_dict(),
            }

        return {"response": "", "message": {"role": "assistant", "content": ""}}
