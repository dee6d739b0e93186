"""
Base class providing shared utilities for model services.
"""

import logging
import time
from abc import ABC
from typing import Optional

import httpx

from .protocols import InferenceMetrics


class BaseModelService(ABC):
    """
    Optional base class providing common utilities for model services.

    Services can inherit from this or implement the Protocol directly.
    """

    def __init__(self, name: str, model_id: str, device: str = "cloud"):
        self.name = name
        self.model_id = model_id
        self._device = device
        self.logger = logging.getLogger(f"agrinav.services.{name}")

    @property
    def device(self) -> str:
        return self._device

    def gather_metrics(self, duration: float) -> InferenceMetrics:
        """Collect inference timing."""
        return InferenceMetrics(
            duration_ms=round(duration * 1000, 2),
            device=self.device,
            model_id=self.model_id,
        )


class HTTPModelService(BaseModelService):
    """Base for backends that talk to a model over a synchronous httpx client."""

    def __init__(
        self,
        name: str,
        model_id: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        device: str = "cloud",
    ):
        super().__init__(name=name, model_id=model_id, device=device)
        self._timeout = float(timeout)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def is_loaded(self) -> bool:
        return self._client is not None

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def load(self) -> None:
        """Open the HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.Client(
            timeout=self._timeout,
            headers=self._headers(),
            transport=self._transport,
        )
        self.logger.info("%s LLM initialized: model=%s", self.name, self.model_id)

    def unload(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self.logger.info("%s LLM unloaded", self.name)

    def _post_json(self, url: str, payload: dict) -> dict:
        if self._client is None:
            raise RuntimeError(f"{self.name} LLM not loaded")
        response = self._client.post(url, json=payload)
        response.raise_for_status()
        return response.json()


class InferenceTimer:
    """Context manager for timing inference operations."""

    def __init__(self):
        self.start_time: float = 0
        self.duration: float = 0

    def __enter__(self) -> "InferenceTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self.duration = time.perf_counter() - self.start_time
