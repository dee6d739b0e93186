"""
Protocol definitions for model services used by the routing tiers.

These protocols define the interface that LLM and embedding implementations
must follow, so tiers can swap backends at runtime and tests can inject fakes.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

import numpy as np


@dataclass
class ModelInfo:
    """Metadata about a loaded model."""
    name: str
    model_id: str
    is_loaded: bool
    device: str
    capabilities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "model_id": self.model_id,
            "is_loaded": self.is_loaded,
            "device": self.device,
            "capabilities": self.capabilities,
        }


@dataclass
class Message:
    """A chat message for LLM conversation."""
    role: str  # "system", "user", "assistant"
    content: str


@runtime_checkable
class LLMService(Protocol):
    """Protocol for Large Language Model (reasoning) services."""

    @property
    def model_info(self) -> ModelInfo:
        """Return metadata about the current model."""
        ...

    def load(self) -> None:
        """Prepare the backend (open clients, check credentials)."""
        ...

    def unload(self) -> None:
        """Release backend resources."""
        ...

    def chat(
        self,
        messages: list[Message],
        max_tokens: int = 512,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> dict[str, Any]:
        """
        Generate a response in a chat conversation.

        Returns:
            Dict with at least a 'response' text field
        """
        ...


@runtime_checkable
class EmbeddingService(Protocol):
    """Protocol for text embedding services."""

    @property
    def dimension(self) -> int:
        ...

    @property
    def is_loaded(self) -> bool:
        ...

    def load(self) -> None:
        ...

    def unload(self) -> None:
        ...

    def embed(self, text: str) -> np.ndarray:
        """Embed one text into a vector of shape (dimension,)."""
        ...

    def embed_batch(self, texts: list[str]) -> np.ndarray:
        """Embed many texts into an array of shape (len(texts), dimension)."""
        ...


@dataclass
class InferenceMetrics:
    """Timing for one inference call."""
    duration_ms: float
    device: str
    model_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_ms": self.duration_ms,
            "device": self.device,
            "model_id": self.model_id,
        }
