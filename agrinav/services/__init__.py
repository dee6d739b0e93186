"""
Model services for AgriNav.

This module provides:
- Protocol definitions for LLM and embedding services
- A registry of LLM backends by name
- Concrete implementations (gemini, groq, openai-compatible, ollama)
"""

from .protocols import (
    EmbeddingService,
    InferenceMetrics,
    LLMService,
    Message,
    ModelInfo,
)
from .registry import (
    llm_registry,
    register_llm,
)

# Import LLM implementations to trigger registration
from . import llm  # noqa: F401

from .embedding import SentenceTransformerEmbedding

__all__ = [
    # Protocols
    "EmbeddingService",
    "LLMService",
    "ModelInfo",
    "InferenceMetrics",
    "Message",
    # Registries
    "llm_registry",
    # Decorators
    "register_llm",
    # Embedding
    "SentenceTransformerEmbedding",
]
