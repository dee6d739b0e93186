"""
Embedding service for AgriNav.

Provides text-to-vector embeddings for the semantic routing tier.
"""

from .sentence_transformer import (
    DEFAULT_EMBEDDING_MODEL,
    SentenceTransformerEmbedding,
    embed_centroids,
    normalize_rows,
)

__all__ = [
    "DEFAULT_EMBEDDING_MODEL",
    "SentenceTransformerEmbedding",
    "embed_centroids",
    "normalize_rows",
]
