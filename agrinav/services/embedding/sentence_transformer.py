"""
Sentence Transformer embedding service.

Uses a multilingual sentence-transformers model (default:
paraphrase-multilingual-MiniLM-L12-v2, 384 dimensions) so utterances in
English, Hindi, Malayalam and other Indic languages share one vector space.

Route example blocks are several paraphrases of one request. ``embed_centroids``
turns each block into a single vector: the re-normalized mean of its sentence
vectors.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..protocols import EmbeddingService

logger = logging.getLogger("agrinav.services.embedding")

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """L2-normalize each row. Zero rows stay zero instead of becoming NaN."""
    norms = np.linalg.norm(vectors, axis=1, keepdims=True)
    return np.divide(vectors, norms, out=np.zeros_like(vectors), where=norms > 0)


def embed_centroids(embedder: EmbeddingService, groups: Sequence[Sequence[str]]) -> np.ndarray:
    """
    Embed groups of sentences as one vector per group.

    All sentences go through a single ``embed_batch`` call. Each group's
    vector is the mean of its normalized sentence vectors, re-normalized.

    Args:
        embedder: Any embedding service
        groups: Sentence lists, one per output row

    Returns:
        numpy array of shape (len(groups), dimension)

    Raises:
        ValueError: If a group has no sentences
    """
    if not groups:
        return np.zeros((0, embedder.dimension), dtype=np.float32)

    spans: list[tuple[int, int]] = []
    sentences: list[str] = []
    for group in groups:
        if not group:
            raise ValueError("Cannot embed an empty sentence group")
        spans.append((len(sentences), len(sentences) + len(group)))
        sentences.extend(group)

    embeddings = normalize_rows(np.asarray(embedder.embed_batch(sentences), dtype=np.float32))
    centroids = np.stack([embeddings[a:b].mean(axis=0) for a, b in spans])
    logger.debug("Embedded %d sentences into %d centroids", len(sentences), len(spans))
    return normalize_rows(centroids)


class SentenceTransformerEmbedding:
    """
    Embedding service using sentence-transformers.

    Produces L2-normalized vectors for semantic similarity.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_EMBEDDING_MODEL,
        device: Optional[str] = None,
    ):
        self.model_name = model_name
        self.device = device
        self._model = None
        self._dimension = 384

    @property
    def dimension(self) -> int:
        """Return embedding dimension."""
        return self._dimension

    @property
    def is_loaded(self) -> bool:
        """Check if model is loaded."""
        return self._model is not None

    def load(self) -> None:
        """Load the embedding model."""
        if self._model is not None:
            logger.debug("Embedding model already loaded")
            return

        try:
            from sentence_transformers import SentenceTransformer

            logger.info("Loading embedding model: %s", self.model_name)
            self._model = SentenceTransformer(
                self.model_name,
                device=self.device,
            )
            self._dimension = self._model.get_sentence_embedding_dimension()
            logger.info(
                "Embedding model loaded (dim=%d, device=%s)",
                self._dimension,
                self._model.device,
            )
        except Exception as e:
            logger.error("Failed to load embedding model: %s", e)
            raise

    def unload(self) -> None:
        """Unload the model to free memory."""
        if self._model is not None:
            del self._model
            self._model = None
            logger.info("Embedding model unloaded")

    def embed(self, text: str) -> np.ndarray:
        """
        Generate embedding for a single text.

        Args:
            text: Input text to embed

        Returns:
            numpy array of shape (dimension,)
        """
        if self._model is None:
            self.load()

        return self._model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )

    def embed_batch(self, texts: list[str]) -> np.ndarray:
        """
        Generate embeddings for multiple texts.

        Args:
            texts: List of input texts

        Returns:
            numpy array of shape (len(texts), dimension)
        """
        if self._model is None:
            self.load()

        return self._model.encode(
            texts,
            convert_to_numpy=True,
            normalize_embeddings=True,
            show_progress_bar=len(texts) > 50,
        )
