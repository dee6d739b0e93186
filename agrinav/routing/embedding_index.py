"""
Embedding index for semantic route matching.

Embeds every example block of the route catalogue once, then answers queries
by cosine similarity against the stored vectors. The vectors are owned by
this component alone and are reachable only through ``initialize`` and
``find_best_route``.

Initialization is single-flight: concurrent ``initialize()`` callers share
one pending task, so the embedding model is loaded and the catalogue is
embedded exactly once.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np

from ..config import EmbeddingConfig, settings
from ..services.embedding import SentenceTransformerEmbedding, embed_centroids, normalize_rows
from ..services.protocols import EmbeddingService
from .catalogue import ActionKind, ExampleBlock, RouteCatalogue, RouteEntry, get_catalogue
from .decision import Decision
from .errors import EmbeddingIndexNotReadyError
from .language import detect_language, normalize_text

logger = logging.getLogger("agrinav.routing.embedding_index")

TIER_NAME = "embedding"

# Confidence of the chat decision returned by an index with no entries
EMPTY_INDEX_CONFIDENCE = 0.3


@dataclass(frozen=True)
class RouteMatch:
    """Nearest catalogue block for a query."""

    entry: Optional[RouteEntry]
    sub_action: Optional[str]
    similarity: float
    confidence: float

    def to_decision(self, utterance: str, language_hint: Optional[str] = None) -> Decision:
        """Convert to an unvalidated tier decision."""
        detected = detect_language(utterance, language_hint)
        query = normalize_text(utterance)
        if self.entry is None:
            return Decision(
                action_kind=ActionKind.CHAT,
                confidence=self.confidence,
                reason="embedding index is empty",
                detected_language=detected,
                normalized_query=query,
                tier=TIER_NAME,
            )
        return Decision(
            action_kind=ActionKind.NAVIGATE,
            target_id=self.entry.id.value,
            sub_action=self.sub_action,
            confidence=self.confidence,
            reason=f"semantic similarity {self.similarity:.3f}",
            detected_language=detected,
            normalized_query=query,
            tier=TIER_NAME,
        )


def cosine_similarities(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Cosine similarity of ``query`` against each row of ``matrix``.

    Defined as dot(a, b) / (|a| * |b|). Rows (or a query) with zero norm
    get similarity 0 instead of NaN.
    """
    if matrix.shape[0] == 0:
        return np.zeros(0, dtype=np.float32)
    query = np.asarray(query, dtype=np.float32).reshape(-1)
    dots = matrix @ query
    denom = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    return np.divide(dots, denom, out=np.zeros_like(dots), where=denom > 0)


class EmbeddingIndex:
    """
    Semantic matcher over the route catalogue.

    One vector per example block, aligned with catalogue declaration order.
    With the ``centroid`` strategy a block's vector is the re-normalized mean
    of its per-sentence embeddings; with ``block`` the whole block is
    embedded as one text.
    """

    def __init__(
        self,
        catalogue: Optional[RouteCatalogue] = None,
        embedder_factory: Optional[Callable[[], EmbeddingService]] = None,
        config: Optional[EmbeddingConfig] = None,
    ) -> None:
        self._config = config or settings.embedding
        self._catalogue = catalogue if catalogue is not None else get_catalogue()
        self._embedder_factory = embedder_factory or self._default_embedder
        self._embedder: Optional[EmbeddingService] = None
        self._blocks: list[tuple[RouteEntry, ExampleBlock]] = []
        self._vectors: Optional[np.ndarray] = None
        self._init_task: Optional[asyncio.Future] = None
        self._load_seconds: Optional[float] = None
        self._from_cache = False

    def _default_embedder(self) -> EmbeddingService:
        return SentenceTransformerEmbedding(
            model_name=self._config.model,
            device=self._config.device,
        )

    @property
    def is_ready(self) -> bool:
        return self._vectors is not None

    @property
    def is_initializing(self) -> bool:
        return self._init_task is not None and not self._init_task.done()

    @property
    def catalogue(self) -> RouteCatalogue:
        return self._catalogue

    async def initialize(self) -> None:
        """
        Load the embedding model and embed the catalogue.

        Idempotent. A call made while another is in flight awaits the same
        pending task. A failed initialization is not cached, so a later call
        retries.
        """
        if self._vectors is not None:
            return

        if self._init_task is None or self._init_task.done():
            self._init_task = asyncio.ensure_future(self._build())
        task = self._init_task

        try:
            # Shield so a cancelled caller does not abort the shared build
            await asyncio.shield(task)
        except Exception:
            if self._init_task is task:
                self._init_task = None
            raise

    async def wait_ready(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for an in-flight initialization."""
        if self.is_ready:
            return True
        task = self._init_task
        if task is None or timeout <= 0:
            return False
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        except Exception as e:
            logger.warning("Embedding initialization failed while waiting: %s", e)
            return False
        return self.is_ready

    def start_background_initialize(self) -> Optional[asyncio.Future]:
        """Schedule initialization without awaiting it; returns the pending task."""
        if self.is_ready:
            return None
        if not self.is_initializing:
            self._init_task = asyncio.ensure_future(self._build())
            self._init_task.add_done_callback(self._on_background_done)
        return self._init_task

    def _on_background_done(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Background embedding initialization failed: %s", error)
            if self._init_task is task:
                self._init_task = None

    async def _build(self) -> None:
        loop = asyncio.get_running_loop()
        start = time.perf_counter()

        embedder = self._embedder or self._embedder_factory()
        logger.info("Loading embedding index (strategy=%s)", self._config.strategy)
        await loop.run_in_executor(None, embedder.load)

        blocks = self._catalogue.blocks()
        vectors = self._load_cache(embedder, len(blocks))
        self._from_cache = vectors is not None
        if vectors is None:
            vectors = await loop.run_in_executor(None, self._compute_vectors, embedder, blocks)
            self._save_cache(embedder, vectors)

        self._embedder = embedder
        self._blocks = blocks
        self._vectors = vectors
        self._load_seconds = time.perf_counter() - start

        logger.info(
            "Embedding index ready in %.2fs (%d routes, %d blocks, dim=%d, cached=%s)",
            self._load_seconds, len(self._catalogue), len(blocks),
            vectors.shape[1] if vectors.ndim == 2 else 0, self._from_cache,
        )

    def _compute_vectors(
        self,
        embedder: EmbeddingService,
        blocks: list[tuple[RouteEntry, ExampleBlock]],
    ) -> np.ndarray:
        """Embed all blocks with a single embed_batch call."""
        if not blocks:
            return np.zeros((0, embedder.dimension), dtype=np.float32)

        if self._config.strategy == "block":
            texts = [block.text for _entry, block in blocks]
            return normalize_rows(np.asarray(embedder.embed_batch(texts), dtype=np.float32))

        return embed_centroids(embedder, [block.sentences() or [block.text] for _entry, block in blocks])

    def _model_name(self, embedder: EmbeddingService) -> str:
        return str(getattr(embedder, "model_name", self._config.model))

    def _load_cache(self, embedder: EmbeddingService, expected_rows: int) -> Optional[np.ndarray]:
        path = self._config.cache_path
        if path is None or not Path(path).exists():
            return None
        try:
            with np.load(path, allow_pickle=False) as data:
                if (
                    str(data["fingerprint"]) != self._catalogue.fingerprint()
                    or str(data["model"]) != self._model_name(embedder)
                    or str(data["strategy"]) != self._config.strategy
                ):
                    logger.info("Embedding cache %s is stale, recomputing", path)
                    return None
                vectors = np.asarray(data["vectors"], dtype=np.float32)
        except (OSError, KeyError, ValueError) as e:
            logger.warning("Could not read embedding cache %s: %s", path, e)
            return None
        if vectors.ndim != 2 or vectors.shape[0] != expected_rows:
            logger.warning("Embedding cache %s has shape %s, recomputing", path, vectors.shape)
            return None
        return vectors

    def _save_cache(self, embedder: EmbeddingService, vectors: np.ndarray) -> None:
        path = self._config.cache_path
        if path is None:
            return
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                np.savez(
                    f,
                    vectors=vectors,
                    fingerprint=np.array(self._catalogue.fingerprint()),
                    model=np.array(self._model_name(embedder)),
                    strategy=np.array(self._config.strategy),
                )
            logger.info("Saved embedding cache to %s", path)
        except OSError as e:
            logger.warning("Could not write embedding cache %s: %s", path, e)

    async def find_best_route(self, utterance: str, language_hint: Optional[str] = None) -> RouteMatch:
        """
        Return the nearest catalogue block for ``utterance``.

        Raises:
            EmbeddingIndexNotReadyError: If ``initialize()`` has not completed
        """
        # Local references stay valid if unload() runs while the query is embedded
        vectors, blocks, embedder = self._vectors, self._blocks, self._embedder
        if vectors is None or embedder is None:
            raise EmbeddingIndexNotReadyError("initializing" if self.is_initializing else "not initialized")

        if not blocks:
            return RouteMatch(entry=None, sub_action=None, similarity=0.0, confidence=EMPTY_INDEX_CONFIDENCE)

        loop = asyncio.get_running_loop()
        query_vec = await loop.run_in_executor(None, embedder.embed, utterance)

        sims = cosine_similarities(vectors, query_vec)
        best = int(np.argmax(sims))
        similarity = float(sims[best])
        entry, block = blocks[best]

        # Text similarity is conventionally non-negative; clamp guards degenerate vectors
        confidence = min(1.0, max(0.0, similarity))
        logger.debug(
            "Embedding match: %s/%s sim=%.3f", entry.id.value, block.sub_action, similarity,
        )
        return RouteMatch(entry=entry, sub_action=block.sub_action, similarity=similarity, confidence=confidence)

    def status(self) -> dict[str, Any]:
        """Report index state for health endpoints."""
        return {
            "initialized": self.is_ready,
            "initializing": self.is_initializing,
            "routes": len(self._catalogue),
            "blocks": len(self._blocks) if self.is_ready else len(self._catalogue.blocks()),
            "embeddings": 0 if self._vectors is None else int(self._vectors.shape[0]),
            "dimension": None if self._vectors is None or self._vectors.ndim != 2 else int(self._vectors.shape[1]),
            "model": self._model_name(self._embedder) if self._embedder is not None else self._config.model,
            "strategy": self._config.strategy,
            "from_cache": self._from_cache,
            "load_seconds": None if self._load_seconds is None else round(self._load_seconds, 3),
        }

    def unload(self) -> None:
        """Drop the model and vectors; the next initialize() rebuilds."""
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()
        self._init_task = None
        if self._embedder is not None:
            self._embedder.unload()
            self._embedder = None
        self._vectors = None
        self._blocks = []
        self._load_seconds = None
        logger.info("Embedding index unloaded")


_index: Optional[EmbeddingIndex] = None


def get_embedding_index() -> EmbeddingIndex:
    """Get or create the global embedding index."""
    global _index
    if _index is None:
        _index = EmbeddingIndex()
    return _index
