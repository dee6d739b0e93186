"""
Shared fixtures for the routing test suite.

The fake embedder gives each distinct word its own axis, so cosine
similarity is word overlap and tests need no model download.
"""

import re

import numpy as np
import pytest

from agrinav.config import EmbeddingConfig
from agrinav.routing.catalogue import ActionKind, ExampleBlock, RouteCatalogue, RouteEntry, RouteId


class FakeEmbedder:
    """Deterministic bag-of-words embedder with call counters."""

    def __init__(self, dimension: int = 512, fail_loads: int = 0):
        self.model_name = "fake-bow"
        self._dimension = dimension
        self._vocab: dict[str, int] = {}
        self._loaded = False
        self._fail_loads = fail_loads
        self.load_calls = 0
        self.embed_calls = 0
        self.embed_batch_calls = 0
        self.batch_inputs: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        self.load_calls += 1
        if self._fail_loads > 0:
            self._fail_loads -= 1
            raise RuntimeError("model download failed")
        self._loaded = True

    def unload(self) -> None:
        self._loaded = False

    def _vector(self, text: str) -> np.ndarray:
        vec = np.zeros(self._dimension, dtype=np.float32)
        for token in re.findall(r"\w+", text.lower()):
            idx = self._vocab.setdefault(token, len(self._vocab) % self._dimension)
            vec[idx] += 1.0
        norm = np.linalg.norm(vec)
        return vec / norm if norm > 0 else vec

    def embed(self, text: str) -> np.ndarray:
        self.embed_calls += 1
        return self._vector(text)

    def embed_batch(self, texts: list[str]) -> np.ndarray:
        self.embed_batch_calls += 1
        self.batch_inputs.append(list(texts))
        return np.stack([self._vector(t) for t in texts])


def build_small_catalogue() -> RouteCatalogue:
    return RouteCatalogue(
        [
            RouteEntry(
                id=RouteId.MARKET,
                title="Market Prices",
                description="Mandi prices.",
                action_kind=ActionKind.NAVIGATE,
                sub_actions=frozenset({"prices", "trends"}),
                example_utterances=(ExampleBlock("Mandi price rates."),),
            ),
            RouteEntry(
                id=RouteId.WEATHER,
                title="Weather",
                description="Weather summary.",
                action_kind=ActionKind.RESPOND,
                sub_actions=frozenset({"current", "alerts", "forecast"}),
                default_sub_action="current",
                example_utterances=(
                    ExampleBlock("Sunny weather today.", sub_action="current"),
                    ExampleBlock("Storm warning alert. Cyclone alert.", sub_action="alerts"),
                ),
            ),
            RouteEntry(
                id=RouteId.CHATBOT,
                title="Assistant",
                description="General help.",
                action_kind=ActionKind.CHAT,
                example_utterances=(ExampleBlock("Talk to assistant."),),
            ),
        ],
        version="test",
    )


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def small_catalogue():
    return build_small_catalogue()


@pytest.fixture
def embedding_config():
    return EmbeddingConfig(
        strategy="centroid",
        min_confidence=0.4,
        cache_path=None,
        init_on_demand=False,
        init_wait_timeout=0.0,
    )
