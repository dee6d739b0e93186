"""
Tests for the tier orchestrator.

Covers:
1. End-to-end scenarios (offline keyword, weather normalization, gibberish,
   out-of-catalogue remote ids)
2. Tier ordering, confidence floors, and skipping unavailable tiers
3. Totality: route() always returns an actionable decision
4. Weather decisions have one shape whichever tier produced them
5. On-demand embedding initialization
6. Fallback JSONL log and status reporting
"""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from agrinav.config import ConnectivityConfig
from agrinav.routing.catalogue import ActionKind, RouteId, get_catalogue
from agrinav.routing.connectivity import ConnectivityMonitor
from agrinav.routing.embedding_index import EmbeddingIndex
from agrinav.routing.keywords import KeywordGroup, KeywordMatcher
from agrinav.routing.orchestrator import VoiceRouter
from agrinav.routing.reasoning import ReasoningTier, UnavailableLocalTier

from conftest import FakeEmbedder


class FakeTier(ReasoningTier):
    """Reasoning tier returning a canned candidate."""

    def __init__(
        self,
        name: str,
        result: Any = None,
        available: bool = True,
        min_confidence: float = 0.5,
        error: Optional[Exception] = None,
    ):
        self.name = name
        self.min_confidence = min_confidence
        self._result = result
        self._available = available
        self._error = error
        self.calls = 0

    @property
    def is_available(self) -> bool:
        return self._available

    async def resolve(self, utterance, language_hint=None):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._result


SMALL_KEYWORDS = (
    KeywordGroup(RouteId.MARKET, {"en": ("mandi",)}),
    KeywordGroup(RouteId.WEATHER, {"en": ("storm",)}, sub_action="alerts"),
)


def make_router(
    catalogue=None,
    local=None,
    remote=None,
    online=True,
    index=None,
    embedding_config=None,
    keyword_matcher=None,
    fallback_log=None,
):
    catalogue = catalogue if catalogue is not None else get_catalogue()
    index = index or EmbeddingIndex(catalogue, embedder_factory=FakeEmbedder, config=embedding_config)
    return VoiceRouter(
        catalogue=catalogue,
        local_tier=local or UnavailableLocalTier(),
        remote_tier=remote or FakeTier("remote"),
        embedding_index=index,
        keyword_matcher=keyword_matcher,
        connectivity=ConnectivityMonitor(ConnectivityConfig(assume_online=online, probe_url=None)),
        embedding_config=embedding_config,
        fallback_log=fallback_log,
    )


class TestScenarios:
    """Concrete end-to-end routing scenarios."""

    @pytest.mark.asyncio
    async def test_offline_price_query_uses_keywords(self, embedding_config):
        remote = FakeTier("remote", result={"actionKind": "chat", "confidence": 0.99})
        router = make_router(remote=remote, online=False, embedding_config=embedding_config)

        decision = await router.route("what's the price of rice today")

        assert decision.action_kind is ActionKind.NAVIGATE
        assert decision.target_id == "market"
        assert decision.tier == "keyword"
        assert remote.calls == 0

    @pytest.mark.asyncio
    async def test_remote_weather_navigation_normalized(self, embedding_config):
        remote = FakeTier("remote", result={"actionKind": "navigate", "targetId": "weather", "confidence": 0.9})
        router = make_router(remote=remote, embedding_config=embedding_config)

        decision = await router.route("any weather warnings")

        assert decision.action_kind is ActionKind.RESPOND
        assert decision.target_id is None
        assert decision.sub_action == "alerts"
        assert decision.tier == "remote"

    @pytest.mark.asyncio
    async def test_gibberish_falls_to_chat(self, embedding_config):
        router = make_router(embedding_config=embedding_config)

        decision = await router.route("asdfasdf gibberish")

        assert decision.action_kind is ActionKind.CHAT
        assert decision.target_id is None
        assert decision.confidence == pytest.approx(0.4)
        assert decision.tier == "keyword"

    @pytest.mark.asyncio
    async def test_out_of_catalogue_remote_id_falls_through(self, embedding_config):
        remote = FakeTier(
            "remote", result={"actionKind": "navigate", "targetId": "not-a-real-id", "confidence": 0.95},
        )
        router = make_router(remote=remote, embedding_config=embedding_config)

        decision = await router.route("what's the price of rice today")

        assert remote.calls == 1
        assert decision.target_id == "market"
        assert decision.tier == "keyword"


class TestTierOrder:
    """Priority order, floors and availability."""

    @pytest.mark.asyncio
    async def test_local_wins_first(self, embedding_config):
        local = FakeTier("local", result={"actionKind": "navigate", "targetId": "forum", "confidence": 0.9})
        remote = FakeTier("remote", result={"actionKind": "navigate", "targetId": "market", "confidence": 0.9})
        router = make_router(local=local, remote=remote, embedding_config=embedding_config)

        decision = await router.route("open the forum")

        assert decision.target_id == "forum"
        assert decision.tier == "local"
        assert remote.calls == 0

    @pytest.mark.asyncio
    async def test_unavailable_tiers_are_not_called(self, embedding_config):
        local = FakeTier("local", result={"actionKind": "chat"}, available=False)
        remote = FakeTier("remote", result={"actionKind": "chat"}, available=False)
        router = make_router(local=local, remote=remote, embedding_config=embedding_config)

        decision = await router.route("mandi rates")

        assert local.calls == 0
        assert remote.calls == 0
        assert decision.tier == "keyword"

    @pytest.mark.asyncio
    async def test_below_floor_falls_through(self, embedding_config):
        remote = FakeTier(
            "remote",
            result={"actionKind": "navigate", "targetId": "forum", "confidence": 0.3},
            min_confidence=0.5,
        )
        router = make_router(remote=remote, embedding_config=embedding_config)

        decision = await router.route("what's the price of rice today")

        assert decision.target_id == "market"
        assert decision.tier == "keyword"

    @pytest.mark.asyncio
    async def test_remote_exception_is_absorbed(self, embedding_config):
        remote = FakeTier("remote", error=RuntimeError("connection reset"))
        router = make_router(remote=remote, embedding_config=embedding_config)

        decision = await router.route("what's the price of rice today")

        assert decision.target_id == "market"

    @pytest.mark.asyncio
    async def test_rejected_action_falls_through(self, embedding_config):
        remote = FakeTier("remote", result={"actionKind": "teleport", "confidence": 1.0})
        router = make_router(remote=remote, embedding_config=embedding_config)

        decision = await router.route("asdfasdf gibberish")

        assert decision.action_kind is ActionKind.CHAT
        assert decision.tier == "keyword"

    @pytest.mark.asyncio
    async def test_embedding_tier_wins_when_ready(self, small_catalogue, fake_embedder, embedding_config):
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: fake_embedder, config=embedding_config)
        await index.initialize()
        router = make_router(
            catalogue=small_catalogue,
            index=index,
            embedding_config=embedding_config,
            keyword_matcher=KeywordMatcher(small_catalogue, groups=()),
        )

        decision = await router.route("mandi price")

        assert decision.action_kind is ActionKind.NAVIGATE
        assert decision.target_id == "market"
        assert decision.tier == "embedding"

    @pytest.mark.asyncio
    async def test_weak_embedding_match_falls_to_keyword(self, small_catalogue, fake_embedder, embedding_config):
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: fake_embedder, config=embedding_config)
        await index.initialize()
        router = make_router(
            catalogue=small_catalogue,
            index=index,
            embedding_config=embedding_config,
            keyword_matcher=KeywordMatcher(small_catalogue, groups=()),
        )

        decision = await router.route("completely unrelated words")

        assert decision.action_kind is ActionKind.CHAT
        assert decision.tier == "keyword"


class TestTotality:
    """route() never raises and always returns an actionable decision."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "utterance,hint",
        [
            ("what's the price of rice today", None),
            ("मंडी भाव", "hi-IN"),
            ("ഇന്നത്തെ കാലാവസ്ഥ", "Malayalam"),
            ("asdfasdf gibberish", "xx"),
            ("?!", "klingon"),
            ("   ", None),
            ("", "en"),
        ],
    )
    async def test_always_actionable(self, utterance, hint, embedding_config):
        remote = FakeTier("remote", error=TimeoutError("remote timed out"))
        router = make_router(remote=remote, embedding_config=embedding_config)

        decision = await router.route(utterance, hint)

        assert decision.is_actionable
        assert 0.0 <= decision.confidence <= 1.0
        if decision.target_id is not None:
            assert decision.target_id in get_catalogue()

    @pytest.mark.asyncio
    async def test_blank_input_skips_model_tiers(self, embedding_config):
        local = FakeTier("local", result={"actionKind": "chat"})
        remote = FakeTier("remote", result={"actionKind": "chat"})
        router = make_router(local=local, remote=remote, embedding_config=embedding_config)

        decision = await router.route("   ")

        assert decision.action_kind is ActionKind.CHAT
        assert local.calls == 0
        assert remote.calls == 0

    @pytest.mark.asyncio
    async def test_non_string_input(self, embedding_config):
        router = make_router(embedding_config=embedding_config)

        decision = await router.route(None)

        assert decision.action_kind is ActionKind.CHAT

    @pytest.mark.asyncio
    async def test_broken_keyword_tier_still_returns_chat(self, embedding_config):
        matcher = MagicMock()
        matcher.match.side_effect = RuntimeError("keyword table corrupted")
        router = make_router(embedding_config=embedding_config, keyword_matcher=matcher)

        decision = await router.route("asdfasdf gibberish")

        assert decision.action_kind is ActionKind.CHAT
        assert decision.confidence == pytest.approx(0.4)


class TestWeatherUniformity:
    """Weather decisions from every tier share one shape."""

    @pytest.mark.asyncio
    async def test_same_shape_from_each_tier(self, small_catalogue, embedding_config):
        utterance = "storm warning alert"
        matcher = KeywordMatcher(small_catalogue, groups=SMALL_KEYWORDS)

        remote = FakeTier("remote", result={"actionKind": "navigate", "targetId": "weather", "confidence": 0.9})
        from_remote = await make_router(
            catalogue=small_catalogue, remote=remote, embedding_config=embedding_config, keyword_matcher=matcher,
        ).route(utterance)

        embedder = FakeEmbedder()
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: embedder, config=embedding_config)
        await index.initialize()
        from_embedding = await make_router(
            catalogue=small_catalogue, index=index, embedding_config=embedding_config, keyword_matcher=matcher,
        ).route(utterance)

        from_keyword = await make_router(
            catalogue=small_catalogue, embedding_config=embedding_config, keyword_matcher=matcher,
        ).route(utterance)

        assert [d.tier for d in (from_remote, from_embedding, from_keyword)] == ["remote", "embedding", "keyword"]
        shapes = {(d.action_kind, d.target_id, d.sub_action) for d in (from_remote, from_embedding, from_keyword)}
        assert shapes == {(ActionKind.RESPOND, None, "alerts")}


class TestOnDemandInitialization:
    """Queries reaching an uninitialized index."""

    @pytest.mark.asyncio
    async def test_waits_for_initialization(self, small_catalogue, fake_embedder, embedding_config):
        config = embedding_config.model_copy(update={"init_on_demand": True, "init_wait_timeout": 5.0})
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: fake_embedder, config=config)
        router = make_router(
            catalogue=small_catalogue,
            index=index,
            embedding_config=config,
            keyword_matcher=KeywordMatcher(small_catalogue, groups=()),
        )

        decision = await router.route("mandi price")

        assert decision.tier == "embedding"
        assert decision.target_id == "market"

    @pytest.mark.asyncio
    async def test_starts_background_initialization_without_waiting(
        self, small_catalogue, fake_embedder, embedding_config,
    ):
        config = embedding_config.model_copy(update={"init_on_demand": True, "init_wait_timeout": 0.0})
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: fake_embedder, config=config)
        router = make_router(
            catalogue=small_catalogue,
            index=index,
            embedding_config=config,
            keyword_matcher=KeywordMatcher(small_catalogue, groups=()),
        )

        decision = await router.route("mandi price")

        assert decision.tier == "keyword"
        assert index.is_initializing or index.is_ready
        assert await index.wait_ready(5.0)
        assert fake_embedder.embed_batch_calls == 1

    @pytest.mark.asyncio
    async def test_no_initialization_when_disabled(self, small_catalogue, fake_embedder, embedding_config):
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: fake_embedder, config=embedding_config)
        router = make_router(
            catalogue=small_catalogue,
            index=index,
            embedding_config=embedding_config,
            keyword_matcher=KeywordMatcher(small_catalogue, groups=()),
        )

        await router.route("mandi price")

        assert not index.is_initializing
        assert fake_embedder.load_calls == 0

    @pytest.mark.asyncio
    async def test_warm_up(self, small_catalogue, fake_embedder, embedding_config):
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: fake_embedder, config=embedding_config)
        router = make_router(catalogue=small_catalogue, index=index, embedding_config=embedding_config,
                             keyword_matcher=KeywordMatcher(small_catalogue, groups=()))

        assert await router.warm_up() is True
        assert index.is_ready

    @pytest.mark.asyncio
    async def test_warm_up_failure_reported(self, small_catalogue, embedding_config):
        embedder = FakeEmbedder(fail_loads=1)
        index = EmbeddingIndex(small_catalogue, embedder_factory=lambda: embedder, config=embedding_config)
        router = make_router(catalogue=small_catalogue, index=index, embedding_config=embedding_config,
                             keyword_matcher=KeywordMatcher(small_catalogue, groups=()))

        assert await router.warm_up() is False
        assert not index.is_ready


class TestFallbackLog:
    """JSONL entries for queries the first attempted tier did not resolve."""

    @pytest.mark.asyncio
    async def test_logs_fallthrough(self, tmp_path, embedding_config):
        log_path = tmp_path / "logs" / "fallback.jsonl"
        router = make_router(embedding_config=embedding_config, fallback_log=log_path)

        await router.route("what's the price of rice today")

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["query"] == "what's the price of rice today"
        assert entry["decision"]["targetId"] == "market"
        outcomes = [(a["tier"], a["outcome"]) for a in entry["attempts"]]
        assert ("remote", "declined") in outcomes
        assert outcomes[-1] == ("keyword", "accepted")

    @pytest.mark.asyncio
    async def test_no_entry_when_first_tier_wins(self, tmp_path, embedding_config):
        log_path = tmp_path / "fallback.jsonl"
        remote = FakeTier("remote", result={"actionKind": "navigate", "targetId": "market", "confidence": 0.9})
        router = make_router(remote=remote, embedding_config=embedding_config, fallback_log=log_path)

        await router.route("what's the price of rice today")

        assert not log_path.exists()


class TestStatus:
    """status() aggregation."""

    def test_status(self, embedding_config):
        router = make_router(online=False, embedding_config=embedding_config)

        status = router.status()

        assert status["catalogue_version"] == get_catalogue().version
        assert status["connectivity"]["online"] is False
        assert set(status["tiers"]) == {"local", "remote", "embedding", "keyword"}
        assert status["tiers"]["local"]["available"] is False
        assert status["tiers"]["embedding"]["initialized"] is False
