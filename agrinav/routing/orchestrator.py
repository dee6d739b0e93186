"""
Tier orchestrator for voice routing.

Runs the resolution tiers in priority order and returns the first
structurally valid, sufficiently confident decision:

    LOCAL -> CONNECTIVITY_CHECK -> REMOTE -> EMBEDDING -> KEYWORD -> DONE

Tiers run strictly one after another. When the device is offline the remote
tier is skipped. The keyword tier always produces an actionable decision, so
``route()`` always returns one and never raises.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ..config import EmbeddingConfig, settings
from .catalogue import ActionKind, RouteCatalogue, get_catalogue
from .connectivity import ConnectivityMonitor
from .decision import Decision
from .embedding_index import TIER_NAME as EMBEDDING_TIER
from .embedding_index import EmbeddingIndex
from .errors import EmbeddingIndexNotReadyError
from .keywords import KEYWORD_FALLBACK_CONFIDENCE
from .keywords import TIER_NAME as KEYWORD_TIER
from .keywords import KeywordMatcher
from .language import detect_language, normalize_text
from .reasoning import ReasoningTier, build_local_tier, build_remote_tier
from .validation import validate_and_normalize

logger = logging.getLogger("agrinav.routing.orchestrator")

# Warm-ups slower than this are logged as warnings
SLOW_WARM_UP_SECONDS = 10.0


class RouterState(str, Enum):
    """States of the routing state machine."""

    LOCAL = "local"
    CONNECTIVITY_CHECK = "connectivity_check"
    REMOTE = "remote"
    EMBEDDING = "embedding"
    KEYWORD = "keyword"
    DONE = "done"


@dataclass
class TierAttempt:
    """Outcome of one tier for one query."""

    tier: str
    outcome: str  # accepted, declined, rejected, not_actionable, below_floor, unavailable, skipped, error
    confidence: Optional[float] = None
    target: Optional[str] = None
    detail: Optional[str] = None


class VoiceRouter:
    """
    Routes utterances to catalogue destinations through the tier chain.

    All collaborators are injectable; defaults come from settings.
    """

    def __init__(
        self,
        catalogue: Optional[RouteCatalogue] = None,
        local_tier: Optional[ReasoningTier] = None,
        remote_tier: Optional[ReasoningTier] = None,
        embedding_index: Optional[EmbeddingIndex] = None,
        keyword_matcher: Optional[KeywordMatcher] = None,
        connectivity: Optional[ConnectivityMonitor] = None,
        embedding_config: Optional[EmbeddingConfig] = None,
        fallback_log: Optional[Path] = None,
    ) -> None:
        self._catalogue = catalogue if catalogue is not None else get_catalogue()
        self._embedding_config = embedding_config or settings.embedding
        self._keywords = keyword_matcher or KeywordMatcher(self._catalogue)
        self._local = local_tier or build_local_tier()
        self._remote = remote_tier or build_remote_tier()
        self._index = embedding_index or EmbeddingIndex(self._catalogue, config=self._embedding_config)
        self._connectivity = connectivity or ConnectivityMonitor()

        if fallback_log is None:
            fallback_log = settings.router.fallback_log
        self._fallback_log_path: Optional[Path] = None
        if fallback_log:
            self._fallback_log_path = Path(fallback_log)
            self._fallback_log_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def connectivity(self) -> ConnectivityMonitor:
        return self._connectivity

    @property
    def embedding_index(self) -> EmbeddingIndex:
        return self._index

    @property
    def catalogue(self) -> RouteCatalogue:
        return self._catalogue

    async def route(self, utterance: str, language_hint: Optional[str] = None) -> Decision:
        """
        Resolve an utterance to a validated decision.

        Never raises: internal failures fall back to the keyword tier, and
        failing that to the universal chat decision.
        """
        start = time.perf_counter()
        text = utterance if isinstance(utterance, str) else ""
        attempts: list[TierAttempt] = []

        try:
            decision = await self._run(text, language_hint, attempts)
        except Exception as e:
            logger.error("Routing failed, using keyword fallback: %s", e, exc_info=True)
            attempts.append(TierAttempt(tier="orchestrator", outcome="error", detail=str(e)))
            decision = self._safe_keyword(text, language_hint)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Route: '%s' -> %s/%s (%s, conf=%.2f, %.0fms)",
            text[:50], decision.action_kind.value,
            decision.target_id or decision.sub_action or "-",
            decision.tier, decision.confidence, elapsed_ms,
        )
        self._log_fallback(text, attempts, decision, elapsed_ms)
        return decision

    async def _run(self, text: str, language_hint: Optional[str], attempts: list[TierAttempt]) -> Decision:
        # Blank input has nothing for the model tiers to classify
        state = RouterState.LOCAL if text.strip() else RouterState.KEYWORD

        while state is not RouterState.DONE:
            result: Optional[Decision] = None

            if state is RouterState.LOCAL:
                result = await self._try_reasoning(self._local, text, language_hint, attempts)
                state = RouterState.CONNECTIVITY_CHECK

            elif state is RouterState.CONNECTIVITY_CHECK:
                if self._connectivity.is_online:
                    state = RouterState.REMOTE
                else:
                    attempts.append(TierAttempt(tier=self._remote.name, outcome="skipped", detail="offline"))
                    state = RouterState.EMBEDDING

            elif state is RouterState.REMOTE:
                result = await self._try_reasoning(self._remote, text, language_hint, attempts)
                state = RouterState.EMBEDDING

            elif state is RouterState.EMBEDDING:
                result = await self._try_embedding(text, language_hint, attempts)
                state = RouterState.KEYWORD

            elif state is RouterState.KEYWORD:
                result = self._keyword(text, language_hint, attempts)
                state = RouterState.DONE

            if result is not None:
                return result

        # Unreachable: the keyword state always returns
        return self._universal_chat(text, language_hint)

    def _accept(
        self,
        candidate: Optional[Decision],
        tier: str,
        floor: float,
        text: str,
        attempts: list[TierAttempt],
    ) -> Optional[Decision]:
        """Validate a candidate and apply the tier's confidence floor."""
        if candidate is None:
            attempts.append(TierAttempt(tier=tier, outcome="declined"))
            return None

        decision = validate_and_normalize(
            candidate, utterance=text, catalogue=self._catalogue, matcher=self._keywords,
        )
        if decision is None:
            logger.warning("%s tier produced an invalid decision", tier)
            attempts.append(TierAttempt(tier=tier, outcome="rejected"))
            return None

        attempt = TierAttempt(tier=tier, outcome="accepted", confidence=decision.confidence, target=decision.target_id)
        if not decision.is_actionable:
            attempt.outcome = "not_actionable"
        elif decision.confidence < floor:
            attempt.outcome = "below_floor"
        attempts.append(attempt)

        if attempt.outcome != "accepted":
            logger.debug("%s tier declined: %s (conf=%.2f)", tier, attempt.outcome, decision.confidence)
            return None
        return decision.with_tier(tier)

    async def _try_reasoning(
        self,
        tier: ReasoningTier,
        text: str,
        language_hint: Optional[str],
        attempts: list[TierAttempt],
    ) -> Optional[Decision]:
        if not tier.is_available:
            attempts.append(TierAttempt(tier=tier.name, outcome="unavailable"))
            return None
        try:
            candidate = await tier.resolve(text, language_hint)
        except Exception as e:
            logger.warning("%s tier raised: %s", tier.name, e)
            attempts.append(TierAttempt(tier=tier.name, outcome="error", detail=str(e)))
            return None
        return self._accept(candidate, tier.name, tier.min_confidence, text, attempts)

    async def _try_embedding(
        self,
        text: str,
        language_hint: Optional[str],
        attempts: list[TierAttempt],
    ) -> Optional[Decision]:
        config = self._embedding_config
        if not config.enabled:
            attempts.append(TierAttempt(tier=EMBEDDING_TIER, outcome="unavailable", detail="disabled"))
            return None

        index = self._index
        if not index.is_ready:
            if config.init_on_demand and not index.is_initializing:
                index.start_background_initialize()
            if index.is_initializing and config.init_wait_timeout > 0:
                await index.wait_ready(config.init_wait_timeout)
            if not index.is_ready:
                attempts.append(TierAttempt(tier=EMBEDDING_TIER, outcome="skipped", detail="index not ready"))
                return None

        try:
            match = await index.find_best_route(text, language_hint)
        except EmbeddingIndexNotReadyError as e:
            attempts.append(TierAttempt(tier=EMBEDDING_TIER, outcome="skipped", detail=str(e)))
            return None
        except Exception as e:
            logger.warning("Embedding tier failed: %s", e)
            attempts.append(TierAttempt(tier=EMBEDDING_TIER, outcome="error", detail=str(e)))
            return None

        return self._accept(
            match.to_decision(text, language_hint), EMBEDDING_TIER, config.min_confidence, text, attempts,
        )

    def _keyword(self, text: str, language_hint: Optional[str], attempts: list[TierAttempt]) -> Decision:
        decision = self._accept(self._keywords.match(text, language_hint), KEYWORD_TIER, 0.0, text, attempts)
        if decision is None:
            # Keyword output is built from validated tables; reaching here is a defect
            logger.error("Keyword tier produced a non-actionable decision for '%s'", text[:50])
            return self._universal_chat(text, language_hint)
        return decision

    def _safe_keyword(self, text: str, language_hint: Optional[str]) -> Decision:
        try:
            return self._keyword(text, language_hint, [])
        except Exception as e:
            logger.error("Keyword fallback failed: %s", e, exc_info=True)
            return self._universal_chat(text, language_hint)

    def _universal_chat(self, text: str, language_hint: Optional[str]) -> Decision:
        return Decision(
            action_kind=ActionKind.CHAT,
            confidence=KEYWORD_FALLBACK_CONFIDENCE,
            reason="fallback",
            detected_language=detect_language(text, language_hint),
            normalized_query=normalize_text(text),
            tier=KEYWORD_TIER,
        )

    def _log_fallback(
        self,
        text: str,
        attempts: list[TierAttempt],
        decision: Decision,
        route_time_ms: float,
    ) -> None:
        """Append a JSONL entry when the first tier that actually ran did not win."""
        if not self._fallback_log_path:
            return
        ran = [a for a in attempts if a.outcome not in ("unavailable", "skipped")]
        if not ran or ran[0].outcome == "accepted":
            return
        try:
            entry = {
                "ts": datetime.now(timezone.utc).isoformat(),
                "query": text,
                "attempts": [asdict(a) for a in attempts],
                "decision": decision.to_dict(),
                "route_time_ms": round(route_time_ms, 1),
            }
            with open(self._fallback_log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except Exception:
            logger.debug("Failed to write fallback log entry", exc_info=True)

    async def warm_up(self) -> bool:
        """Initialize the embedding index; returns False if it failed."""
        if not self._embedding_config.enabled:
            return False
        start = time.perf_counter()
        try:
            await self._index.initialize()
        except Exception as e:
            logger.warning("Embedding warm-up failed: %s", e)
            return False
        elapsed = time.perf_counter() - start
        if elapsed > SLOW_WARM_UP_SECONDS:
            logger.warning("Embedding warm-up was slow: %.1fs", elapsed)
        else:
            logger.info("Embedding warm-up finished in %.2fs", elapsed)
        return True

    def status(self) -> dict[str, Any]:
        """Aggregate tier and connectivity status."""
        return {
            "catalogue_version": self._catalogue.version,
            "routes": len(self._catalogue),
            "connectivity": self._connectivity.status(),
            "tiers": {
                "local": self._local.status(),
                "remote": self._remote.status(),
                "embedding": self._index.status(),
                "keyword": {"name": KEYWORD_TIER, "available": True},
            },
        }

    def unload(self) -> None:
        """Release models held by the tiers."""
        self._index.unload()
        self._local.unload()
        self._remote.unload()
        logger.info("Voice router unloaded")


# Module-level singleton
_router: Optional[VoiceRouter] = None


def get_voice_router() -> VoiceRouter:
    """Get or create the global voice router instance."""
    global _router
    if _router is None:
        _router = VoiceRouter()
    return _router


async def route_utterance(utterance: str, language_hint: Optional[str] = None) -> Decision:
    """Convenience function to route an utterance."""
    router = get_voice_router()
    return await router.route(utterance, language_hint)
