"""
Reasoning tiers: language-model classification of an utterance.

Both the on-device (local) tier and the remote tier sit behind the same
``ReasoningTier`` contract. ``resolve`` returns a validated, normalized
Decision or None when the tier cannot answer; it never raises. Network
failures, timeouts and malformed responses all count as "not available".
"""

import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Callable, Optional

from ..config import LocalTierConfig, RemoteTierConfig, settings
from ..services.protocols import LLMService, Message
from .catalogue import RouteCatalogue, get_catalogue
from .decision import Decision
from .errors import TierUnavailableError
from .keywords import KeywordMatcher
from .language import detect_language, normalize_language_hint, normalize_text
from .validation import validate_and_normalize

logger = logging.getLogger("agrinav.routing.reasoning")

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ReasoningTier(ABC):
    """A model-backed resolution tier."""

    name: str = "reasoning"
    min_confidence: float = 0.5

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the tier can currently attempt a resolution."""

    @abstractmethod
    async def resolve(self, utterance: str, language_hint: Optional[str] = None) -> Optional[Decision]:
        """Return a validated decision, or None if the tier defers."""

    def status(self) -> dict[str, Any]:
        return {"name": self.name, "available": self.is_available}

    def unload(self) -> None:
        pass


class UnavailableTier(ReasoningTier):
    """A tier that always defers."""

    def __init__(self, name: str, reason: str = "not configured"):
        self.name = name
        self.reason = reason

    @property
    def is_available(self) -> bool:
        return False

    async def resolve(self, utterance: str, language_hint: Optional[str] = None) -> Optional[Decision]:
        return None

    def status(self) -> dict[str, Any]:
        return {"name": self.name, "available": False, "reason": self.reason}


class UnavailableLocalTier(UnavailableTier):
    """
    Capability stub for an on-device general model.

    Holds the local tier's place in the chain until a model ships with the
    app; it always defers to the next tier.
    """

    def __init__(self, reason: str = "no on-device model configured"):
        super().__init__(name="local", reason=reason)


SYSTEM_PROMPT = """You route voice requests for a farming app to one app destination.
The user may speak English, Hindi, Malayalam, Telugu, Kannada, Bengali, or a mix.

Destinations (JSON):
{catalogue}

Rules:
- "navigate": the request names a destination above. Set targetId to its id and, if clear, subAction to one of that destination's subActions.
- "respond": weather requests. Set targetId to null and subAction to one of: {weather_modes}.
- "chat": open-ended farming questions or anything that is not a destination. Set targetId and subAction to null.
- Never invent ids or subActions that are not listed.
- confidence is your certainty between 0 and 1.

Output strict JSON only, no prose, with exactly these keys:
{{"actionKind": "navigate|respond|chat", "targetId": string|null, "subAction": string|null, "confidence": number, "reason": string, "detectedLanguage": string, "normalizedQuery": string}}"""


def build_routing_prompt(
    catalogue: RouteCatalogue,
    utterance: str,
    language_hint: Optional[str] = None,
    max_examples: int = 6,
) -> list[Message]:
    """Build the grounding messages for an LLM routing call."""
    respond_entry = catalogue.respond_entry()
    weather_modes = ", ".join(sorted(respond_entry.sub_actions)) if respond_entry else "none"
    system = SYSTEM_PROMPT.format(
        catalogue=json.dumps(catalogue.to_prompt_context(max_examples), ensure_ascii=False),
        weather_modes=weather_modes,
    )
    hint = normalize_language_hint(language_hint) or "unknown"
    user = f"Language hint: {hint}\nUtterance: {json.dumps(utterance, ensure_ascii=False)}"
    return [Message(role="system", content=system), Message(role="user", content=user)]


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Extract the first JSON object from a model response.

    Handles markdown fences, <think> blocks and surrounding prose.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    if not text:
        raise ValueError("empty response")
    # Strip any <think> tags from reasoning models
    cleaned = _THINK_BLOCK.sub("", text)
    if "</think>" in cleaned:
        cleaned = cleaned[cleaned.rfind("</think>") + len("</think>"):]
    cleaned = _FENCE.sub("", cleaned).strip()

    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", cleaned):
        try:
            obj, _end = decoder.raw_decode(cleaned, match.start())
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            return obj
    raise ValueError(f"no JSON object in response: {text[:80]!r}")


class LLMReasoningTier(ReasoningTier):
    """
    Tier that asks an LLM backend for a structured routing decision.

    The backend is created and loaded lazily on first use. A backend that
    fails to load marks the tier unavailable.
    """

    def __init__(
        self,
        name: str,
        llm_factory: Callable[[], LLMService],
        timeout: float = 8.0,
        temperature: float = 0.0,
        max_tokens: int = 256,
        min_confidence: float = 0.5,
        max_examples: int = 6,
        catalogue: Optional[RouteCatalogue] = None,
        matcher: Optional[KeywordMatcher] = None,
    ):
        self.name = name
        self.min_confidence = min_confidence
        self._llm_factory = llm_factory
        self._llm: Optional[LLMService] = None
        self._load_error: Optional[str] = None
        self._timeout = timeout
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._max_examples = max_examples
        self._catalogue = catalogue if catalogue is not None else get_catalogue()
        self._matcher = matcher

    @property
    def is_available(self) -> bool:
        return self._load_error is None

    def _get_llm(self) -> LLMService:
        if self._llm is not None:
            return self._llm
        if self._load_error is not None:
            raise TierUnavailableError(self.name, self._load_error)
        try:
            llm = self._llm_factory()
            llm.load()
        except Exception as e:
            self._load_error = str(e)
            logger.warning("%s tier unavailable: %s", self.name, e)
            raise TierUnavailableError(self.name, self._load_error) from e
        self._llm = llm
        return llm

    async def resolve(self, utterance: str, language_hint: Optional[str] = None) -> Optional[Decision]:
        """Classify ``utterance``; None on any failure."""
        try:
            llm = self._get_llm()
        except TierUnavailableError:
            return None

        messages = build_routing_prompt(self._catalogue, utterance, language_hint, self._max_examples)
        loop = asyncio.get_running_loop()
        try:
            result = await asyncio.wait_for(
                loop.run_in_executor(
                    None,
                    lambda: llm.chat(
                        messages=messages,
                        max_tokens=self._max_tokens,
                        temperature=self._temperature,
                        json_mode=True,
                    ),
                ),
                timeout=self._timeout,
            )
            parsed = extract_json_object((result or {}).get("response", ""))
        except asyncio.TimeoutError:
            logger.warning("%s tier timed out (%.1fs)", self.name, self._timeout)
            return None
        except (json.JSONDecodeError, ValueError, KeyError) as e:
            logger.warning("%s tier parse error: %s", self.name, e)
            return None
        except Exception as e:
            logger.warning("%s tier failed: %s", self.name, e)
            return None

        parsed.setdefault("tier", self.name)
        decision = validate_and_normalize(
            parsed, utterance=utterance, catalogue=self._catalogue, matcher=self._matcher,
        )
        if decision is None:
            logger.warning(
                "%s tier returned an invalid action: %r",
                self.name, parsed.get("actionKind", parsed.get("action")),
            )
            return None

        # Fill best-effort fields the model left blank
        if not decision.detected_language or not decision.normalized_query:
            decision = replace(
                decision,
                detected_language=decision.detected_language or detect_language(utterance, language_hint),
                normalized_query=decision.normalized_query or normalize_text(utterance),
            )
        return decision.with_tier(self.name)

    def status(self) -> dict[str, Any]:
        info: dict[str, Any] = {"name": self.name, "available": self.is_available}
        if self._llm is not None:
            info["model"] = self._llm.model_info.to_dict()
        if self._load_error:
            info["reason"] = self._load_error
        return info

    def unload(self) -> None:
        if self._llm is not None:
            self._llm.unload()
            self._llm = None


def build_remote_tier(config: Optional[RemoteTierConfig] = None) -> ReasoningTier:
    """Create the remote tier from configuration."""
    config = config or settings.remote
    if not config.enabled:
        return UnavailableTier("remote", reason="disabled")

    from ..services import llm_registry

    def factory() -> LLMService:
        return llm_registry.create(
            config.backend,
            model=config.model,
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    return LLMReasoningTier(
        name="remote",
        llm_factory=factory,
        timeout=config.timeout,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        min_confidence=config.min_confidence,
        max_examples=config.max_examples_per_route,
    )


def build_local_tier(config: Optional[LocalTierConfig] = None) -> ReasoningTier:
    """Create the on-device tier; the stub unless a local backend is configured."""
    config = config or settings.local
    if config.backend == "none":
        return UnavailableLocalTier()

    from ..services import llm_registry

    def factory() -> LLMService:
        return llm_registry.create(
            config.backend,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    return LLMReasoningTier(
        name="local",
        llm_factory=factory,
        timeout=config.timeout,
        min_confidence=config.min_confidence,
        max_examples=2,
    )
