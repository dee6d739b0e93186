"""
Voice-intent routing core.

Turns a multilingual spoken utterance into a validated navigation Decision
through a chain of tiers: on-device model, remote model, embedding search,
and keyword matching.
"""

from .catalogue import ActionKind, ExampleBlock, RouteCatalogue, RouteEntry, RouteId, get_catalogue
from .connectivity import ConnectivityMonitor
from .decision import Decision
from .embedding_index import EmbeddingIndex, RouteMatch, get_embedding_index
from .errors import CatalogueError, EmbeddingIndexNotReadyError, RoutingError, TierUnavailableError
from .keywords import KeywordGroup, KeywordMatcher, get_keyword_matcher
from .orchestrator import RouterState, VoiceRouter, get_voice_router, route_utterance
from .reasoning import LLMReasoningTier, ReasoningTier, UnavailableLocalTier, UnavailableTier
from .validation import normalize, validate, validate_and_normalize

__all__ = [
    # Catalogue
    "ActionKind",
    "ExampleBlock",
    "RouteCatalogue",
    "RouteEntry",
    "RouteId",
    "get_catalogue",
    # Decision + validation
    "Decision",
    "validate",
    "normalize",
    "validate_and_normalize",
    # Tiers
    "KeywordGroup",
    "KeywordMatcher",
    "get_keyword_matcher",
    "EmbeddingIndex",
    "RouteMatch",
    "get_embedding_index",
    "ReasoningTier",
    "LLMReasoningTier",
    "UnavailableTier",
    "UnavailableLocalTier",
    # Orchestration
    "ConnectivityMonitor",
    "RouterState",
    "VoiceRouter",
    "get_voice_router",
    "route_utterance",
    # Errors
    "RoutingError",
    "CatalogueError",
    "EmbeddingIndexNotReadyError",
    "TierUnavailableError",
]
