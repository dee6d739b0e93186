"""
Exception types for the voice routing core.

Provides explicit error types for each failure class. Tier-level errors are
always absorbed by the orchestrator and never reach a caller of ``route()``.
"""


class RoutingError(Exception):
    """Base exception for all routing errors."""

    pass


class CatalogueError(RoutingError):
    """Raised when catalogue or keyword data fails load-time validation."""

    pass


class EmbeddingIndexNotReadyError(RoutingError):
    """Raised when the embedding index is queried before initialization."""

    def __init__(self, state: str = "not initialized"):
        self.state = state
        super().__init__(
            f"Embedding index {state}. Call initialize() before find_best_route()."
        )


class TierUnavailableError(RoutingError):
    """Raised when a resolution tier cannot run."""

    def __init__(self, tier: str, reason: str):
        self.tier = tier
        self.reason = reason
        super().__init__(f"Tier '{tier}' unavailable: {reason}")
