"""
The routing Decision, the output contract of the voice routing core.
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Optional

from .catalogue import ActionKind


@dataclass(frozen=True)
class Decision:
    """
    A routing decision.

    Attributes:
        action_kind: navigate, respond or chat
        target_id: Catalogue route id, or None
        sub_action: Sub-action owned by the target (or by the respond route)
        confidence: Score in [0, 1], not calibrated across tiers
        reason: Diagnostic text
        detected_language: Best-effort language code
        normalized_query: The utterance reduced to its core intent
        tier: Name of the tier that produced this decision
    """

    action_kind: ActionKind
    target_id: Optional[str] = None
    sub_action: Optional[str] = None
    confidence: float = 0.5
    reason: str = ""
    detected_language: str = ""
    normalized_query: str = ""
    tier: Optional[str] = None

    @property
    def is_actionable(self) -> bool:
        """Whether the UI can act on this decision without another tier."""
        if self.action_kind is ActionKind.NAVIGATE:
            return self.target_id is not None
        if self.action_kind is ActionKind.RESPOND:
            return self.sub_action is not None
        return True

    def with_tier(self, tier: str) -> "Decision":
        return replace(self, tier=tier)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for API consumers."""
        data = asdict(self)
        return {
            "actionKind": self.action_kind.value,
            "targetId": data["target_id"],
            "subAction": data["sub_action"],
            "confidence": data["confidence"],
            "reason": data["reason"],
            "detectedLanguage": data["detected_language"],
            "normalizedQuery": data["normalized_query"],
            "tier": data["tier"],
        }
