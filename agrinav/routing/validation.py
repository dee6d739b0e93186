"""
Decision validation and normalization.

``validate`` enforces the output contract against the route catalogue.
``normalize`` maps tier outputs onto one canonical shape so every tier
produces the same decision for the same intent:

- navigation to the weather route becomes an in-place ``respond`` decision
  with a null target and a weather sub-action;
- navigation to the chatbot route, and any ``chat`` decision, becomes a bare
  chat decision with null target and sub-action.
"""

import logging
import math
from dataclasses import replace
from typing import Any, Mapping, Optional, Union

from .catalogue import ActionKind, RouteCatalogue, get_catalogue
from .decision import Decision
from .keywords import KeywordMatcher, get_keyword_matcher

logger = logging.getLogger("agrinav.routing.validation")

DEFAULT_CONFIDENCE = 0.5

# Accepted spellings per field; the first is canonical
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "action_kind": ("actionKind", "action_kind", "action"),
    "target_id": ("targetId", "target_id", "target"),
    "sub_action": ("subAction", "sub_action"),
    "confidence": ("confidence",),
    "reason": ("reason",),
    "detected_language": ("detectedLanguage", "detected_language", "language"),
    "normalized_query": ("normalizedQuery", "normalized_query", "queryNormalized"),
    "tier": ("tier",),
}

# Older response schema used a dedicated action for weather
ACTION_ALIASES = {"weather": ActionKind.RESPOND.value}


def _pick(candidate: Mapping[str, Any], field_name: str) -> Any:
    for key in FIELD_ALIASES[field_name]:
        if key in candidate and candidate[key] is not None:
            return candidate[key]
    return None


def _as_mapping(candidate: Union[Decision, Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if isinstance(candidate, Decision):
        return {
            "action_kind": candidate.action_kind,
            "target_id": candidate.target_id,
            "sub_action": candidate.sub_action,
            "confidence": candidate.confidence,
            "reason": candidate.reason,
            "detected_language": candidate.detected_language,
            "normalized_query": candidate.normalized_query,
            "tier": candidate.tier,
        }
    if isinstance(candidate, Mapping):
        return candidate
    return None


def _parse_action_kind(raw: Any) -> Optional[ActionKind]:
    if isinstance(raw, ActionKind):
        return raw
    if not isinstance(raw, str):
        return None
    value = raw.strip().lower()
    value = ACTION_ALIASES.get(value, value)
    try:
        return ActionKind(value)
    except ValueError:
        return None


def _parse_confidence(raw: Any) -> float:
    if isinstance(raw, bool):
        return DEFAULT_CONFIDENCE
    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            return DEFAULT_CONFIDENCE
    if not isinstance(raw, (int, float)) or math.isnan(raw):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, float(raw)))


def _text(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""


def _optional_id(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if not value or value.lower() in ("null", "none"):
        return None
    return value


def validate(
    candidate: Union[Decision, Mapping[str, Any], None],
    catalogue: Optional[RouteCatalogue] = None,
) -> Optional[Decision]:
    """
    Validate a tier candidate against the route catalogue.

    Rules, in order:
        1. The action kind must be navigate, respond or chat, else the
           candidate is rejected (returns None).
        2. A target outside the catalogue is cleared to None.
        3. A sub-action not owned by the target (or, for respond decisions
           without a target, by the respond route) is cleared to None.
        4. Confidence is clamped into [0, 1], defaulting to 0.5.

    Args:
        candidate: A Decision or a decoded JSON object from a tier
        catalogue: Catalogue to validate against (defaults to the global one)

    Returns:
        The validated Decision, or None if rejected
    """
    if catalogue is None:
        catalogue = get_catalogue()
    data = _as_mapping(candidate)
    if data is None:
        return None

    action_kind = _parse_action_kind(_pick(data, "action_kind"))
    if action_kind is None:
        logger.debug("Rejected candidate with unknown action kind: %r", _pick(data, "action_kind"))
        return None

    target_id = _optional_id(_pick(data, "target_id"))
    target_entry = catalogue.by_id(target_id) if target_id else None
    if target_id is not None and target_entry is None:
        logger.warning("Cleared out-of-catalogue target id: %r", target_id)
        target_id = None

    sub_action = _optional_id(_pick(data, "sub_action"))
    if sub_action is not None:
        owner = target_entry
        if owner is None and action_kind is ActionKind.RESPOND:
            owner = catalogue.respond_entry()
        if owner is None or not owner.has_sub_action(sub_action):
            logger.warning(
                "Cleared sub-action %r not owned by %s",
                sub_action, owner.id.value if owner else "any target",
            )
            sub_action = None

    tier = _pick(data, "tier")
    return Decision(
        action_kind=action_kind,
        target_id=target_id,
        sub_action=sub_action,
        confidence=_parse_confidence(_pick(data, "confidence")),
        reason=_text(_pick(data, "reason")),
        detected_language=_text(_pick(data, "detected_language")),
        normalized_query=_text(_pick(data, "normalized_query")),
        tier=tier if isinstance(tier, str) else None,
    )


def normalize(
    decision: Decision,
    utterance: Optional[str] = None,
    catalogue: Optional[RouteCatalogue] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> Decision:
    """
    Map a validated decision onto its canonical shape.

    Applying ``normalize`` to its own output returns an equal decision.
    """
    if catalogue is None:
        catalogue = get_catalogue()
    target_entry = catalogue.by_id(decision.target_id) if decision.target_id else None
    respond_entry = catalogue.respond_entry()

    to_respond = decision.action_kind is ActionKind.RESPOND or (
        decision.action_kind is ActionKind.NAVIGATE
        and target_entry is not None
        and target_entry.action_kind is ActionKind.RESPOND
    )
    if to_respond and respond_entry is not None:
        sub_action = decision.sub_action
        if not respond_entry.has_sub_action(sub_action):
            matcher = matcher or get_keyword_matcher()
            sub_action = matcher.infer_sub_action(
                respond_entry.id.value, utterance or decision.normalized_query
            ) or respond_entry.default_sub_action
        return replace(
            decision,
            action_kind=ActionKind.RESPOND,
            target_id=None,
            sub_action=sub_action,
        )

    to_chat = decision.action_kind is ActionKind.CHAT or (
        target_entry is not None and target_entry.action_kind is ActionKind.CHAT
    )
    if to_chat:
        return replace(decision, action_kind=ActionKind.CHAT, target_id=None, sub_action=None)

    return decision


def validate_and_normalize(
    candidate: Union[Decision, Mapping[str, Any], None],
    utterance: Optional[str] = None,
    catalogue: Optional[RouteCatalogue] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> Optional[Decision]:
    """Validate, then normalize; None if the candidate is rejected."""
    decision = validate(candidate, catalogue=catalogue)
    if decision is None:
        return None
    return normalize(decision, utterance=utterance, catalogue=catalogue, matcher=matcher)
