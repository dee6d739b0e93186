"""
Tests for decision validation and normalization.

Covers:
1. Validator rules (reject unknown action, clear invalid ids, clamp confidence)
2. Field aliases from older response schemas
3. Soundness over a grid of candidates
4. Weather and chat normalization, including idempotence
"""

import itertools

import pytest

from agrinav.routing.catalogue import ActionKind, get_catalogue
from agrinav.routing.decision import Decision
from agrinav.routing.validation import normalize, validate, validate_and_normalize


class TestValidateRules:
    """validate() rules applied in order."""

    def test_unknown_action_rejected(self):
        assert validate({"actionKind": "teleport", "targetId": "market"}) is None

    def test_missing_action_rejected(self):
        assert validate({"targetId": "market"}) is None

    def test_non_mapping_rejected(self):
        assert validate("navigate to market") is None
        assert validate(None) is None

    def test_valid_candidate(self):
        decision = validate({
            "actionKind": "navigate",
            "targetId": "market",
            "subAction": "prices",
            "confidence": 0.92,
            "reason": "price question",
        })
        assert decision.action_kind is ActionKind.NAVIGATE
        assert decision.target_id == "market"
        assert decision.sub_action == "prices"
        assert decision.confidence == pytest.approx(0.92)
        assert decision.reason == "price question"

    def test_unknown_target_is_cleared_not_rejected(self):
        decision = validate({
            "actionKind": "navigate",
            "targetId": "not-a-real-id",
            "confidence": 0.9,
            "reason": "guess",
        })
        assert decision is not None
        assert decision.target_id is None
        assert decision.confidence == pytest.approx(0.9)
        assert decision.reason == "guess"
        assert not decision.is_actionable

    def test_sub_action_from_another_entry_is_cleared(self):
        decision = validate({"actionKind": "navigate", "targetId": "market", "subAction": "diagnose"})
        assert decision.target_id == "market"
        assert decision.sub_action is None

    @pytest.mark.parametrize(
        "target,sub_action",
        [("diagnose", "camera"), ("diagnose", "history"), ("scan", "pest"), ("scan", "camera")],
    )
    def test_crop_doctor_and_pest_scanner_are_destinations(self, target, sub_action):
        decision = validate({
            "actionKind": "navigate",
            "targetId": target,
            "subAction": sub_action,
            "confidence": 0.9,
        })
        assert decision.target_id == target
        assert decision.sub_action == sub_action
        assert decision.is_actionable

    def test_scan_sub_action_not_carried_to_diagnose(self):
        decision = validate({"actionKind": "navigate", "targetId": "diagnose", "subAction": "pest"})
        assert decision.target_id == "diagnose"
        assert decision.sub_action is None

    def test_sub_action_without_target_is_cleared(self):
        decision = validate({"actionKind": "navigate", "subAction": "prices"})
        assert decision.sub_action is None

    def test_respond_sub_action_owned_by_respond_entry(self):
        decision = validate({"actionKind": "respond", "subAction": "forecast"})
        assert decision.sub_action == "forecast"

    def test_null_strings_are_null(self):
        decision = validate({"actionKind": "chat", "targetId": "null", "subAction": "None"})
        assert decision.target_id is None
        assert decision.sub_action is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (1.7, 1.0),
            (-0.2, 0.0),
            (0.35, 0.35),
            ("0.8", 0.8),
            ("high", 0.5),
            (None, 0.5),
            (True, 0.5),
            (float("nan"), 0.5),
        ],
    )
    def test_confidence_clamped(self, raw, expected):
        decision = validate({"actionKind": "chat", "confidence": raw})
        assert decision.confidence == pytest.approx(expected)

    def test_accepts_decision_instances(self):
        original = Decision(action_kind=ActionKind.NAVIGATE, target_id="forum", confidence=0.7, tier="embedding")
        decision = validate(original)
        assert decision == original


class TestFieldAliases:
    """Older response schema field names are accepted."""

    def test_legacy_weather_action(self):
        decision = validate({"action": "weather", "subAction": "alerts", "queryNormalized": "alerts"})
        assert decision.action_kind is ActionKind.RESPOND
        assert decision.sub_action == "alerts"
        assert decision.normalized_query == "alerts"

    def test_snake_case_fields(self):
        decision = validate({
            "action_kind": "navigate",
            "target_id": "planner",
            "sub_action": "calendar",
            "detected_language": "ml",
        })
        assert decision.target_id == "planner"
        assert decision.sub_action == "calendar"
        assert decision.detected_language == "ml"

    def test_language_alias(self):
        assert validate({"actionKind": "chat", "language": "hi"}).detected_language == "hi"

    def test_action_is_case_insensitive(self):
        assert validate({"actionKind": " NAVIGATE ", "targetId": "home"}).target_id == "home"


class TestValidatorSoundness:
    """No validated decision carries an id outside the catalogue or a foreign sub-action."""

    def test_grid(self):
        catalogue = get_catalogue()
        targets = [None, "", "market", "weather", "identify", "diagnose", "scan", "chatbot", "not-a-real-id", 7]
        subs = [None, "prices", "alerts", "diagnose", "camera", "pest", "current", "bogus", 3]
        actions = ["navigate", "respond", "chat", "weather", "bogus"]

        for action, target, sub in itertools.product(actions, targets, subs):
            decision = validate({"actionKind": action, "targetId": target, "subAction": sub})
            if decision is None:
                assert action == "bogus"
                continue
            if decision.target_id is not None:
                assert decision.target_id in catalogue
            if decision.sub_action is not None:
                owner = catalogue.by_id(decision.target_id) if decision.target_id else catalogue.respond_entry()
                assert decision.sub_action in owner.sub_actions


class TestNormalize:
    """Weather and chat normalization."""

    def test_navigate_to_weather_becomes_respond(self):
        decision = validate({"actionKind": "navigate", "targetId": "weather"})
        normalized = normalize(decision, utterance="any weather warnings")
        assert normalized.action_kind is ActionKind.RESPOND
        assert normalized.target_id is None
        assert normalized.sub_action == "alerts"

    def test_navigate_to_weather_keeps_valid_sub_action(self):
        decision = validate({"actionKind": "navigate", "targetId": "weather", "subAction": "forecast"})
        assert normalize(decision, utterance="any weather warnings").sub_action == "forecast"

    def test_respond_without_sub_action_uses_default(self):
        decision = validate({"actionKind": "respond"})
        assert normalize(decision, utterance="hello").sub_action == "current"

    def test_respond_uses_normalized_query_when_no_utterance(self):
        decision = validate({"actionKind": "respond", "normalizedQuery": "storm alert tomorrow"})
        assert normalize(decision).sub_action == "alerts"

    def test_chatbot_navigation_becomes_chat(self):
        decision = validate({"actionKind": "navigate", "targetId": "chatbot", "confidence": 0.8})
        normalized = normalize(decision)
        assert normalized.action_kind is ActionKind.CHAT
        assert normalized.target_id is None
        assert normalized.confidence == pytest.approx(0.8)

    def test_chat_with_target_is_cleared(self):
        decision = validate({"actionKind": "chat", "targetId": "market", "subAction": "prices"})
        normalized = normalize(decision)
        assert normalized.target_id is None
        assert normalized.sub_action is None

    def test_plain_navigation_unchanged(self):
        decision = validate({"actionKind": "navigate", "targetId": "market", "subAction": "prices"})
        assert normalize(decision) is decision

    @pytest.mark.parametrize(
        "candidate",
        [
            {"actionKind": "navigate", "targetId": "weather"},
            {"actionKind": "navigate", "targetId": "weather", "subAction": "alerts"},
            {"action": "weather"},
            {"actionKind": "respond", "targetId": "market", "subAction": "prices"},
            {"actionKind": "navigate", "targetId": "chatbot"},
            {"actionKind": "chat", "targetId": "forum"},
            {"actionKind": "navigate", "targetId": "identify", "subAction": "scan"},
        ],
    )
    def test_idempotent(self, candidate):
        once = validate_and_normalize(candidate, utterance="any weather warnings")
        twice = normalize(once, utterance="any weather warnings")
        assert once == twice
        assert validate_and_normalize(once, utterance="any weather warnings") == once

    def test_weather_shape_is_tier_independent(self):
        from_remote = validate_and_normalize(
            {"actionKind": "navigate", "targetId": "weather", "tier": "remote"},
            utterance="any weather warnings",
        )
        from_embedding = validate_and_normalize(
            Decision(action_kind=ActionKind.NAVIGATE, target_id="weather", sub_action="alerts", tier="embedding"),
            utterance="any weather warnings",
        )
        from_legacy = validate_and_normalize({"action": "weather"}, utterance="any weather warnings")
        shapes = {(d.action_kind, d.target_id, d.sub_action) for d in (from_remote, from_embedding, from_legacy)}
        assert shapes == {(ActionKind.RESPOND, None, "alerts")}
