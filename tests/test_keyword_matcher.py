"""
Tests for the multilingual keyword matcher.

Covers:
1. Hits across languages and the fixed hit confidence
2. The universal chat fallback
3. First-declared-route precedence (known precision limitation) and
   phrases that must not hit inside longer words
4. Crop doctor and pest scanner destinations
5. Sub-action inference for weather
6. Load-time validation of keyword tables
"""

import pytest

from agrinav.routing.catalogue import ActionKind, RouteId, get_catalogue
from agrinav.routing.errors import CatalogueError
from agrinav.routing.keywords import (
    KEYWORD_FALLBACK_CONFIDENCE,
    KEYWORD_GROUPS,
    KEYWORD_HIT_CONFIDENCE,
    KeywordGroup,
    KeywordMatcher,
    get_keyword_matcher,
)


@pytest.fixture
def matcher():
    return KeywordMatcher()


class TestKeywordHits:
    """Utterances that contain a known phrase."""

    def test_price_of_rice_routes_to_market(self, matcher):
        decision = matcher.match("what's the price of rice today")
        assert decision.action_kind is ActionKind.NAVIGATE
        assert decision.target_id == "market"
        assert decision.confidence == KEYWORD_HIT_CONFIDENCE
        assert decision.tier == "keyword"

    def test_malayalam_market(self, matcher):
        decision = matcher.match("വിപണി വില എന്താണ്?", "ml-IN")
        assert decision.target_id == "market"
        assert decision.detected_language == "ml"

    def test_hindi_disease_routes_to_diagnose(self, matcher):
        decision = matcher.match("मेरे पौधे पर काले धब्बे हैं")
        assert decision.target_id == "identify"
        assert decision.sub_action == "diagnose"
        assert decision.detected_language == "hi"

    def test_pest_routes_to_scan(self, matcher):
        decision = matcher.match("there are caterpillars on my tomato plant")
        assert decision.target_id == "identify"
        assert decision.sub_action == "scan"

    def test_case_and_whitespace_are_normalized(self, matcher):
        decision = matcher.match("   MANDI    Rates  ")
        assert decision.target_id == "market"
        assert decision.normalized_query == "mandi rates"

    def test_home(self, matcher):
        assert matcher.match("go to home").target_id == "home"

    def test_chatbot_hit_is_chat_without_target(self, matcher):
        decision = matcher.match("I need help")
        assert decision.action_kind is ActionKind.CHAT
        assert decision.target_id is None
        assert decision.sub_action is None
        assert decision.confidence == KEYWORD_HIT_CONFIDENCE


class TestWeatherKeywords:
    """Weather is an in-place respond action with its own sub-actions."""

    def test_weather_warning_is_alerts(self, matcher):
        decision = matcher.match("any weather warnings")
        assert decision.action_kind is ActionKind.RESPOND
        assert decision.target_id is None
        assert decision.sub_action == "alerts"

    def test_forecast(self, matcher):
        assert matcher.match("show me weather forecast").sub_action == "forecast"

    def test_generic_weather_defaults_to_current(self, matcher):
        decision = matcher.match("मौसम कैसा है")
        assert decision.action_kind is ActionKind.RESPOND
        assert decision.sub_action == "current"

    def test_infer_sub_action(self, matcher):
        assert matcher.infer_sub_action("weather", "any weather warnings") == "alerts"
        assert matcher.infer_sub_action("weather", "is it raining") == "current"
        assert matcher.infer_sub_action("weather", "hello there") is None
        assert matcher.infer_sub_action("weather", "") is None

    def test_infer_sub_action_unknown_route(self, matcher):
        assert matcher.infer_sub_action("not-a-route", "weather alert") is None


class TestFallback:
    """No keyword hit returns the universal chat decision."""

    def test_gibberish_is_low_confidence_chat(self, matcher):
        decision = matcher.match("asdfasdf gibberish")
        assert decision.action_kind is ActionKind.CHAT
        assert decision.target_id is None
        assert decision.confidence == KEYWORD_FALLBACK_CONFIDENCE

    def test_empty_utterance(self, matcher):
        decision = matcher.match("")
        assert decision.action_kind is ActionKind.CHAT
        assert decision.confidence == KEYWORD_FALLBACK_CONFIDENCE

    def test_non_string_utterance_does_not_raise(self, matcher):
        decision = matcher.match(None)
        assert decision.action_kind is ActionKind.CHAT

    def test_hint_used_when_text_has_no_letters(self, matcher):
        assert matcher.match("123", "ml-IN").detected_language == "ml"

    def test_every_result_is_actionable(self, matcher):
        for text in ("", "xyz", "weather", "market", "profile", "help"):
            assert matcher.match(text).is_actionable


class TestPrecedence:
    """First hit in declaration order wins, not the longest match."""

    def test_first_declared_route_wins_over_later_match(self, matcher):
        # Mentions weather and market; weather is declared first
        decision = matcher.match("weather alert for tomato prices")
        assert decision.action_kind is ActionKind.RESPOND
        assert decision.sub_action == "alerts"

    def test_group_order_within_route(self):
        catalogue = get_catalogue()
        groups = (
            KeywordGroup(RouteId.IDENTIFY, {"en": ("leaf",)}, sub_action="diagnose"),
            KeywordGroup(RouteId.IDENTIFY, {"en": ("leaf bug",)}, sub_action="scan"),
        )
        matcher = KeywordMatcher(catalogue, groups=groups)
        assert matcher.match("leaf bug").sub_action == "diagnose"

    def test_catalogue_order_beats_table_order(self):
        catalogue = get_catalogue()
        # Table lists home first, but profile is declared earlier in the catalogue
        groups = (
            KeywordGroup(RouteId.HOME, {"en": ("open",)}),
            KeywordGroup(RouteId.PROFILE, {"en": ("open",)}),
        )
        matcher = KeywordMatcher(catalogue, groups=groups)
        assert matcher.match("open").target_id == "profile"

    @pytest.mark.parametrize(
        "utterance,route_id",
        [
            ("i want to buy pesticide", "buy"),
            ("i want to buy insecticide", "buy"),
            ("कीटनाशक खरीदना है", "buy"),
            ("where is my order", "buy"),
            ("show the accurate soil test", "soil-analyzer"),
            ("open the fairfarm marketplace", "fairfarm"),
        ],
    )
    def test_phrase_inside_longer_word_does_not_win(self, matcher, utterance, route_id):
        assert matcher.match(utterance).target_id == route_id

    @pytest.mark.parametrize(
        "utterance,wrong_route",
        [
            ("what plant should i grow this season", "planner"),
            ("guards at the border", "buy"),
            # "ഇലകളിൽ" (on the leaves) contains the short weed stem
            ("ഇലകളിൽ വെള്ളം", "identify"),
        ],
    )
    def test_word_fragment_is_not_a_hit(self, matcher, utterance, wrong_route):
        assert matcher.match(utterance).target_id != wrong_route

    def test_every_shipped_phrase_reaches_its_own_group(self, matcher):
        catalogue = get_catalogue()
        for group in KEYWORD_GROUPS:
            entry = catalogue.by_id(group.route_id)
            for phrases in group.phrases.values():
                for phrase in phrases:
                    decision = matcher.match(phrase)
                    assert decision.confidence == KEYWORD_HIT_CONFIDENCE, phrase
                    assert decision.action_kind is entry.action_kind, phrase
                    if entry.action_kind is ActionKind.NAVIGATE:
                        assert decision.target_id == entry.id.value, phrase
                        assert decision.sub_action == group.sub_action, phrase
                    elif entry.action_kind is ActionKind.RESPOND:
                        assert decision.sub_action == (group.sub_action or entry.default_sub_action), phrase


class TestCropDoctorAndScanner:
    """Keyword hits for the crop doctor and pest scanner destinations."""

    def test_crop_doctor(self, matcher):
        decision = matcher.match("open the crop doctor")
        assert decision.target_id == "diagnose"
        assert decision.sub_action is None

    def test_diagnosis_history(self, matcher):
        decision = matcher.match("show my diagnosis history")
        assert decision.target_id == "diagnose"
        assert decision.sub_action == "history"

    def test_upload_photo(self, matcher):
        assert matcher.match("upload a photo of the leaf").sub_action == "upload"

    def test_scan_pest(self, matcher):
        decision = matcher.match("scan pest")
        assert decision.target_id == "scan"
        assert decision.sub_action == "pest"

    def test_open_camera(self, matcher):
        decision = matcher.match("open camera")
        assert decision.target_id == "scan"
        assert decision.sub_action == "camera"

    def test_pest_description_still_goes_to_identify(self, matcher):
        decision = matcher.match("pests are eating my crop")
        assert decision.target_id == "identify"
        assert decision.sub_action == "scan"


class TestTableValidation:
    """Keyword tables are checked against the catalogue at load."""

    def test_foreign_sub_action_rejected(self):
        groups = (KeywordGroup(RouteId.MARKET, {"en": ("bug",)}, sub_action="scan"),)
        with pytest.raises(CatalogueError, match="scan"):
            KeywordMatcher(get_catalogue(), groups=groups)

    def test_unsupported_language_rejected(self):
        groups = (KeywordGroup(RouteId.MARKET, {"fr": ("prix",)}),)
        with pytest.raises(CatalogueError, match="fr"):
            KeywordMatcher(get_catalogue(), groups=groups)

    def test_empty_phrase_rejected(self):
        groups = (KeywordGroup(RouteId.MARKET, {"en": ("  ",)}),)
        with pytest.raises(CatalogueError, match="Empty"):
            KeywordMatcher(get_catalogue(), groups=groups)

    def test_route_missing_from_catalogue_rejected(self, small_catalogue):
        groups = (KeywordGroup(RouteId.FORUM, {"en": ("forum",)}),)
        with pytest.raises(CatalogueError, match="unknown route"):
            KeywordMatcher(small_catalogue, groups=groups)

    def test_shipped_tables_load(self):
        assert get_keyword_matcher() is get_keyword_matcher()
