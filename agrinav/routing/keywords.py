"""
Deterministic multilingual keyword matcher.

The always-available terminal tier. Phrases are kept per route and per
language, validated at load against the route catalogue, and matched as plain
substrings of the normalized utterance.

Precedence is first hit in catalogue declaration order (then group order
within a route), not longest match. An utterance naming two destinations,
e.g. "weather alert for tomato prices", resolves to whichever route is
declared first. This is a known precision limitation of the tier.

Because matching is by substring, a short phrase also hits inside longer
words ("pest" in "pesticide", "rate" in "accurate"). Phrases are therefore
kept long enough, or plural, that none contains a phrase of an earlier group.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .catalogue import ActionKind, RouteCatalogue, RouteEntry, RouteId, get_catalogue
from .decision import Decision
from .errors import CatalogueError
from .language import SUPPORTED_LANGUAGES, detect_language, normalize_text

logger = logging.getLogger("agrinav.routing.keywords")

KEYWORD_HIT_CONFIDENCE = 0.6
KEYWORD_FALLBACK_CONFIDENCE = 0.4

TIER_NAME = "keyword"


@dataclass(frozen=True)
class KeywordGroup:
    """Language-tagged phrase lists that select one route (and sub-action)."""

    route_id: RouteId
    phrases: Mapping[str, tuple[str, ...]]
    sub_action: Optional[str] = None


@dataclass(frozen=True)
class _CompiledGroup:
    entry: RouteEntry
    sub_action: Optional[str]
    # (normalized phrase, language) pairs in declaration order
    phrases: tuple[tuple[str, str], ...] = field(default_factory=tuple)


KEYWORD_GROUPS: tuple[KeywordGroup, ...] = (
    KeywordGroup(
        RouteId.PROFILE,
        {
            "en": ("profile", "my account", "account settings", "settings", "preferences"),
            "ml": ("പ്രൊഫൈൽ", "സെറ്റിംഗ്സ്", "അക്കൗണ്ട്"),
            "hi": ("प्रोफ़ाइल", "प्रोफाइल", "सेटिंग्स", "मेरा खाता"),
            "te": ("ప్రొఫైల్", "సెట్టింగ్"),
            "kn": ("ಪ್ರೊಫೈಲ್",),
            "bn": ("প্রোফাইল", "সেটিংস"),
        },
    ),
    KeywordGroup(
        RouteId.TWIN,
        {
            "en": (
                "recommendation", "suggest", "advice", "which crop", "what crop",
                "best crop", "cropwise", "crop wise",
            ),
            "ml": ("ശുപാർശ", "ഏത് വിള", "ഉപദേശം"),
            "hi": ("सिफारिश", "सुझाव", "कौन सी फसल", "सलाह"),
            "te": ("సూచన", "ఏ పంట", "సలహా"),
            "kn": ("ಶಿಫಾರಸು", "ಯಾವ ಬೆಳೆ", "ಸಲಹೆ"),
            "bn": ("সুপারিশ", "কোন ফসল", "পরামর্শ"),
        },
        sub_action="recommendations",
    ),
    KeywordGroup(
        RouteId.TWIN,
        {
            "en": ("crop guide", "farming guide", "digital twin"),
            "ml": ("വിള ഗൈഡ്",),
            "hi": ("फसल गाइड",),
        },
        sub_action="twin",
    ),
    KeywordGroup(
        RouteId.WEATHER,
        {
            "en": (
                "current weather", "weather now", "today weather", "today's weather",
                "weather today", "temperature",
            ),
            "ml": ("ഇന്നത്തെ കാലാവസ്ഥ", "താപനില"),
            "hi": ("आज का मौसम", "आज मौसम", "तापमान"),
            "te": ("ఈరోజు వాతావరణం", "ఉష్ణోగ్రత"),
            "kn": ("ಇಂದು ಹವಾಮಾನ", "ತಾಪಮಾನ"),
            "bn": ("আজকের আবহাওয়া", "তাপমাত্রা"),
        },
        sub_action="current",
    ),
    KeywordGroup(
        RouteId.WEATHER,
        {
            "en": (
                "weather forecast", "forecast", "tomorrow weather", "tomorrow's weather",
                "weather tomorrow", "rain tomorrow", "weather prediction", "next week weather",
                "weather this week",
            ),
            "ml": ("കാലാവസ്ഥാ പ്രവചനം", "നാളത്തെ കാലാവസ്ഥ", "പ്രവചനം"),
            "hi": ("मौसम पूर्वानुमान", "पूर्वानुमान", "कल का मौसम", "कल मौसम"),
            "te": ("వాతావరణ అంచనా", "రేపు వాతావరణం"),
            "kn": ("ಹವಾಮಾನ ಮುನ್ಸೂಚನೆ", "ಮುನ್ಸೂಚನೆ", "ನಾಳೆ ಹವಾಮಾನ"),
            "bn": ("আবহাওয়ার পূর্বাভাস", "পূর্বাভাস"),
        },
        sub_action="forecast",
    ),
    KeywordGroup(
        RouteId.WEATHER,
        {
            "en": (
                "weather alert", "weather warning", "storm alert", "storm warning",
                "rain alert", "cyclone", "flood warning", "heavy rain",
            ),
            "ml": ("കാലാവസ്ഥാ അലേർട്ട്", "കാലാവസ്ഥാ മുന്നറിയിപ്പ്", "കൊടുങ്കാറ്റ്"),
            "hi": ("मौसम चेतावनी", "मौसम अलर्ट", "तूफान अलर्ट", "चक्रवात"),
            "te": ("వాతావరణ హెచ్చరిక", "తుఫాను"),
            "kn": ("ಹವಾಮಾನ ಎಚ್ಚರಿಕೆ", "ಚಂಡಮಾರುತ"),
            "bn": ("আবহাওয়া সতর্কতা", "ঘূর্ণিঝড়"),
        },
        sub_action="alerts",
    ),
    KeywordGroup(
        RouteId.WEATHER,
        {
            "en": ("weather", "rainfall", "raining", "will it rain", "storm"),
            "ml": ("കാലാവസ്ഥ", "മഴ"),
            "hi": ("मौसम", "बारिश", "तूफान"),
            "te": ("వాతావరణం", "వర్షం"),
            "kn": ("ಹವಾಮಾನ", "ಮಳೆ"),
            "bn": ("আবহাওয়া", "বৃষ্টি"),
        },
        sub_action="current",
    ),
    KeywordGroup(
        RouteId.NOTIFICATIONS,
        {
            "en": ("notification", "alert", "warning"),
            "ml": ("അറിയിപ്പ്", "അലർട്ട്", "അലേർട്ട്"),
            "hi": ("अधिसूचना", "अलर्ट", "सूचना", "चेतावनी"),
            "te": ("నోటిఫికేషన్", "హెచ్చరిక"),
            "kn": ("ಅಧಿಸೂಚನೆ", "ಎಚ್ಚರಿಕೆ"),
            "bn": ("বিজ্ঞপ্তি", "সতর্কতা"),
        },
    ),
    KeywordGroup(
        RouteId.NEWS,
        {
            "en": ("news", "latest update", "headline"),
            "ml": ("വാർത്ത", "ന്യൂസ്"),
            "hi": ("समाचार", "खबर"),
            "te": ("వార్తలు",),
            "kn": ("ಸುದ್ದಿ",),
            "bn": ("খবর", "সংবাদ"),
        },
    ),
    KeywordGroup(
        RouteId.EXPENSE,
        {
            "en": (
                "expense", "spend", "spent", "farm costs", "my costs", "expenditure", "budget",
                "how much did i",
            ),
            "ml": ("ചെലവ്", "ചിലവ്", "ബഡ്ജറ്റ്", "കണക്ക്"),
            "hi": ("खर्च", "बजट"),
            "te": ("ఖర్చు", "బడ్జెట్"),
            "kn": ("ವೆಚ್ಚ", "ಬಜೆಟ್"),
            "bn": ("খরচ", "বাজেট"),
        },
    ),
    KeywordGroup(
        RouteId.MARKET,
        {
            "en": ("market price", "market rate", "market trend", "mandi", "price", "price rate"),
            "ml": ("വില", "വിപണി", "മണ്ഡി"),
            "hi": ("मंडी", "भाव", "कीमत", "दाम"),
            "te": ("ధర", "మండి"),
            "kn": ("ಬೆಲೆ", "ಮಾರುಕಟ್ಟೆ"),
            "bn": ("দাম", "বাজার"),
        },
    ),
    KeywordGroup(
        RouteId.IDENTIFY,
        {
            "en": (
                "diagnose", "disease", "black spot", "brown spot", "yellow leaves",
                "leaves are turning yellow", "wilting", "fungus", "blight", "root rot", "rotting",
                "sick plant", "plant is sick", "looks sick",
            ),
            "ml": ("രോഗം", "പുള്ളി", "മഞ്ഞയാകുന്നു", "ഉണങ്ങി"),
            "hi": ("रोग", "बीमारी", "काले धब्बे", "धब्बे", "पीली"),
            "te": ("వ్యాధి", "మచ్చలు"),
            "kn": ("ರೋಗ", "ಚುಕ್ಕೆ"),
            "bn": ("রোগ", "দাগ"),
        },
        sub_action="diagnose",
    ),
    KeywordGroup(
        RouteId.IDENTIFY,
        {
            # Plural or qualified forms so pesticide and insecticide names do not hit
            "en": (
                "pests", "pest attack", "pest control", "insects", "insect attack", "bugs",
                "caterpillar", "worms on", "worms in", "beetle", "aphid", "locust",
            ),
            "ml": ("കീടം", "കീടങ്ങൾ", "പുഴു", "പ്രാണി"),
            "hi": ("कीड़े", "कीड़ा", "इल्ली", "कौन सा कीट", "कीट लग"),
            "te": ("పురుగులు", "కీటకం"),
            "kn": ("ಕೀಟಗಳು", "ಹುಳು"),
            "bn": ("পোকা",),
        },
        sub_action="scan",
    ),
    KeywordGroup(
        RouteId.IDENTIFY,
        {
            "en": ("weed", "unwanted plant", "wild grass", "wild plant"),
            "ml": ("കളകൾ", "അനാവശ്യ ചെടി"),
            "hi": ("खरपतवार",),
            "te": ("కలుపు",),
            "kn": ("ಕಳೆ ಗಿಡ",),
            "bn": ("আগাছা",),
        },
        sub_action="weed",
    ),
    KeywordGroup(
        RouteId.DIAGNOSE,
        {
            "en": ("upload photo", "upload a photo", "upload image", "upload picture"),
            "hi": ("फोटो अपलोड",),
        },
        sub_action="upload",
    ),
    KeywordGroup(
        RouteId.DIAGNOSE,
        {
            "en": ("diagnosis history", "previous diagnosis", "past diagnosis", "last diagnosis"),
            "hi": ("पिछली जांच",),
        },
        sub_action="history",
    ),
    KeywordGroup(
        RouteId.DIAGNOSE,
        {
            "en": ("photo of my plant", "photo of my crop", "picture of my plant"),
            "ml": ("ചെടിയുടെ ഫോട്ടോ",),
            "hi": ("पौधे की फोटो",),
        },
        sub_action="camera",
    ),
    KeywordGroup(
        RouteId.DIAGNOSE,
        {
            "en": ("crop doctor", "plant doctor", "plant clinic"),
            "ml": ("വിള ഡോക്ടർ",),
            "hi": ("फसल डॉक्टर",),
        },
    ),
    KeywordGroup(
        RouteId.SCAN,
        {
            "en": ("scan pest", "pest scanner", "pest detector", "detect pest"),
            "hi": ("कीट स्कैन",),
        },
        sub_action="pest",
    ),
    KeywordGroup(
        RouteId.SCAN,
        {
            "en": ("scan leaf", "scan this leaf", "leaf scanner", "scan my crop"),
            "hi": ("पत्ती स्कैन",),
        },
        sub_action="disease",
    ),
    KeywordGroup(
        RouteId.SCAN,
        {
            "en": ("camera scan", "open camera", "scan with camera", "scanner", "scan"),
            "ml": ("സ്കാൻ", "ക്യാമറ"),
            "hi": ("स्कैन", "कैमरा"),
            "te": ("స్కాన్", "కెమెరా"),
            "kn": ("ಸ್ಕ್ಯಾನ್", "ಕ್ಯಾಮೆರಾ"),
            "bn": ("স্ক্যান", "ক্যামেরা"),
        },
        sub_action="camera",
    ),
    KeywordGroup(
        RouteId.SOIL_ANALYZER,
        {
            "en": ("soil", "ph level", "nitrogen", "phosphorus", "potassium", "nutrient"),
            "ml": ("മണ്ണ്", "പിഎച്ച്", "പോഷക"),
            "hi": ("मिट्टी", "पीएच", "पोषक"),
            "te": ("నేల", "మట్టి"),
            "kn": ("ಮಣ್ಣು", "ಪೋಷಕಾಂಶ"),
            "bn": ("মাটি",),
        },
    ),
    KeywordGroup(
        RouteId.PLANNER,
        {
            "en": (
                "planner", "crop plan", "farm plan", "planting time", "planting schedule",
                "calendar", "schedule", "sowing", "when to sow", "time to sow",
                "when to harvest", "when do i harvest", "harvest time",
            ),
            "ml": ("വിതയ്ക്ക", "കലണ്ടർ", "കാലണ്ടർ", "വിളവെടുപ്പ്"),
            "hi": ("कैलेंडर", "बुवाई", "कटाई", "योजना बनाओ"),
            "te": ("క్యాలెండర్", "కాలెండర్", "నాటాలి"),
            "kn": ("ಕ್ಯಾಲೆಂಡರ್", "ನಾಟಿ"),
            "bn": ("ক্যালেন্ডার", "রোপণ"),
        },
    ),
    KeywordGroup(
        RouteId.FORUM,
        {
            "en": ("forum", "community", "farmer group", "other farmers", "discussion"),
            "ml": ("ഫോറം", "കർഷക സമൂഹം", "കർഷകരോട്"),
            "hi": ("फोरम", "समुदाय", "अन्य किसानों"),
            "te": ("ఫోరం", "ఇతర రైతులు"),
            "kn": ("ಸಮುದಾಯ",),
            "bn": ("সম্প্রদায়", "ফোরাম"),
        },
    ),
    KeywordGroup(
        RouteId.RESOURCES,
        {
            "en": ("resources", "knowledge center", "learning center"),
            "ml": ("റിസോഴ്സ്", "വിജ്ഞാന കേന്ദ്രം"),
            "hi": ("संसाधन",),
            "te": ("వనరులు",),
            "kn": ("ಸಂಪನ್ಮೂಲ",),
            "bn": ("সম্পদ",),
        },
    ),
    KeywordGroup(
        RouteId.KNOWLEDGE,
        {
            "en": ("knowledge", "how to", "home remedies", "home remedy", "tutorial", "learn", "farming tips"),
            "ml": ("പഠിക്കണം", "വിവരങ്ങൾ", "ഗൈഡ്"),
            "hi": ("जानकारी", "सीखना", "गाइड"),
            "te": ("నేర్చుకోవాలి", "సమాచారం"),
            "kn": ("ಕಲಿಯಬೇಕು", "ಮಾಹಿತಿ"),
            "bn": ("শিখতে", "তথ্য"),
        },
    ),
    KeywordGroup(
        RouteId.LABOURERS,
        {
            "en": ("workers", "labour", "laborer", "farm labor", "hire", "manpower"),
            "ml": ("തൊഴിലാളി", "വർക്കർ"),
            "hi": ("मज़दूर", "मजदूर", "काम करने वाले"),
            "te": ("కార్మికులు",),
            "kn": ("ಕಾರ್ಮಿಕ", "ಕೆಲಸಗಾರ"),
            "bn": ("শ্রমিক", "কর্মী"),
        },
    ),
    KeywordGroup(
        RouteId.FAIRFARM,
        {
            "en": ("fair farm", "fairfarm", "marketplace", "sell crops", "sell my crop", "sell produce"),
            "ml": ("മാർക്കറ്റ്പ്ലേസ്", "നേരിട്ട് വിൽക്കണം"),
            "hi": ("मार्केटप्लेस", "सीधे बेचना"),
            "te": ("మార్కెట్‌ప్లేస్", "నేరుగా అమ్మాలి"),
            "kn": ("ನೇರವಾಗಿ ಮಾರಾಟ",),
            "bn": ("সরাসরি বিক্রি",),
        },
    ),
    KeywordGroup(
        RouteId.BUY,
        {
            "en": ("buy", "purchase", "shopping", "shop for", "place order", "place an order", "my order"),
            "ml": ("വാങ്ങണം", "വാങ്ങുക", "ഓർഡർ"),
            "hi": ("खरीद",),
            "te": ("కొనాలి", "కొనుగోలు"),
            "kn": ("ಖರೀದಿ", "ಕೊಳ್ಳು"),
            "bn": ("কিনতে", "কিনুন"),
        },
    ),
    KeywordGroup(
        RouteId.SCHEMES,
        {
            "en": ("scheme", "subsidy", "subsidies", "yojana", "government program"),
            "ml": ("സബ്സിഡി", "പദ്ധതി"),
            "hi": ("योजना", "सब्सिडी"),
            "te": ("పథకం", "పథకాలు"),
            "kn": ("ಯೋಜನೆ",),
            "bn": ("প্রকল্প", "ভর্তুকি"),
        },
    ),
    KeywordGroup(
        RouteId.HOME,
        {
            "en": ("go home", "to home", "home screen", "homepage", "home page", "dashboard", "main screen", "main page"),
            "ml": ("ഹോം", "ഡാഷ്ബോർഡ്"),
            "hi": ("होम", "डैशबोर्ड", "मुख्य स्क्रीन"),
            "te": ("హోమ్",),
            "kn": ("ಮುಖಪುಟ",),
            "bn": ("হোম", "ড্যাশবোর্ড"),
        },
    ),
    KeywordGroup(
        RouteId.CHATBOT,
        {
            "en": ("assistant", "chatbot", "chat", "help", "support"),
            "ml": ("സഹായം",),
            "hi": ("सहायता", "मदद"),
            "te": ("సహాయం",),
            "kn": ("ಸಹಾಯ",),
            "bn": ("সাহায্য",),
        },
    ),
)


def compile_keyword_groups(
    groups: tuple[KeywordGroup, ...],
    catalogue: RouteCatalogue,
) -> tuple[_CompiledGroup, ...]:
    """
    Validate keyword groups against the catalogue and order them for matching.

    Raises:
        CatalogueError: If a group names an unknown route, a foreign
            sub-action, an unsupported language, or an empty phrase.
    """
    position = {route_id: i for i, route_id in enumerate(catalogue.ids())}
    compiled: list[tuple[int, int, _CompiledGroup]] = []

    for order, group in enumerate(groups):
        entry = catalogue.by_id(group.route_id)
        if entry is None:
            raise CatalogueError(f"Keyword group for unknown route: {group.route_id!r}")
        if group.sub_action is not None and not entry.has_sub_action(group.sub_action):
            raise CatalogueError(
                f"Keyword sub-action '{group.sub_action}' not declared by route '{entry.id.value}'"
            )

        phrases: list[tuple[str, str]] = []
        for lang, lang_phrases in group.phrases.items():
            if lang not in SUPPORTED_LANGUAGES:
                raise CatalogueError(f"Unsupported keyword language '{lang}' for route '{entry.id.value}'")
            for phrase in lang_phrases:
                normalized = normalize_text(phrase)
                if not normalized:
                    raise CatalogueError(f"Empty keyword phrase for route '{entry.id.value}'")
                phrases.append((normalized, lang))

        compiled.append(
            (position[entry.id.value], order, _CompiledGroup(entry, group.sub_action, tuple(phrases)))
        )

    compiled.sort(key=lambda item: (item[0], item[1]))
    return tuple(item[2] for item in compiled)


class KeywordMatcher:
    """
    Substring matcher over per-language phrase tables.

    ``match`` never raises and never returns "no match": when nothing hits it
    returns the universal chat decision at KEYWORD_FALLBACK_CONFIDENCE.
    """

    def __init__(
        self,
        catalogue: Optional[RouteCatalogue] = None,
        groups: tuple[KeywordGroup, ...] = KEYWORD_GROUPS,
    ):
        self._catalogue = catalogue if catalogue is not None else get_catalogue()
        self._groups = compile_keyword_groups(groups, self._catalogue)
        self._by_route: Mapping[str, tuple[_CompiledGroup, ...]] = MappingProxyType(
            {
                route_id: tuple(g for g in self._groups if g.entry.id.value == route_id)
                for route_id in self._catalogue.ids()
            }
        )

    @property
    def catalogue(self) -> RouteCatalogue:
        return self._catalogue

    def match(self, utterance: str, language_hint: Optional[str] = None) -> Decision:
        """Resolve an utterance to a decision by first keyword hit."""
        try:
            text = normalize_text(utterance)
            detected = detect_language(utterance, language_hint)
        except Exception as e:
            logger.warning("Keyword normalization failed: %s", e)
            text, detected = "", "unknown"

        if text:
            for group in self._groups:
                for phrase, lang in group.phrases:
                    if phrase in text:
                        return self._hit(group, phrase, lang, text, detected)

        return Decision(
            action_kind=ActionKind.CHAT,
            confidence=KEYWORD_FALLBACK_CONFIDENCE,
            reason="no keyword match",
            detected_language=detected,
            normalized_query=text,
            tier=TIER_NAME,
        )

    def infer_sub_action(self, route_id: str, utterance: str) -> Optional[str]:
        """Return the sub-action of the first keyword group of ``route_id`` that hits."""
        text = normalize_text(utterance)
        if not text:
            return None
        for group in self._by_route.get(route_id, ()):
            if group.sub_action is None:
                continue
            for phrase, _lang in group.phrases:
                if phrase in text:
                    return group.sub_action
        return None

    def _hit(self, group: _CompiledGroup, phrase: str, lang: str, text: str, detected: str) -> Decision:
        entry = group.entry
        reason = f"keyword '{phrase}' ({lang})"

        if entry.action_kind is ActionKind.CHAT:
            return Decision(
                action_kind=ActionKind.CHAT,
                confidence=KEYWORD_HIT_CONFIDENCE,
                reason=reason,
                detected_language=detected,
                normalized_query=text,
                tier=TIER_NAME,
            )

        if entry.action_kind is ActionKind.RESPOND:
            return Decision(
                action_kind=ActionKind.RESPOND,
                sub_action=group.sub_action or entry.default_sub_action,
                confidence=KEYWORD_HIT_CONFIDENCE,
                reason=reason,
                detected_language=detected,
                normalized_query=text,
                tier=TIER_NAME,
            )

        return Decision(
            action_kind=ActionKind.NAVIGATE,
            target_id=entry.id.value,
            sub_action=group.sub_action,
            confidence=KEYWORD_HIT_CONFIDENCE,
            reason=reason,
            detected_language=detected,
            normalized_query=text,
            tier=TIER_NAME,
        )


_matcher: Optional[KeywordMatcher] = None


def get_keyword_matcher() -> KeywordMatcher:
    """Get or create the global keyword matcher."""
    global _matcher
    if _matcher is None:
        _matcher = KeywordMatcher()
    return _matcher
