"""
Route catalogue for voice navigation.

A static, versioned table of app destinations. Each entry carries a stable
id from the closed ``RouteId`` enumeration, optional sub-actions (tabs,
panels, or modes reachable after landing), a description used as grounding
context for the remote reasoning tier, and one or more blocks of multilingual
example utterances used only for embedding comparison.

Declaration order is significant: the keyword matcher resolves ties by it.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .errors import CatalogueError

logger = logging.getLogger("agrinav.routing.catalogue")

CATALOGUE_VERSION = "2025.09"


class ActionKind(str, Enum):
    """Behavior a decision asks the UI to perform."""

    NAVIGATE = "navigate"  # go to a destination screen
    RESPOND = "respond"  # immediate in-place action (weather summary)
    CHAT = "chat"  # hand off to open-ended assistance


class RouteId(str, Enum):
    """Closed enumeration of navigable destinations."""

    PROFILE = "profile"
    TWIN = "twin"
    WEATHER = "weather"
    NOTIFICATIONS = "notifications"
    NEWS = "news"
    EXPENSE = "expense"
    MARKET = "market"
    IDENTIFY = "identify"
    DIAGNOSE = "diagnose"
    SCAN = "scan"
    SOIL_ANALYZER = "soil-analyzer"
    PLANNER = "planner"
    FORUM = "forum"
    RESOURCES = "resources"
    KNOWLEDGE = "knowledge"
    LABOURERS = "labourers"
    FAIRFARM = "fairfarm"
    BUY = "buy"
    SCHEMES = "schemes"
    HOME = "home"
    CHATBOT = "chatbot"


ROUTE_IDS: frozenset[str] = frozenset(r.value for r in RouteId)


@dataclass(frozen=True)
class ExampleBlock:
    """A block of example sentences, optionally tied to one sub-action."""

    text: str
    sub_action: Optional[str] = None
    title: Optional[str] = None

    def sentences(self) -> list[str]:
        """Split the block into individual example sentences."""
        from .language import split_sentences

        return split_sentences(self.text)


@dataclass(frozen=True)
class RouteEntry:
    """A navigable destination."""

    id: RouteId
    title: str
    description: str
    action_kind: ActionKind
    example_utterances: tuple[ExampleBlock, ...]
    sub_actions: frozenset[str] = field(default_factory=frozenset)
    default_sub_action: Optional[str] = None

    def has_sub_action(self, sub_action: Optional[str]) -> bool:
        return sub_action is not None and sub_action in self.sub_actions

    def to_prompt_dict(self, max_examples: int = 6) -> dict:
        """Serialized view used as grounding context for LLM tiers."""
        examples: list[str] = []
        for block in self.example_utterances:
            examples.extend(block.sentences()[:max_examples])
        return {
            "id": self.id.value,
            "title": self.title,
            "description": self.description,
            "actionKind": self.action_kind.value,
            "subActions": sorted(self.sub_actions),
            "examples": examples[: max_examples * 2],
        }


class RouteCatalogue:
    """
    Read-only catalogue of route entries.

    Validated once at construction against the closed ``RouteId``
    enumeration. No mutation operations are exposed.
    """

    def __init__(self, entries: Iterable[RouteEntry], version: str = CATALOGUE_VERSION):
        self._entries: tuple[RouteEntry, ...] = tuple(entries)
        self._version = version
        self._by_id: dict[str, RouteEntry] = {}
        self._validate()
        self._fingerprint: Optional[str] = None

    def _validate(self) -> None:
        respond_entries = []
        for entry in self._entries:
            if not isinstance(entry.id, RouteId):
                raise CatalogueError(f"Route id outside the catalogue enumeration: {entry.id!r}")
            if entry.id.value in self._by_id:
                raise CatalogueError(f"Duplicate route id: {entry.id.value}")
            for block in entry.example_utterances:
                if block.sub_action is not None and block.sub_action not in entry.sub_actions:
                    raise CatalogueError(
                        f"Example block sub-action '{block.sub_action}' "
                        f"not declared by route '{entry.id.value}'"
                    )
            if entry.default_sub_action is not None and entry.default_sub_action not in entry.sub_actions:
                raise CatalogueError(
                    f"Default sub-action '{entry.default_sub_action}' "
                    f"not declared by route '{entry.id.value}'"
                )
            if entry.action_kind is ActionKind.RESPOND:
                respond_entries.append(entry.id.value)
            self._by_id[entry.id.value] = entry

        # Respond decisions carry a null target, so the owner must be unambiguous
        if len(respond_entries) > 1:
            raise CatalogueError(f"At most one respond route allowed, found: {respond_entries}")

    @property
    def version(self) -> str:
        return self._version

    def all(self) -> list[RouteEntry]:
        """Return all entries in declaration order."""
        return list(self._entries)

    def by_id(self, route_id) -> Optional[RouteEntry]:
        """Return the entry for ``route_id`` (str or RouteId), or None."""
        if isinstance(route_id, RouteId):
            route_id = route_id.value
        if not isinstance(route_id, str):
            return None
        return self._by_id.get(route_id)

    def ids(self) -> list[str]:
        return [entry.id.value for entry in self._entries]

    def respond_entry(self) -> Optional[RouteEntry]:
        """Return the single respond-kind entry, if any."""
        for entry in self._entries:
            if entry.action_kind is ActionKind.RESPOND:
                return entry
        return None

    def blocks(self) -> list[tuple[RouteEntry, ExampleBlock]]:
        """Flatten to (entry, block) pairs in declaration order."""
        return [(entry, block) for entry in self._entries for block in entry.example_utterances]

    def fingerprint(self) -> str:
        """Stable hash of everything that feeds the embedding index."""
        if self._fingerprint is None:
            payload = [
                [entry.id.value, [[b.text, b.sub_action] for b in entry.example_utterances]]
                for entry in self._entries
            ]
            raw = json.dumps([self._version, payload], ensure_ascii=False, sort_keys=True)
            self._fingerprint = hashlib.sha256(raw.encode("utf-8")).hexdigest()
        return self._fingerprint

    def to_prompt_context(self, max_examples: int = 6) -> list[dict]:
        return [entry.to_prompt_dict(max_examples=max_examples) for entry in self._entries]

    def __contains__(self, route_id) -> bool:
        return self.by_id(route_id) is not None

    def __len__(self) -> int:
        return len(self._entries)


# -- Catalogue data --
# Example blocks mix English, Malayalam, Hindi, Telugu, Kannada and Bengali.

ROUTE_ENTRIES: tuple[RouteEntry, ...] = (
    RouteEntry(
        id=RouteId.PROFILE,
        title="Profile & Settings",
        description="View and edit your profile and settings.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"settings", "account", "preferences"}),
        example_utterances=(
            ExampleBlock(
                "Open my profile. Show my account settings. Change my preferences. Edit my profile. "
                "Update my information. എന്റെ പ്രൊഫൈൽ കാണിക്കുക. സെറ്റിംഗ്സ് തുറക്കുക. "
                "അക്കൗണ്ട് എഡിറ്റ് ചെയ്യുക. मेरा प्रोफ़ाइल दिखाओ. सेटिंग्स खोलें. నా ప్రొఫైల్ తెరవండి. "
                "సెట్టింగ్‌లు చూపించు. ನನ್ನ ಪ್ರೊಫೈಲ್ ತೆರೆಯಿರಿ. সেটিংস দেখান. প্রোফাইল খুলুন.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.TWIN,
        title="Crop Guide",
        description=(
            "Crop guide for monitoring and insights. Has tabs: 'twin' for the main dashboard "
            "and 'recommendations' for crop recommendations."
        ),
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"recommendations", "twin", "digital-twin"}),
        example_utterances=(
            ExampleBlock(
                "Give me farming advice. Show me crop recommendations. What's the best practice for "
                "growing rice? I need expert farming tips. How do I grow tomatoes properly? Give me "
                "agricultural guidance. Help me with crop management. Show me digital twin insights. "
                "കൃഷി ഉപദേശം വേണം. വിള ശുപാർശകൾ കാണിക്കുക. മികച്ച രീതികൾ എന്തൊക്കെയാണ്? "
                "എങ്ങനെയാണ് നല്ല വിള കൃഷി ചെയ്യുന്നത്? कृषि सलाह चाहिए. फसल की सिफारिश दिखाओ. "
                "सबसे अच्छा तरीका क्या है? వ్యవసాయ సలహా కావాలి. పంట సూచనలు చూపించు. "
                "ಕೃಷಿ ಸಲಹೆ ಬೇಕು. ಬೆಳೆ ಶಿಫಾರಸುಗಳು ತೋರಿಸಿ. কৃষি পরামর্শ চাই. ফসলের সুপারিশ দেখান.",
                sub_action="twin",
                title="Crop Guide",
            ),
            ExampleBlock(
                "Which crop should I plant this season? Suggest the best crop for my soil. What crop "
                "is profitable now? Recommend suitable crops for my area. What should I grow? Which "
                "crop gives good yield? ഏത് വിള നടണം? എന്റെ മണ്ണിന് അനുയോജ്യമായ വിള ഏത്? "
                "ലാഭകരമായ വിള ഏതാണ്? ഈ സീസണിൽ എന്ത് നടാം? कौन सी फसल लगाएं? मेरी मिट्टी के लिए "
                "कौन सी फसल अच्छी है? लाभदायक फसल कौन सी है? ఏ పంట నాటాలి? నా నేలకు తగిన పంట ఏది? "
                "ಯಾವ ಬೆಳೆ ನಾಟಿ ಮಾಡಬೇಕು? ನನ್ನ ಮಣ್ಣಿಗೆ ಸೂಕ್ತ ಬೆಳೆ ಯಾವುದು? কোন ফসল রোপণ করব?",
                sub_action="recommendations",
                title="Crop Recommendations",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.WEATHER,
        title="Weather",
        description=(
            "Weather forecasts and severe alerts. Shown as an immediate summary, not a screen: "
            "current conditions, alerts, or forecast."
        ),
        action_kind=ActionKind.RESPOND,
        sub_actions=frozenset({"current", "alerts", "forecast"}),
        default_sub_action="current",
        example_utterances=(
            ExampleBlock(
                "What's the weather today? How is the weather now? Show me current temperature. Is it "
                "going to rain? Check today's weather. Weather report. കാലാവസ്ഥ എങ്ങനെയാണ്? "
                "ഇന്ന് മഴ പെയ്യുമോ? താപനില എത്രയാണ്? आज मौसम कैसा है? बारिश होगी क्या? "
                "ఈరోజు వాతావరణం ఎలా ఉంది? వర్షం పడుతుందా? ಇಂದು ಹವಾಮಾನ ಹೇಗಿದೆ? ಮಳೆ ಬರುತ್ತದೆಯೇ? "
                "আজকের আবহাওয়া কেমন? বৃষ্টি হবে?",
                sub_action="current",
                title="Current Weather",
            ),
            ExampleBlock(
                "Any weather warnings? Storm alert. Heavy rain alert. Check weather alerts. Severe "
                "weather warning. കാലാവസ്ഥാ അലേർട്ട് ഉണ്ടോ? കൊടുങ്കാറ്റ് മുന്നറിയിപ്പ്? "
                "कोई मौसम चेतावनी? तूफान अलर्ट? వాతావరణ హెచ్చరికలు ఉన్నాయా? తుఫాను హెచ్చరిక? "
                "ಹವಾಮಾನ ಎಚ್ಚರಿಕೆಗಳು ಇವೆಯೇ? আবহাওয়া সতর্কতা আছে?",
                sub_action="alerts",
                title="Weather Alerts",
            ),
            ExampleBlock(
                "What's tomorrow's weather? Show me weather forecast. Will it rain this week? Next "
                "week weather. Future weather prediction. നാളത്തെ കാലാവസ്ഥ എങ്ങനെയായിരിക്കും? "
                "ആഴ്ചയിൽ മഴ പെയ്യുമോ? पूर्वानुमान दिखाओ. कल मौसम कैसा होगा? "
                "రేపు వాతావరణం ఎలా ఉంటుంది? వాతావరణ అంచనా చూపించు. ನಾಳೆ ಹವಾಮಾನ ಹೇಗಿರುತ್ತದೆ? "
                "ಮುನ್ಸೂಚನೆ ತೋರಿಸಿ. আগামীকালের আবহাওয়া কেমন হবে?",
                sub_action="forecast",
                title="Weather Forecast",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.NOTIFICATIONS,
        title="Notifications & Updates",
        description="All notifications and alerts related to your farm.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"weather", "alerts", "updates"}),
        example_utterances=(
            ExampleBlock(
                "Show me my notifications. Any alerts for me? Check my messages. Show updates. "
                "What's new? അറിയിപ്പുകൾ കാണിക്കുക. എന്തെങ്കിലും അലേർട്ട് ഉണ്ടോ? "
                "अधिसूचना दिखाओ. अलर्ट चेक करें. నోటిఫికేషన్లు చూపించు. అప్‌డేట్స్ ఏమిటి? "
                "ಅಧಿಸೂಚನೆಗಳನ್ನು ತೋರಿಸಿ. সূচনা দেখান. আপডেট কী?",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.NEWS,
        title="Agriculture News",
        description="Latest agri news and updates.",
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "Show me farming news. What's the latest agricultural updates? Give me news about "
                "agriculture. Show current events. Latest farming news. കാർഷിക വാർത്തകൾ കാണിക്കുക. "
                "പുതിയ വാർത്തകൾ എന്തൊക്കെയാണ്? ന്യൂസ് കാണിക്കുക. कृषि समाचार दिखाओ. "
                "ताज़ा खबर क्या है? వ్యవసాయ వార్తలు చూపించు. తాజా వార్తలు ఏమిటి? "
                "ಕೃಷಿ ಸುದ್ದಿ ತೋರಿಸಿ. ಇತ್ತೀಚಿನ ಸುದ್ದಿ ಏನು? কৃষি খবর দেখান. সর্বশেষ সংবাদ কি?",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.EXPENSE,
        title="Expense Tracker",
        description="Track farming expenses and view totals.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"add", "view", "summary", "reports"}),
        example_utterances=(
            ExampleBlock(
                "Track my farming expenses. How much did I spend? Show me my budget. Record farm "
                "costs. Check my spending. Add an expense. Monitor farm finances. എത്ര ചെലവായി? "
                "ബഡ്ജറ്റ് കാണിക്കുക. ചെലവ് ട്രാക്ക് ചെയ്യുക. കണക്ക് കാണിക്കുക. कितना खर्च हुआ? "
                "बजट दिखाओ. खर्च ट्रैक करें. ఎంత ఖర్చు అయింది? బడ్జెట్ చూపించు. ವೆಚ್ಚ ಎಷ್ಟು? "
                "ಬಜೆಟ್ ತೋರಿಸಿ. কত খরচ হয়েছে? বাজেট দেখান.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.MARKET,
        title="Market Prices",
        description="See mandi prices and market trends for crops.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"prices", "trends", "alerts"}),
        example_utterances=(
            ExampleBlock(
                "What's the market price of tomatoes today? Show me today's mandi rates. How much can "
                "I sell my crop for? Check current vegetable prices. What's the price of onions in the "
                "market? I want to see market rates. Give me today's crop prices. വിപണി വില എന്താണ്? "
                "ഇന്നത്തെ മണ്ഡി നിരക്ക് കാണിക്കുക. എത്ര വിലയ്ക്ക് വിൽക്കാം? പച്ചക്കറി വില എത്രയാണ്? "
                "आज की मंडी भाव क्या है? टमाटर का भाव क्या है? मैं अपनी फसल कितने में बेच सकता हूं? "
                "ఈరోజు మార్కెట్ ధర ఎంత? మండి రేట్లు చూపించు. ಇಂದಿನ ಮಾರುಕಟ್ಟೆ ಬೆಲೆ ಎಷ್ಟು? "
                "ತರಕಾರಿ ಬೆಲೆ ತೋರಿಸಿ. আজকের বাজার দাম কত? সবজির দাম দেখান.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.IDENTIFY,
        title="Identify Crop Problems",
        description=(
            "Camera-based identification with tabs: 'diagnose' for plant disease symptoms "
            "(spots, yellowing, wilting, powdery substances), 'scan' for pests and insects "
            "eating crops, 'weed' for unwanted plants and wild grass."
        ),
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"diagnose", "scan", "weed"}),
        example_utterances=(
            ExampleBlock(
                "My plant has black spots on the leaves. The leaves are turning yellow. I see some "
                "disease on my crop. What's wrong with my plant? My tomato plant looks sick. There are "
                "brown spots appearing on the leaves. The leaves are wilting and drooping. Can you "
                "diagnose my crop disease? എന്റെ ചെടിയിൽ കറുത്ത പുള്ളികൾ ഉണ്ട്. ഇലകൾ മഞ്ഞയാകുന്നു. "
                "എന്റെ വിളയ്ക്ക് എന്തോ രോഗം ഉണ്ട്. എന്റെ ചെടിക്ക് എന്താണ് പറ്റിയത്? ഇലകൾ ഉണങ്ങിപോകുന്നു. "
                "मेरे पौधे पर काले धब्बे हैं. पत्तियां पीली हो रही हैं. मेरी फसल बीमार है. "
                "నా పంట అనారోగ్యంగా ఉంది. ನನ್ನ ಗಿಡದ ಮೇಲೆ ಕಪ್ಪು ಚುಕ್ಕೆಗಳಿವೆ. ಎಲೆಗಳು ಹಳದಿಯಾಗುತ್ತಿವೆ. "
                "আমার গাছে কালো দাগ আছে. পাতা হলুদ হয়ে যাচ্ছে.",
                sub_action="diagnose",
                title="Diagnose Crop Disease",
            ),
            ExampleBlock(
                "There are insects eating my crop. I see bugs on the leaves. Small worms are crawling "
                "on my plant. Identify this pest for me. What insect is this? My crop is being "
                "attacked by pests. There are caterpillars on my tomato plant. I found some beetles "
                "on my crop. കീടങ്ങൾ എന്റെ വിള തിന്നുന്നു. ഇലകളിൽ പുഴുക്കൾ ഉണ്ട്. "
                "പ്രാണികൾ ചെടിയെ നശിപ്പിക്കുന്നു. ഈ കീടം ഏതാണ്? कीड़े मेरी फसल खा रहे हैं. "
                "पत्तियों पर कीड़े हैं. ये कौन सा कीट है? పురుగులు నా పంటను తింటున్నాయి. "
                "ಕೀಟಗಳು ನನ್ನ ಬೆಳೆಯನ್ನು ತಿನ್ನುತ್ತಿವೆ. পোকা আমার ফসল খাচ্ছে. পাতায় পোকা আছে.",
                sub_action="scan",
                title="Pest Scan",
            ),
            ExampleBlock(
                "There are unwanted plants growing in my field. Help me identify these weeds. What are "
                "these wild plants? I need to remove weeds from my crop. There's too much grass "
                "growing with my crops. കളകൾ എന്റെ വയലിൽ വളരുന്നു. അനാവശ്യ ചെടികൾ നീക്കം ചെയ്യണം. "
                "ഇത് ഏത് കളയാണ്? खरपतवार हटाने में मदद चाहिए. ये कौन सा खरपतवार है? "
                "కలుపు మొక్కలను గుర్తించండి. ಕಳೆ ಗಿಡಗಳು ಬೆಳೆಯುತ್ತಿವೆ. ಇದು ಯಾವ ಕಳೆ? "
                "আগাছা সমস্যা আছে. এটা কোন আগাছা?",
                sub_action="weed",
                title="Weed Identification",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.DIAGNOSE,
        title="Crop Doctor",
        description=(
            "Diagnose plant diseases and get remedies. Tabs: 'camera' to photograph the plant, "
            "'upload' to send an existing photo, 'history' for past diagnoses."
        ),
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"camera", "upload", "history"}),
        example_utterances=(
            ExampleBlock(
                "Open the crop doctor. Plant disease help. Diagnose my crop. My tomato plant has "
                "spots. Plant looks sick. White powder on leaves. Powdery mildew. Leaf curl. Leaf "
                "blight. വിള ഡോക്ടർ തുറക്കുക. ചെടിയുടെ രോഗം കണ്ടെത്തുക. फसल डॉक्टर खोलो. "
                "पौधे की बीमारी पहचानो. పంట వ్యాధి గుర్తించండి. ಬೆಳೆ ರೋಗ ಪತ್ತೆ ಮಾಡಿ. "
                "ফসলের রোগ নির্ণয় করুন.",
            ),
            ExampleBlock(
                "Take a photo of my plant. Use the camera to check my crop. Click a picture of the "
                "diseased leaf. ചെടിയുടെ ഫോട്ടോ എടുക്കുക. पौधे की फोटो खींचो. "
                "మొక్క ఫోటో తీయండి. ಗಿಡದ ಫೋಟೋ ತೆಗೆಯಿರಿ. গাছের ছবি তুলুন.",
                sub_action="camera",
                title="Photograph Plant",
            ),
            ExampleBlock(
                "Upload a photo of my crop. I already have a picture of the leaf. Send an image from "
                "my gallery. ഫോട്ടോ അപ്‌ലോഡ് ചെയ്യുക. फोटो अपलोड करो. ఫోటో అప్‌లోడ్ చేయండి. "
                "ಫೋಟೋ ಅಪ್‌ಲೋಡ್ ಮಾಡಿ. ছবি আপলোড করুন.",
                sub_action="upload",
                title="Upload Photo",
            ),
            ExampleBlock(
                "Show my diagnosis history. What did the last diagnosis say? Previous crop doctor "
                "results. പഴയ രോഗനിർണയങ്ങൾ കാണിക്കുക. पिछली जांच के नतीजे दिखाओ. "
                "గత నిర్ధారణలు చూపించు. ಹಿಂದಿನ ರೋಗನಿರ್ಣಯ ತೋರಿಸಿ. আগের রোগ নির্ণয় দেখান.",
                sub_action="history",
                title="Diagnosis History",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.SCAN,
        title="Scan & Detect Pests",
        description=(
            "Use the camera to detect pests, insects and bugs on crops. Tabs: 'pest' for insect "
            "detection, 'disease' for leaf scans, 'camera' to open the scanner."
        ),
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"pest", "disease", "camera"}),
        example_utterances=(
            ExampleBlock(
                "Scan pest. Camera detect insect. Identify pest. Insects eating my plants. Bugs on "
                "leaves. Caterpillar on plant. Aphids on plant. കീടം സ്കാൻ ചെയ്യുക. "
                "ക്യാമറ കൊണ്ട് പ്രാണി കണ്ടെത്തുക. എന്ത് കീടമാണ് ഇത്. कीट स्कैन करो. "
                "कैमरे से कीड़ा पहचानो. పురుగును స్కాన్ చేయండి. ಕೀಟ ಸ್ಕ್ಯಾನ್ ಮಾಡಿ. পোকা স্ক্যান করুন.",
                sub_action="pest",
                title="Pest Scan",
            ),
            ExampleBlock(
                "Scan this leaf for disease. Scan my crop. Check the leaf with the scanner. "
                "ഇല സ്കാൻ ചെയ്യുക. पत्ती स्कैन करो. ఆకును స్కాన్ చేయండి. ಎಲೆ ಸ್ಕ್ಯಾನ್ ಮಾಡಿ. "
                "পাতা স্ক্যান করুন.",
                sub_action="disease",
                title="Leaf Scan",
            ),
            ExampleBlock(
                "Open the camera scanner. Scan with camera. Start scanning. ക്യാമറ തുറക്കുക. "
                "कैमरा खोलो. కెమెరా తెరవండి. ಕ್ಯಾಮೆರಾ ತೆರೆಯಿರಿ. ক্যামেরা খুলুন.",
                sub_action="camera",
                title="Camera Scanner",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.SOIL_ANALYZER,
        title="Soil Analyzer",
        description=(
            "Analyze soil quality, pH levels, nutrients. Get soil test recommendations and "
            "fertilizer suggestions based on soil type."
        ),
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "Test my soil. I want to check soil nutrients. What's my soil pH level? Analyze my soil "
                "quality. Check nitrogen and phosphorus levels. Is my soil fertile? Test soil health. "
                "മണ്ണ് പരിശോധിക്കുക. മണ്ണിലെ പോഷകങ്ങൾ എന്തൊക്കെയാണ്? പിഎച്ച് ലെവൽ എത്രയാണ്? "
                "मिट्टी जांच करें. पोषक तत्व चेक करें. पीएच स्तर क्या है? నేల పరీక్ష చేయండి. "
                "ಮಣ್ಣು ಪರೀಕ್ಷೆ ಮಾಡಿ. ಪೋಷಕಾಂಶಗಳನ್ನು ಪರಿಶೀಲಿಸಿ. মাটি পরীক্ষা করুন.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.PLANNER,
        title="Crop Planner",
        description="Plan crop calendar, sowing, irrigation, and tasks.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"calendar", "tasks", "schedule"}),
        example_utterances=(
            ExampleBlock(
                "When should I plant tomatoes? Show me the crop calendar. What's the best time to sow "
                "wheat? Help me plan my farming schedule. When do I harvest rice? Show me planting "
                "times. I need to schedule my farming activities. വിള എപ്പോൾ നടണം? കാലണ്ടർ കാണിക്കുക. "
                "എപ്പോഴാണ് വിതയ്ക്കേണ്ട സമയം? വിളവെടുപ്പ് സമയം എപ്പോൾ? कब लगाना चाहिए? "
                "फसल कैलेंडर दिखाओ. कटाई कब करें? ఎప్పుడు నాటాలి? కాలెండర్ చూపించు. "
                "ಯಾವಾಗ ನಾಟಿ ಮಾಡಬೇಕು? ಕ್ಯಾಲೆಂಡರ್ ತೋರಿಸಿ. কখন রোপণ করব? ক্যালেন্ডার দেখান.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.FORUM,
        title="Farmer Forum",
        description="Discuss and ask questions with other farmers.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"posts", "discussions", "create"}),
        example_utterances=(
            ExampleBlock(
                "I want to talk to other farmers. Connect me with farmer community. Ask a question to "
                "farmers. Join farmer discussion. Share my farming experience. Get advice from other "
                "farmers. കർഷകരോട് സംസാരിക്കണം. മറ്റ് കർഷകരുമായി ബന്ധപ്പെടുക. കർഷക സമൂഹം കാണിക്കുക. "
                "अन्य किसानों से बात करें. किसान समुदाय से जुड़ें. ఇతర రైతులతో మాట్లాడాలి. "
                "ರೈತ ಸಮುದಾಯಕ್ಕೆ ಸೇರಿ. কৃষক সম্প্রদায়ে যোগ দিন.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.RESOURCES,
        title="Resources",
        description="Access to all knowledge resources and learning materials.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"knowledge", "buy", "scan", "expense", "news", "schemes", "labourers"}),
        example_utterances=(
            ExampleBlock(
                "Open resources. Show all learning materials. Take me to the knowledge center. Open "
                "the learning center. റിസോഴ്സുകൾ കാണിക്കുക. വിജ്ഞാന കേന്ദ്രം തുറക്കുക. "
                "പഠന കേന്ദ്രം. संसाधन दिखाओ. सीखने का केंद्र खोलो. వనరులు చూపించు. "
                "ಸಂಪನ್ಮೂಲಗಳನ್ನು ತೋರಿಸಿ. সম্পদ দেখান.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.KNOWLEDGE,
        title="Knowledge Center",
        description=(
            "Guides, best practices, home remedies, and learning content including soil testing "
            "with household items."
        ),
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "I want to learn about farming. Show me agricultural tutorials. Give me farming tips. "
                "I need farming knowledge. Teach me how to farm better. Show farming guides. "
                "കൃഷിയെക്കുറിച്ച് പഠിക്കണം. കാർഷിക വിവരങ്ങൾ വേണം. ഗൈഡ് കാണിക്കുക. "
                "कृषि के बारे में सीखना है. जानकारी चाहिए. गाइड दिखाओ. వ్యవసాయం గురించి నేర్చుకోవాలి. "
                "ಕೃಷಿಯ ಬಗ್ಗೆ ಕಲಿಯಬೇಕು. ಮಾಹಿತಿ ಬೇಕು. কৃষি সম্পর্কে শিখতে চাই. তথ্য চাই.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.LABOURERS,
        title="Labour Hub",
        description="Find and hire farm laborers, check availability and rates.",
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "I need farm workers. Find labour for me. Hire workers for harvesting. Need help with "
                "farming work. Find manpower. തൊഴിലാളികൾ വേണം. വർക്കർമാരെ കണ്ടെത്തുക. "
                "काम करने वाले चाहिए. मज़दूर चाहिए. కార్మికులు కావాలి. పని చేసే వారు కావాలి. "
                "ಕಾರ್ಮಿಕರು ಬೇಕು. ಕೆಲಸಗಾರರನ್ನು ಹುಡುಕಿ. শ্রমিক দরকার. কর্মী খুঁজে দিন.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.FAIRFARM,
        title="FairFarm Marketplace",
        description="Direct farmer-to-consumer marketplace for selling and buying farm products.",
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "I want to sell my crops directly. Show me FairFarm marketplace. Sell produce to "
                "consumers. Direct selling platform. Trade my crops. നേരിട്ട് വിൽക്കണം. "
                "മാർക്കറ്റ്പ്ലേസ് കാണിക്കുക. വിള വിൽക്കുക. सीधे बेचना है. मार्केटप्लेस दिखाओ. "
                "నేరుగా అమ్మాలి. మార్కెట్‌ప్లేస్ చూపించు. ನೇರವಾಗಿ ಮಾರಾಟ ಮಾಡಬೇಕು. "
                "সরাসরি বিক্রি করতে চাই.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.BUY,
        title="Buy Inputs",
        description="Shop for seeds, fertilizers, pesticides, and tools.",
        action_kind=ActionKind.NAVIGATE,
        sub_actions=frozenset({"seeds", "fertilizers", "tools", "pesticides"}),
        example_utterances=(
            ExampleBlock(
                "I want to buy seeds. Purchase fertilizer. Buy pesticides online. Order farming tools. "
                "Shop for agricultural inputs. Buy farm supplies. വിത്ത് വാങ്ങണം. വളം വാങ്ങുക. "
                "കീടനാശിനി ഓർഡർ ചെയ്യുക. उपकरण खरीदना है. बीज खरीदें. खाद चाहिए. "
                "విత్తనాలు కొనాలి. ఎరువులు కొనుగోలు చేయండి. ಬೀಜ ಖರೀದಿಸಬೇಕು. ಗೊಬ್ಬರ ಕೊಳ್ಳುವುದು. "
                "বীজ কিনতে চাই. সার কিনুন.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.SCHEMES,
        title="Government Schemes",
        description="Government schemes and subsidies for farmers.",
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "Show me government schemes for farmers. What benefits can I get? List farmer "
                "subsidies. Show government programs. I want to apply for a scheme. "
                "സർക്കാർ പദ്ധതികൾ കാണിക്കുക. എനിക്ക് എന്ത് ആനുകൂല്യങ്ങൾ കിട്ടും? സബ്സിഡി എന്തൊക്കെയാണ്? "
                "सरकारी योजनाएं दिखाओ. सब्सिडी क्या मिलेगी? ప్రభుత్వ పథకాలు చూపించు. "
                "ಸರ್ಕಾರಿ ಯೋಜನೆಗಳು ತೋರಿಸಿ. সরকারি প্রকল্প দেখান. ভর্তুকি কী?",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.HOME,
        title="Home Dashboard",
        description="Main dashboard with weather, quick actions, and featured content.",
        action_kind=ActionKind.NAVIGATE,
        example_utterances=(
            ExampleBlock(
                "Go home. Take me to the home screen. Show me the main dashboard. I want to see the "
                "homepage. Return to the main page. Go back to the start. Navigate to home. Open the "
                "dashboard. വീട്ടിലേക്ക് പോകുക. ഹോം സ്ക്രീൻ കാണിക്കുക. മെയിൻ ഡാഷ്ബോർഡ് തുറക്കുക. "
                "പ്രധാന പേജിലേക്ക് മടങ്ങുക. मुख्य स्क्रीन दिखाओ. होम पर जाओ. डैशबोर्ड खोलो. "
                "ముఖ్య స్క్రీన్ చూపించు. హోమ్‌కి వెళ్లు. ಮುಖಪುಟಕ್ಕೆ ಹೋಗಿ. ড্যাশবোর্ড দেখান. হোমে যান.",
            ),
        ),
    ),
    RouteEntry(
        id=RouteId.CHATBOT,
        title="AI Assistant",
        description="General help via chatbot when a request is not directly navigable.",
        action_kind=ActionKind.CHAT,
        example_utterances=(
            ExampleBlock(
                "I need help. Ask the AI assistant. Talk to chatbot. Get general farming advice. I "
                "have a question. Help me with something. सहायता चाहिए. AI से पूछें. సహాయం కావాలి. "
                "AI తో మాట్లాడండి. ಸಹಾಯ ಬೇಕು. ಎಐ ಜೊತೆ ಮಾತನಾಡಿ. সাহায্য চাই. AI এর সাথে কথা বলুন.",
            ),
        ),
    ),
)


_catalogue: Optional[RouteCatalogue] = None


def get_catalogue() -> RouteCatalogue:
    """Get or create the process-wide route catalogue."""
    global _catalogue
    if _catalogue is None:
        _catalogue = RouteCatalogue(ROUTE_ENTRIES)
        logger.info(
            "Route catalogue loaded (version=%s, routes=%d, blocks=%d)",
            _catalogue.version, len(_catalogue), len(_catalogue.blocks()),
        )
    return _catalogue
